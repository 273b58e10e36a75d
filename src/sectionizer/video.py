"""Frame sources: decode a video file into fixed-size raw RGB buffers."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Protocol

import cv2
import numpy as np

from .config import Config
from .errors import ExtractionError
from .models import VideoInfo

logger = logging.getLogger(__name__)

# Lines of decoder stderr kept in an ExtractionError
STDERR_TAIL = 20


class FrameSource(Protocol):
    """Produces raw frame buffers for a file, in strict decode order.

    Every buffer is exactly ``cfg.frame_size`` bytes; end of stream is
    signalled by the iterator finishing, never by an in-band marker.
    """

    def frames(self, path: str) -> AsyncIterator[bytes]:
        ...


async def read_chunks(reader: asyncio.StreamReader, size: int) -> AsyncIterator[bytes]:
    """Read fixed-size chunks until the stream closes.

    A trailing partial chunk (short read) ends the sequence and is discarded.

    Args:
        reader: Stream to read from
        size: Chunk size in bytes

    Yields:
        Chunks of exactly ``size`` bytes
    """
    while True:
        try:
            yield await reader.readexactly(size)
        except asyncio.IncompleteReadError as e:
            if e.partial:
                logger.debug(f"Dropping truncated frame ({len(e.partial)}/{size} bytes)")
            return


class FfmpegFrameSource:
    """Decodes with an ffmpeg subprocess writing rawvideo to stdout."""

    def __init__(self, cfg: Config):
        """Initialize ffmpeg frame source.

        Args:
            cfg: Configuration with decoder path, sampling rate and frame size
        """
        self.cfg = cfg

    def build_command(self, path: str) -> list[str]:
        """Build the decoder command line for ``path``.

        Args:
            path: Input file

        Returns:
            argv list for the decoder process
        """
        cfg = self.cfg
        cmd = [cfg.ffmpeg_path, "-hide_banner", "-nostdin", "-nostats", "-loglevel", "error"]
        if cfg.max_seconds is not None:
            cmd += ["-t", str(cfg.max_seconds)]
        cmd += [
            "-i", path,
            "-map", "0:v:0",
            "-an", "-sn",
            "-vf", f"fps={cfg.fps},scale={cfg.frame_width}:{cfg.frame_height}",
            "-f", "rawvideo",
            "-pix_fmt", "rgb24",
            "pipe:1",
        ]
        return cmd

    async def frames(self, path: str) -> AsyncIterator[bytes]:
        """Spawn the decoder and yield its frames.

        Args:
            path: Input file

        Yields:
            Raw RGB buffers of ``cfg.frame_size`` bytes

        Raises:
            ExtractionError: If the decoder cannot be started or exits with an error
        """
        cmd = self.build_command(path)
        logger.debug(f"Starting decoder: {' '.join(cmd)}")
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ExtractionError(path, f"could not start {self.cfg.ffmpeg_path}: {e}") from e

        assert proc.stdout is not None
        assert proc.stderr is not None
        stderr_task = asyncio.ensure_future(proc.stderr.read())
        try:
            async for chunk in read_chunks(proc.stdout, self.cfg.frame_size):
                yield chunk
            returncode = await proc.wait()
            stderr = (await stderr_task).decode(errors="replace")
        finally:
            if proc.returncode is None:
                logger.debug(f"Killing decoder for {path}")
                proc.kill()
                await proc.wait()
            if not stderr_task.done():
                stderr_task.cancel()

        if returncode != 0:
            tail = "\n".join(stderr.strip().splitlines()[-STDERR_TAIL:])
            raise ExtractionError(path, f"decoder exited with status {returncode}", tail)


class OpenCVFrameSource:
    """Decodes with OpenCV, resampling to the configured frame rate."""

    def __init__(self, cfg: Config):
        """Initialize OpenCV frame source.

        Args:
            cfg: Configuration with sampling rate and frame size
        """
        self.cfg = cfg

    def open(self, path: str) -> cv2.VideoCapture:
        """Open video for reading.

        Returns:
            OpenCV VideoCapture object

        Raises:
            ExtractionError: If the file cannot be opened
        """
        if not Path(path).exists():
            raise ExtractionError(path, "file not found")
        cap = cv2.VideoCapture(str(path))
        if not cap.isOpened():
            raise ExtractionError(path, "OpenCV could not open video")
        return cap

    def describe(self, cap: cv2.VideoCapture) -> VideoInfo:
        """Read stream properties from an open capture.

        Returns:
            VideoInfo with fps, total_frames, width, height
        """
        return VideoInfo(
            fps=cap.get(cv2.CAP_PROP_FPS),
            width=int(cap.get(cv2.CAP_PROP_FRAME_WIDTH)),
            height=int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT)),
            total_frames=int(cap.get(cv2.CAP_PROP_FRAME_COUNT)),
        )

    def probe(self, path: str) -> VideoInfo:
        """Extract video information.

        Returns:
            VideoInfo with fps, total_frames, width, height
        """
        cap = self.open(path)
        try:
            return self.describe(cap)
        finally:
            cap.release()

    def to_buffer(self, frame: np.ndarray) -> bytes:
        """Convert a BGR frame from cv2 to a packed RGB hash-input buffer.

        Args:
            frame: BGR frame from cv2

        Returns:
            ``frame_width * frame_height * 3`` bytes
        """
        resized = cv2.resize(
            frame, (self.cfg.frame_width, self.cfg.frame_height), interpolation=cv2.INTER_AREA
        )
        rgb = cv2.cvtColor(resized, cv2.COLOR_BGR2RGB)
        return np.ascontiguousarray(rgb, dtype=np.uint8).tobytes()

    async def frames(self, path: str) -> AsyncIterator[bytes]:
        """Decode ``path`` in a worker thread and yield resampled frames.

        Args:
            path: Input file

        Yields:
            Raw RGB buffers of ``cfg.frame_size`` bytes

        Raises:
            ExtractionError: If the file cannot be opened
        """
        cap = await asyncio.to_thread(self.open, path)
        pending: asyncio.Future | None = None
        try:
            info = self.describe(cap)
            logger.debug(
                f"{path}: {info.width}x{info.height} @ {info.fps:.3f} fps, "
                f"{info.total_frames} frames"
            )
            source_fps = info.fps or float(self.cfg.fps)
            limit = None
            if self.cfg.max_seconds is not None:
                limit = self.cfg.max_seconds * self.cfg.fps

            emitted = 0
            source_idx = 0
            while limit is None or emitted < limit:
                pending = asyncio.ensure_future(asyncio.to_thread(cap.read))
                ok, frame = await asyncio.shield(pending)
                pending = None
                if not ok:
                    break
                # Emit each output tick whose timestamp this source frame covers
                source_end = (source_idx + 1) / source_fps
                buffer = None
                while emitted / self.cfg.fps < source_end and (limit is None or emitted < limit):
                    if buffer is None:
                        buffer = self.to_buffer(frame)
                    yield buffer
                    emitted += 1
                source_idx += 1
        finally:
            if pending is not None:
                # The worker thread uses cap until read() returns
                await asyncio.wait([pending])
            cap.release()


def create_frame_source(cfg: Config) -> FrameSource:
    """Factory function to create the configured frame source.

    Args:
        cfg: Configuration object

    Returns:
        Frame source instance based on cfg.decoder

    Raises:
        ValueError: If the decoder type is unknown
    """
    if cfg.decoder == "ffmpeg":
        return FfmpegFrameSource(cfg)
    if cfg.decoder == "opencv":
        return OpenCVFrameSource(cfg)
    msg = f"Unknown decoder: {cfg.decoder}"
    raise ValueError(msg)
