"""Perceptual hashing of raw RGB frame buffers."""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import aclosing

import imagehash
from PIL import Image
from tqdm import tqdm

from .config import Config
from .models import Frame
from .video import FrameSource

logger = logging.getLogger(__name__)

_HASH_FUNCTIONS: dict[str, Callable[..., imagehash.ImageHash]] = {
    "dhash": imagehash.dhash,
    "phash": imagehash.phash,
    "ahash": imagehash.average_hash,
    "whash": imagehash.whash,
}


class FrameHasher:
    """Maps a raw RGB buffer to a fixed-width perceptual hash code."""

    def __init__(self, cfg: Config):
        """Initialize hasher.

        Args:
            cfg: Configuration providing buffer geometry and hash settings

        Raises:
            ValueError: If the hash method is unknown
        """
        if cfg.hash_method not in _HASH_FUNCTIONS:
            msg = f"Unknown hash method: {cfg.hash_method}"
            raise ValueError(msg)
        self.size = (cfg.frame_width, cfg.frame_height)
        self.frame_size = cfg.frame_size
        self.hash_size = cfg.hash_size
        self._hash_fn = _HASH_FUNCTIONS[cfg.hash_method]

    def hash(self, buffer: bytes) -> int:
        """Hash one frame buffer.

        Args:
            buffer: ``width * height * 3`` bytes of packed RGB

        Returns:
            Hash code as an unsigned integer (row-major bit order)

        Raises:
            ValueError: If the buffer has the wrong size
        """
        if len(buffer) != self.frame_size:
            msg = f"Expected a {self.frame_size} byte frame, got {len(buffer)} bytes"
            raise ValueError(msg)
        image = Image.frombytes("RGB", self.size, bytes(buffer))
        # str(ImageHash) is the hex encoding of the flattened bit array
        return int(str(self._hash_fn(image, hash_size=self.hash_size)), 16)

    __call__ = hash


async def hash_frames(
    source: FrameSource,
    path: str,
    hasher: FrameHasher,
    show_progress: bool = False,
    position: int = 0,
) -> list[Frame]:
    """Decode ``path`` and hash every frame in decode order.

    Args:
        source: Frame source producing raw buffers
        path: Input file
        hasher: Hash function for each buffer
        show_progress: Show a tqdm progress bar
        position: tqdm bar position (keeps concurrent bars apart)

    Returns:
        Frames indexed 0, 1, 2, ... in decode order.
    """
    frames: list[Frame] = []
    with tqdm(desc=f"Hashing {path}", unit="frame", position=position,
              disable=not show_progress, leave=False) as pbar:
        async with aclosing(source.frames(path)) as stream:
            async for buffer in stream:
                frames.append(Frame(hash=hasher.hash(buffer), index=len(frames)))
                pbar.update(1)

    logger.info(f"Hashed {len(frames)} frames from {path}")
    return frames
