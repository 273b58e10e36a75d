"""Two-file section detection: concurrent extraction, cross matching, clustering."""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor

from .clustering import cluster
from .config import Config
from .hashing import FrameHasher, hash_frames
from .matcher import match_sequence
from .metrics import Metric, create_metric
from .models import Frame, Section, Sections
from .search import MetricIndex
from .video import FrameSource, create_frame_source


class Sectionizer:
    """Finds time ranges where two video files show matching content."""

    def __init__(
        self,
        cfg: Config | None = None,
        logger: logging.Logger | None = None,
        source: FrameSource | None = None,
        hasher: FrameHasher | None = None,
        metric: Metric[Frame] | None = None,
    ):
        """
        Initialize the sectionizer.

        Args:
            cfg: Matching, clustering and decoding parameters (defaults if None)
            logger: Diagnostic logger; only affects log output, never results
            source: Frame source (built from cfg.decoder if None)
            hasher: Perceptual hasher (built from cfg if None)
            metric: Distance between frames (Hamming if None)

        Raises:
            ValueError: If the configuration is invalid
        """
        self.cfg = cfg if cfg is not None else Config()
        self.cfg.validate()
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        self.source = source if source is not None else create_frame_source(self.cfg)
        self.hasher = hasher if hasher is not None else FrameHasher(self.cfg)
        self.metric = metric if metric is not None else create_metric("hamming")

    async def extract(self, file_a: str, file_b: str) -> tuple[list[Frame], list[Frame]]:
        """Hash both files concurrently.

        If either extraction fails the other is cancelled (killing its decoder)
        and the error is re-raised; no partial sequence is ever returned.

        Raises:
            ExtractionError: If either frame source fails
        """
        tasks = [
            asyncio.ensure_future(
                hash_frames(self.source, path, self.hasher, self.cfg.show_progress, position)
            )
            for position, path in enumerate((file_a, file_b))
        ]
        try:
            frames_a, frames_b = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return frames_a, frames_b

    async def categorize(self, file_a: str, file_b: str) -> tuple[Sections, Sections]:
        """Detect matching sections in two files.

        Args:
            file_a: First input file
            file_b: Second input file

        Returns:
            Tuple of (Sections for file_a, Sections for file_b)

        Raises:
            ExtractionError: If either file cannot be decoded
        """
        self.logger.info(f"Extracting frame hashes from {file_a} and {file_b}")
        frames_a, frames_b = await self.extract(file_a, file_b)

        sections_a, sections_b = await asyncio.to_thread(self.find_sections, frames_a, frames_b)
        return (
            Sections(target=str(file_a), sections=sections_a),
            Sections(target=str(file_b), sections=sections_b),
        )

    def find_sections(
        self, frames_a: list[Frame], frames_b: list[Frame]
    ) -> tuple[list[Section], list[Section]]:
        """Match two hashed sequences against each other and cluster the matches.

        Args:
            frames_a: Hashed frames of the first file
            frames_b: Hashed frames of the second file

        Returns:
            Tuple of (sections of A, sections of B)
        """
        index_a = MetricIndex.from_items(self.metric, frames_a)
        index_b = MetricIndex.from_items(self.metric, frames_b)
        self.logger.debug(f"Built indexes: {len(index_a)} and {len(index_b)} frames")

        if self.cfg.concurrent_matching:
            with ThreadPoolExecutor(max_workers=2) as pool:
                fut_a = pool.submit(self._sections_for, frames_a, frames_b, index_a, index_b)
                fut_b = pool.submit(self._sections_for, frames_b, frames_a, index_b, index_a)
                sections_a, sections_b = fut_a.result(), fut_b.result()
        else:
            sections_a = self._sections_for(frames_a, frames_b, index_a, index_b)
            sections_b = self._sections_for(frames_b, frames_a, index_b, index_a)

        self.logger.info(f"Found {len(sections_a)} and {len(sections_b)} sections")
        return sections_a, sections_b

    def _sections_for(
        self,
        own: list[Frame],
        other: list[Frame],
        own_index: MetricIndex[Frame],
        other_index: MetricIndex[Frame],
    ) -> list[Section]:
        """Sections of ``own`` according to the configured match direction."""
        cfg = self.cfg
        if cfg.match_direction == "query":
            pairs = match_sequence(own, other_index, cfg.match_radius)
            side = "queried"
        else:
            pairs = match_sequence(other, own_index, cfg.match_radius)
            side = "matched"
        self.logger.debug(f"{len(pairs)} matched pairs ({cfg.match_direction} direction)")

        return cluster(
            pairs,
            fps=cfg.fps,
            max_gap_seconds=cfg.max_gap_seconds,
            min_duration_seconds=cfg.min_duration_seconds,
            side=side,
        )


def run_categorize(
    file_a: str, file_b: str, cfg: Config | None = None, logger: logging.Logger | None = None
) -> tuple[Sections, Sections]:
    """Synchronous wrapper around :meth:`Sectionizer.categorize`."""
    return asyncio.run(Sectionizer(cfg, logger).categorize(file_a, file_b))
