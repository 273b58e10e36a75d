"""Temporal clustering of frame matches into time sections."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Literal

from .models import MatchedPair, Section

logger = logging.getLogger(__name__)

Side = Literal["queried", "matched"]


def _frame_index(pair: MatchedPair, side: Side) -> int:
    return pair.queried.index if side == "queried" else pair.matched.index


def partition_runs(
    pairs: Iterable[MatchedPair], gap_frames: float, side: Side = "queried"
) -> list[list[MatchedPair]]:
    """Split matches into maximal runs of nearby frame indices.

    Consecutive matches (after a stable sort on the frame index) stay in the
    same run while ``next.index - prev.index < gap_frames``. An isolated match
    forms a run of its own.

    Args:
        pairs: Matched pairs in any order
        gap_frames: Exclusive upper bound on the index gap inside a run
        side: Which frame of each pair provides the index

    Returns:
        Non-overlapping runs in ascending index order.
    """
    ordered = sorted(pairs, key=lambda pair: _frame_index(pair, side))

    runs: list[list[MatchedPair]] = []
    current: list[MatchedPair] = []
    for pair in ordered:
        if current and _frame_index(pair, side) - _frame_index(current[-1], side) >= gap_frames:
            runs.append(current)
            current = []
        current.append(pair)
    if current:
        runs.append(current)
    return runs


def cluster(
    pairs: Iterable[MatchedPair],
    fps: int,
    max_gap_seconds: float,
    min_duration_seconds: float | None,
    side: Side = "queried",
) -> list[Section]:
    """Collapse scattered frame matches into contiguous time sections.

    Args:
        pairs: Matched pairs, ideally ordered by frame index
        fps: Frame rate the indices were sampled at
        max_gap_seconds: Gap tolerance inside a run, in seconds
        min_duration_seconds: Runs must last strictly longer than this;
            None keeps every run
        side: Which frame of each pair provides the index

    Returns:
        Sections in ascending start order.

    Raises:
        ValueError: If fps is not positive
    """
    if fps <= 0:
        msg = f"fps must be positive, got {fps}"
        raise ValueError(msg)

    runs = partition_runs(pairs, max_gap_seconds * fps, side)

    sections: list[Section] = []
    for run in runs:
        start = _frame_index(run[0], side) // fps
        end = _frame_index(run[-1], side) // fps
        if min_duration_seconds is not None and end - start <= min_duration_seconds:
            continue
        sections.append(Section(start=start, end=end))

    logger.debug(f"{len(runs)} runs -> {len(sections)} sections")
    return sections
