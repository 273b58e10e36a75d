"""Cross-sequence frame matching against a metric index."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .models import Frame, MatchedPair
from .search import MetricIndex

logger = logging.getLogger(__name__)


def match_sequence(
    queried: Iterable[Frame], index: MetricIndex[Frame], radius: int
) -> list[MatchedPair]:
    """Pair every queried frame with its nearest within-radius neighbour.

    Frames with no neighbour inside the radius are dropped; their absence is
    the "no match" signal.

    Args:
        queried: Frames of the sequence being scanned
        index: Index built from the other sequence
        radius: Maximum Hamming distance for a match

    Returns:
        At most one MatchedPair per queried frame, ordered by ``queried.index``.
    """
    pairs: list[MatchedPair] = []
    scanned = 0
    for frame in queried:
        scanned += 1
        candidates = index.find_within(frame, radius)
        if not candidates:
            continue
        # Sorted by distance, ties in traversal order
        distance, nearest = candidates[0]
        pairs.append(MatchedPair(queried=frame, matched=nearest, distance=distance))

    pairs.sort(key=lambda pair: pair.queried.index)
    logger.debug(f"Matched {len(pairs)}/{scanned} frames within radius {radius}")
    return pairs
