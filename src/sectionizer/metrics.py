#!/usr/bin/env python3
"""Distance metrics for perceptual hash matching."""

from __future__ import annotations

from typing import Protocol, TypeVar

from .models import Frame

T_contra = TypeVar("T_contra", contravariant=True)


class Metric(Protocol[T_contra]):
    """Protocol defining the interface for metric-space distances.

    Implementations must satisfy the metric axioms (non-negativity, symmetry,
    identity of indiscernibles and the triangle inequality); the BK-tree in
    :mod:`sectionizer.search` prunes subtrees using the triangle inequality.
    """

    def distance(self, a: T_contra, b: T_contra) -> int:
        """Compute the distance between two items.

        Args:
            a: First item
            b: Second item

        Returns:
            Non-negative integer distance (0 = identical)
        """
        ...


def hamming(a: int, b: int) -> int:
    """Number of differing bits between two equal-width codes."""
    return (a ^ b).bit_count()


class HammingDistance:
    """Hamming distance between the hash codes of two frames.

    Frame indices take no part in the distance: frames from different
    sequences are only ever compared by hash.
    """

    def distance(self, a: Frame, b: Frame) -> int:
        """Compute Hamming distance.

        Args:
            a: First frame
            b: Second frame

        Returns:
            Popcount of ``a.hash XOR b.hash``.
        """
        return hamming(a.hash, b.hash)


def create_metric(name: str = "hamming") -> Metric[Frame]:
    """Factory function to create a frame distance metric.

    Args:
        name: Metric name

    Returns:
        Metric instance for the given name

    Raises:
        ValueError: If metric type is unknown
    """
    if name == "hamming":
        return HammingDistance()
    msg = f"Unknown metric type: {name}"
    raise ValueError(msg)
