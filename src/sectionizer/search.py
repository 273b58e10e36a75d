#!/usr/bin/env python3
"""BK-tree search index over an arbitrary metric space."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Generic, TypeVar

from .metrics import Metric

T = TypeVar("T")


class _Node(Generic[T]):
    """Tree node; children are keyed by their exact distance to this node."""

    __slots__ = ("children", "item")

    def __init__(self, item: T):
        self.item = item
        self.children: dict[int, _Node[T]] = {}


class MetricIndex(Generic[T]):
    """BK-tree index supporting bounded-radius nearest-neighbour queries.

    The index is append-only. It is built once per matching round and only
    read afterwards, so concurrent queries need no locking.
    """

    def __init__(self, metric: Metric[T]):
        """Initialize an empty index.

        Args:
            metric: Distance function; must satisfy the triangle inequality
        """
        self.metric = metric
        self._root: _Node[T] | None = None
        self._size = 0

    @classmethod
    def from_items(cls, metric: Metric[T], items: Iterable[T]) -> MetricIndex[T]:
        """Build an index and bulk-insert ``items``."""
        index = cls(metric)
        index.insert_all(items)
        return index

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[T]:
        if self._root is None:
            return
        stack = [self._root]
        while stack:
            node = stack.pop()
            yield node.item
            stack.extend(node.children.values())

    def insert(self, item: T) -> None:
        """Insert a single item.

        Descends into the child bucket matching the distance to each visited
        node and attaches a new leaf at the first empty bucket.

        Args:
            item: Item to insert
        """
        self._size += 1
        if self._root is None:
            self._root = _Node(item)
            return

        node = self._root
        while True:
            dist = self.metric.distance(node.item, item)
            child = node.children.get(dist)
            if child is None:
                node.children[dist] = _Node(item)
                return
            node = child

    def insert_all(self, items: Iterable[T]) -> None:
        """Insert every item in order.

        Args:
            items: Items to insert
        """
        for item in items:
            self.insert(item)

    def find_within(self, target: T, radius: int) -> list[tuple[int, T]]:
        """Find every indexed item within ``radius`` of ``target``.

        Args:
            target: Query item
            radius: Maximum distance (inclusive)

        Returns:
            List of (distance, item) tuples sorted by distance; items at equal
            distance keep tree traversal order.

        Raises:
            ValueError: If radius is negative
        """
        if radius < 0:
            msg = f"radius must be >= 0, got {radius}"
            raise ValueError(msg)
        if self._root is None:
            return []

        found: list[tuple[int, T]] = []
        stack = [self._root]
        while stack:
            node = stack.pop()
            dist = self.metric.distance(node.item, target)
            if dist <= radius:
                found.append((dist, node.item))

            # Triangle inequality: only buckets in [dist - radius, dist + radius]
            # can hold items within radius of the target.
            lo, hi = dist - radius, dist + radius
            children = [child for key, child in node.children.items() if lo <= key <= hi]
            stack.extend(reversed(children))

        found.sort(key=lambda pair: pair[0])
        return found
