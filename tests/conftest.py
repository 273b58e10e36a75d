"""Shared fixtures and fakes for sectionizer tests."""

from __future__ import annotations

import asyncio

import numpy as np
import pytest

from sectionizer import ExtractionError, Frame


def random_hashes(n: int, seed: int = 0) -> list[int]:
    """Generate n random 64-bit hash codes."""
    rng = np.random.default_rng(seed)
    return [int(x) for x in rng.integers(0, 2**64, size=n, dtype=np.uint64)]


def frames_from_hashes(hashes: list[int]) -> list[Frame]:
    return [Frame(hash=h, index=i) for i, h in enumerate(hashes)]


def shared_segment_hashes(
    length: int = 240, shared: range = range(48, 192), seed: int = 7
) -> tuple[list[int], list[int]]:
    """Two hash sequences identical over ``shared`` and random elsewhere."""
    common = random_hashes(length, seed)
    a = random_hashes(length, seed + 1)
    b = random_hashes(length, seed + 2)
    for i in shared:
        a[i] = common[i]
        b[i] = common[i]
    return a, b


class IntHasher:
    """Hasher stand-in: each buffer is the big-endian encoding of its hash."""

    def hash(self, buffer: bytes) -> int:
        return int.from_bytes(buffer, "big")


class FakeSource:
    """In-memory frame source.

    Paths listed in ``fail`` raise ExtractionError after ``fail_after`` frames;
    paths listed in ``hang`` never finish, so they can only end by cancellation.
    """

    def __init__(self, buffers: dict[str, list[bytes]], fail: set[str] | None = None,
                 fail_after: int = 0, hang: set[str] | None = None):
        self.buffers = buffers
        self.fail = fail or set()
        self.fail_after = fail_after
        self.hang = hang or set()
        self.closed: list[str] = []

    async def frames(self, path: str):
        try:
            for i, buffer in enumerate(self.buffers.get(path, [])):
                if path in self.fail and i >= self.fail_after:
                    break
                await asyncio.sleep(0)
                yield buffer
            if path in self.fail:
                raise ExtractionError(path, "decoder crashed")
            if path in self.hang:
                await asyncio.Event().wait()
        finally:
            self.closed.append(path)


def hash_buffers(hashes: list[int]) -> list[bytes]:
    return [h.to_bytes(8, "big") for h in hashes]


@pytest.fixture
def shared_pair() -> tuple[list[int], list[int]]:
    return shared_segment_hashes()
