#!/usr/bin/env python3
"""Configuration dataclass for the sectionizer package."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

# Type aliases
DecoderType = Literal["ffmpeg", "opencv"]
HashMethod = Literal["dhash", "phash", "ahash", "whash"]
MatchDirection = Literal["query", "index"]


@dataclass
class Config:
    """Main configuration for frame hashing, matching and sectioning."""

    # Matching Settings
    match_radius: int = 5  # Max Hamming distance between matched hashes

    # Clustering Settings
    max_gap_seconds: int = 5
    min_duration_seconds: int | None = 10  # None = keep every run

    # Sampling Settings
    fps: int = 24
    max_seconds: int | None = 300  # Only the head of each file; None = whole file

    # Hash Input (raw RGB buffer handed to the hasher)
    frame_width: int = 18
    frame_height: int = 16
    channels: int = 3
    hash_size: int = 8  # 8 -> 64-bit codes
    hash_method: HashMethod = "dhash"

    # Frame Source Settings
    decoder: DecoderType = "ffmpeg"
    ffmpeg_path: str = "ffmpeg"

    # "query": file A queried against B's index, sectioned on A's indices
    # "index": file B queried against A's index, sectioned on the matched A indices
    match_direction: MatchDirection = "query"
    concurrent_matching: bool = True

    show_progress: bool = False

    @property
    def frame_size(self) -> int:
        """Size in bytes of one raw frame buffer.

        Returns:
            frame_width * frame_height * channels.
        """
        return self.frame_width * self.frame_height * self.channels

    def validate(self) -> None:
        """Validate configuration parameters.

        Raises:
            ValueError: If any parameter is invalid.
        """
        if self.match_radius < 0:
            msg = f"match_radius must be >= 0, got {self.match_radius}"
            raise ValueError(msg)
        if self.max_gap_seconds <= 0:
            msg = f"max_gap_seconds must be positive, got {self.max_gap_seconds}"
            raise ValueError(msg)
        if self.min_duration_seconds is not None and self.min_duration_seconds < 0:
            msg = f"min_duration_seconds must be >= 0, got {self.min_duration_seconds}"
            raise ValueError(msg)
        if self.fps <= 0:
            msg = f"fps must be positive, got {self.fps}"
            raise ValueError(msg)
        if self.max_seconds is not None and self.max_seconds <= 0:
            msg = f"max_seconds must be positive, got {self.max_seconds}"
            raise ValueError(msg)
        if self.frame_width <= 0 or self.frame_height <= 0:
            msg = f"frame size must be positive, got {self.frame_width}x{self.frame_height}"
            raise ValueError(msg)
        if self.channels != 3:
            msg = f"only RGB buffers are supported, got {self.channels} channels"
            raise ValueError(msg)
        if self.hash_size < 2:
            msg = f"hash_size must be >= 2, got {self.hash_size}"
            raise ValueError(msg)
        if self.hash_method not in ("dhash", "phash", "ahash", "whash"):
            msg = f"Unknown hash method: {self.hash_method}"
            raise ValueError(msg)
        if self.hash_method == "whash" and self.hash_size & (self.hash_size - 1):
            msg = f"whash needs a power-of-two hash_size, got {self.hash_size}"
            raise ValueError(msg)
        if self.decoder not in ("ffmpeg", "opencv"):
            msg = f"Unknown decoder: {self.decoder}"
            raise ValueError(msg)
        if self.match_direction not in ("query", "index"):
            msg = f"Unknown match direction: {self.match_direction}"
            raise ValueError(msg)
