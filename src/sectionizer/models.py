"""Pydantic models for type-safe data structures."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


def format_timestamp(seconds: int) -> str:
    """Render whole seconds as ``MM:SS`` (minutes are not wrapped into hours)."""
    return f"{seconds // 60:02}:{seconds % 60:02}"


class Frame(BaseModel):
    """Perceptual hash of a single decoded frame.

    Attributes:
        hash: Fixed-width hash code as an unsigned integer.
        index: Zero-based decode-order position within its source sequence.
    """
    model_config = ConfigDict(frozen=True)

    hash: int = Field(ge=0)
    index: int = Field(ge=0)


class MatchedPair(BaseModel):
    """A queried frame and its nearest neighbour from the other sequence.

    Attributes:
        queried: Frame from the sequence being scanned.
        matched: Frame found in the other sequence's index.
        distance: Hamming distance between the two hashes.
    """
    model_config = ConfigDict(frozen=True)

    queried: Frame
    matched: Frame
    distance: int = Field(default=0, ge=0)


class Section(BaseModel):
    """A contiguous time range, in whole seconds, with matching content."""

    start: int = Field(ge=0)
    end: int = Field(ge=0)

    @model_validator(mode="after")
    def _check_order(self) -> Section:
        if self.start > self.end:
            msg = f"Section start {self.start} is after end {self.end}"
            raise ValueError(msg)
        return self

    @property
    def duration(self) -> int:
        return self.end - self.start

    def format(self) -> str:
        """Render as ``MM:SS -> MM:SS``."""
        return f"{format_timestamp(self.start)} -> {format_timestamp(self.end)}"


class Sections(BaseModel):
    """Sections detected for one input file.

    Attributes:
        target: Identifier (path) of the file the sections belong to.
        sections: Sections in ascending start order.
    """
    target: str
    sections: list[Section] = Field(default_factory=list)

    def as_tuples(self) -> list[tuple[int, int]]:
        return [(s.start, s.end) for s in self.sections]


class VideoInfo(BaseModel):
    """Video file metadata.

    Attributes:
        fps: Frames per second.
        width: Frame width in pixels.
        height: Frame height in pixels.
        total_frames: Total number of frames in video.
    """
    fps: float
    width: int
    height: int
    total_frames: int
