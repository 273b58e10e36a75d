"""Exception types raised by the sectionizer package."""

from __future__ import annotations


class SectionizerError(Exception):
    """Base class for all sectionizer failures."""


class ExtractionError(SectionizerError):
    """The frame source for a file could not be created, started or completed.

    Attributes:
        path: File whose extraction failed.
        stderr: Tail of the decoder's diagnostic output, if any was captured.
    """

    def __init__(self, path: str, reason: str, stderr: str = ""):
        self.path = path
        self.reason = reason
        self.stderr = stderr
        msg = f"Frame extraction failed for {path}: {reason}"
        if stderr:
            msg = f"{msg}\n{stderr}"
        super().__init__(msg)
