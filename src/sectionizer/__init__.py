"""Sectionizer - Find matching time sections (openings, credits, recaps) in two videos."""

from .clustering import cluster, partition_runs
from .config import Config
from .errors import ExtractionError, SectionizerError
from .hashing import FrameHasher
from .matcher import match_sequence
from .metrics import HammingDistance, Metric, hamming
from .models import Frame, MatchedPair, Section, Sections, VideoInfo
from .processor import Sectionizer, run_categorize
from .search import MetricIndex

__version__ = "0.1.0"

__all__ = [
    "Config",
    "ExtractionError",
    "Frame",
    "FrameHasher",
    "HammingDistance",
    "MatchedPair",
    "Metric",
    "MetricIndex",
    "Section",
    "Sections",
    "SectionizerError",
    "Sectionizer",
    "VideoInfo",
    "cluster",
    "hamming",
    "match_sequence",
    "partition_runs",
    "run_categorize",
]
