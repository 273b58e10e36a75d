#!/usr/bin/env python3
"""CLI interface for sectionizer."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from .config import Config
from .errors import SectionizerError
from .models import Sections
from .processor import Sectionizer

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser.

    Returns:
        Parser for the ``sectionizer`` command.
    """
    defaults = Config()
    parser = argparse.ArgumentParser(
        prog="sectionizer",
        description="Find time sections with matching content in two video files",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    parser.add_argument("files", nargs="*", metavar="file",
                        help="Two video files: <file_a> <file_b>")

    parser.add_argument("--radius", type=int, default=defaults.match_radius,
                        help="Maximum Hamming distance between matching frame hashes")
    parser.add_argument("--max-gap", type=int, default=defaults.max_gap_seconds,
                        help="Largest gap (seconds) between matches inside one section")
    parser.add_argument("--min-duration", type=int, default=defaults.min_duration_seconds,
                        help="Sections must last longer than this many seconds")
    parser.add_argument("--no-min-duration", action="store_true",
                        help="Keep sections of any length")
    parser.add_argument("--fps", type=int, default=defaults.fps,
                        help="Frame rate used to sample both videos")
    parser.add_argument("--max-seconds", type=int, default=defaults.max_seconds,
                        help="Only analyse the first N seconds of each file")
    parser.add_argument("--full", action="store_true",
                        help="Analyse whole files (overrides --max-seconds)")
    parser.add_argument("--decoder", choices=["ffmpeg", "opencv"], default=defaults.decoder,
                        help="Frame source backend")
    parser.add_argument("--ffmpeg", type=str, default=defaults.ffmpeg_path,
                        help="Path to the ffmpeg executable")
    parser.add_argument("--hash-method", choices=["dhash", "phash", "ahash", "whash"],
                        default=defaults.hash_method,
                        help="Perceptual hash algorithm")
    parser.add_argument("--direction", choices=["query", "index"],
                        default=defaults.match_direction,
                        help="query=scan each file against the other's index, "
                             "index=scan the other file against each file's index")
    parser.add_argument("--json", action="store_true",
                        help="Print sections as JSON")
    parser.add_argument("--progress", action="store_true",
                        help="Show hashing progress bars")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable debug logging")
    return parser


def config_from_args(args: argparse.Namespace) -> Config:
    """Build a validated Config from parsed arguments.

    Raises:
        ValueError: If any parameter is invalid.
    """
    cfg = Config(
        match_radius=args.radius,
        max_gap_seconds=args.max_gap,
        min_duration_seconds=None if args.no_min_duration else args.min_duration,
        fps=args.fps,
        max_seconds=None if args.full else args.max_seconds,
        decoder=args.decoder,
        ffmpeg_path=args.ffmpeg,
        hash_method=args.hash_method,
        match_direction=args.direction,
        show_progress=args.progress,
    )
    cfg.validate()
    return cfg


def print_sections(sections: Sections) -> None:
    """Print one ``Sections for <file>`` block."""
    print(f"Sections for {sections.target}")
    for section in sections.sections:
        print(section.format())


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for sectionizer.

    Args:
        argv: Arguments (defaults to sys.argv[1:])

    Returns:
        Process exit status.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S"
    )

    if len(args.files) < 2:
        parser.print_usage()
        return 0
    if len(args.files) > 2:
        logger.warning(f"Ignoring extra arguments: {' '.join(args.files[2:])}")
    file_a, file_b = args.files[:2]

    try:
        cfg = config_from_args(args)
        sectionizer = Sectionizer(cfg, logger=logger)
        result = asyncio.run(sectionizer.categorize(file_a, file_b))
    except (SectionizerError, ValueError) as e:
        logger.error(str(e))
        return 1

    if args.json:
        print(json.dumps([s.model_dump() for s in result], indent=2))
    else:
        for sections in result:
            print_sections(sections)
    return 0


if __name__ == "__main__":
    sys.exit(main())
