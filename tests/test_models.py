"""
Tests for configuration validation and the pydantic data models.
"""

import pytest
from pydantic import ValidationError

from sectionizer import Config, Frame, MatchedPair, Section, Sections
from sectionizer.models import format_timestamp


class TestConfig:
    """Test Config defaults, derived values and validation."""

    def test_defaults_are_valid(self):
        cfg = Config()
        cfg.validate()
        assert cfg.frame_size == 18 * 16 * 3

    @pytest.mark.parametrize("kwargs, message", [
        ({"match_radius": -1}, "match_radius"),
        ({"max_gap_seconds": 0}, "max_gap_seconds"),
        ({"min_duration_seconds": -1}, "min_duration_seconds"),
        ({"fps": 0}, "fps"),
        ({"max_seconds": 0}, "max_seconds"),
        ({"frame_width": 0}, "frame size"),
        ({"channels": 4}, "RGB"),
        ({"hash_size": 1}, "hash_size"),
        ({"hash_method": "md5"}, "hash method"),
        ({"hash_method": "whash", "hash_size": 6}, "power-of-two"),
        ({"decoder": "vlc"}, "decoder"),
        ({"match_direction": "sideways"}, "direction"),
    ])
    def test_invalid_values(self, kwargs, message):
        with pytest.raises(ValueError, match=message):
            Config(**kwargs).validate()

    def test_optional_limits(self):
        Config(min_duration_seconds=None, max_seconds=None).validate()


class TestModels:
    """Test Frame, MatchedPair and Section models."""

    def test_frame_rejects_negative_values(self):
        with pytest.raises(ValidationError):
            Frame(hash=-1, index=0)
        with pytest.raises(ValidationError):
            Frame(hash=0, index=-1)

    def test_frame_is_immutable_and_hashable(self):
        frame = Frame(hash=2**127, index=3)
        with pytest.raises(ValidationError):
            frame.index = 4  # type: ignore[misc]
        assert frame == Frame(hash=2**127, index=3)
        assert len({frame, Frame(hash=2**127, index=3)}) == 1

    def test_matched_pair(self):
        pair = MatchedPair(queried=Frame(hash=1, index=0), matched=Frame(hash=3, index=9),
                           distance=1)
        assert pair.matched.index == 9

    def test_section_order_validated(self):
        with pytest.raises(ValidationError):
            Section(start=5, end=4)
        assert Section(start=4, end=4).duration == 0

    @pytest.mark.parametrize("seconds, expected", [
        (0, "00:00"), (59, "00:59"), (65, "01:05"), (3600, "60:00"),
    ])
    def test_format_timestamp(self, seconds, expected):
        assert format_timestamp(seconds) == expected

    def test_section_format(self):
        assert Section(start=90, end=125).format() == "01:30 -> 02:05"

    def test_sections_as_tuples(self):
        sections = Sections(target="a.mkv", sections=[Section(start=1, end=12)])
        assert sections.as_tuples() == [(1, 12)]
        assert Sections(target="b.mkv").as_tuples() == []
