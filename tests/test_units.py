"""Tests for magnitude and timestamp parsing."""

import math

import pytest

from webm_toolkit.core import InvalidMagnitudeError, parse_magnitude
from webm_toolkit.core.units import format_size, parse_timestamp


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("500K", 500_000),
        ("2M", 2_000_000),
        ("1G", 1_000_000_000),
        ("128000", 128_000),
        ("1.5M", 1_500_000),
        ("1.1K", 1_100),
        ("0.0005K", 1),
        ("2.0000001K", 2_001),
        ("96k", 96_000),
        (" 8M ", 8_000_000),
    ],
)
def test_parse_magnitude(value: str, expected: int) -> None:
    """Suffixes scale by powers of ten and fractions round up."""
    assert parse_magnitude(value) == expected


def test_parse_magnitude_matches_ceiling_of_product() -> None:
    """Output equals ceil(N * 10^k) for every suffix."""
    for suffix, exponent in (("", 0), ("K", 3), ("M", 6), ("G", 9)):
        assert parse_magnitude(f"3.25{suffix}") == math.ceil(3.25 * 10**exponent)


@pytest.mark.parametrize("value", ["", "K", "abc", "-5M", "5T", "1.2.3", "5 M", "M5"])
def test_parse_magnitude_rejects_garbage(value: str) -> None:
    """Unparseable magnitudes raise InvalidMagnitudeError."""
    with pytest.raises(InvalidMagnitudeError):
        parse_magnitude(value)


def test_invalid_magnitude_is_a_value_error() -> None:
    """argparse-style callers can catch ValueError."""
    with pytest.raises(ValueError, match="Invalid magnitude"):
        parse_magnitude("lots")


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("90", 90.0),
        ("90.5", 90.5),
        ("1:30", 90.0),
        ("01:02:03", 3723.0),
        ("0:00.250", 0.25),
    ],
)
def test_parse_timestamp(value: str, expected: float) -> None:
    """Plain seconds and clock notation are both accepted."""
    assert parse_timestamp(value) == pytest.approx(expected)


@pytest.mark.parametrize("value", ["", "-1", "1:75", "1::2", "a:b", "1:2:3:4", "inf"])
def test_parse_timestamp_rejects_garbage(value: str) -> None:
    """Malformed times raise ValueError."""
    with pytest.raises(ValueError):
        parse_timestamp(value)


def test_format_size() -> None:
    """Sizes are rendered with a binary unit."""
    assert format_size(512) == "512 B"
    assert format_size(2048) == "2.00 KB"
    assert format_size(5 * 1024 * 1024) == "5.00 MB"
