"""Conversion of human-readable magnitudes such as ``500K`` or ``1.5M``."""

from __future__ import annotations

import math
import re
from decimal import Decimal, InvalidOperation

from .base import InvalidMagnitudeError

# Decimal (SI) multipliers, matching ffmpeg's own bitrate suffixes
UNIT_MULTIPLIERS = {
    "": 1,
    "K": 10**3,
    "M": 10**6,
    "G": 10**9,
}

_MAGNITUDE_RE = re.compile(r"^(?P<number>\d+(?:\.\d*)?|\.\d+)(?P<unit>[KMG]?)$", re.IGNORECASE)

KIB = 1024
MIB = 1024 * 1024


def parse_magnitude(value: str) -> int:
    """
    Parse ``<number>[K|M|G]`` into an integer count of bits or bytes.

    The result is rounded up so a user-specified size or bitrate is never
    under-counted.

    Raises:
        InvalidMagnitudeError: if the value is empty, negative or not a number.

    """
    text = str(value).strip()
    match = _MAGNITUDE_RE.match(text)
    if match is None:
        msg = f"Invalid magnitude '{value}': expected a number with an optional K, M or G suffix"
        raise InvalidMagnitudeError(msg)

    try:
        number = Decimal(match.group("number"))
    except InvalidOperation as e:
        msg = f"Invalid magnitude '{value}': {e}"
        raise InvalidMagnitudeError(msg, cause=e) from e

    return math.ceil(number * UNIT_MULTIPLIERS[match.group("unit").upper()])


def parse_timestamp(value: str) -> float:
    """
    Parse seconds (``"90"``, ``"90.5"``) or ``[HH:]MM:SS[.ms]`` into seconds.

    Raises:
        ValueError: if the value is malformed or negative.

    """
    text = str(value).strip()
    parts = text.split(":")
    if not text or len(parts) > 3 or any(not part for part in parts):
        msg = f"Invalid time '{value}': expected seconds or [HH:]MM:SS"
        raise ValueError(msg)

    try:
        *whole, seconds = parts
        total = float(Decimal(seconds))
        for multiplier, part in zip((60, 3600), reversed(whole)):
            total += int(part) * multiplier
    except (ValueError, InvalidOperation) as e:
        msg = f"Invalid time '{value}': {e}"
        raise ValueError(msg) from e

    if not math.isfinite(total) or total < 0 or (whole and not 0 <= float(seconds) < 60):
        msg = f"Invalid time '{value}'"
        raise ValueError(msg)
    return total


def format_size(size_bytes: int) -> str:
    """Render a byte count for log and summary output."""
    if size_bytes < KIB:
        return f"{size_bytes} B"
    if size_bytes < MIB:
        return f"{size_bytes / KIB:.2f} KB"
    return f"{size_bytes / MIB:.2f} MB"


def format_bitrate(bits_per_second: int) -> str:
    """Render a bitrate in kbit/s."""
    return f"{bits_per_second / 1000:.1f} kbit/s"
