"""Size-fitting: the video bitrate that makes an encode land on a byte budget."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..core.base import ZeroDurationError

LOG = logging.getLogger(__name__)

BITS_PER_BYTE = 8


@dataclass(frozen=True)
class BitrateFit:
    """Outcome of fitting a size budget to a duration."""

    total_bitrate: int
    audio_bitrate: int

    @property
    def video_bitrate(self) -> int:
        """Bitrate left for video once audio is paid for; may be zero or negative."""
        return self.total_bitrate - self.audio_bitrate


def fit_bitrate(target_size_bytes: int, duration_seconds: int, audio_bitrate: int) -> BitrateFit:
    """
    Split a byte budget over ``duration_seconds`` into total and video bitrates.

    ``total_bitrate = ceil(8 * size / duration)``, computed exactly in integers.
    The video share is not clamped; callers decide what a non-positive value means.

    Raises:
        ZeroDurationError: if ``duration_seconds`` is not positive.

    """
    if duration_seconds <= 0:
        msg = f"Cannot fit {target_size_bytes} bytes into a source of {duration_seconds}s"
        raise ZeroDurationError(msg)

    total_bits = BITS_PER_BYTE * target_size_bytes
    total_bitrate = -(-total_bits // duration_seconds)
    fit = BitrateFit(total_bitrate=total_bitrate, audio_bitrate=audio_bitrate)
    LOG.debug(
        "Fitted %d bytes over %ds: total %d b/s, video %d b/s",
        target_size_bytes,
        duration_seconds,
        fit.total_bitrate,
        fit.video_bitrate,
    )
    return fit


def fit_video_bitrate(target_size_bytes: int, duration_seconds: int, audio_bitrate: int) -> int:
    """Video bitrate in bits per second for the given size budget and duration."""
    return fit_bitrate(target_size_bytes, duration_seconds, audio_bitrate).video_bitrate


def choose_video_bitrate(
    target_size_bytes: int | None,
    duration_seconds: int,
    audio_bitrate: int,
    fixed_video_bitrate: int | None,
    default_video_bitrate: int,
) -> int:
    """
    Pick the video bitrate for a single-file encode.

    Size-fitting wins over a fixed bitrate; the fixed value is then dropped
    with a warning.
    """
    if target_size_bytes is None:
        return fixed_video_bitrate if fixed_video_bitrate is not None else default_video_bitrate

    if fixed_video_bitrate is not None:
        LOG.warning(
            "Both a target size and a video bitrate were given; ignoring video bitrate %d b/s in favour of the size",
            fixed_video_bitrate,
        )
    return fit_video_bitrate(target_size_bytes, duration_seconds, audio_bitrate)
