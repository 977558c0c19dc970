"""Tests for size-fitting."""

import logging

import pytest

from webm_toolkit.core import ZeroDurationError
from webm_toolkit.video.bitrate import choose_video_bitrate, fit_bitrate, fit_video_bitrate


def test_fit_bitrate_worked_example() -> None:
    """5 MB over 60 s with 128 kbit/s audio leaves 538,667 b/s for video."""
    fit = fit_bitrate(5_000_000, 60, 128_000)

    assert fit.total_bitrate == 666_667
    assert fit.video_bitrate == 538_667
    assert fit_video_bitrate(5_000_000, 60, 128_000) == 538_667


@pytest.mark.parametrize(
    ("size", "duration"),
    [(5_000_000, 60), (8_000_000, 7), (1, 3), (123_456_789, 3_601), (10**9, 1)],
)
def test_fit_bitrate_reproduces_size_within_rounding(size: int, duration: int) -> None:
    """total_bitrate * duration / 8 lands on the budget, overshooting by less than one second's rounding."""
    fit = fit_bitrate(size, duration, 0)
    produced_bits = fit.total_bitrate * duration

    assert produced_bits >= 8 * size
    assert produced_bits - 8 * size < duration


def test_fit_bitrate_is_deterministic() -> None:
    """Same inputs, same answer."""
    assert fit_bitrate(7_340_032, 95, 96_000) == fit_bitrate(7_340_032, 95, 96_000)


def test_fit_bitrate_zero_duration() -> None:
    """A zero-length source cannot be size-fitted."""
    with pytest.raises(ZeroDurationError):
        fit_bitrate(5_000_000, 0, 128_000)


def test_fit_bitrate_negative_video_share_is_not_clamped() -> None:
    """When audio eats the budget the negative video bitrate is returned as is."""
    assert fit_video_bitrate(100_000, 60, 128_000) == -(128_000 - 13_334)


def test_choose_prefers_size_over_fixed_bitrate(caplog: pytest.LogCaptureFixture) -> None:
    """A fixed video bitrate is dropped with a warning when a size is given."""
    with caplog.at_level(logging.WARNING, logger="webm_toolkit.video.bitrate"):
        bitrate = choose_video_bitrate(5_000_000, 60, 128_000, 2_000_000, 1_000_000)

    assert bitrate == 538_667
    assert "ignoring video bitrate" in caplog.text


def test_choose_uses_fixed_then_default_without_size() -> None:
    """Without a size the fixed bitrate, then the default, is used."""
    assert choose_video_bitrate(None, 0, 128_000, 2_000_000, 1_000_000) == 2_000_000
    assert choose_video_bitrate(None, 0, 128_000, None, 1_000_000) == 1_000_000
