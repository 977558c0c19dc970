"""Tests for trimming and scaling."""

import logging
from pathlib import Path
from unittest.mock import Mock

import pytest

from webm_toolkit.core import FFmpegError, TrimError, UpscaleError, Workspace
from webm_toolkit.core.ffmpeg import FFmpegProcessor
from webm_toolkit.video.preprocess import resolve_scale_filter, trim_input
from webm_toolkit.video.transcode import TimeWindow


def _probe_with_height(height: int) -> Mock:
    probe = Mock()
    probe.get_vertical_resolution.return_value = height
    return probe


def test_downscale_builds_filter() -> None:
    """Smaller targets get an aspect-preserving scale filter."""
    assert resolve_scale_filter(Path("in.mkv"), 720, _probe_with_height(1080)) == "scale=-2:720"


def test_scale_flags_are_appended() -> None:
    """A configured scaling algorithm is passed to the filter."""
    scale_filter = resolve_scale_filter(Path("in.mkv"), 480, _probe_with_height(1080), flags="lanczos")

    assert scale_filter == "scale=-2:480:flags=lanczos"


@pytest.mark.parametrize("target", [1081, 1440, 2160])
def test_upscale_is_refused(target: int) -> None:
    """Requests above the source height raise UpscaleError."""
    with pytest.raises(UpscaleError):
        resolve_scale_filter(Path("in.mkv"), target, _probe_with_height(1080))


def test_same_height_skips_filter_with_warning(caplog: pytest.LogCaptureFixture) -> None:
    """An equal height needs no filter but is worth a warning."""
    with caplog.at_level(logging.WARNING, logger="webm_toolkit.video.preprocess"):
        assert resolve_scale_filter(Path("in.mkv"), 1080, _probe_with_height(1080)) is None

    assert "not scaling" in caplog.text


def test_trim_writes_into_workspace(tmp_path: Path) -> None:
    """The trimmed copy lives in the workspace and keeps the input's extension."""
    processor = Mock(spec=FFmpegProcessor)
    processor.build_trim_command.side_effect = FFmpegProcessor.build_trim_command

    with Workspace() as workspace:
        trimmed = trim_input(tmp_path / "in.mkv", TimeWindow(10, 40), workspace, processor)
        assert trimmed.parent == workspace.path

    assert trimmed.suffix == ".mkv"
    cmd = processor.run_command.call_args.args[0]
    assert cmd[cmd.index("-ss") + 1] == "10"
    assert cmd[cmd.index("-t") + 1] == "30"
    assert cmd[-1] == str(trimmed)


def test_trim_failure_raises_trim_error(tmp_path: Path) -> None:
    """ffmpeg failures while cutting become TrimError."""
    processor = Mock(spec=FFmpegProcessor)
    processor.build_trim_command.side_effect = FFmpegProcessor.build_trim_command
    processor.run_command.side_effect = FFmpegError("bad seek", return_code=1, stderr="bad seek")

    with Workspace() as workspace:
        with pytest.raises(TrimError) as excinfo:
            trim_input(tmp_path / "in.mkv", TimeWindow(10), workspace, processor)

    assert excinfo.value.return_code == 1


def test_trim_without_input_extension_uses_matroska(tmp_path: Path) -> None:
    """Inputs without an extension are cut into an .mkv so ffmpeg can pick a muxer."""
    processor = Mock(spec=FFmpegProcessor)
    processor.build_trim_command.side_effect = FFmpegProcessor.build_trim_command

    with Workspace() as workspace:
        trimmed = trim_input(tmp_path / "recording", TimeWindow(1, 5), workspace, processor)

    assert trimmed.name == "trimmed.mkv"
    assert processor.run_command.call_args.args[0][-1] == str(trimmed)
