"""Tests for two-pass encoding."""

import os
from pathlib import Path
from unittest.mock import Mock

import pytest

from webm_toolkit.config import EncoderConfig
from webm_toolkit.core import EncodePassError, FFmpegError, Workspace
from webm_toolkit.video.transcode import EncodeJob, TimeWindow, TwoPassEncoder, ffmpeg_cmd


@pytest.fixture
def job(tmp_path: Path) -> EncodeJob:
    """A job with every optional field set."""
    return EncodeJob(
        input_path=tmp_path / "in.mkv",
        output_path=tmp_path / "out.webm",
        video_bitrate=538_667,
        audio_bitrate=128_000,
        threads=4,
        window=TimeWindow(start=25, end=55),
        scale_filter="scale=-2:720",
        max_file_size=500_000,
    )


def _passlog_dirs(workspace: Workspace) -> list[Path]:
    return [p for p in workspace.path.iterdir() if p.is_dir()]


def test_shared_arguments(job: EncodeJob) -> None:
    """Both passes share the window, threads, codec, bitrate, quality and scale."""
    cmd = ffmpeg_cmd(job, EncoderConfig())

    assert cmd[cmd.index("-ss") + 1] == "25"
    assert cmd.index("-ss") < cmd.index("-i")
    assert cmd[cmd.index("-t") + 1] == "30"
    assert cmd[cmd.index("-threads") + 1] == "4"
    assert cmd[cmd.index("-c:v") + 1] == "libvpx-vp9"
    assert cmd[cmd.index("-b:v") + 1] == "538667"
    assert cmd[cmd.index("-deadline") + 1] == "good"
    assert cmd[cmd.index("-vf") + 1] == "scale=-2:720"


def test_encode_runs_pass_one_before_pass_two(job: EncodeJob) -> None:
    """Pass 1 goes to the null sink without audio; pass 2 writes the file with audio and size cap."""
    processor = Mock()

    with Workspace() as workspace:
        output = TwoPassEncoder(EncoderConfig(), workspace, processor).encode(job)
        assert _passlog_dirs(workspace) == []

    assert output == job.output_path
    first, second = (call.args[0] for call in processor.run_command.call_args_list)

    assert first[first.index("-pass") + 1] == "1"
    assert "-an" in first
    assert first[-1] == os.devnull
    assert "-fs" not in first

    assert second[second.index("-pass") + 1] == "2"
    assert second[second.index("-c:a") + 1] == "libopus"
    assert second[second.index("-b:a") + 1] == "128000"
    assert second[second.index("-fs") + 1] == "500000"
    assert second[-1] == str(job.output_path)

    prefix = first[first.index("-passlogfile") + 1]
    assert second[second.index("-passlogfile") + 1] == prefix


def test_pass_one_failure_skips_pass_two_and_cleans_up(job: EncodeJob) -> None:
    """A failed analysis pass stops the job and still removes the pass log."""
    processor = Mock()
    processor.run_command.side_effect = FFmpegError("boom", return_code=1, stderr="boom")

    with Workspace() as workspace:
        encoder = TwoPassEncoder(EncoderConfig(), workspace, processor)
        with pytest.raises(EncodePassError) as excinfo:
            encoder.encode(job)
        assert _passlog_dirs(workspace) == []

    assert excinfo.value.pass_number == 1
    assert processor.run_command.call_count == 1


def test_pass_two_failure_cleans_up(job: EncodeJob) -> None:
    """A failed final pass reports pass 2 and removes the pass log."""
    processor = Mock()
    processor.run_command.side_effect = [Mock(), FFmpegError("disk full", return_code=1)]

    with Workspace() as workspace:
        encoder = TwoPassEncoder(EncoderConfig(), workspace, processor)
        with pytest.raises(EncodePassError) as excinfo:
            encoder.encode(job)
        assert _passlog_dirs(workspace) == []

    assert excinfo.value.pass_number == 2
    assert excinfo.value.return_code == 1


def test_each_job_gets_its_own_pass_log(job: EncodeJob) -> None:
    """Pass log prefixes are never reused between jobs."""
    processor = Mock()

    with Workspace() as workspace:
        encoder = TwoPassEncoder(EncoderConfig(), workspace, processor)
        encoder.encode(job)
        encoder.encode(job)

    prefixes = {
        call.args[0][call.args[0].index("-passlogfile") + 1] for call in processor.run_command.call_args_list
    }
    assert len(prefixes) == 2


def test_job_without_window_or_scale(tmp_path: Path) -> None:
    """Optional arguments are omitted when unset."""
    job = EncodeJob(tmp_path / "in.mkv", tmp_path / "out.webm", video_bitrate=1_000_000, audio_bitrate=96_000, threads=2)
    cmd = ffmpeg_cmd(job, EncoderConfig())

    assert "-ss" not in cmd
    assert "-t" not in cmd
    assert "-vf" not in cmd


def test_time_window_validation() -> None:
    """Windows must start at or after zero and end after they start."""
    with pytest.raises(ValueError):
        TimeWindow(start=-1)
    with pytest.raises(ValueError):
        TimeWindow(start=10, end=10)
    assert TimeWindow(start=10).length is None
