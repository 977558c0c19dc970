"""Two-pass WebM encoding."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..config import EncoderConfig
from ..config.constants import FFMPEG_QUIET_LOGLEVEL
from ..core.ffmpeg import EncodePassError, FFmpegError, FFmpegProcessor, format_timestamp

if TYPE_CHECKING:
    from pathlib import Path

    from ..core.workspace import PassLog, Workspace

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimeWindow:
    """A ``[start, end)`` range on the source timeline, in seconds."""

    start: float = 0.0
    end: float | None = None

    def __post_init__(self) -> None:
        if self.start < 0:
            msg = f"Window start must not be negative, got {self.start}"
            raise ValueError(msg)
        if self.end is not None and self.end <= self.start:
            msg = f"Window end ({self.end}) must be after its start ({self.start})"
            raise ValueError(msg)

    @property
    def length(self) -> float | None:
        """Window length, or None when it runs to the end of the source."""
        if self.end is None:
            return None
        return self.end - self.start


@dataclass(frozen=True)
class EncodeJob:
    """Everything one two-pass encode needs. Built once, encoded once."""

    input_path: Path
    output_path: Path
    video_bitrate: int
    audio_bitrate: int
    threads: int
    window: TimeWindow | None = None
    scale_filter: str | None = None
    max_file_size: int | None = None


def ffmpeg_cmd(job: EncodeJob, encoder: EncoderConfig, *, loglevel: str = FFMPEG_QUIET_LOGLEVEL) -> list[str]:
    """
    Arguments shared by both passes of ``job``.

    Args:
        job: The encode being run
        encoder: Codec names and quality preset
        loglevel: ffmpeg ``-loglevel`` value

    Returns:
        FFmpeg command prefix as list of strings

    """
    cmd = ["ffmpeg", "-hide_banner", "-y", "-loglevel", loglevel]

    if job.window is not None and job.window.start > 0:
        cmd.extend(["-ss", format_timestamp(job.window.start)])
    cmd.extend(["-i", str(job.input_path)])
    if job.window is not None and job.window.length is not None:
        cmd.extend(["-t", format_timestamp(job.window.length)])

    cmd.extend(["-threads", str(job.threads)])
    cmd.extend(["-c:v", encoder.video_codec, "-b:v", str(job.video_bitrate), "-deadline", encoder.quality])

    if job.scale_filter:
        cmd.extend(["-vf", job.scale_filter])

    return cmd


def first_pass_cmd(
    job: EncodeJob, encoder: EncoderConfig, passlog: PassLog, *, loglevel: str = FFMPEG_QUIET_LOGLEVEL
) -> list[str]:
    """Analysis pass: no audio, output discarded."""
    return [
        *ffmpeg_cmd(job, encoder, loglevel=loglevel),
        "-pass",
        "1",
        "-passlogfile",
        str(passlog.prefix),
        "-an",
        "-f",
        "null",
        os.devnull,
    ]


def second_pass_cmd(
    job: EncodeJob, encoder: EncoderConfig, passlog: PassLog, *, loglevel: str = FFMPEG_QUIET_LOGLEVEL
) -> list[str]:
    """Final pass: writes the real file, with audio."""
    cmd = [
        *ffmpeg_cmd(job, encoder, loglevel=loglevel),
        "-pass",
        "2",
        "-passlogfile",
        str(passlog.prefix),
        "-c:a",
        encoder.audio_codec,
        "-b:a",
        str(job.audio_bitrate),
    ]
    if job.max_file_size is not None:
        cmd.extend(["-fs", str(job.max_file_size)])
    cmd.append(str(job.output_path))
    return cmd


class TwoPassEncoder:
    """Runs a job through an analysis pass and a final pass sharing one pass log."""

    def __init__(
        self,
        encoder: EncoderConfig,
        workspace: Workspace,
        processor: FFmpegProcessor | None = None,
        *,
        loglevel: str = FFMPEG_QUIET_LOGLEVEL,
    ) -> None:
        self.encoder = encoder
        self.workspace = workspace
        self.processor = processor or FFmpegProcessor()
        self.loglevel = loglevel

    def encode(self, job: EncodeJob) -> Path:
        """
        Encode ``job`` and return its output path.

        The pass log is removed whatever happens. A failed second pass may
        leave a partial file at ``job.output_path``.

        Raises:
            EncodePassError: if either pass exits unsuccessfully.

        """
        with self.workspace.passlog() as passlog:
            LOG.info("Encoding %s -> %s at %d b/s (pass 1/2)", job.input_path, job.output_path, job.video_bitrate)
            self._run_pass(first_pass_cmd(job, self.encoder, passlog, loglevel=self.loglevel), job, 1)

            LOG.info("Encoding %s -> %s (pass 2/2)", job.input_path, job.output_path)
            self._run_pass(second_pass_cmd(job, self.encoder, passlog, loglevel=self.loglevel), job, 2)

        return job.output_path

    def _run_pass(self, command: list[str], job: EncodeJob, pass_number: int) -> None:
        try:
            self.processor.run_command(command, job.input_path)
        except FFmpegError as e:
            msg = f"Encoding pass {pass_number} failed for {job.input_path}: {e}"
            raise EncodePassError(
                msg,
                pass_number=pass_number,
                command=command,
                return_code=e.return_code,
                stderr=e.stderr,
                file_path=job.input_path,
            ) from e
