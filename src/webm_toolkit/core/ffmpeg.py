"""FFmpeg integration and utilities."""

from __future__ import annotations

import json
import logging
import math
import shutil
import subprocess
import time
from typing import TYPE_CHECKING, Any

from .base import ProcessingError

if TYPE_CHECKING:
    from pathlib import Path

LOG = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT = 30


class FFmpegError(ProcessingError):
    """FFmpeg-specific error."""

    def __init__(
        self,
        message: str,
        *,
        command: list[str] | None = None,
        return_code: int | None = None,
        stderr: str | None = None,
        file_path: Path | None = None,
    ) -> None:
        """Initialize FFmpeg error with detailed context."""
        super().__init__(message, file_path=file_path)
        self.command = command
        self.return_code = return_code
        self.stderr = stderr


class ProbeError(FFmpegError):
    """The media file could not be read or lacks the requested metadata."""


class TrimError(FFmpegError):
    """The stream-copy trim of the input failed."""


class EncodePassError(FFmpegError):
    """One pass of a two-pass encode exited unsuccessfully."""

    def __init__(self, message: str, *, pass_number: int, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.pass_number = pass_number


class FFmpegProbe:
    """ffprobe wrapper answering the duration and resolution questions the encoder needs."""

    def __init__(self, timeout: float | None = DEFAULT_PROBE_TIMEOUT) -> None:
        """Initialize the probe with a timeout in seconds for each ffprobe call."""
        self.timeout = timeout

    @staticmethod
    def check_availability() -> None:
        """Check if FFmpeg tools are available."""
        required = ["ffmpeg", "ffprobe"]
        missing = [exe for exe in required if not shutil.which(exe)]

        if missing:
            error_msg = f"Missing FFmpeg executables: {', '.join(missing)}"
            LOG.error(error_msg)
            raise FFmpegError(error_msg)

    def probe_media(self, file_path: Path, stream_type: str | None = None) -> dict[str, Any]:
        """Probe media file for format and stream metadata."""
        cmd = [
            "ffprobe",
            "-v",
            "error",
            "-print_format",
            "json",
            "-show_format",
            "-show_streams",
        ]

        if stream_type:
            cmd.extend(["-select_streams", f"{stream_type}:0"])

        cmd.append(str(file_path))
        LOG.debug("Probing %s", file_path)

        try:
            result = subprocess.run(  # noqa: S603
                cmd,
                capture_output=True,
                text=True,
                check=True,
                timeout=self.timeout,
                encoding="utf-8",
                errors="replace",
            )
            probe_data = json.loads(result.stdout)
        except subprocess.CalledProcessError as e:
            error_details = e.stderr or e.stdout or "No error output"
            msg = f"ffprobe failed for {file_path}: {error_details.strip()}"
            raise ProbeError(
                msg,
                command=cmd,
                return_code=e.returncode,
                file_path=file_path,
                stderr=e.stderr,
            ) from e
        except subprocess.TimeoutExpired as e:
            msg = f"ffprobe timed out for {file_path}"
            raise ProbeError(msg, command=cmd, file_path=file_path) from e
        except json.JSONDecodeError as e:
            msg = f"Invalid JSON from ffprobe for {file_path}: {e}"
            raise ProbeError(msg, command=cmd, file_path=file_path) from e
        except OSError as e:
            msg = f"Could not run ffprobe for {file_path}: {e}"
            raise ProbeError(msg, command=cmd, file_path=file_path) from e
        else:
            return probe_data

    def get_duration(self, file_path: Path) -> int:
        """Return the container duration in whole seconds, rounded down."""
        data = self.probe_media(file_path)
        raw_duration = data.get("format", {}).get("duration")

        try:
            duration = float(raw_duration)
        except (TypeError, ValueError) as e:
            msg = f"No duration metadata in {file_path}"
            raise ProbeError(msg, file_path=file_path) from e

        if math.isnan(duration) or math.isinf(duration) or duration < 0:
            msg = f"Unusable duration {raw_duration!r} in {file_path}"
            raise ProbeError(msg, file_path=file_path)

        return math.floor(duration)

    def get_vertical_resolution(self, file_path: Path) -> int:
        """Return the height of the first video stream."""
        data = self.probe_media(file_path, "v")

        if not data.get("streams"):
            msg = f"No video streams found in {file_path}"
            raise ProbeError(msg, file_path=file_path)

        height = data["streams"][0].get("height")
        try:
            return int(height)
        except (TypeError, ValueError) as e:
            msg = f"Video stream in {file_path} has no height"
            raise ProbeError(msg, file_path=file_path) from e


class FFmpegProcessor:
    """FFmpeg command executor with enhanced error handling."""

    def __init__(self, timeout: float | None = None) -> None:
        """Initialize FFmpeg processor with an optional timeout in seconds."""
        self.timeout = timeout

    def run_command(self, command: list[str], file_path: Path | None = None) -> subprocess.CompletedProcess:
        """Run FFmpeg command with proper error handling."""
        LOG.info("Running FFmpeg command: %s", " ".join(command))
        start_time = time.time()

        try:
            result = subprocess.run(  # noqa: S603
                command,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,  # We'll handle return code ourselves
                encoding="utf-8",
                errors="replace",
            )
        except subprocess.TimeoutExpired as e:
            msg = f"FFmpeg command timed out after {self.timeout}s"
            raise FFmpegError(msg, command=command, file_path=file_path) from e
        except OSError as e:
            msg = f"Unexpected error running FFmpeg: {e}"
            raise FFmpegError(msg, command=command, file_path=file_path) from e

        LOG.debug("FFmpeg command completed in %.2fs", time.time() - start_time)

        if result.returncode != 0:
            self._handle_ffmpeg_error(result, command, file_path)
        return result

    def _handle_ffmpeg_error(
        self, result: subprocess.CompletedProcess, command: list[str], file_path: Path | None
    ) -> None:
        """Handle FFmpeg command error by raising appropriate exception."""
        error_msg = f"FFmpeg failed with return code {result.returncode}"
        if result.stderr:
            error_msg += f": {result.stderr.strip()}"

        raise FFmpegError(
            error_msg,
            command=command,
            return_code=result.returncode,
            stderr=result.stderr,
            file_path=file_path,
        )

    @staticmethod
    def build_trim_command(
        input_file: Path, output_file: Path, start: float, end: float | None = None, *, loglevel: str = "error"
    ) -> list[str]:
        """Build a lossless stream-copy command cutting ``[start, end)`` out of the input."""
        cmd = ["ffmpeg", "-hide_banner", "-y", "-loglevel", loglevel, "-ss", format_timestamp(start), "-i", str(input_file)]
        if end is not None:
            cmd.extend(["-t", format_timestamp(end - start)])
        cmd.extend(["-map", "0", "-c", "copy", str(output_file)])
        return cmd


def format_timestamp(value: float) -> str:
    """Format a timestamp for ffmpeg without a trailing ``.0`` on whole seconds."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.3f}"
