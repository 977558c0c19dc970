"""Trimming and downscaling applied before encoding."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..config.constants import FFMPEG_QUIET_LOGLEVEL
from ..core.base import UpscaleError
from ..core.ffmpeg import FFmpegError, FFmpegProbe, FFmpegProcessor, TrimError

if TYPE_CHECKING:
    from pathlib import Path

    from ..core.workspace import Workspace
    from .transcode import TimeWindow

LOG = logging.getLogger(__name__)

TRIMMED_STEM = "trimmed"
# Container for inputs without an extension; must accept any stream copy
FALLBACK_TRIM_SUFFIX = ".mkv"


def trim_input(
    source: Path,
    window: TimeWindow,
    workspace: Workspace,
    processor: FFmpegProcessor | None = None,
    *,
    loglevel: str = FFMPEG_QUIET_LOGLEVEL,
) -> Path:
    """
    Stream-copy ``window`` of ``source`` into the workspace.

    The returned file replaces ``source`` for all later probing and encoding.

    Raises:
        TrimError: if ffmpeg fails to cut the window.

    """
    processor = processor or FFmpegProcessor()
    trimmed = workspace.file(f"{TRIMMED_STEM}{source.suffix or FALLBACK_TRIM_SUFFIX}")
    command = processor.build_trim_command(source, trimmed, window.start, window.end, loglevel=loglevel)

    try:
        processor.run_command(command, source)
    except FFmpegError as e:
        msg = f"Could not cut {window.start}s-{window.end if window.end is not None else 'end'} from {source}: {e}"
        raise TrimError(
            msg, command=command, return_code=e.return_code, stderr=e.stderr, file_path=source
        ) from e

    LOG.info("Trimmed %s to %s", source, trimmed)
    return trimmed


def resolve_scale_filter(
    source: Path,
    target_height: int,
    probe: FFmpegProbe | None = None,
    *,
    flags: str | None = None,
) -> str | None:
    """
    Return the ``-vf`` scale filter for ``target_height``, or None if no scaling is needed.

    Raises:
        UpscaleError: if ``target_height`` exceeds the source height.

    """
    probe = probe or FFmpegProbe()
    current_height = probe.get_vertical_resolution(source)

    if target_height > current_height:
        msg = f"Refusing to upscale {source} from {current_height}p to {target_height}p"
        raise UpscaleError(msg, file_path=source)

    if target_height == current_height:
        LOG.warning("%s is already %dp; not scaling", source.name, current_height)
        return None

    LOG.info("Scaling %s from %dp to %dp", source.name, current_height, target_height)
    scale_filter = f"scale=-2:{target_height}"
    if flags:
        scale_filter += f":flags={flags}"
    return scale_filter
