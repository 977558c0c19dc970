"""Core abstractions and utilities for the webm toolkit."""

from .base import (
    BitrateBudgetError,
    InvalidMagnitudeError,
    MediaProcessor,
    ProcessingError,
    ProcessingResult,
    ProcessingStatus,
    SegmentEncodeError,
    SegmentStallError,
    UpscaleError,
    ZeroDurationError,
)
from .config import ConfigManager, ProcessingOptions, with_config_overrides
from .ffmpeg import EncodePassError, FFmpegError, FFmpegProbe, FFmpegProcessor, ProbeError, TrimError
from .system import get_encoder_thread_count
from .units import parse_magnitude
from .workspace import PassLog, Workspace

__all__ = [
    "BitrateBudgetError",
    "ConfigManager",
    "EncodePassError",
    "FFmpegError",
    "FFmpegProbe",
    "FFmpegProcessor",
    "InvalidMagnitudeError",
    "MediaProcessor",
    "PassLog",
    "ProbeError",
    "ProcessingError",
    "ProcessingOptions",
    "ProcessingResult",
    "ProcessingStatus",
    "SegmentEncodeError",
    "SegmentStallError",
    "TrimError",
    "UpscaleError",
    "Workspace",
    "ZeroDurationError",
    "get_encoder_thread_count",
    "parse_magnitude",
    "with_config_overrides",
]
