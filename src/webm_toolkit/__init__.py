"""WebM Toolkit - size-targeted two-pass WebM conversion."""

from __future__ import annotations

__version__ = "0.1.0"
__author__ = "Your Name"
__description__ = "Convert media to size-targeted VP9/Opus WebM files"

# Public API exports
from .config import WebmToolkitConfig, get_config
from .core import (
    ConfigManager,
    EncodePassError,
    FFmpegError,
    FFmpegProbe,
    FFmpegProcessor,
    MediaProcessor,
    ProbeError,
    ProcessingError,
    ProcessingResult,
    ProcessingStatus,
    Workspace,
    parse_magnitude,
    with_config_overrides,
)
from .processors import ConversionOptions, VideoProcessor

__all__ = [
    # Configuration
    "WebmToolkitConfig",
    "get_config",
    "ConfigManager",
    "with_config_overrides",
    # Core functionality
    "MediaProcessor",
    "FFmpegProcessor",
    "FFmpegProbe",
    "Workspace",
    "parse_magnitude",
    # Processors
    "ConversionOptions",
    "VideoProcessor",
    # Enums and data classes
    "ProcessingStatus",
    "ProcessingResult",
    # Exceptions
    "ProcessingError",
    "FFmpegError",
    "ProbeError",
    "EncodePassError",
]
