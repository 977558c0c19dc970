"""Base classes and interfaces for media processing."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path

LOG = logging.getLogger(__name__)


class ProcessingStatus(Enum):
    """Status of a processing operation."""

    SUCCESS = "success"
    FAILED = "failed"
    ERROR = "error"


@dataclass
class ProcessingResult:
    """Result of a media processing operation."""

    source_file: Path
    status: ProcessingStatus
    message: str = ""
    output_files: list[Path] = field(default_factory=list)
    original_size: int | None = None
    new_size: int | None = None
    processing_time: float = 0.0
    metadata: dict[str, Any] = field(default_factory=dict)


class ProcessingError(Exception):
    """Base exception for media processing errors."""

    def __init__(
        self,
        message: str,
        file_path: Path | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.file_path = file_path
        self.cause = cause


class InvalidMagnitudeError(ProcessingError, ValueError):
    """A size or bitrate string could not be parsed."""


class ZeroDurationError(ProcessingError):
    """A zero-length source cannot be fitted to a target size."""


class UpscaleError(ProcessingError):
    """The requested vertical resolution exceeds the source resolution."""


class BitrateBudgetError(ProcessingError):
    """The audio bitrate alone uses up the whole size budget."""

    def __init__(self, message: str, *, video_bitrate: int, audio_bitrate: int, file_path: Path | None = None) -> None:
        super().__init__(message, file_path=file_path)
        self.video_bitrate = video_bitrate
        self.audio_bitrate = audio_bitrate


class SegmentEncodeError(ProcessingError):
    """Encoding one segment failed; remaining segments were abandoned."""

    def __init__(self, message: str, *, index: int, file_path: Path | None = None, cause: Exception | None = None) -> None:
        super().__init__(message, file_path=file_path, cause=cause)
        self.index = index


class SegmentStallError(ProcessingError):
    """A produced segment measured zero seconds, so splitting cannot advance."""

    def __init__(self, message: str, *, index: int, cursor: int, file_path: Path | None = None) -> None:
        super().__init__(message, file_path=file_path)
        self.index = index
        self.cursor = cursor


class MediaProcessor(ABC):
    """Abstract base class for media processors."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.logger = logging.getLogger(f"{self.__class__.__module__}.{self.__class__.__name__}")

    @abstractmethod
    def can_process(self, file_path: Path) -> bool:
        """Check if this processor can handle the given file."""

    @abstractmethod
    def process_file(self, file_path: Path, **kwargs) -> ProcessingResult:
        """Process a single file."""
