"""Media processors using the core architecture."""

from .video_processor import ConversionOptions, VideoProcessor

__all__ = [
    "ConversionOptions",
    "VideoProcessor",
]
