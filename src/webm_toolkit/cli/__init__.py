"""CLI module for the webm toolkit."""

from .commands import ConvertCommand
from .main import WebmToolkitCLI

__all__ = [
    "ConvertCommand",
    "WebmToolkitCLI",
]
