"""Configuration management for the webm toolkit."""

from __future__ import annotations

from .constants import *  # noqa: F403, F401
from .settings import EncoderConfig, GlobalConfig, WebmToolkitConfig, get_config

__all__ = [
    "EncoderConfig",
    "GlobalConfig",
    "WebmToolkitConfig",
    "get_config",
]
