"""Configuration management for webm toolkit."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

LOG = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "config.yaml"


# Configuration singleton
class _ConfigSingleton:
    """Configuration singleton holder."""

    _instance: WebmToolkitConfig | None = None

    @classmethod
    def get_instance(cls) -> WebmToolkitConfig:
        """Get the configuration instance."""
        if cls._instance is None:
            config_path = Path.cwd() / DEFAULT_CONFIG_NAME
            if config_path.exists():
                cls._instance = WebmToolkitConfig.load_from_file(config_path)
            else:
                cls._instance = WebmToolkitConfig()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the configuration instance."""
        cls._instance = None


_config_singleton = _ConfigSingleton()


@dataclass
class EncoderConfig:
    """Fixed codec pair and default rates for the WebM encoder."""

    video_codec: str = "libvpx-vp9"
    audio_codec: str = "libopus"
    quality: str = "good"  # libvpx -deadline
    extension: str = ".webm"
    video_bitrate: str = "1M"
    audio_bitrate: str = "128K"
    scale_flags: str | None = None  # swscale algorithm, e.g. lanczos


@dataclass
class GlobalConfig:
    """Global settings."""

    log_level: str = "WARNING"
    threads: int | None = None
    probe_timeout: float = 30.0
    encode_timeout: float | None = None


@dataclass
class WebmToolkitConfig:
    """Main configuration class."""

    encoder: EncoderConfig = field(default_factory=EncoderConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    @classmethod
    def load_from_file(cls, config_path: Path) -> WebmToolkitConfig:
        """Load configuration from YAML file."""
        try:
            with config_path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}

            return cls._from_dict(data)
        except (OSError, yaml.YAMLError, AttributeError, TypeError) as e:
            LOG.warning("Failed to load config from %s: %s", config_path, e)
            return cls()

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> WebmToolkitConfig:
        """Create config from dictionary."""
        encoder_config = cls._parse_encoder_config(data.get("encoder") or {})
        global_config = cls._parse_global_config(data.get("global") or {})

        return cls(encoder=encoder_config, global_=global_config)

    @classmethod
    def _parse_encoder_config(cls, encoder_data: dict[str, Any]) -> EncoderConfig:
        """Parse encoder configuration."""
        defaults = EncoderConfig()
        extension = str(encoder_data.get("extension", defaults.extension))
        if not extension.startswith("."):
            extension = f".{extension}"

        return EncoderConfig(
            video_codec=str(encoder_data.get("video_codec", defaults.video_codec)),
            audio_codec=str(encoder_data.get("audio_codec", defaults.audio_codec)),
            quality=str(encoder_data.get("quality", defaults.quality)),
            extension=extension,
            video_bitrate=str(encoder_data.get("video_bitrate", defaults.video_bitrate)),
            audio_bitrate=str(encoder_data.get("audio_bitrate", defaults.audio_bitrate)),
            scale_flags=str(encoder_data["scale_flags"]) if encoder_data.get("scale_flags") else None,
        )

    @classmethod
    def _parse_global_config(cls, global_data: dict[str, Any]) -> GlobalConfig:
        """Parse global configuration."""
        threads = global_data.get("threads")
        if threads is not None and (not isinstance(threads, int) or threads < 1):
            LOG.warning("Invalid thread count '%s'. Detecting automatically.", threads)
            threads = None

        return GlobalConfig(
            log_level=str(global_data.get("log_level", "WARNING")).upper(),
            threads=threads,
            probe_timeout=global_data.get("probe_timeout", GlobalConfig.probe_timeout),
            encode_timeout=global_data.get("encode_timeout"),
        )


def get_config() -> WebmToolkitConfig:
    """Get the global configuration instance."""
    return _config_singleton.get_instance()
