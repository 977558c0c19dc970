"""Main CLI interface for the webm toolkit."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from ..config.constants import VERBOSE_LOGGING_THRESHOLD
from ..core import ConfigManager, FFmpegError, FFmpegProbe, ProcessingOptions, with_config_overrides
from .commands import ConvertCommand

LOG = logging.getLogger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser that exits with status 1 on invalid usage."""

    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


class WebmToolkitCLI:
    """Command-line front end: parses, validates and dispatches one conversion."""

    def __init__(self, config_path: Path | None = None) -> None:
        self.config_manager = ConfigManager(config_path)
        self.convert_command = ConvertCommand(self.config_manager)

    @staticmethod
    def setup_logging(verbosity: int, base_level: str = "WARNING") -> None:
        """Setup logging based on verbosity level; ``base_level`` applies when no -v is given."""
        configured = logging.getLevelName(base_level.upper())
        level_map = {
            0: configured if isinstance(configured, int) else logging.WARNING,
            1: logging.INFO,
            2: logging.DEBUG,
        }

        level = level_map.get(verbosity, logging.DEBUG)

        log_format = (
            "%(levelname)s: %(name)s: %(message)s"
            if verbosity >= VERBOSE_LOGGING_THRESHOLD
            else "%(levelname)s: %(message)s"
        )

        logging.basicConfig(level=level, format=log_format, handlers=[logging.StreamHandler(sys.stderr)], force=True)

    def build_parser(self) -> argparse.ArgumentParser:
        """Build the argument parser."""
        parser = _ArgumentParser(
            prog="webm-toolkit",
            description="Convert a media file to VP9/Opus WebM, optionally fitted to a file size",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Fit a clip into 8 MB
  webm-toolkit clip.mp4 --size 8M

  # Cut 1:30-2:00, downscale to 720p, write into ./out
  webm-toolkit movie.mkv --cut 1:30 2:00 --resolution 720 --output-dir out

  # Split into files of at most 50 MB at 1.5 Mbit/s
  webm-toolkit lecture.mp4 --split --size 50M --video-bitrate 1.5M
            """,
        )

        parser.add_argument(
            "-v",
            "--verbose",
            action="count",
            default=0,
            help="Increase verbosity (-v for info, -vv for debug and ffmpeg output)",
        )
        parser.add_argument("--config", type=Path, help="Path to configuration file")

        self.convert_command.add_arguments(parser)
        return parser

    @staticmethod
    def create_processing_options(args: argparse.Namespace) -> ProcessingOptions:
        """Create processing options from CLI arguments."""
        return ProcessingOptions(
            threads=getattr(args, "threads", None),
            verbose=getattr(args, "verbose", 0) > 0,
        )

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parser = self.build_parser()
        parsed_args = parser.parse_args(args)

        if getattr(parsed_args, "config", None):
            self.config_manager = ConfigManager(parsed_args.config)
            self.convert_command.config_manager = self.config_manager

        self.setup_logging(parsed_args.verbose, str(self.config_manager.get_value("global_.log_level", "WARNING")))

        processing_options = self.create_processing_options(parsed_args)

        try:
            FFmpegProbe.check_availability()

            with with_config_overrides(self.config_manager) as config_mgr:
                config_mgr.apply_processing_options(processing_options)
                return self.convert_command.handle_command(parsed_args)

        except FFmpegError as e:
            LOG.error("%s", e)
            return 1
        except KeyboardInterrupt:
            LOG.warning("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except Exception as e:
            LOG.exception(f"Unexpected error: {e}")
            return 1


def main() -> int:
    """Entry point for the CLI."""
    cli = WebmToolkitCLI()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
