"""Convert command: validates user input and hands it to the video processor."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from ...config.constants import VERBOSE_LOGGING_THRESHOLD
from ...core import InvalidMagnitudeError, parse_magnitude
from ...core.units import parse_timestamp
from ...processors import ConversionOptions, VideoProcessor
from ...video.transcode import TimeWindow
from ..summary import print_output_table

if TYPE_CHECKING:
    import argparse

    from ...core import ConfigManager

LOG = logging.getLogger(__name__)


class OptionError(ValueError):
    """A command-line value failed validation."""


def positive_int(value: str) -> int:
    """argparse type for strictly positive integers."""
    try:
        number = int(value)
    except ValueError as e:
        msg = f"'{value}' is not an integer"
        raise OptionError(msg) from e
    if number < 1:
        msg = f"'{value}' must be at least 1"
        raise OptionError(msg)
    return number


class ConvertCommand:
    """Handler for converting one input file."""

    def __init__(self, config_manager: ConfigManager) -> None:
        """Initialize convert command handler."""
        self.config_manager = config_manager

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        """Add conversion options to parser."""
        parser.add_argument("input", type=Path, help="Input media file")
        parser.add_argument(
            "-r", "--resolution", type=positive_int, metavar="HEIGHT", help="Downscale to this vertical resolution"
        )
        parser.add_argument("-b", "--video-bitrate", metavar="RATE", help="Video bitrate, e.g. 800K or 1.5M")
        parser.add_argument("-a", "--audio-bitrate", metavar="RATE", help="Audio bitrate, e.g. 96K")
        parser.add_argument("-s", "--size", metavar="SIZE", help="Target file size in bytes, e.g. 8M")
        parser.add_argument(
            "--split", action="store_true", help="Split into several files of at most --size bytes each"
        )
        parser.add_argument(
            "-c",
            "--cut",
            nargs=2,
            metavar=("START", "END"),
            help="Only convert this time range (seconds or [HH:]MM:SS)",
        )
        parser.add_argument("-o", "--output-dir", type=Path, help="Output directory (default: next to the input)")
        parser.add_argument("-t", "--threads", type=positive_int, help="Encoder threads (default: CPU count)")

    def handle_command(self, args: argparse.Namespace) -> int:
        """Validate arguments, run the conversion and report the outcome."""
        try:
            input_path, options = self.build_options(args)
        except OptionError as e:
            LOG.error("%s", e)
            return 1

        processor = VideoProcessor(self.config_manager)
        if not processor.can_process(input_path):
            LOG.error("Input is not a readable file: %s", input_path)
            return 1

        result = processor.process_file(input_path, options=options)
        segments = result.metadata.get("segments", [])

        if result.status.value == "success":
            print_output_table(segments)
            LOG.info("Converted %s in %.1fs", input_path, result.processing_time)
            return 0

        print_output_table(segments, partial=True)
        LOG.error("%s", result.message)
        return 1

    @staticmethod
    def build_options(args: argparse.Namespace) -> tuple[Path, ConversionOptions]:
        """Turn parsed arguments into an input path and validated conversion options."""
        input_path = args.input.expanduser().resolve()
        if not input_path.is_file():
            msg = f"Input file does not exist: {args.input}"
            raise OptionError(msg)

        output_dir = None
        if args.output_dir is not None:
            output_dir = args.output_dir.expanduser().resolve()
            if not output_dir.is_dir():
                msg = f"Output directory does not exist: {args.output_dir}"
                raise OptionError(msg)

        try:
            video_bitrate = parse_magnitude(args.video_bitrate) if args.video_bitrate else None
            audio_bitrate = parse_magnitude(args.audio_bitrate) if args.audio_bitrate else None
            target_size = parse_magnitude(args.size) if args.size else None
        except InvalidMagnitudeError as e:
            raise OptionError(str(e)) from e

        for name, value in (("video bitrate", video_bitrate), ("audio bitrate", audio_bitrate), ("size", target_size)):
            if value == 0:
                msg = f"The {name} must be greater than zero"
                raise OptionError(msg)

        if args.split and target_size is None:
            msg = "--split needs --size to know how large each file may be"
            raise OptionError(msg)

        window = None
        if args.cut:
            try:
                window = TimeWindow(start=parse_timestamp(args.cut[0]), end=parse_timestamp(args.cut[1]))
            except ValueError as e:
                raise OptionError(str(e)) from e

        options = ConversionOptions(
            output_dir=output_dir,
            target_height=args.resolution,
            video_bitrate=video_bitrate,
            audio_bitrate=audio_bitrate,
            target_size=target_size,
            split=args.split,
            window=window,
            threads=args.threads,
            verbose=getattr(args, "verbose", 0) >= VERBOSE_LOGGING_THRESHOLD,
        )
        return input_path, options
