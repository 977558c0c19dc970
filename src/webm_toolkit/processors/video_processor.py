"""WebM conversion pipeline: trim, scale, size-fit and encode, optionally in segments."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..config.constants import FFMPEG_QUIET_LOGLEVEL, FFMPEG_VERBOSE_LOGLEVEL
from ..core import (
    BitrateBudgetError,
    ConfigManager,
    FFmpegProbe,
    FFmpegProcessor,
    MediaProcessor,
    ProcessingError,
    ProcessingResult,
    ProcessingStatus,
    Workspace,
    ZeroDurationError,
    get_encoder_thread_count,
    parse_magnitude,
)
from ..core.ffmpeg import DEFAULT_PROBE_TIMEOUT, ProbeError
from ..core.units import format_bitrate, format_size
from ..video.bitrate import choose_video_bitrate
from ..video.preprocess import resolve_scale_filter, trim_input
from ..video.segments import Segment, SegmentPlanner, segment_output_path
from ..video.transcode import EncodeJob, TimeWindow, TwoPassEncoder

if TYPE_CHECKING:
    from pathlib import Path


@dataclass(frozen=True)
class ConversionOptions:
    """Validated user choices for one conversion. Rates in bits/s, sizes in bytes."""

    output_dir: Path | None = None
    target_height: int | None = None
    video_bitrate: int | None = None
    audio_bitrate: int | None = None
    target_size: int | None = None
    split: bool = False
    window: TimeWindow | None = None
    threads: int | None = None
    verbose: bool = False

    def __post_init__(self) -> None:
        if self.split and self.target_size is None:
            msg = "Splitting requires a target size per file"
            raise ValueError(msg)


class VideoProcessor(MediaProcessor):
    """Converts one input file to WebM with VP9 video and Opus audio."""

    def __init__(
        self,
        config_manager: ConfigManager,
        ffmpeg: FFmpegProcessor | None = None,
        probe: FFmpegProbe | None = None,
    ) -> None:
        """Initialize video processor with config manager."""
        super().__init__("VideoProcessor")
        self.config_manager = config_manager
        self.ffmpeg = ffmpeg or FFmpegProcessor(timeout=config_manager.get_value("global_.encode_timeout"))
        self.probe = probe or FFmpegProbe(
            timeout=config_manager.get_value("global_.probe_timeout", DEFAULT_PROBE_TIMEOUT)
        )

    def can_process(self, file_path: Path) -> bool:
        """Any readable regular file is worth handing to ffmpeg."""
        return file_path.is_file()

    def process_file(self, file_path: Path, **kwargs: object) -> ProcessingResult:
        """Convert ``file_path``; failures are reported in the result rather than raised."""
        options = kwargs.get("options") or ConversionOptions()
        if not isinstance(options, ConversionOptions):
            msg = f"Expected ConversionOptions, got {type(options).__name__}"
            raise TypeError(msg)

        start_time = time.time()
        original_size = file_path.stat().st_size if file_path.exists() else None
        produced: list[Segment] = []

        try:
            produced = self.convert(file_path, options, produced=produced)
        except ProcessingError as e:
            self.logger.debug("Conversion of %s failed", file_path, exc_info=True)
            return ProcessingResult(
                source_file=file_path,
                status=ProcessingStatus.ERROR,
                message=str(e),
                output_files=[segment.path for segment in produced],
                original_size=original_size,
                processing_time=time.time() - start_time,
                metadata={"error_type": type(e).__name__, "segments": produced},
            )

        return ProcessingResult(
            source_file=file_path,
            status=ProcessingStatus.SUCCESS,
            message=f"Wrote {len(produced)} file(s)",
            output_files=[segment.path for segment in produced],
            original_size=original_size,
            new_size=sum(segment.size for segment in produced),
            processing_time=time.time() - start_time,
            metadata={"segments": produced},
        )

    def convert(
        self, file_path: Path, options: ConversionOptions, *, produced: list[Segment] | None = None
    ) -> list[Segment]:
        """
        Run the whole pipeline for ``file_path``.

        Args:
            file_path: Input media file
            options: Validated conversion options
            produced: Optional list that receives segments as they are written,
                so callers still see them if a later segment fails

        Returns:
            The written output files, in order

        Raises:
            ProcessingError: on the first failing step; nothing is retried

        """
        produced = produced if produced is not None else []
        encoder_config = self.config_manager.config.encoder
        audio_bitrate = options.audio_bitrate or parse_magnitude(
            self.config_manager.get_value("encoder.audio_bitrate", encoder_config.audio_bitrate)
        )
        threads = get_encoder_thread_count(options.threads or self.config_manager.get_value("global_.threads"))
        loglevel = FFMPEG_VERBOSE_LOGLEVEL if options.verbose else FFMPEG_QUIET_LOGLEVEL
        output_dir = options.output_dir or file_path.parent

        with Workspace() as workspace:
            source = file_path
            if options.window is not None:
                source = trim_input(file_path, options.window, workspace, self.ffmpeg, loglevel=loglevel)

            scale_filter = None
            if options.target_height is not None:
                scale_filter = resolve_scale_filter(
                    source,
                    options.target_height,
                    self.probe,
                    flags=self.config_manager.get_value("encoder.scale_flags", encoder_config.scale_flags),
                )

            encoder = TwoPassEncoder(encoder_config, workspace, self.ffmpeg, loglevel=loglevel)

            if options.split:
                self._convert_split(
                    file_path, source, options, encoder, output_dir, audio_bitrate, threads, scale_filter, produced
                )
            else:
                self._convert_single(
                    file_path, source, options, encoder, output_dir, audio_bitrate, threads, scale_filter, produced
                )

        return produced

    def _default_video_bitrate(self) -> int:
        return parse_magnitude(
            self.config_manager.get_value("encoder.video_bitrate", self.config_manager.config.encoder.video_bitrate)
        )

    def _extension(self) -> str:
        return str(self.config_manager.get_value("encoder.extension", ".webm"))

    def _convert_single(  # noqa: PLR0913
        self,
        file_path: Path,
        source: Path,
        options: ConversionOptions,
        encoder: TwoPassEncoder,
        output_dir: Path,
        audio_bitrate: int,
        threads: int,
        scale_filter: str | None,
        produced: list[Segment],
    ) -> None:
        output_path = output_dir / f"{file_path.stem}{self._extension()}"
        if output_path.resolve() == file_path.resolve():
            msg = f"Output {output_path} would overwrite the input; choose another output directory"
            raise ProcessingError(msg, file_path=file_path)

        duration = self.probe.get_duration(source) if options.target_size is not None else 0
        video_bitrate = choose_video_bitrate(
            options.target_size, duration, audio_bitrate, options.video_bitrate, self._default_video_bitrate()
        )

        if video_bitrate <= 0:
            msg = (
                f"A {format_size(options.target_size or 0)} budget over {duration}s leaves "
                f"{video_bitrate} b/s for video after {format_bitrate(audio_bitrate)} of audio; "
                "raise the size or lower the audio bitrate"
            )
            raise BitrateBudgetError(
                msg, video_bitrate=video_bitrate, audio_bitrate=audio_bitrate, file_path=file_path
            )

        self.logger.info("Video bitrate for %s: %s", file_path.name, format_bitrate(video_bitrate))
        job = EncodeJob(
            input_path=source,
            output_path=output_path,
            video_bitrate=video_bitrate,
            audio_bitrate=audio_bitrate,
            threads=threads,
            scale_filter=scale_filter,
        )
        encoder.encode(job)

        size = output_path.stat().st_size if output_path.exists() else 0
        try:
            output_duration = self.probe.get_duration(output_path)
        except ProbeError:
            # written but unmeasurable; listed with zero length
            produced.append(Segment(index=1, path=output_path, start=0, duration=0, size=size))
            raise

        produced.append(Segment(index=1, path=output_path, start=0, duration=output_duration, size=size))

    def _convert_split(  # noqa: PLR0913
        self,
        file_path: Path,
        source: Path,
        options: ConversionOptions,
        encoder: TwoPassEncoder,
        output_dir: Path,
        audio_bitrate: int,
        threads: int,
        scale_filter: str | None,
        produced: list[Segment],
    ) -> None:
        duration = self.probe.get_duration(source)
        if duration <= 0:
            msg = f"{file_path} is shorter than one second; nothing to split"
            raise ZeroDurationError(msg, file_path=file_path)

        video_bitrate = options.video_bitrate or self._default_video_bitrate()
        extension = self._extension()
        self.logger.info(
            "Splitting %s (%ds) into files of at most %s at %s",
            file_path.name,
            duration,
            format_size(options.target_size or 0),
            format_bitrate(video_bitrate),
        )

        def make_job(index: int, start: int) -> EncodeJob:
            return EncodeJob(
                input_path=source,
                output_path=segment_output_path(output_dir, file_path.stem, index, extension),
                video_bitrate=video_bitrate,
                audio_bitrate=audio_bitrate,
                threads=threads,
                window=TimeWindow(start=start) if start > 0 else None,
                scale_filter=scale_filter,
                max_file_size=options.target_size,
            )

        planner = SegmentPlanner(encoder, self.probe)
        planner.run(duration, make_job, show_progress=not options.verbose, produced=produced)
