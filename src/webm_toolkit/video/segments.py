"""Splitting a source into size-capped segments by measuring each one after it is made."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from tqdm import tqdm

from ..core.base import SegmentEncodeError, SegmentStallError
from ..core.ffmpeg import EncodePassError, FFmpegProbe, ProbeError

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from .transcode import EncodeJob, TwoPassEncoder

LOG = logging.getLogger(__name__)


class PlannerState(Enum):
    """Where the planner is in its encode/measure loop."""

    PLANNING = "planning"
    ENCODING_SEGMENT = "encoding_segment"
    MEASURING = "measuring"
    DONE = "done"
    FAILED = "failed"


@dataclass
class SegmentState:
    """Progress through the source: seconds covered and the next segment number."""

    cursor: int = 0
    index: int = 1

    def advance(self, measured_duration: int) -> None:
        self.cursor += measured_duration
        self.index += 1


@dataclass(frozen=True)
class Segment:
    """One produced output file."""

    index: int
    path: Path
    start: int
    duration: int
    size: int


def segment_output_path(output_dir: Path, stem: str, index: int, extension: str) -> Path:
    """``<output_dir>/<stem>_<index><extension>``"""
    return output_dir / f"{stem}_{index}{extension}"


class SegmentPlanner:
    """
    Produce consecutive segments until the whole source is covered.

    Each segment is capped by size, so how much of the source it holds is only
    known afterwards. The planner probes every produced file and starts the
    next segment where the last one actually ended.
    """

    def __init__(self, encoder: TwoPassEncoder, probe: FFmpegProbe | None = None) -> None:
        self.encoder = encoder
        self.probe = probe or FFmpegProbe()
        self.state = PlannerState.PLANNING
        self.progress = SegmentState()

    def run(
        self,
        duration: int,
        make_job: Callable[[int, int], EncodeJob],
        *,
        show_progress: bool = False,
        produced: list[Segment] | None = None,
    ) -> list[Segment]:
        """
        Encode segments covering ``duration`` seconds of the source.

        Args:
            duration: Total source duration in whole seconds
            make_job: Builds the job for ``(index, start_seconds)``
            show_progress: Show a tqdm bar over the source timeline
            produced: Optional list to append segments to as they are written

        Returns:
            The produced segments in order

        Raises:
            SegmentEncodeError: if a segment fails to encode; earlier segments are kept
            SegmentStallError: if a segment measures zero seconds
            ProbeError: if a produced segment cannot be measured

        """
        self.state = PlannerState.PLANNING
        self.progress = SegmentState()
        segments = produced if produced is not None else []

        with tqdm(total=duration, desc="Encoding segments", unit="s", disable=not show_progress) as bar:
            while self.progress.cursor < duration:
                segment = self._produce_segment(make_job)
                segments.append(segment)
                covered = min(self.progress.cursor, duration)
                self.progress.advance(segment.duration)
                bar.update(min(self.progress.cursor, duration) - covered)

        self.state = PlannerState.DONE
        LOG.info("Split into %d segments covering %ds", len(segments), self.progress.cursor)
        return segments

    def _produce_segment(self, make_job: Callable[[int, int], EncodeJob]) -> Segment:
        index = self.progress.index
        start = self.progress.cursor
        job = make_job(index, start)

        self.state = PlannerState.ENCODING_SEGMENT
        LOG.info("Encoding segment %d starting at %ds", index, start)
        try:
            output = self.encoder.encode(job)
        except EncodePassError as e:
            self.state = PlannerState.FAILED
            msg = f"Segment {index} failed at pass {e.pass_number}: {e}"
            raise SegmentEncodeError(msg, index=index, file_path=job.input_path, cause=e) from e

        self.state = PlannerState.MEASURING
        try:
            measured = self.probe.get_duration(output)
        except ProbeError:
            self.state = PlannerState.FAILED
            raise

        if measured <= 0:
            self.state = PlannerState.FAILED
            msg = f"Segment {index} ({output}) holds no whole second of video; cannot advance past {start}s"
            raise SegmentStallError(msg, index=index, cursor=start, file_path=output)

        size = output.stat().st_size if output.exists() else 0
        LOG.info("Segment %d: %ds, %d bytes", index, measured, size)
        return Segment(index=index, path=output, start=start, duration=measured, size=size)
