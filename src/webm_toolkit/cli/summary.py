"""Table of written files shown after a conversion."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..config.constants import FILENAME_TRUNCATE_LENGTH, MAX_FILENAME_LENGTH
from ..core.units import format_size

if TYPE_CHECKING:
    from ..video.segments import Segment


def print_output_table(segments: list[Segment], *, partial: bool = False) -> None:
    """
    Print a simple table of the files a conversion wrote.

    Args:
        segments: Written files, in order
        partial: The run failed after writing these files

    """
    if not segments:
        return

    title = "FILES WRITTEN BEFORE FAILURE" if partial else "FILES WRITTEN"
    print("\n" + "=" * 80)
    print(f"{title:^80}")
    print("=" * 80)

    print(f"{'#':>3} | {'FILE':<40} | {'START':>7} | {'LENGTH':>7} | {'SIZE':>12}")
    print("-" * 80)

    for segment in segments:
        filename = segment.path.name
        if len(filename) > MAX_FILENAME_LENGTH:
            filename = filename[:FILENAME_TRUNCATE_LENGTH] + "..."

        print(
            f"{segment.index:>3} | {filename:<40} | {segment.start:>6}s | {segment.duration:>6}s | "
            f"{format_size(segment.size):>12}"
        )

    total_duration = sum(segment.duration for segment in segments)
    total_size = sum(segment.size for segment in segments)
    print("-" * 80)
    print(f"Total: {len(segments)} file(s), {total_duration}s, {format_size(total_size)}\n")
