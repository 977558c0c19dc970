"""Size-fitting, two-pass encoding and segment splitting."""

from .bitrate import BitrateFit, choose_video_bitrate, fit_bitrate, fit_video_bitrate
from .preprocess import resolve_scale_filter, trim_input
from .segments import PlannerState, Segment, SegmentPlanner, SegmentState
from .transcode import EncodeJob, TimeWindow, TwoPassEncoder

__all__ = [
    "BitrateFit",
    "EncodeJob",
    "PlannerState",
    "Segment",
    "SegmentPlanner",
    "SegmentState",
    "TimeWindow",
    "TwoPassEncoder",
    "choose_video_bitrate",
    "fit_bitrate",
    "fit_video_bitrate",
    "resolve_scale_filter",
    "trim_input",
]
