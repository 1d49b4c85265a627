"""Engine module exports."""

from trainpilot.engine.estimates import (
    EstimateCodec,
    EstimatePass,
    EstimateReconciler,
    decode_estimate,
    encode_estimate,
    format_estimate,
    strip_estimate,
)
from trainpilot.engine.grouping import GroupingEngine
from trainpilot.engine.markers import CloseMarker, OpenMarker, PlainTitle, classify, clean_name, format_open_marker
from trainpilot.engine.progress import NullRunProgress, RunProgress
from trainpilot.engine.relations import RelationSynchronizer
from trainpilot.engine.scanner import Collecting, Group, Idle, scan, scan_groups, step

__all__ = [
    "CloseMarker",
    "Collecting",
    "EstimateCodec",
    "EstimatePass",
    "EstimateReconciler",
    "Group",
    "GroupingEngine",
    "Idle",
    "NullRunProgress",
    "OpenMarker",
    "PlainTitle",
    "RelationSynchronizer",
    "RunProgress",
    "classify",
    "clean_name",
    "decode_estimate",
    "encode_estimate",
    "format_estimate",
    "format_open_marker",
    "scan",
    "scan_groups",
    "step",
    "strip_estimate",
]
