"""Alignment, gain estimation and combination of PCM tracks."""

from lector.separation.align import shift_signal, skip_leading, truncate_pair
from lector.separation.combine import CombineOp, combine, estimate_gain
from lector.separation.correlate import (
    correlation_scores,
    estimate_lag,
    manual_lag,
    resolve_lag,
)
from lector.separation.module import ExtractionOutput, extract_lector, run_extraction

__all__ = [
    "CombineOp",
    "ExtractionOutput",
    "combine",
    "correlation_scores",
    "estimate_gain",
    "estimate_lag",
    "extract_lector",
    "manual_lag",
    "resolve_lag",
    "run_extraction",
    "shift_signal",
    "skip_leading",
    "truncate_pair",
]
