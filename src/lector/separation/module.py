"""Extraction module: orchestrates lag, alignment, gain and combine steps."""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from lector.errors import AlignmentError, LectorError
from lector.models.alignment import ExtractionReport
from lector.models.config import ExtractionConfig
from lector.separation.align import shift_signal, skip_leading, truncate_pair
from lector.separation.combine import CombineOp, combine, estimate_gain
from lector.separation.correlate import resolve_lag
from lector.utils.pcm import load_pcm, store_pcm
from lector.utils.progress import log_saved, log_step, show_run_summary


@dataclass
class ExtractionOutput:
    """In-memory result of an extraction run."""

    difference: np.ndarray
    recombined: np.ndarray
    report: ExtractionReport


def extract_lector(
    original: np.ndarray,
    mixed: np.ndarray,
    config: ExtractionConfig | None = None,
) -> ExtractionOutput:
    """Separate the lector track from the mixed track.

    Steps:
    1. Resolve the lag (cross-correlation or manual override)
    2. Align the original onto the mixed track
    3. Estimate the gain alpha over the aligned overlap
    4. Build the difference and recombined signals
    """
    config = config or ExtractionConfig()
    original = np.asarray(original, dtype=np.int16)
    mixed = np.asarray(mixed, dtype=np.int16)

    # Step 1: Lag
    estimate = resolve_lag(original, mixed, config)
    lag = estimate.lag

    # Step 2: Alignment
    if config.alignment == "skip":
        a_aligned, c_aligned = _skip_align(original, mixed, estimate.lag, estimate.strategy)
    else:
        a_aligned = shift_signal(original, lag, len(mixed))
        c_aligned = mixed.copy()

    log_step("Align", f"{config.alignment}: {len(a_aligned)} aligned samples")

    # Step 3: Gain
    alpha = estimate_gain(a_aligned, c_aligned)
    log_step("Gain", f"Alpha coefficient: {alpha:.4f}")

    # Step 4: Combine
    policy = config.combine_policy
    difference = combine(a_aligned, c_aligned, CombineOp.DIFFERENCE, policy=policy, alpha=alpha)
    recombined = combine(a_aligned, c_aligned, CombineOp.SUM, policy=policy, alpha=alpha)
    log_step("Combine", f"Built difference and sum ({policy} policy)")

    report = ExtractionReport(
        lag=estimate,
        alignment=config.alignment,
        combine_policy=policy,
        alpha=alpha,
        original_samples=len(original),
        mixed_samples=len(mixed),
        aligned_samples=len(a_aligned),
    )
    return ExtractionOutput(difference=difference, recombined=recombined, report=report)


def _skip_align(
    original: np.ndarray,
    mixed: np.ndarray,
    lag: int,
    strategy: str,
) -> tuple[np.ndarray, np.ndarray]:
    """Align by dropping leading samples, then cut both to the overlap.

    A correlated lag means original[i] ~ mixed[i + lag], so the later track
    loses its head: mixed for lag > 0, original for lag < 0. A manual lag is
    the number of leading original samples to drop and must be >= 0.
    """
    if strategy == "correlate":
        if lag >= 0:
            return truncate_pair(original, skip_leading(mixed, lag))
        return truncate_pair(skip_leading(original, -lag), mixed)

    if lag < 0:
        raise AlignmentError(
            "Truncating skip cannot apply a negative manual lag; use shift alignment",
            lag=lag,
        )
    return truncate_pair(skip_leading(original, lag), mixed)


def run_extraction(
    original_path: Path | str,
    mixed_path: Path | str,
    difference_path: Path | str,
    sum_path: Path | str,
    config: ExtractionConfig | None = None,
) -> ExtractionReport:
    """Run the full file-to-file extraction.

    Both outputs are computed before anything is written. Each file is
    written atomically, and if the second write fails the first output is
    removed so no half-finished result is left behind.
    """
    config = config or ExtractionConfig()
    difference_path = Path(difference_path)
    sum_path = Path(sum_path)
    start_time = time.time()

    log_step("Load", f"Loading original audio: {Path(original_path).name}")
    original = load_pcm(original_path, sample_rate=config.sample_rate, channels=config.channels)
    log_step("Load", f"Loading mixed audio: {Path(mixed_path).name}")
    mixed = load_pcm(mixed_path, sample_rate=config.sample_rate, channels=config.channels)
    log_step("Load", f"Loaded {len(original)} + {len(mixed)} samples")

    output = extract_lector(original, mixed, config)

    store_pcm(difference_path, output.difference, sample_rate=config.sample_rate)
    log_saved(difference_path, len(output.difference), config.sample_rate)
    try:
        store_pcm(sum_path, output.recombined, sample_rate=config.sample_rate)
    except LectorError:
        difference_path.unlink(missing_ok=True)
        raise
    log_saved(sum_path, len(output.recombined), config.sample_rate)

    show_run_summary(output.report.summary(), time.time() - start_time)
    return output.report
