"""Lag estimation via cross-correlation."""

from __future__ import annotations

import numpy as np

from lector.models.alignment import LagEstimate
from lector.models.config import ExtractionConfig
from lector.utils.progress import log_step


def correlation_scores(
    reference: np.ndarray,
    probe: np.ndarray,
    max_lag: int,
    *,
    method: str = "direct",
) -> np.ndarray:
    """Score every candidate lag in [-max_lag, +max_lag].

    Entry k holds sum(reference[i] * probe[i + lag]) for lag = k - max_lag,
    taken over indices valid in both signals (no wrap-around). Direct scores
    are exact. FFT scores are rounded estimates, except that every candidate
    within the FFT error bound of the maximum is rescored exactly, so the
    winning lag and tie-breaking match the direct method.
    """
    if max_lag < 0:
        raise ValueError(f"max_lag must be non-negative, got {max_lag}")

    ref = np.asarray(reference, dtype=np.int64)
    prb = np.asarray(probe, dtype=np.int64)

    if method == "direct":
        return _direct_scores(ref, prb, max_lag)
    if method == "fft":
        return _fft_scores(ref, prb, max_lag)
    raise ValueError(f"Unknown correlation method: {method}")


def _direct_scores(ref: np.ndarray, prb: np.ndarray, max_lag: int) -> np.ndarray:
    scores = np.zeros(2 * max_lag + 1, dtype=np.int64)
    for k, lag in enumerate(range(-max_lag, max_lag + 1)):
        scores[k] = _exact_score(ref, prb, lag)

    return scores


def _exact_score(ref: np.ndarray, prb: np.ndarray, lag: int) -> int:
    start = max(0, -lag)
    stop = min(len(ref), len(prb) - lag)
    if stop <= start:
        return 0
    return int(np.dot(ref[start:stop], prb[start + lag:stop + lag]))


def _fft_scores(ref: np.ndarray, prb: np.ndarray, max_lag: int) -> np.ndarray:
    from scipy.signal import correlate

    scores = np.zeros(2 * max_lag + 1, dtype=np.int64)
    if len(ref) == 0 or len(prb) == 0:
        return scores

    # full[j] = sum(prb[n + lag] * ref[n]) with lag = j - (len(ref) - 1)
    full = correlate(prb.astype(np.float64), ref.astype(np.float64), mode="full", method="fft")
    full = np.rint(full).astype(np.int64)

    lo = max(-max_lag, -(len(ref) - 1))
    hi = min(max_lag, len(prb) - 1)
    if hi >= lo:
        offset = len(ref) - 1
        scores[lo + max_lag:hi + max_lag + 1] = full[lo + offset:hi + offset + 1]

    # float64 FFT error grows with the norms; rescore near-maximal lags exactly
    norms = np.linalg.norm(ref.astype(np.float64)) * np.linalg.norm(prb.astype(np.float64))
    tolerance = 1e-9 * norms + 1.0
    best = scores.max()
    for k in np.flatnonzero(scores >= best - tolerance):
        scores[k] = _exact_score(ref, prb, int(k) - max_lag)

    return scores


def estimate_lag(
    reference: np.ndarray,
    probe: np.ndarray,
    max_lag: int,
    *,
    method: str = "direct",
    sample_rate: int = 48000,
) -> LagEstimate:
    """Find the lag with the strictly greatest correlation.

    Ties keep the smallest lag, so an all-zero reference yields -max_lag.
    Cost is O(max_lag * overlap) for the direct method.
    """
    scores = correlation_scores(reference, probe, max_lag, method=method)
    # argmax returns the first maximum, i.e. the earliest lag in scan order
    best = int(np.argmax(scores))

    return LagEstimate(
        lag=best - max_lag,
        strategy="correlate",
        method=method,
        score=int(scores[best]),
        max_lag=max_lag,
        sample_rate=sample_rate,
    )


def manual_lag(lag: int, max_lag: int, *, sample_rate: int = 48000) -> LagEstimate:
    """Wrap a known lag in the same result type the estimator produces."""
    if max_lag < 0:
        raise ValueError(f"max_lag must be non-negative, got {max_lag}")
    if abs(lag) > max_lag:
        raise ValueError(f"Lag {lag} is outside the ±{max_lag} sample window")

    return LagEstimate(
        lag=lag,
        strategy="manual",
        max_lag=max_lag,
        sample_rate=sample_rate,
    )


def resolve_lag(
    reference: np.ndarray,
    probe: np.ndarray,
    config: ExtractionConfig,
) -> LagEstimate:
    """Compute the lag or take the configured override, as selected."""
    if config.lag_strategy == "manual":
        estimate = manual_lag(
            config.manual_lag,
            config.max_lag,
            sample_rate=config.sample_rate,
        )
        log_step("Lag", f"Using manual lag: {estimate.lag} samples ({estimate.offset_ms:.2f} ms)")
        return estimate

    log_step(
        "Lag",
        f"Searching ±{config.max_lag} samples ({config.correlation_method} correlation)...",
    )
    estimate = estimate_lag(
        reference,
        probe,
        config.max_lag,
        method=config.correlation_method,
        sample_rate=config.sample_rate,
    )
    log_step("Lag", f"Found lag: {estimate.lag} samples ({estimate.offset_ms:.2f} ms)")
    return estimate
