"""Sample-accurate signal alignment."""

from __future__ import annotations

import numpy as np


def skip_leading(signal: np.ndarray, lag: int) -> np.ndarray:
    """Drop the first `lag` samples. No padding; empty if lag >= len(signal)."""
    if lag < 0:
        raise ValueError(f"Truncating skip needs a non-negative lag, got {lag}")
    signal = np.asarray(signal)
    return signal[lag:].copy()


def shift_signal(signal: np.ndarray, lag: int, target_len: int) -> np.ndarray:
    """Shift by `lag` samples, zero-filling gaps, to exactly `target_len` samples.

    lag > 0 delays the content (leading silence); lag <= 0 drops |lag|
    leading samples. Short inputs and oversized lags just yield more silence.
    """
    if target_len < 0:
        raise ValueError(f"target_len must be non-negative, got {target_len}")
    signal = np.asarray(signal)
    shifted = np.zeros(target_len, dtype=signal.dtype)

    if lag > 0:
        count = max(0, min(len(signal), target_len - lag))
        if count:
            shifted[lag:lag + count] = signal[:count]
    else:
        content = signal[min(-lag, len(signal)):]
        count = min(len(content), target_len)
        shifted[:count] = content[:count]

    return shifted


def truncate_pair(a: np.ndarray, c: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Cut both signals to their shared (shorter) length."""
    overlap = min(len(a), len(c))
    return np.asarray(a)[:overlap].copy(), np.asarray(c)[:overlap].copy()
