"""Gain estimation and sample-wise combination of aligned tracks."""

from __future__ import annotations

from enum import Enum

import numpy as np

from lector.errors import DegenerateSignalError, LengthMismatchError

INT16_MIN = -32768
INT16_MAX = 32767


class CombineOp(str, Enum):
    """Which output to build from the aligned pair."""

    DIFFERENCE = "difference"
    SUM = "sum"


def _check_lengths(a: np.ndarray, c: np.ndarray, stage: str) -> None:
    if len(a) != len(c):
        raise LengthMismatchError(len(a), len(c), stage)


def estimate_gain(a: np.ndarray, c: np.ndarray) -> float:
    """Least-squares gain relating c to a: (a·c) / (a·a)."""
    _check_lengths(a, c, "gain")

    a64 = np.asarray(a, dtype=np.float64)
    c64 = np.asarray(c, dtype=np.float64)
    dot_aa = float(np.dot(a64, a64))
    if dot_aa == 0.0:
        raise DegenerateSignalError("gain")

    return float(np.dot(a64, c64)) / dot_aa


def combine(
    a: np.ndarray,
    c: np.ndarray,
    op: CombineOp | str,
    *,
    policy: str = "halving",
    alpha: float | None = None,
) -> np.ndarray:
    """Combine two equal-length aligned signals into a new int16 signal.

    Policies:
        halving: difference = (c >> 1) - (a >> 1), sum = (a >> 1) + (c >> 1).
            Gain is ignored. Both halves fit in 16 bits, so nothing clips.
            The shift floors odd negative samples (-3 >> 1 == -2), whereas
            halving by division truncates toward zero (-3 / 2 == -1), so
            such samples can differ by 1 from a divide-based combine.
        gain: difference = c - alpha*a, sum = c + alpha*a, rounded half away
            from zero and clamped to the int16 range.

    Mismatched lengths are rejected; callers truncate to the overlap first.
    """
    op = CombineOp(op)
    _check_lengths(a, c, op.value)

    if policy == "halving":
        half_a = np.right_shift(np.asarray(a, dtype=np.int32), 1)
        half_c = np.right_shift(np.asarray(c, dtype=np.int32), 1)
        if op is CombineOp.DIFFERENCE:
            return (half_c - half_a).astype(np.int16)
        return (half_a + half_c).astype(np.int16)

    if policy == "gain":
        if alpha is None:
            raise ValueError("gain policy requires alpha")
        scaled = alpha * np.asarray(a, dtype=np.float64)
        c64 = np.asarray(c, dtype=np.float64)
        mixed = c64 - scaled if op is CombineOp.DIFFERENCE else c64 + scaled
        return _to_int16(mixed)

    raise ValueError(f"Unknown combine policy: {policy}")


def _to_int16(values: np.ndarray) -> np.ndarray:
    """Round half away from zero, then clamp to the int16 range."""
    rounded = np.copysign(np.floor(np.abs(values) + 0.5), values)
    return np.clip(rounded, INT16_MIN, INT16_MAX).astype(np.int16)
