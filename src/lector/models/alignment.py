"""Lag estimate and run report models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class LagEstimate(BaseModel):
    """Offset between the original and mixed tracks.

    reference[i] lines up with probe[i + lag].
    """

    lag: int
    strategy: Literal["correlate", "manual"]
    method: Literal["direct", "fft"] | None = None
    score: int | None = None  # best correlation score, correlate strategy only
    max_lag: int
    sample_rate: int = 48000

    @property
    def offset_ms(self) -> float:
        return self.lag * 1000.0 / self.sample_rate


class ExtractionReport(BaseModel):
    """Summary of one extraction run."""

    lag: LagEstimate
    alignment: Literal["skip", "shift"]
    combine_policy: Literal["halving", "gain"]
    alpha: float
    original_samples: int
    mixed_samples: int
    aligned_samples: int

    def summary(self) -> dict[str, str]:
        """Rows for the console summary panel."""
        return {
            "Lag": f"{self.lag.lag} samples ({self.lag.offset_ms:.2f} ms, {self.lag.strategy})",
            "Alpha": f"{self.alpha:.4f}",
            "Alignment": self.alignment,
            "Combine policy": self.combine_policy,
            "Aligned samples": str(self.aligned_samples),
        }
