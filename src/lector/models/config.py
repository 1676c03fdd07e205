"""Configuration model for the extraction pipeline."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, model_validator


class ExtractionConfig(BaseModel):
    """Configuration for a single extraction run."""

    sample_rate: int = Field(default=48000, ge=1)
    channels: int = Field(default=1, ge=1, le=2)  # 2 = interleaved stereo, downmixed on load
    max_lag: int = Field(default=48000, ge=0)  # search window in samples
    lag_strategy: Literal["correlate", "manual"] = "correlate"
    manual_lag: int | None = None
    correlation_method: Literal["direct", "fft"] = "direct"
    alignment: Literal["skip", "shift"] = "skip"
    combine_policy: Literal["halving", "gain"] = "halving"

    @model_validator(mode="after")
    def _check_manual_lag(self) -> "ExtractionConfig":
        if self.lag_strategy == "manual":
            if self.manual_lag is None:
                raise ValueError("manual lag strategy requires manual_lag")
            if abs(self.manual_lag) > self.max_lag:
                raise ValueError(
                    f"manual_lag {self.manual_lag} is outside the "
                    f"±{self.max_lag} sample window"
                )
        return self
