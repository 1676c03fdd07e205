"""Pydantic data models for lector."""

from lector.models.alignment import ExtractionReport, LagEstimate
from lector.models.config import ExtractionConfig

__all__ = [
    "ExtractionConfig",
    "ExtractionReport",
    "LagEstimate",
]
