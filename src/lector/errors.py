"""Exceptions raised by the lector extraction pipeline.

All of them derive from LectorError so the CLI can report any pipeline
failure with its context and exit non-zero.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any


class LectorError(Exception):
    """Base exception for all lector errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({ctx_str})"
        return self.message


class SignalIOError(LectorError):
    """Raised when a PCM file cannot be opened, read or written."""

    def __init__(self, path: Path | str, reason: str | None = None) -> None:
        message = f"Cannot access PCM file: {path}"
        if reason:
            message += f" ({reason})"
        super().__init__(message, {"path": str(path)})
        self.path = str(path)
        self.reason = reason


class SignalFormatError(LectorError):
    """Raised when a PCM stream ends with an incomplete sample or frame."""

    def __init__(self, path: Path | str, byte_length: int, frame_bytes: int) -> None:
        super().__init__(
            f"Truncated PCM data in {path}: {byte_length} bytes is not a "
            f"multiple of {frame_bytes}",
            {"path": str(path), "trailing_bytes": byte_length % frame_bytes},
        )
        self.path = str(path)
        self.byte_length = byte_length
        self.frame_bytes = frame_bytes


class DegenerateSignalError(LectorError):
    """Raised when the reference signal has zero energy and gain is undefined."""

    def __init__(self, stage: str = "gain") -> None:
        super().__init__(
            "Reference signal has zero energy; gain is undefined",
            {"stage": stage},
        )
        self.stage = stage


class LengthMismatchError(LectorError):
    """Raised when two signals that must match in length do not."""

    def __init__(self, left: int, right: int, stage: str) -> None:
        super().__init__(
            f"Signal lengths differ: {left} != {right}",
            {"stage": stage},
        )
        self.left = left
        self.right = right
        self.stage = stage


class AlignmentError(LectorError):
    """Raised when a lag cannot be applied with the selected alignment."""

    def __init__(self, message: str, lag: int | None = None) -> None:
        super().__init__(message, {"lag": lag} if lag is not None else None)
        self.lag = lag
