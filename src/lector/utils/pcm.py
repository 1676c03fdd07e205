"""Headerless PCM I/O: little-endian signed 16-bit, no header."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import numpy as np
import soundfile as sf

from lector.errors import SignalFormatError, SignalIOError

SAMPLE_BYTES = 2

_RAW_OPTIONS = {"format": "RAW", "subtype": "PCM_16", "endian": "LITTLE"}


def load_pcm(
    path: Path | str,
    *,
    sample_rate: int = 48000,
    channels: int = 1,
) -> np.ndarray:
    """Load a raw PCM file as a mono int16 signal.

    Stereo input (channels=2) is interleaved L/R and is downmixed on load.
    A trailing incomplete sample or frame is a SignalFormatError.
    """
    path = Path(path)
    if channels not in (1, 2):
        raise ValueError(f"Unsupported channel count: {channels}")

    try:
        byte_length = path.stat().st_size
    except OSError as e:
        raise SignalIOError(path, e.strerror or str(e)) from e

    frame_bytes = SAMPLE_BYTES * channels
    if byte_length % frame_bytes:
        raise SignalFormatError(path, byte_length, frame_bytes)

    # libsndfile refuses to open zero-length raw streams
    if byte_length == 0:
        return np.zeros(0, dtype=np.int16)

    try:
        data, _ = sf.read(
            str(path),
            dtype="int16",
            always_2d=True,
            samplerate=sample_rate,
            channels=channels,
            **_RAW_OPTIONS,
        )
    except (RuntimeError, OSError) as e:
        raise SignalIOError(path, str(e)) from e

    if channels == 2:
        return downmix_stereo(data)
    return np.ascontiguousarray(data[:, 0])


def downmix_stereo(frames: np.ndarray) -> np.ndarray:
    """Average L/R per frame, truncating toward zero.

    Accepts either an (n, 2) array or a flat interleaved L, R, L, R sequence.
    """
    frames = np.asarray(frames)
    if frames.ndim == 1:
        if frames.size % 2:
            raise ValueError("Interleaved stereo data has an odd sample count")
        frames = frames.reshape(-1, 2)
    if frames.ndim != 2 or frames.shape[1] != 2:
        raise ValueError(f"Expected stereo frames, got shape {frames.shape}")

    total = frames[:, 0].astype(np.int32) + frames[:, 1].astype(np.int32)
    # Integer division rounds toward -inf; trunc rounds toward zero
    mono = np.trunc(total / 2).astype(np.int32)
    return mono.astype(np.int16)


def store_pcm(
    path: Path | str,
    signal: np.ndarray,
    *,
    sample_rate: int = 48000,
) -> None:
    """Write a mono int16 signal as raw PCM, atomically (temp file, then rename)."""
    path = Path(path)
    samples = np.asarray(signal, dtype=np.int16)
    if samples.ndim != 1:
        raise ValueError(f"Expected a mono signal, got shape {samples.shape}")

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, suffix=".pcm.tmp")
        os.close(fd)
    except OSError as e:
        raise SignalIOError(path, e.strerror or str(e)) from e

    tmp_path = Path(tmp_name)
    try:
        if samples.size:
            sf.write(str(tmp_path), samples, sample_rate, **_RAW_OPTIONS)
        tmp_path.replace(path)
    except (RuntimeError, OSError) as e:
        tmp_path.unlink(missing_ok=True)
        raise SignalIOError(path, str(e)) from e
