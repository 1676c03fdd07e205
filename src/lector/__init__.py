"""lector: recover a voice-over track from a mix by aligning it against the original."""

__version__ = "0.1.0"
