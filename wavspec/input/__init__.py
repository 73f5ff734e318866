"""Input layer - Decode audio files into sample stores."""

from .loader import AudioLoader, AudioInfo, SUBTYPE_BIT_DEPTHS

__all__ = [
    "AudioLoader",
    "AudioInfo",
    "SUBTYPE_BIT_DEPTHS",
]
