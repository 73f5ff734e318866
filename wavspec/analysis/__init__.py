"""Analysis layer - the spectral transform engine.

This layer turns decoded samples into a normalized spectrogram:
- Window planning (start offsets, window length)
- Per-channel extraction with zero padding
- Per-window DFT and cross-channel accumulation
- Global normalization of the transform map
"""

from .window import WindowPlan, seconds_to_samples
from .extractor import ChannelExtractor, clamp_span
from .transform import FFTPlan, SpectralTransformer, output_height
from .transform_map import (
    TransformMap,
    ContrastAmplifier,
    identity_amplifier,
    make_amplifier,
)
from .engine import SpectrogramConfig, SpectrogramEngine, compute_spectrogram

__all__ = [
    "WindowPlan",
    "seconds_to_samples",
    "ChannelExtractor",
    "clamp_span",
    "FFTPlan",
    "SpectralTransformer",
    "output_height",
    "TransformMap",
    "ContrastAmplifier",
    "identity_amplifier",
    "make_amplifier",
    "SpectrogramConfig",
    "SpectrogramEngine",
    "compute_spectrogram",
]
