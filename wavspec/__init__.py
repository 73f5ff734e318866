"""wavspec - Audio to Spectrogram Conversion.

Architecture Layers:
    1. core/      - Sample store, error types, constants
    2. input/     - Audio decoding into sample stores
    3. analysis/  - Spectral transform engine (windows, DFT, normalization)
    4. output/    - Export (images)
"""

__version__ = "0.1.0"

# Core types
from .core import (
    SampleStore,
    SpectrogramError,
    InvalidParameter,
    EmptyInput,
    InvalidState,
    UnsupportedFormatError,
)

# Input layer
from .input import AudioLoader

# Analysis layer
from .analysis import (
    WindowPlan,
    ChannelExtractor,
    SpectralTransformer,
    TransformMap,
    SpectrogramConfig,
    SpectrogramEngine,
    compute_spectrogram,
)

# Output layer
from .output import ImageRenderer, RenderConfig

__all__ = [
    # Core
    "SampleStore",
    "SpectrogramError",
    "InvalidParameter",
    "EmptyInput",
    "InvalidState",
    "UnsupportedFormatError",
    # Input
    "AudioLoader",
    # Analysis
    "WindowPlan",
    "ChannelExtractor",
    "SpectralTransformer",
    "TransformMap",
    "SpectrogramConfig",
    "SpectrogramEngine",
    "compute_spectrogram",
    # Output
    "ImageRenderer",
    "RenderConfig",
]
