"""Core types and constants for wavspec."""

from .samples import SampleStore
from .errors import (
    SpectrogramError,
    InvalidParameter,
    EmptyInput,
    InvalidState,
    UnsupportedFormatError,
)
from .constants import (
    DEFAULT_START_TIME,
    DEFAULT_WINDOW_LENGTH,
    DEFAULT_KEEP_FRACTION,
    MAX_FLOOR,
)

__all__ = [
    "SampleStore",
    "SpectrogramError",
    "InvalidParameter",
    "EmptyInput",
    "InvalidState",
    "UnsupportedFormatError",
    "DEFAULT_START_TIME",
    "DEFAULT_WINDOW_LENGTH",
    "DEFAULT_KEEP_FRACTION",
    "MAX_FLOOR",
]
