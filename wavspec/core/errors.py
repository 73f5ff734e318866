"""Exception types raised by wavspec."""


class SpectrogramError(Exception):
    """Base class for all wavspec errors."""


class InvalidParameter(SpectrogramError, ValueError):
    """Timing or configuration value that cannot produce a valid run.

    Raised before any window is processed.
    """


class EmptyInput(SpectrogramError, ValueError):
    """The sample store holds no samples."""


class InvalidState(SpectrogramError, RuntimeError):
    """Internal contract violation (programming error)."""


class UnsupportedFormatError(SpectrogramError, ValueError):
    """Audio container, extension or bit depth the decoder cannot handle."""
