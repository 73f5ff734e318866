"""Spectral transform - one window's channel buffers to one magnitude row.

Magnitudes are ``|Re(X[k])|``, not the complex modulus
``sqrt(Re^2 + Im^2)``. Switching to the modulus changes the rendered output.
"""

from dataclasses import dataclass
from typing import Sequence
import math

import numpy as np
import scipy.fft

from ..core.errors import InvalidParameter, InvalidState
from ..core.constants import DEFAULT_KEEP_FRACTION


def output_height(window_length: int, keep_fraction: float = DEFAULT_KEEP_FRACTION) -> int:
    """
    Number of frequency bins kept for a window length.

    The upper half of the spectrum mirrors the lower half for real input,
    so only ``window_length // 2`` bins are meaningful; of those, the lowest
    ``keep_fraction`` are retained.
    """
    if not math.isfinite(keep_fraction) or not 0 < keep_fraction <= 1:
        raise InvalidParameter(
            f"frequency_keep_fraction must be in (0, 1], got {keep_fraction}"
        )
    # 400 * (1/25) must give 16, not 15
    return int(math.floor((window_length // 2) * keep_fraction + 1e-9))


@dataclass(frozen=True)
class FFTPlan:
    """Transform size and retained bin range, derived once per run.

    Shared read-only by every window. scipy caches its twiddle factors per
    transform size, so repeated calls at ``size`` reuse the same setup.
    """

    size: int
    height: int

    @classmethod
    def for_window(
        cls,
        window_length: int,
        keep_fraction: float = DEFAULT_KEEP_FRACTION,
    ) -> "FFTPlan":
        if window_length <= 0:
            raise InvalidState(f"FFT size must be positive, got {window_length}")
        height = output_height(window_length, keep_fraction)
        if height < 2:
            raise InvalidParameter(
                f"Window of {window_length} samples with keep fraction "
                f"{keep_fraction} leaves no frequency bins above DC; "
                "use a longer window or a larger fraction"
            )
        return cls(size=window_length, height=height)

    def forward(self, buffers: np.ndarray) -> np.ndarray:
        """Forward DFT along the last axis."""
        return scipy.fft.fft(buffers, n=self.size, axis=-1)


class SpectralTransformer:
    """Turns per-channel buffers into a per-window magnitude row.

    Channel spectra are summed bin by bin, so a frequency present in two
    channels scores higher than in one and a silent channel adds nothing.
    """

    def __init__(self, plan: FFTPlan):
        self.plan = plan

    @property
    def height(self) -> int:
        return self.plan.height

    def transform(self, buffers: Sequence[np.ndarray]) -> np.ndarray:
        """
        Compute one window's magnitude row.

        Args:
            buffers: One complex buffer per channel, each ``plan.size`` long

        Returns:
            Freshly allocated row of length ``height``

        Raises:
            InvalidState: A buffer has the wrong length, or none were given
        """
        if len(buffers) == 0:
            raise InvalidState("No channel buffers to transform")
        for buffer in buffers:
            self._check_length(buffer)

        spectra = self.plan.forward(np.stack(buffers))
        magnitudes = np.abs(spectra.real[:, 1:self.plan.height])

        row = np.zeros(self.plan.height, dtype=np.float64)
        # Fixed channel order keeps the sum reproducible
        for channel_row in magnitudes:
            row[1:] += channel_row
        return row

    def _check_length(self, buffer: np.ndarray) -> None:
        if np.ndim(buffer) != 1 or len(buffer) != self.plan.size:
            raise InvalidState(
                f"Channel buffer has shape {np.shape(buffer)}, "
                f"expected ({self.plan.size},)"
            )
