"""TransformMap - accumulated magnitude field and its normalization."""

from dataclasses import dataclass
from typing import Callable, Optional
import math

import numpy as np

from ..core.errors import InvalidParameter, InvalidState
from ..core.constants import MAX_FLOOR, DISPLAY_MAX


Amplifier = Callable[[np.ndarray], np.ndarray]


def identity_amplifier(values: np.ndarray) -> np.ndarray:
    return values


@dataclass(frozen=True)
class ContrastAmplifier:
    """``x -> (gain * x) ** 2``.

    Squaring pushes quiet bins down relative to peaks; the gain lifts the
    peaks back up before clamping.
    """

    gain: float

    def __post_init__(self):
        if not math.isfinite(self.gain) or self.gain <= 0:
            raise InvalidParameter(f"amplifier_gain must be positive, got {self.gain}")

    def __call__(self, values: np.ndarray) -> np.ndarray:
        return (self.gain * values) ** 2


def make_amplifier(gain: Optional[float] = None) -> Amplifier:
    """Identity when ``gain`` is None, otherwise a ContrastAmplifier."""
    if gain is None:
        return identity_amplifier
    return ContrastAmplifier(gain)


class TransformMap:
    """Dense ``width x height`` magnitude field (window index x bin).

    Lifecycle: allocate, write every row, ``reduce_max()``, then
    ``normalize()`` exactly once. Column 0 (DC) is never written.
    """

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise InvalidState(f"TransformMap needs positive dimensions, got {width}x{height}")
        self.values = np.zeros((width, height), dtype=np.float64)
        self.global_max: Optional[float] = None
        self.normalized = False

    @property
    def width(self) -> int:
        return self.values.shape[0]

    @property
    def height(self) -> int:
        return self.values.shape[1]

    @property
    def shape(self):
        return self.values.shape

    def write_row(self, index: int, row: np.ndarray) -> None:
        """Store a window's magnitude row."""
        if self.normalized or self.global_max is not None:
            raise InvalidState("Cannot write rows after accumulation has finished")
        if len(row) != self.height:
            raise InvalidState(f"Row has {len(row)} bins, expected {self.height}")
        self.values[index, 1:] = row[1:]

    def reduce_max(self) -> float:
        """
        Finish accumulation and compute the normalization denominator.

        Returns:
            ``max(max cell, 1.0)``; the floor keeps silent input at zero
        """
        if self.global_max is None:
            self.global_max = max(float(self.values.max()), MAX_FLOOR)
        return self.global_max

    def normalize(self, amplifier: Optional[Amplifier] = None) -> "TransformMap":
        """
        Rescale every cell into ``[0, 1]`` in place.

        Args:
            amplifier: Monotonic function applied after division by the
                global max (identity by default)

        Returns:
            self

        Raises:
            InvalidState: The map was already normalized
        """
        if self.normalized:
            raise InvalidState("TransformMap is already normalized")
        amplifier = amplifier or identity_amplifier

        global_max = self.reduce_max()
        scaled = amplifier(self.values / global_max)
        np.clip(scaled, 0.0, 1.0, out=self.values)
        self.values[:, 0] = 0.0
        self.normalized = True
        return self

    def to_grid(self) -> np.ndarray:
        """Read-only view of the field, row-major by window index."""
        grid = self.values.view()
        grid.flags.writeable = False
        return grid

    def to_display(self, max_value: int = DISPLAY_MAX) -> np.ndarray:
        """Scale a normalized map to integers in ``[0, max_value]``."""
        if not self.normalized:
            raise InvalidState("Normalize the map before scaling it for display")
        return np.floor(self.to_grid() * max_value).astype(np.uint8 if max_value <= 255 else np.uint16)

    def peak(self):
        """(window_index, bin) of the largest cell."""
        return np.unravel_index(int(np.argmax(self.values)), self.values.shape)
