"""Window planning - partition a sample stream into analysis windows."""

from dataclasses import dataclass
from typing import Optional, Tuple
import math
import warnings

import numpy as np

from ..core.errors import InvalidParameter, EmptyInput


def seconds_to_samples(seconds: float, sampling_rate: int) -> int:
    """Convert a duration in seconds to a whole number of samples (rounded)."""
    return int(round(seconds * sampling_rate))


def _check_time(name: str, value: float, allow_zero: bool) -> None:
    if value is None or not math.isfinite(value):
        raise InvalidParameter(f"{name} must be a finite number, got {value}")
    if value < 0 or (value == 0 and not allow_zero):
        bound = ">= 0" if allow_zero else "> 0"
        raise InvalidParameter(f"{name} must be {bound}, got {value}")


@dataclass(frozen=True)
class WindowPlan:
    """Fixed window length plus the ordered window start offsets.

    Offsets are frame indices into the stream. They are strictly
    increasing, never empty, and never exceed ``stream_length - 1``.
    """

    window_length: int
    window_positions: Tuple[int, ...]
    step: int
    sampling_rate: int
    stream_length: int

    @classmethod
    def compute(
        cls,
        sampling_rate: int,
        stream_length: int,
        window_length_s: float,
        step_s: Optional[float] = None,
        start_time_s: float = 0.0,
        duration_s: Optional[float] = None,
    ) -> "WindowPlan":
        """
        Plan the analysis windows for a stream.

        Args:
            sampling_rate: Sample rate in Hz
            stream_length: Stream length in frames
            window_length_s: Window ("chunk") length in seconds
            step_s: Time between successive window starts; defaults to
                window_length_s (non-overlapping windows)
            start_time_s: Time of the first window
            duration_s: Span to analyze; None means rest of stream

        Returns:
            WindowPlan

        Raises:
            InvalidParameter: Non-finite, negative or zero-sized timing values
            EmptyInput: stream_length is 0
        """
        if sampling_rate <= 0:
            raise InvalidParameter(f"sampling_rate must be positive, got {sampling_rate}")
        if step_s is None:
            step_s = window_length_s

        _check_time("window_length_s", window_length_s, allow_zero=False)
        _check_time("step_s", step_s, allow_zero=False)
        _check_time("start_time_s", start_time_s, allow_zero=True)
        if duration_s is not None:
            _check_time("duration_s", duration_s, allow_zero=True)

        window_length = seconds_to_samples(window_length_s, sampling_rate)
        if window_length <= 0:
            raise InvalidParameter(
                f"window_length_s={window_length_s} is shorter than one sample "
                f"at {sampling_rate} Hz"
            )
        step = seconds_to_samples(step_s, sampling_rate)
        if step <= 0:
            raise InvalidParameter(
                f"step_s={step_s} is shorter than one sample at {sampling_rate} Hz"
            )

        if stream_length <= 0:
            raise EmptyInput("Cannot plan windows over an empty stream")

        last = stream_length - 1
        start = min(seconds_to_samples(start_time_s, sampling_rate), last)
        if duration_s is None:
            end = last
        else:
            end = min(start + seconds_to_samples(duration_s, sampling_rate), last)

        # Inclusive of end: start <= end always holds, so the plan is never empty
        positions = tuple(int(p) for p in np.arange(start, end + 1, step))

        if window_length > stream_length:
            warnings.warn(
                f"Window of {window_length} samples is longer than the stream "
                f"({stream_length} samples); it will be zero padded"
            )

        return cls(
            window_length=window_length,
            window_positions=positions,
            step=step,
            sampling_rate=sampling_rate,
            stream_length=stream_length,
        )

    @property
    def width(self) -> int:
        """Number of windows (rows of the transform map)."""
        return len(self.window_positions)

    def __len__(self) -> int:
        return len(self.window_positions)

    def __iter__(self):
        return iter(self.window_positions)

    def window_times(self) -> np.ndarray:
        """Start time of each window in seconds."""
        return np.asarray(self.window_positions, dtype=np.float64) / self.sampling_rate
