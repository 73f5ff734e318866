"""Spectral transform engine - plan, accumulate, reduce, normalize."""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from typing import Optional
import warnings

import numpy as np

from ..core import SampleStore
from ..core.errors import EmptyInput, InvalidParameter, InvalidState
from ..core.constants import (
    DEFAULT_START_TIME,
    DEFAULT_WINDOW_LENGTH,
    DEFAULT_KEEP_FRACTION,
)
from .window import WindowPlan
from .extractor import ChannelExtractor
from .transform import FFTPlan, SpectralTransformer
from .transform_map import TransformMap, make_amplifier


@dataclass
class SpectrogramConfig:
    """Configuration for a spectrogram run.

    Attributes:
        start_time_s: Time of the first window (default: 0.0)
        window_length_s: Window ("chunk") length in seconds (default: 0.1)
        step_s: Time between window starts; None means window_length_s,
            i.e. non-overlapping windows (default: None)
        duration_s: Span to analyze; None means the rest of the stream
        frequency_keep_fraction: Fraction of the half-spectrum kept
            (default: 1/25)
        amplifier_gain: Contrast gain k for ``(k*x)**2``; None keeps the
            normalized values unchanged (default: None)
        max_workers: Threads used for the per-window loop (default: 1)
    """

    start_time_s: float = DEFAULT_START_TIME
    window_length_s: float = DEFAULT_WINDOW_LENGTH
    step_s: Optional[float] = None
    duration_s: Optional[float] = None
    frequency_keep_fraction: float = DEFAULT_KEEP_FRACTION
    amplifier_gain: Optional[float] = None
    max_workers: int = 1

    @property
    def effective_step_s(self) -> float:
        return self.window_length_s if self.step_s is None else self.step_s


class SpectrogramEngine:
    """Computes a normalized TransformMap from a SampleStore.

    The run is split into phases with a hard barrier between them: every
    window row is written before the global max is reduced, and the map is
    normalized once after that.
    """

    def __init__(self, config: Optional[SpectrogramConfig] = None):
        self.config = config or SpectrogramConfig()
        if self.config.max_workers < 1:
            raise InvalidParameter(
                f"max_workers must be at least 1, got {self.config.max_workers}"
            )
        # Fail on a bad gain before touching any samples
        self.amplifier = make_amplifier(self.config.amplifier_gain)
        self.plan: Optional[WindowPlan] = None

    def plan_windows(self, store: SampleStore) -> WindowPlan:
        """Compute the WindowPlan for ``store`` without transforming."""
        if store.is_empty:
            raise EmptyInput("SampleStore holds no samples")
        config = self.config
        return WindowPlan.compute(
            sampling_rate=store.sampling_rate,
            stream_length=store.frame_count,
            window_length_s=config.window_length_s,
            step_s=config.effective_step_s,
            start_time_s=config.start_time_s,
            duration_s=config.duration_s,
        )

    def accumulate(self, store: SampleStore, plan: WindowPlan) -> TransformMap:
        """
        Fill a TransformMap with raw (unnormalized) magnitudes.

        Args:
            store: Decoded samples
            plan: Window plan for ``store``

        Returns:
            TransformMap with every row written, not yet normalized
        """
        fft_plan = FFTPlan.for_window(plan.window_length, self.config.frequency_keep_fraction)
        transformer = SpectralTransformer(fft_plan)
        extractor = ChannelExtractor(store, plan.window_length)

        if store.has_partial_frame:
            warnings.warn(
                f"Stream of {len(store)} samples ends with a partial frame for "
                f"{store.channel_count} channels; missing samples read as zero"
            )

        def compute_row(frame: int) -> np.ndarray:
            return transformer.transform(extractor.extract_frame(frame))

        transform_map = TransformMap(plan.width, fft_plan.height)
        positions = plan.window_positions

        if self.config.max_workers == 1:
            rows = map(compute_row, positions)
        else:
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                rows = list(executor.map(compute_row, positions))

        for index, row in enumerate(rows):
            transform_map.write_row(index, row)
        return transform_map

    def run(self, store: SampleStore) -> TransformMap:
        """
        Run the whole transform.

        Args:
            store: Decoded samples

        Returns:
            Normalized TransformMap, values in [0, 1]

        Raises:
            EmptyInput: store has no samples
            InvalidParameter: timing or frequency settings are unusable
        """
        self.plan = self.plan_windows(store)
        transform_map = self.accumulate(store, self.plan)
        transform_map.reduce_max()
        return transform_map.normalize(self.amplifier)

    def bin_frequencies(self, height: int) -> np.ndarray:
        """Centre frequency in Hz of each retained bin of the last run."""
        if self.plan is None:
            raise InvalidState("No plan yet; call run() first")
        return np.arange(height) * self.plan.sampling_rate / self.plan.window_length

    def window_times(self) -> np.ndarray:
        """Start time in seconds of each window of the last run."""
        if self.plan is None:
            raise InvalidState("No plan yet; call run() first")
        return self.plan.window_times()


def compute_spectrogram(store: SampleStore, **options) -> TransformMap:
    """
    One-shot helper: ``compute_spectrogram(store, window_length_s=0.05)``.

    Keyword arguments are SpectrogramConfig fields.
    """
    config = replace(SpectrogramConfig(), **options)
    return SpectrogramEngine(config).run(store)
