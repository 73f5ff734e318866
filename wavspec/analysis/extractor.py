"""Channel extraction - per-channel complex buffers for one window."""

from typing import List, Tuple
import numpy as np

from ..core import SampleStore


def clamp_span(start: int, stop: int, length: int) -> Tuple[int, int]:
    """
    Clamp a half-open index range to ``[0, length)``.

    Returns:
        (start, stop) with ``0 <= start <= stop <= length``
    """
    start = min(max(start, 0), length)
    stop = min(max(stop, start), length)
    return start, stop


class ChannelExtractor:
    """Gathers one zero-padded buffer per channel from interleaved samples.

    For channel ``c`` at interleaved offset ``p`` the buffer holds samples
    ``p + c, p + c + n, p + c + 2n, ...`` (``n`` = channel count), cast to
    complex. Anything outside the stream reads as zero, so every buffer is
    exactly ``window_length`` long.
    """

    def __init__(self, store: SampleStore, window_length: int):
        self.store = store
        self.window_length = window_length

    def extract_channel(self, offset: int, channel: int) -> np.ndarray:
        """Buffer for a single channel at interleaved offset ``offset``."""
        samples = self.store.samples
        stride = self.store.channel_count
        buffer = np.zeros(self.window_length, dtype=np.complex128)

        first = offset + channel
        if offset < 0:
            # Window lands before the channel's data
            return buffer

        start, stop = clamp_span(first, first + self.window_length * stride, len(samples))
        values = samples[start:stop:stride]
        buffer[: len(values)] = values
        return buffer

    def extract(self, offset: int) -> List[np.ndarray]:
        """
        Extract every channel's buffer for the window at ``offset``.

        Args:
            offset: Interleaved sample offset of the window

        Returns:
            List of complex buffers, one per channel
        """
        return [
            self.extract_channel(offset, channel)
            for channel in range(self.store.channel_count)
        ]

    def extract_frame(self, frame: int) -> List[np.ndarray]:
        """Extract buffers for a window starting at frame index ``frame``."""
        return self.extract(frame * self.store.channel_count)
