"""SampleStore - decoded PCM samples handed to the transform engine."""

from dataclasses import dataclass
import numpy as np

from .errors import InvalidParameter


@dataclass(frozen=True)
class SampleStore:
    """Interleaved PCM samples plus the stream layout.

    Samples are stored frame-major (``L R L R ...`` for stereo). The
    length does not need to be a multiple of ``channel_count``; a trailing
    partial frame is zero padded by the extractor.
    """

    samples: np.ndarray  # 1-D float64, interleaved by channel
    channel_count: int
    sampling_rate: int  # Hz

    def __post_init__(self):
        if self.channel_count <= 0:
            raise InvalidParameter(
                f"channel_count must be positive, got {self.channel_count}"
            )
        if self.sampling_rate <= 0:
            raise InvalidParameter(
                f"sampling_rate must be positive, got {self.sampling_rate}"
            )
        # Borrow when possible; only convert if the caller passed something else
        samples = np.asarray(self.samples, dtype=np.float64).view()
        if samples.ndim != 1:
            raise InvalidParameter(
                f"samples must be one-dimensional (interleaved), got shape {samples.shape}"
            )
        samples.flags.writeable = False
        object.__setattr__(self, "samples", samples)

    @classmethod
    def from_channels(cls, audio: np.ndarray, sampling_rate: int) -> "SampleStore":
        """
        Build a store from a ``[channels, samples]`` or 1-D array.

        Args:
            audio: Mono array, or 2-D array with one row per channel
            sampling_rate: Sample rate in Hz

        Returns:
            SampleStore with the channels interleaved
        """
        audio = np.asarray(audio, dtype=np.float64)
        if audio.ndim == 1:
            return cls(audio, 1, sampling_rate)
        if audio.ndim != 2:
            raise InvalidParameter(f"Expected 1-D or 2-D audio, got shape {audio.shape}")
        return cls(audio.T.reshape(-1), audio.shape[0], sampling_rate)

    def __len__(self) -> int:
        return len(self.samples)

    @property
    def is_empty(self) -> bool:
        return len(self.samples) == 0

    @property
    def frame_count(self) -> int:
        """Number of frames, counting a trailing partial frame."""
        return -(-len(self.samples) // self.channel_count)

    @property
    def has_partial_frame(self) -> bool:
        return len(self.samples) % self.channel_count != 0

    @property
    def duration(self) -> float:
        """Duration in seconds."""
        return self.frame_count / self.sampling_rate
