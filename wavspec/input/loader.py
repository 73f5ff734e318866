"""Audio loading - decode files into a SampleStore."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import numpy as np
import librosa
import soundfile as sf

from ..core import SampleStore
from ..core.errors import UnsupportedFormatError
from ..core.constants import SUPPORTED_BIT_DEPTHS


# soundfile subtype -> bits per sample
SUBTYPE_BIT_DEPTHS = {
    "PCM_U8": 8,
    "PCM_S8": 8,
    "PCM_16": 16,
    "PCM_24": 24,
    "PCM_32": 32,
    "FLOAT": 32,
}

# Integer subtypes are handed to the engine in their fixed-point range
PCM_FULL_SCALE = {
    "PCM_U8": 2 ** 7,
    "PCM_S8": 2 ** 7,
    "PCM_16": 2 ** 15,
    "PCM_24": 2 ** 23,
    "PCM_32": 2 ** 31,
}

# Decoded compressed audio is treated as 16-bit
COMPRESSED_FULL_SCALE = 2 ** 15


@dataclass
class AudioInfo:
    """Header information of an audio file."""

    path: Path
    sampling_rate: int
    channel_count: int
    frames: int
    subtype: Optional[str] = None
    bit_depth: Optional[int] = None

    @property
    def duration(self) -> float:
        """Duration in seconds."""
        return self.frames / self.sampling_rate if self.sampling_rate else 0.0


class AudioLoader:
    """Decodes audio files into interleaved samples.

    Integer PCM keeps its fixed-point range (a 16-bit file yields values in
    [-32768, 32767]), FLOAT files stay in [-1, 1], and compressed formats are
    scaled like 16-bit PCM.
    """

    # Read directly with libsndfile, bit depth checked from the header
    PCM_FORMATS = {".wav", ".flac"}
    # Decoded through librosa's audioread/ffmpeg backend
    COMPRESSED_FORMATS = {".mp3", ".ogg", ".m4a", ".mp4"}

    def __init__(self, mono: bool = False, normalize: bool = False):
        """
        Initialize AudioLoader.

        Args:
            mono: Down-mix all channels into one if True
            normalize: Peak-normalize amplitude to [-1, 1] if True
        """
        self.mono = mono
        self.normalize = normalize

    @property
    def supported_formats(self):
        return self.PCM_FORMATS | self.COMPRESSED_FORMATS

    def _check_path(self, path) -> Path:
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Audio file not found: {path}")

        if path.suffix.lower() not in self.supported_formats:
            raise UnsupportedFormatError(
                f"Unsupported format: {path.suffix}. "
                f"Supported: {sorted(self.supported_formats)}"
            )
        return path

    def info(self, path) -> AudioInfo:
        """
        Read header information without decoding samples.

        Raises:
            FileNotFoundError: If file doesn't exist
            UnsupportedFormatError: If the format or bit depth is not supported
        """
        path = self._check_path(path)

        if path.suffix.lower() in self.PCM_FORMATS:
            header = self._read_header(path)
            return AudioInfo(
                path=path,
                sampling_rate=header.samplerate,
                channel_count=header.channels,
                frames=header.frames,
                subtype=header.subtype,
                bit_depth=self.bit_depth(header.subtype),
            )

        audio, sr = self._decode_compressed(path)
        audio = np.atleast_2d(audio)
        return AudioInfo(
            path=path,
            sampling_rate=sr,
            channel_count=audio.shape[0],
            frames=audio.shape[1],
        )

    def load(self, path) -> SampleStore:
        """
        Load an audio file.

        Args:
            path: Path to audio file

        Returns:
            SampleStore with interleaved samples in the file's sample range

        Raises:
            FileNotFoundError: If file doesn't exist
            UnsupportedFormatError: If the format or bit depth is not supported
        """
        path = self._check_path(path)

        if path.suffix.lower() in self.PCM_FORMATS:
            header = self._read_header(path)
            # Rejects unsupported widths before decoding anything
            self.bit_depth(header.subtype)
            audio, sr = sf.read(str(path), dtype="float64", always_2d=True)
            # soundfile gives [frames, channels]
            audio = audio.T
            full_scale = PCM_FULL_SCALE.get(header.subtype, 1)
        else:
            audio, sr = self._decode_compressed(path)
            audio = np.atleast_2d(audio)
            full_scale = COMPRESSED_FULL_SCALE

        if self.mono and audio.shape[0] > 1:
            audio = np.mean(audio, axis=0, keepdims=True)

        if self.normalize:
            audio = self._normalize(audio)

        return SampleStore.from_channels(audio * full_scale, int(sr))

    @staticmethod
    def bit_depth(subtype: str) -> int:
        """Bits per sample for a soundfile subtype."""
        try:
            return SUBTYPE_BIT_DEPTHS[subtype]
        except KeyError:
            raise UnsupportedFormatError(
                f"Unsupported sample format: {subtype}. Supported bit depths: "
                + ", ".join(str(bits) for bits in SUPPORTED_BIT_DEPTHS)
            ) from None

    def _read_header(self, path: Path):
        try:
            return sf.info(str(path))
        except RuntimeError as e:
            raise UnsupportedFormatError(f"Could not read audio header of {path}: {e}") from e

    def _decode_compressed(self, path: Path):
        try:
            return librosa.load(str(path), sr=None, mono=False)
        except Exception as e:
            raise UnsupportedFormatError(f"Could not decode {path}: {e}") from e

    def _normalize(self, audio: np.ndarray) -> np.ndarray:
        """Normalize audio to [-1, 1] range using peak normalization."""
        peak = np.abs(audio).max() if audio.size else 0.0
        if peak > 0:
            audio = audio / peak
        return audio
