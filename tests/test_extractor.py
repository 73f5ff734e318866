"""Tests for SampleStore and channel extraction."""

import numpy as np
import pytest

from wavspec.core import SampleStore, InvalidParameter
from wavspec.analysis import ChannelExtractor, clamp_span


class TestSampleStore:
    """Tests for SampleStore."""

    def test_frame_count_and_duration(self):
        store = SampleStore(np.zeros(16000), channel_count=2, sampling_rate=8000)
        assert store.frame_count == 8000
        assert store.duration == pytest.approx(1.0)
        assert not store.has_partial_frame

    def test_trailing_partial_frame(self):
        store = SampleStore(np.arange(9, dtype=float), channel_count=2, sampling_rate=10)
        assert len(store) == 9
        assert store.frame_count == 5
        assert store.has_partial_frame

    def test_from_channels_interleaves(self):
        left = np.array([1.0, 2.0, 3.0])
        right = np.array([-1.0, -2.0, -3.0])
        store = SampleStore.from_channels(np.stack([left, right]), 44100)

        assert store.channel_count == 2
        np.testing.assert_array_equal(store.samples, [1, -1, 2, -2, 3, -3])
        np.testing.assert_array_equal(store.samples[1::2], right)

    def test_from_channels_mono(self):
        store = SampleStore.from_channels(np.ones(5), 8000)
        assert store.channel_count == 1
        assert len(store) == 5

    def test_samples_are_read_only(self):
        data = np.zeros(4)
        store = SampleStore(data, 1, 8000)
        with pytest.raises(ValueError):
            store.samples[0] = 1.0
        # the caller's array is untouched
        data[0] = 2.0
        assert store.samples[0] == 2.0

    @pytest.mark.parametrize("channels,rate", [(0, 8000), (-1, 8000), (1, 0)])
    def test_invalid_layout(self, channels, rate):
        with pytest.raises(InvalidParameter):
            SampleStore(np.zeros(4), channels, rate)

    def test_rejects_2d_samples(self):
        with pytest.raises(InvalidParameter):
            SampleStore(np.zeros((2, 4)), 2, 8000)

    def test_empty(self):
        store = SampleStore(np.array([]), 1, 8000)
        assert store.is_empty
        assert store.frame_count == 0


class TestClampSpan:
    """Tests for the bounds policy."""

    @pytest.mark.parametrize(
        "start,stop,length,expected",
        [
            (-5, 3, 10, (0, 3)),
            (2, 6, 10, (2, 6)),
            (8, 20, 10, (8, 10)),
            (12, 15, 10, (10, 10)),
            (5, 2, 10, (5, 5)),
            (0, 4, 0, (0, 0)),
        ],
    )
    def test_clamp(self, start, stop, length, expected):
        assert clamp_span(start, stop, length) == expected


class TestChannelExtractor:
    """Tests for ChannelExtractor."""

    @pytest.fixture
    def mono(self):
        return SampleStore(np.arange(1, 11, dtype=float), 1, 10)

    @pytest.fixture
    def stereo(self):
        # L = 0, 2, 4, 6, 8 and R = 1, 3, 5, 7, 9
        return SampleStore(np.arange(10, dtype=float), 2, 10)

    def test_first_window(self, mono):
        buffers = ChannelExtractor(mono, 4).extract(0)

        assert len(buffers) == 1
        assert buffers[0].dtype == np.complex128
        np.testing.assert_array_equal(buffers[0], [1, 2, 3, 4])
        assert np.all(buffers[0].imag == 0)

    def test_last_window_is_zero_padded(self, mono):
        buffer = ChannelExtractor(mono, 4).extract(8)[0]
        np.testing.assert_array_equal(buffer, [9, 10, 0, 0])

    def test_offset_past_end_is_silent(self, mono):
        buffer = ChannelExtractor(mono, 4).extract(20)[0]
        assert len(buffer) == 4
        assert np.all(buffer == 0)

    def test_negative_offset_is_silent(self, mono):
        buffer = ChannelExtractor(mono, 4).extract(-3)[0]
        assert len(buffer) == 4
        assert np.all(buffer == 0)

    def test_stereo_stride(self, stereo):
        left, right = ChannelExtractor(stereo, 3).extract(2)
        np.testing.assert_array_equal(left, [2, 4, 6])
        np.testing.assert_array_equal(right, [3, 5, 7])

    def test_frame_offset(self, stereo):
        left, right = ChannelExtractor(stereo, 3).extract_frame(3)
        np.testing.assert_array_equal(left, [6, 8, 0])
        np.testing.assert_array_equal(right, [7, 9, 0])

    def test_partial_frame(self):
        store = SampleStore(np.arange(9, dtype=float), 2, 10)
        left, right = ChannelExtractor(store, 3).extract_frame(4)

        np.testing.assert_array_equal(left, [8, 0, 0])
        np.testing.assert_array_equal(right, [0, 0, 0])

    def test_window_longer_than_stream(self, mono):
        buffer = ChannelExtractor(mono, 16).extract(0)[0]
        assert len(buffer) == 16
        np.testing.assert_array_equal(buffer[:10], np.arange(1, 11))
        assert np.all(buffer[10:] == 0)

    @pytest.mark.parametrize("offset", [-100, -1, 0, 1, 5, 9, 10, 11, 1000])
    @pytest.mark.parametrize("channels", [1, 2, 3])
    def test_buffer_length_is_always_window_length(self, offset, channels):
        store = SampleStore(np.random.default_rng(0).normal(size=25), channels, 100)
        buffers = ChannelExtractor(store, 7).extract(offset)

        assert len(buffers) == channels
        assert all(len(b) == 7 for b in buffers)

    def test_does_not_modify_store(self, stereo):
        before = stereo.samples.copy()
        ChannelExtractor(stereo, 4).extract(0)[0][:] = 99
        np.testing.assert_array_equal(stereo.samples, before)
