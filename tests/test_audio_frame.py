"""Tests for AudioFrame validation."""

import numpy as np
import pytest

from guitar_tuner.audio_frame import AudioFrame, FrameDomain
from guitar_tuner.exceptions import InvalidFrameError, TunerError


class TestAudioFrame:
    """Construction and validation of frames."""

    def test_time_domain_frame(self):
        frame = AudioFrame.from_samples([0.0, 0.5, -0.5], 44100)
        assert frame.domain == FrameDomain.TIME
        assert len(frame) == 3
        assert frame.values.dtype == np.float64
        assert not frame.is_spectrum

    def test_spectrum_frame_bin_count(self):
        frame = AudioFrame.from_spectrum(np.full(1024, -90.0), 44100)
        assert frame.is_spectrum
        assert frame.bin_count == 1024

    def test_spectrum_allows_negative_infinity(self):
        """Silent bins are -inf dB, which is valid."""
        frame = AudioFrame.from_spectrum([-np.inf, -np.inf, -20.0], 44100)
        assert frame.bin_count == 3

    def test_empty_frame_rejected(self):
        with pytest.raises(InvalidFrameError):
            AudioFrame.from_samples([], 44100)

    def test_two_dimensional_frame_rejected(self):
        with pytest.raises(InvalidFrameError):
            AudioFrame.from_samples(np.zeros((2, 16)), 44100)

    @pytest.mark.parametrize("sample_rate", [0, -44100, float("nan")])
    def test_bad_sample_rate_rejected(self, sample_rate):
        with pytest.raises(InvalidFrameError):
            AudioFrame.from_samples(np.zeros(16), sample_rate)

    def test_non_finite_samples_rejected(self):
        with pytest.raises(InvalidFrameError):
            AudioFrame.from_samples([0.0, np.nan, 0.1], 44100)

    def test_nan_spectrum_rejected(self):
        with pytest.raises(InvalidFrameError):
            AudioFrame.from_spectrum([-20.0, np.nan], 44100)

    def test_bin_count_undefined_for_time_frames(self):
        frame = AudioFrame.from_samples(np.zeros(16), 44100)
        with pytest.raises(InvalidFrameError):
            _ = frame.bin_count

    def test_frame_errors_are_value_errors(self):
        """Contract errors can be caught as TunerError or ValueError."""
        with pytest.raises(TunerError):
            AudioFrame.from_samples([], 44100)
        with pytest.raises(ValueError):
            AudioFrame.from_samples([], 44100)
