"""
Debug script: Visualize what the spectral detector sees.

Plots the smoothed dB spectrum the analyser produces for a tone, with the
detection floor, the plausible guitar range and the reported peak marked.
With no arguments a synthetic open-A tone is used; pass a WAV file to plot
its final analysis window instead.
"""

import sys

import matplotlib
import numpy as np

matplotlib.use('Agg')
import matplotlib.pyplot as plt

from guitar_tuner.audio_frame import AudioFrame
from guitar_tuner.constants import SAMPLE_RATE, SPECTRAL_FFT_SIZE
from guitar_tuner.note_matcher import match_note
from guitar_tuner.reference_notes import STANDARD_TUNING
from guitar_tuner.spectral_peak_detector import SpectralPeakDetector
from guitar_tuner.spectrum import SpectrumAnalyser


def plot_frame_spectrum(audio, sample_rate, output_file, num_frames=5):
    """Plot the spectrum after feeding num_frames analysis windows."""

    analyser = SpectrumAnalyser(fft_size=SPECTRAL_FFT_SIZE)
    detector = SpectralPeakDetector()

    # Feed the final windows so smoothing has settled
    window = SPECTRAL_FFT_SIZE
    hop = window // 4
    start_idx = max(0, len(audio) - window - (num_frames - 1) * hop)

    spectrum = None
    for frame_num in range(num_frames):
        chunk = audio[start_idx + frame_num * hop:start_idx + frame_num * hop + window]
        if len(chunk) == 0:
            break
        spectrum = analyser.analyse(AudioFrame.from_samples(chunk, sample_rate))

    if spectrum is None:
        print('Recording is too short')
        return

    estimate = detector.estimate(spectrum)
    freqs = np.arange(spectrum.bin_count) * sample_rate / (2 * spectrum.bin_count)

    fig, ax = plt.subplots(figsize=(12, 6))
    valid = freqs <= detector.max_frequency * 2
    ax.plot(freqs[valid], spectrum.values[valid], 'b-', linewidth=0.8)

    ax.axhline(detector.floor_db, color='gray', linestyle=':', label=f'Floor: {detector.floor_db:.0f} dB')
    ax.axvspan(detector.min_frequency, detector.max_frequency, color='green', alpha=0.08, label='Guitar range')

    for note in STANDARD_TUNING:
        ax.axvline(note.frequency_hz, color='green', linestyle='--', linewidth=0.8, alpha=0.6)

    if estimate is not None:
        match = match_note(estimate.frequency_hz, STANDARD_TUNING)
        label = STANDARD_TUNING[match.note_index].label
        ax.axvline(estimate.frequency_hz, color='red', linewidth=1.5,
                   label=f'Detected: {estimate.frequency_hz:.2f} Hz ({label} {match.cents_offset:+.1f}¢)')
        title = f'Spectral peak at {estimate.frequency_hz:.2f} Hz'
    else:
        title = 'No spectral peak detected'

    ax.set_title(title)
    ax.set_xlabel('Frequency (Hz)')
    ax.set_ylabel('Magnitude (dB)')
    ax.set_ylim(-120, 0)
    ax.legend(loc='upper right')
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig(output_file, dpi=100)
    plt.close(fig)
    print(f'Saved: {output_file}')


if __name__ == '__main__':
    if len(sys.argv) > 1:
        from analyze_recording import load_wav
        audio, sample_rate = load_wav(sys.argv[1])
    else:
        sample_rate = SAMPLE_RATE
        t = np.arange(SAMPLE_RATE) / sample_rate
        audio = 0.5 * np.sin(2 * np.pi * 110.0 * t) + 0.2 * np.sin(2 * np.pi * 220.0 * t)
    plot_frame_spectrum(audio, sample_rate, 'scripts/debug_spectrum.png')
    print('Done!')
