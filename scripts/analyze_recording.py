"""
Run a WAV recording through the tuner pipeline tick by tick.

Feeds the recording to a TunerSession in capture-sized blocks, prints every
detected pitch and stable string announcement, and saves a pitch-track plot
plus a JSON report next to the recording.

Usage:
    python scripts/analyze_recording.py recording.wav [spectral]
"""

import json
import sys
from pathlib import Path

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import numpy as np
from scipy.io import wavfile

from guitar_tuner.logging_config import setup_logging
from guitar_tuner.session import DetectorType, TunerConfig, TunerSession

BLOCK_SIZE = 1024


def load_wav(path: Path) -> tuple[np.ndarray, int]:
    """Load a WAV file as mono float samples in [-1, 1]."""
    sample_rate, data = wavfile.read(path)

    if np.issubdtype(data.dtype, np.integer):
        info = np.iinfo(data.dtype)
        data = data.astype(np.float64) / max(abs(info.min), info.max)
    else:
        data = data.astype(np.float64)

    if data.ndim > 1:
        data = data.mean(axis=1)

    return data, int(sample_rate)


def analyze(audio: np.ndarray, sample_rate: int, detector_type: DetectorType) -> dict:
    """Process audio block by block and collect per-tick results."""
    session = TunerSession(TunerConfig(sample_rate=sample_rate, detector_type=detector_type))
    session.start()

    ticks = []
    announcements = []

    for start in range(0, len(audio) - BLOCK_SIZE + 1, BLOCK_SIZE):
        result = session.process(audio[start:start + BLOCK_SIZE])
        time_s = (start + BLOCK_SIZE) / sample_rate
        if result is None:
            continue

        ticks.append({
            "time": time_s,
            "frequency": result.frequency_hz,
            "note": result.note.label,
            "cents": result.cents_offset,
            "confidence": result.match.confidence,
        })
        print(f"{time_s:7.3f}s  {result.frequency_hz:8.2f} Hz  {result.note.label:<4} "
              f"{result.cents_offset:+7.1f}¢  {result.instruction}")

        if result.newly_stable is not None:
            name = session.reference_notes[result.newly_stable].display_name
            announcements.append({"time": time_s, "string": name})
            print(f"  -> Detected string: {name}")

    session.stop()

    return {
        "detector": detector_type.value,
        "sample_rate": sample_rate,
        "duration": len(audio) / sample_rate,
        "ticks": ticks,
        "announcements": announcements,
    }


def plot_pitch_track(report: dict, filename: Path):
    """Plot detected frequency and cents offset over time."""
    ticks = report["ticks"]
    times = [t["time"] for t in ticks]

    fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(12, 8), sharex=True)

    ax1.plot(times, [t["frequency"] for t in ticks], 'b.', markersize=3)
    for announcement in report["announcements"]:
        ax1.axvline(announcement["time"], color='green', linestyle='--', alpha=0.7)
        ax1.annotate(announcement["string"], (announcement["time"], ax1.get_ylim()[1]),
                     color='green', va='top')
    ax1.set_ylabel('Frequency (Hz)')
    ax1.set_title(f'Pitch track ({report["detector"]} detector)')
    ax1.grid(True, alpha=0.3)

    ax2.plot(times, [t["cents"] for t in ticks], 'r.', markersize=3)
    ax2.axhspan(-3, 3, color='green', alpha=0.15)
    ax2.set_ylim(-50, 50)
    ax2.set_xlabel('Time (s)')
    ax2.set_ylabel('Offset (cents)')
    ax2.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig(filename, dpi=100)
    plt.close(fig)
    print(f"Saved: {filename}")


def main():
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)

    setup_logging()

    path = Path(sys.argv[1])
    detector_type = DetectorType.AUTOCORRELATION
    if len(sys.argv) > 2:
        detector_type = DetectorType(sys.argv[2])

    audio, sample_rate = load_wav(path)
    print(f"Analyzing {path.name} ({len(audio) / sample_rate:.1f}s at {sample_rate} Hz)\n")

    report = analyze(audio, sample_rate, detector_type)
    print(f"\n{len(report['ticks'])} ticks with a pitch, "
          f"{len(report['announcements'])} string announcements")

    if report["ticks"]:
        plot_pitch_track(report, path.with_suffix('.pitch.png'))

    report_file = path.with_suffix('.report.json')
    with open(report_file, "w") as f:
        json.dump(report, f, indent=2)
    print(f"Saved: {report_file}")


if __name__ == "__main__":
    main()
