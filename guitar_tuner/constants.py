"""
Named tuning constants.

Every threshold used by the detection pipeline lives here so that hosts can
build a TunerConfig from them or override them individually.
"""

SAMPLE_RATE = 44100

# Signal gate
RMS_FLOOR = 0.005

# Spectral peak estimator
SPECTRUM_FLOOR_DB = -50.0
MIN_FREQUENCY = 70.0
MAX_FREQUENCY = 400.0
SPECTRAL_FFT_SIZE = 8192
SPECTRUM_SMOOTHING = 0.3

# Autocorrelation estimator
CORRELATION_THRESHOLD = 0.8
AUTOCORRELATION_BUFFER_SIZE = 2048

# Input gain applied before analysis, per estimator
AUTOCORRELATION_INPUT_GAIN = 5.0
SPECTRAL_INPUT_GAIN = 1.0

# Note matcher
CONFIDENCE_WINDOW_HZ = 30.0

# Detection stabilizer
CONFIDENCE_ADMISSION = 0.7
HISTORY_CAPACITY = 10
STABLE_VOTE_COUNT = 3

# Tuning feedback band edges (cents)
IN_TUNE_CENTS = 3.0
SLIGHT_CENTS = 10.0
OFF_CENTS = 30.0
CLOSE_INDICATOR_CENTS = 15.0
METER_SPAN_CENTS = 50.0
NEEDLE_LIMIT_DEGREES = 50.0

CENTS_PER_OCTAVE = 1200.0
