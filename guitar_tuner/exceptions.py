"""
Contract errors raised by the tuner core.

A quiet instrument is never an error: estimators return None for "no pitch".
These exceptions mark a misconfigured caller instead.
"""


class TunerError(Exception):
    """Base class for tuner contract errors."""


class InvalidFrameError(TunerError, ValueError):
    """Audio frame is empty, malformed, or of the wrong domain."""


class InvalidReferenceTableError(TunerError, ValueError):
    """Reference note table is empty or not strictly ascending."""


class InvalidFrequencyError(TunerError, ValueError):
    """Frequency handed to the note matcher is not a positive finite number."""


class TunerStateError(TunerError, RuntimeError):
    """Operation is not allowed in the session's current state."""
