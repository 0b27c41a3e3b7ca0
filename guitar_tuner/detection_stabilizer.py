"""
Vote-based stabilization of the detected string.

Single-frame matches flicker between strings on octave errors and transient
noise. The stabilizer keeps a short rolling history of confidently matched note
indices and only announces a string once it wins the vote often enough.
"""

import logging
import threading
from collections import Counter, deque

from .constants import CONFIDENCE_ADMISSION, HISTORY_CAPACITY, STABLE_VOTE_COUNT
from .note_matcher import MatchResult

logger = logging.getLogger(__name__)


class DetectionStabilizer:
    """
    Majority vote over the last few confident matches.

    - Matches with confidence at or below min_confidence are ignored entirely.
    - Admitted indices go into a FIFO of at most capacity entries.
    - The most frequent index is announced once it has at least min_votes
      entries and differs from the previous announcement. Ties go to the index
      observed most recently.

    The append-evict-vote sequence runs under a lock so a host may feed the
    stabilizer from an audio callback thread while resetting it from another.
    """

    def __init__(
        self,
        capacity: int = HISTORY_CAPACITY,
        min_confidence: float = CONFIDENCE_ADMISSION,
        min_votes: int = STABLE_VOTE_COUNT,
    ):
        """
        Initialize stabilizer.

        Args:
            capacity: Maximum number of indices kept in the history
            min_confidence: Confidence a match must exceed to be admitted
            min_votes: Occurrences the winning index needs to be announced
        """
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        if min_votes < 1:
            raise ValueError(f"min_votes must be at least 1, got {min_votes}")

        self.capacity = capacity
        self.min_confidence = min_confidence
        self.min_votes = min_votes

        self._history: deque[int] = deque(maxlen=capacity)
        self._stable_index: int | None = None
        self._lock = threading.Lock()

    def observe(self, match: MatchResult) -> int | None:
        """
        Feed one match.

        Args:
            match: Result of the note matcher for this tick

        Returns:
            Note index that just became stable, or None
        """
        if match.confidence <= self.min_confidence:
            return None

        with self._lock:
            self._history.append(match.note_index)

            winner, votes = self._vote()
            if votes >= self.min_votes and winner != self._stable_index:
                self._stable_index = winner
                logger.debug("Stable note index %d (%d/%d votes)", winner, votes, len(self._history))
                return winner

        return None

    def _vote(self) -> tuple[int, int]:
        counts = Counter(self._history)
        # max keeps the first maximum, so scanning newest first favours the latest
        winner = max(reversed(self._history), key=counts.__getitem__)
        return winner, counts[winner]

    def reset(self):
        """Clear the history and the last announcement."""
        with self._lock:
            self._history.clear()
            self._stable_index = None

    @property
    def history(self) -> tuple[int, ...]:
        """Admitted indices, oldest first."""
        with self._lock:
            return tuple(self._history)

    @property
    def stable_index(self) -> int | None:
        """Most recently announced stable index."""
        return self._stable_index
