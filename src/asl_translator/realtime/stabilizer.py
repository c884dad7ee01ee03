import logging
import math
import numbers
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

from .. import config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawClassification:
    """One sampled frame's classifier output. A label of None means no hand."""
    label: Optional[str]
    confidence: Optional[float] = None


@dataclass(frozen=True)
class CommittedLetter:
    letter: str
    index: int  # position in the stream of committed letters


CommitListener = Callable[[CommittedLetter], None]


class LetterStabilizer:
    def __init__(self, commit_threshold: int = config.COMMIT_THRESHOLD,
                 confidence_threshold: float = config.CONFIDENCE_THRESHOLD,
                 alphabet: Iterable[str] = config.ALPHABET):
        """
        Turn noisy per-frame letter guesses into committed letters.

        A letter commits once it has been seen on `commit_threshold`
        consecutive sampled frames. The streak then starts over, so holding
        a sign commits it again every `commit_threshold` frames.

        Not safe for concurrent callers. Funnel observations from worker
        threads through an ObservationQueue.

        Args:
            commit_threshold: Consecutive matches needed to commit
            confidence_threshold: Observations below this confidence are ignored
            alphabet: Labels accepted as letters, anything else is no-detection
        """
        if commit_threshold < 1:
            raise ValueError(f"commit_threshold must be >= 1, got {commit_threshold}")

        self.commit_threshold = commit_threshold
        self.confidence_threshold = confidence_threshold
        self.alphabet = frozenset(alphabet)

        # State variables
        self.current_candidate: Optional[str] = None
        self.streak = 0
        self.commit_count = 0
        self._listeners: List[CommitListener] = []

    def subscribe(self, listener: CommitListener) -> Callable[[], None]:
        """Register a commit listener. Returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def observe(self, raw_label: Optional[str],
                confidence: Optional[float] = None) -> Optional[CommittedLetter]:
        """
        Feed one sampled frame.

        Args:
            raw_label: Classifier label, or None when no hand was detected
            confidence: Optional classifier confidence in [0, 1]

        Returns:
            The committed letter if this frame completed a streak, else None
        """
        if confidence is not None and not self._confident(confidence):
            logger.debug(f"Ignoring low confidence frame: {raw_label} ({confidence!r})")
            return None

        if not isinstance(raw_label, str) or raw_label not in self.alphabet:
            self.current_candidate = None
            self.streak = 0
            return None

        if raw_label == self.current_candidate:
            self.streak += 1
        else:
            self.current_candidate = raw_label
            self.streak = 1

        logger.debug(f"Candidate '{raw_label}' ({self.streak}/{self.commit_threshold})")

        if self.streak < self.commit_threshold:
            return None

        self.streak = 0
        committed = CommittedLetter(letter=raw_label, index=self.commit_count)
        self.commit_count += 1
        logger.info(f"Letter committed: {raw_label}")

        for listener in list(self._listeners):
            listener(committed)

        return committed

    def _confident(self, confidence) -> bool:
        if isinstance(confidence, bool) or not isinstance(confidence, numbers.Real):
            return False
        if not math.isfinite(confidence):
            return False
        return confidence >= self.confidence_threshold

    def observe_classification(self, classification: RawClassification) -> Optional[CommittedLetter]:
        return self.observe(classification.label, classification.confidence)

    def reset(self):
        """Forget the current candidate and streak."""
        self.current_candidate = None
        self.streak = 0
        self.commit_count = 0
