import json
import logging
import os
import queue
import time
from typing import Dict, Iterable, List, Optional, Tuple

from .. import config
from .stabilizer import CommittedLetter, LetterStabilizer, RawClassification

logger = logging.getLogger(__name__)


class Transcript:
    """Text built from committed letters. Owned by the UI, fed by commit events."""

    def __init__(self, delimiter: str = config.DELIMITER):
        self.delimiter = delimiter
        self._text = ""
        self._letters: List[str] = []

    @property
    def text(self) -> str:
        return self._text

    @property
    def letters(self) -> List[str]:
        """Letters committed since the last clear or edit, in order."""
        return list(self._letters)

    def append_letter(self, committed: CommittedLetter):
        """Commit listener: append the letter and a trailing delimiter."""
        self._letters.append(committed.letter)
        self._text += committed.letter + self.delimiter

    def replace(self, text: str):
        """Overwrite the text with a user edit. Later commits append to it."""
        self._text = text
        # Only commits made after the edit are tracked as letters
        self._letters = []

    def clear(self):
        self._text = ""
        self._letters = []

    def save(self, log_path: Optional[str] = None) -> Dict:
        """
        Append the current text to a JSON transcript log.

        Args:
            log_path: Path to the log file, defaults to TRANSCRIPT_DIR/transcripts.json

        Returns:
            The log entry that was written
        """
        if log_path is None:
            log_path = os.path.join(config.TRANSCRIPT_DIR, 'transcripts.json')

        log = {"transcripts": [], "total_count": 0}
        if os.path.exists(log_path):
            try:
                with open(log_path, 'r') as f:
                    loaded = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Could not read transcript log {log_path}, starting a new one: {e}")
            else:
                if isinstance(loaded, dict) and isinstance(loaded.get("transcripts"), list):
                    log = loaded
                else:
                    logger.warning(f"Transcript log {log_path} has an unexpected layout, starting a new one")

        entry = {
            "text": self._text.strip(),
            "timestamp": time.strftime("%Y-%m-%d %H:%M:%S"),
            "letter_count": len(self._letters)
        }
        log["transcripts"].append(entry)
        log["total_count"] = len(log["transcripts"])

        os.makedirs(os.path.dirname(os.path.abspath(log_path)), exist_ok=True)
        with open(log_path, 'w') as f:
            json.dump(log, f, indent=2)

        logger.info(f"Saved transcript to {log_path}")
        return entry


class TranslationSession:
    def __init__(self, stabilizer: Optional[LetterStabilizer] = None,
                 transcript: Optional[Transcript] = None):
        """
        Wire a stabilizer to a transcript for one translation.

        Args:
            stabilizer: Letter stabilizer, a default one is created if omitted
            transcript: Output transcript, a default one is created if omitted
        """
        self.stabilizer = stabilizer or LetterStabilizer()
        self.transcript = transcript or Transcript()
        self._unsubscribe = self.stabilizer.subscribe(self.transcript.append_letter)

    @property
    def text(self) -> str:
        return self.transcript.text

    def observe(self, label: Optional[str], confidence: Optional[float] = None) -> Optional[CommittedLetter]:
        return self.stabilizer.observe(label, confidence)

    def feed(self, observations: Iterable[Tuple[Optional[str], Optional[float]]]) -> List[CommittedLetter]:
        """Replay (label, confidence) pairs and return the letters they committed."""
        committed = []
        for label, confidence in observations:
            letter = self.observe(label, confidence)
            if letter is not None:
                committed.append(letter)
        return committed

    def start_new_translation(self):
        self.transcript.clear()
        self.stabilizer.reset()
        logger.info("Started new translation")

    def close(self):
        self._unsubscribe()


class ObservationQueue:
    """Hands raw classifications from a worker thread to the thread that owns the session."""

    def __init__(self, maxsize: int = 0):
        self._queue: "queue.Queue[RawClassification]" = queue.Queue(maxsize=maxsize)

    def put(self, classification: RawClassification):
        self._queue.put(classification)

    def drain(self, session: TranslationSession) -> List[CommittedLetter]:
        """Feed every queued observation into the session, in arrival order."""
        committed = []
        while True:
            try:
                classification = self._queue.get_nowait()
            except queue.Empty:
                break
            letter = session.observe(classification.label, classification.confidence)
            if letter is not None:
                committed.append(letter)
        return committed

    def __len__(self):
        return self._queue.qsize()
