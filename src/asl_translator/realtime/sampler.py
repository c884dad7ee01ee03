import time
from typing import Optional

from .. import config


class FrameSampler:
    def __init__(self, interval: int = config.FRAME_SAMPLE_INTERVAL,
                 min_gap: float = config.MIN_SAMPLE_GAP):
        """
        Throttle captured frames down to the cadence the classifier runs at.

        Args:
            interval: Sample one of every `interval` captured frames
            min_gap: Minimum seconds between two samples, 0 disables the check
        """
        if interval < 1:
            raise ValueError(f"interval must be >= 1, got {interval}")
        self.interval = interval
        self.min_gap = min_gap
        self.frame_count = 0
        self.last_sample_time: Optional[float] = None

    def should_sample(self, now: Optional[float] = None) -> bool:
        """Count one captured frame and report whether it should be classified."""
        self.frame_count += 1
        if self.frame_count % self.interval != 0:
            return False

        if now is None:
            now = time.monotonic()
        if (self.min_gap > 0 and self.last_sample_time is not None
                and now - self.last_sample_time < self.min_gap):
            return False

        self.last_sample_time = now
        return True

    def reset(self):
        self.frame_count = 0
        self.last_sample_time = None
