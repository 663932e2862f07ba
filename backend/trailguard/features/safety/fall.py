"""
Fall detection from 3-axis acceleration.

A sudden spike in acceleration magnitude above the threshold is treated
as a potential fall. Only a bounded rolling history is kept.
"""

import math
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from trailguard.shared.scheduler import utcnow

DEFAULT_FALL_THRESHOLD = 20.0
DEFAULT_HISTORY_SIZE = 100


@dataclass(frozen=True)
class AccelerationSample:
    """One device-motion reading (acceleration including gravity)."""
    x: float
    y: float
    z: float
    timestamp: datetime = field(default_factory=utcnow)

    @property
    def magnitude(self) -> float:
        return math.sqrt(self.x ** 2 + self.y ** 2 + self.z ** 2)


class FallDetector:
    """
    Rolling-window fall detector.

    Usage:
        detector = FallDetector()
        if detector.add(sample):
            ...  # potential fall
    """

    def __init__(
        self,
        threshold: float = DEFAULT_FALL_THRESHOLD,
        history_size: int = DEFAULT_HISTORY_SIZE
    ):
        self.threshold = threshold
        self.history: deque[AccelerationSample] = deque(maxlen=history_size)

    def add(self, sample: AccelerationSample) -> bool:
        """
        Record a sample.

        Returns:
            True if the sample's magnitude exceeds the threshold
        """
        self.history.append(sample)
        return sample.magnitude > self.threshold

    @property
    def peak_magnitude(self) -> Optional[float]:
        if not self.history:
            return None
        return max(s.magnitude for s in self.history)

    def clear(self) -> None:
        self.history.clear()
