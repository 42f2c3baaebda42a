"""
Per-hand motion history used to recognise motion-dependent gestures.
"""
import logging
from collections import deque
from typing import Any, Deque, Dict, List, Optional

from .config import TemporalConfig
from .geometry import palm_center
from .landmarks import HandLandmark, coerce_hand
from .types import Gesture, GestureCandidate, HistorySample

logger = logging.getLogger(__name__)

# Static labels that share the five-finger shape a wave or raised hand is made of
WAVE_SOURCES = frozenset({Gesture.OPEN_PALM, Gesture.STOP, Gesture.WAVE})
RAISE_SOURCES = frozenset({Gesture.OPEN_PALM, Gesture.STOP})

WAVE_CONFIDENCE = 0.9
RAISE_HAND_CONFIDENCE = 0.85


def count_reversals(values: List[float], jitter: float = 0.0) -> int:
    """Number of direction changes in a series, ignoring steps no larger than jitter."""
    reversals = 0
    last_direction = 0
    for prev, cur in zip(values, values[1:]):
        step = cur - prev
        if abs(step) <= jitter:
            continue
        direction = 1 if step > 0 else -1
        if last_direction and direction != last_direction:
            reversals += 1
        last_direction = direction
    return reversals


class HandHistory:
    """
    Ring buffer of recent wrist / palm positions per hand label.

    Labels are the detector's handedness ("Left"/"Right") or a positional key.
    A label that stops appearing is simply no longer updated; it is superseded
    the next time the same label is seen.
    """

    def __init__(self, cfg: Optional[TemporalConfig] = None):
        """Initialize with temporal configuration."""
        self.cfg = cfg or TemporalConfig()
        self.buffers: Dict[str, Deque[HistorySample]] = {}

    def update(self, label: str, hand: Any, timestamp: float) -> bool:
        """
        Append the hand's current position to its ring.

        Returns:
            False if the hand was malformed and nothing was recorded
        """
        landmarks = coerce_hand(hand)
        if landmarks is None:
            return False
        buffer = self.buffers.get(label)
        if buffer is None:
            buffer = deque(maxlen=self.cfg.history_size)
            self.buffers[label] = buffer
        buffer.append(HistorySample(
            timestamp=timestamp,
            wrist=landmarks[HandLandmark.WRIST],
            palm_center=palm_center(landmarks),
        ))
        return True

    def samples(self, label: str) -> List[HistorySample]:
        return list(self.buffers.get(label, ()))

    def clear(self) -> None:
        self.buffers.clear()

    def is_waving(self, label: str) -> bool:
        """Wrist x oscillates with enough reversals and amplitude over the window."""
        xs = [s.wrist.x for s in self.buffers.get(label, ())]
        if len(xs) < 3:
            return False
        amplitude = max(xs) - min(xs)
        if amplitude <= self.cfg.wave_min_amplitude:
            return False
        return count_reversals(xs, self.cfg.wave_jitter) >= self.cfg.wave_min_reversals

    def is_raised(self, label: str) -> bool:
        """The wrist stayed high for the last raise_frames samples."""
        buffer = self.buffers.get(label)
        n = self.cfg.raise_frames
        if buffer is None or len(buffer) < n:
            return False
        recent = list(buffer)[-n:]
        return all(s.wrist.y < self.cfg.raise_max_wrist_y for s in recent)

    def upgrade(self, label: str, candidate: Optional[GestureCandidate]) -> Optional[GestureCandidate]:
        """
        Reclassify a static candidate using the hand's motion history.

        Open hands become Wave when oscillating, otherwise Raise Hand when held high.
        """
        if candidate is None:
            return None
        if candidate.label in WAVE_SOURCES and self.is_waving(label):
            logger.debug(f"Upgrading {candidate.label} to Wave for {label}")
            return GestureCandidate(Gesture.WAVE, WAVE_CONFIDENCE, candidate.timestamp)
        if candidate.label in RAISE_SOURCES and self.is_raised(label):
            logger.debug(f"Upgrading {candidate.label} to Raise Hand for {label}")
            return GestureCandidate(Gesture.RAISE_HAND, RAISE_HAND_CONFIDENCE, candidate.timestamp)
        return candidate
