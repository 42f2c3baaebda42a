"""
Gesture engine that turns landmark frames into confirmed gesture events.
"""
import logging
import threading
from typing import Callable, Generic, List, Optional, Tuple, TypeVar

from .audio import TransientCell
from .classifier import classify
from .config import Cfg
from .debounce import Debouncer
from .history import HandHistory
from .landmarks import MAX_HANDS, NUM_LANDMARKS, HandLandmark
from .relational import RelationalClassifier
from .types import Frame, GestureCandidate, GestureEvent, HandObservation

logger = logging.getLogger(__name__)

T = TypeVar("T")

EventCallback = Callable[[GestureEvent], None]


class LatestFrameSlot(Generic[T]):
    """
    Single-slot mailbox between a capture thread and the processing loop.

    Classification is a snapshot operation, so only the newest item matters:
    offering a new item replaces an unconsumed one, which is counted as dropped.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._item: Optional[T] = None
        self.dropped = 0

    def offer(self, item: T) -> None:
        with self._lock:
            if self._item is not None:
                self.dropped += 1
            self._item = item

    def take(self) -> Optional[T]:
        with self._lock:
            item, self._item = self._item, None
            return item


def hand_key(hand: HandObservation, position: int) -> str:
    """History key for a hand: its handedness label, or its position in the frame."""
    return hand.handedness or f"hand{position}"


class GestureEngine:
    """
    Main processor that coordinates classification, history and debounce.

    Each frame is processed to completion: two-hand rules, then per-hand static
    rules upgraded by motion history, then the debounce state machine.
    """

    def __init__(self, cfg: Optional[Cfg] = None, transients: Optional[TransientCell] = None):
        """
        Initialize the engine.

        Args:
            cfg: Configuration (defaults if None)
            transients: Audio transient cell used to corroborate claps
        """
        self.cfg = cfg or Cfg()
        self.relational = RelationalClassifier(self.cfg.relational, transients)
        self.history = HandHistory(self.cfg.temporal)
        self.debouncer = Debouncer(self.cfg.debounce)
        self.subscribers: List[EventCallback] = []
        self.last_candidate: Optional[GestureCandidate] = None

    def subscribe(self, callback: EventCallback) -> None:
        """Register a callback invoked for every confirmed gesture."""
        self.subscribers.append(callback)

    def reset(self) -> None:
        """Drop all in-flight state (pending gesture, cooldown, histories)."""
        self.relational.reset()
        self.history.clear()
        self.debouncer.reset()
        self.last_candidate = None

    def classify_frame(self, frame: Frame) -> Optional[GestureCandidate]:
        """
        Produce this frame's gesture candidate and update hand histories.

        Args:
            frame: Frame with zero, one or two hands

        Returns:
            The winning candidate, or None
        """
        valid = [hand for hand in frame.hands[:MAX_HANDS] if len(hand) == NUM_LANDMARKS]
        keys = [hand_key(hand, i) for i, hand in enumerate(valid)]
        if len(set(keys)) < len(keys):
            # Both hands reported with the same handedness; keep their histories apart
            keys = [f"hand{i}" for i in range(len(valid))]
        hands: List[Tuple[str, HandObservation]] = list(zip(keys, valid))
        t_now = frame.timestamp

        for key, hand in hands:
            self.history.update(key, hand, t_now)

        candidate = None
        if len(hands) == 2:
            (_, hand_a), (_, hand_b) = hands
            candidate = self.relational.classify_pair(hand_a, hand_b, timestamp=t_now)
        else:
            self.relational.reset()

        if candidate is None:
            # Fall back to single-hand rules, leftmost hand that classifies wins
            for key, hand in sorted(hands, key=lambda item: item[1][HandLandmark.WRIST].x):
                static = classify(hand, self.cfg.static, timestamp=t_now)
                candidate = self.history.upgrade(key, static)
                if candidate is not None:
                    break

        return candidate

    def process_frame(self, frame: Frame) -> Optional[GestureEvent]:
        """
        Process a frame and return the confirmed gesture event, if any.

        Args:
            frame: Frame with zero, one or two hands

        Returns:
            GestureEvent when a gesture was confirmed on this frame, None otherwise
        """
        if not frame.hands:
            # A gesture that was only glimpsed must not mature once the hands return
            self.debouncer.cancel_pending()
            return None

        candidate = self.classify_frame(frame)
        self.last_candidate = candidate

        event = self.debouncer.update(candidate, frame.timestamp)
        if event is None:
            return None

        logger.info(f"Gesture confirmed: {event.label} ({event.confidence:.2f})")
        for callback in self.subscribers:
            try:
                callback(event)
            except Exception:
                logger.exception(f"Gesture subscriber failed for {event.label}")
        return event
