"""
Type definitions for the gesture classification engine.
"""
from dataclasses import dataclass
from typing import NamedTuple, Optional, Protocol, Tuple, runtime_checkable


class Gesture:
    """Gesture labels produced by the classifiers."""
    FIST = "Fist"
    THUMBS_UP = "Thumbs-Up"
    POINTING = "Pointing"
    VICTORY = "Victory"
    OPEN_PALM = "Open Palm"
    BACKHAND = "Backhand"
    STOP = "Stop"
    WAVE = "Wave"
    RAISE_HAND = "Raise Hand"
    NAMASTE = "Namaste"
    CLAP = "Clap"
    CROSS_HANDS = "Cross Hands"
    RAISE_BOTH_HANDS = "Raise Both Hands"


class Landmark(NamedTuple):
    """A normalized 3-D hand landmark (smaller z = closer to camera)."""
    x: float
    y: float
    z: float = 0.0


@dataclass(frozen=True)
class HandObservation:
    """One detected hand: 21 landmarks plus detector metadata."""
    landmarks: Tuple[Landmark, ...]
    handedness: Optional[str] = None  # "Left" | "Right"
    score: float = 1.0

    def __len__(self) -> int:
        return len(self.landmarks)

    def __getitem__(self, index: int) -> Landmark:
        return self.landmarks[index]

    def __iter__(self):
        return iter(self.landmarks)


@dataclass(frozen=True)
class Frame:
    """Hands delivered together by the detector at one instant (seconds)."""
    hands: Tuple[HandObservation, ...]
    timestamp: float


@dataclass(frozen=True)
class GestureCandidate:
    """Unconfirmed per-frame classification."""
    label: str
    confidence: float
    timestamp: float


@dataclass(frozen=True)
class GestureEvent:
    """Gesture that survived the stability window."""
    label: str
    confidence: float
    timestamp: float

    @classmethod
    def from_candidate(cls, candidate: GestureCandidate, timestamp: float) -> "GestureEvent":
        return cls(label=candidate.label, confidence=candidate.confidence, timestamp=timestamp)


@dataclass(frozen=True)
class HistorySample:
    """Wrist and palm position of a tracked hand at a specific time."""
    timestamp: float
    wrist: Landmark
    palm_center: Landmark


@dataclass(frozen=True)
class DebounceState:
    """Snapshot of the confirmation state machine."""
    pending_label: Optional[str] = None
    pending_since: Optional[float] = None
    last_emitted_label: Optional[str] = None
    suppress_until: Optional[float] = None
    pending_candidate: Optional[GestureCandidate] = None


@runtime_checkable
class SpeechSinkProto(Protocol):
    """Abstract protocol for collaborators that act on confirmed gestures."""

    async def speak(self, text: str) -> None:
        """Speak (or otherwise present) the phrase mapped to a gesture."""
        ...
