"""
Hand landmark indices and conversion of detector output into engine frames.
"""
import logging
from enum import IntEnum
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from .types import Frame, HandObservation, Landmark

logger = logging.getLogger(__name__)

NUM_LANDMARKS = 21
MAX_HANDS = 2


class HandLandmark(IntEnum):
    """MediaPipe hand landmark indices."""
    WRIST = 0
    THUMB_CMC = 1
    THUMB_MCP = 2
    THUMB_IP = 3
    THUMB_TIP = 4
    INDEX_MCP = 5
    INDEX_PIP = 6
    INDEX_DIP = 7
    INDEX_TIP = 8
    MIDDLE_MCP = 9
    MIDDLE_PIP = 10
    MIDDLE_DIP = 11
    MIDDLE_TIP = 12
    RING_MCP = 13
    RING_PIP = 14
    RING_DIP = 15
    RING_TIP = 16
    PINKY_MCP = 17
    PINKY_PIP = 18
    PINKY_DIP = 19
    PINKY_TIP = 20


# Index, middle, ring, pinky
FINGER_TIPS = (HandLandmark.INDEX_TIP, HandLandmark.MIDDLE_TIP, HandLandmark.RING_TIP, HandLandmark.PINKY_TIP)
FINGER_PIPS = (HandLandmark.INDEX_PIP, HandLandmark.MIDDLE_PIP, HandLandmark.RING_PIP, HandLandmark.PINKY_PIP)
FINGER_MCPS = (HandLandmark.INDEX_MCP, HandLandmark.MIDDLE_MCP, HandLandmark.RING_MCP, HandLandmark.PINKY_MCP)

# All five digits, thumb first
ALL_TIPS = (HandLandmark.THUMB_TIP,) + FINGER_TIPS
ALL_PIPS = (HandLandmark.THUMB_MCP,) + FINGER_PIPS


class LandmarkParseError(ValueError):
    """Raised when a hand does not carry exactly 21 landmarks."""


def to_landmark(point: Any) -> Landmark:
    """Accept a Landmark, an (x, y[, z]) sequence or an object with x/y/z attributes."""
    if isinstance(point, Landmark):
        return point
    if hasattr(point, 'x') and hasattr(point, 'y'):
        return Landmark(float(point.x), float(point.y), float(getattr(point, 'z', 0.0) or 0.0))
    coords = tuple(point)
    if len(coords) not in (2, 3):
        raise LandmarkParseError(f"Landmark must have 2 or 3 coordinates, got {len(coords)}")
    return Landmark(*(float(c) for c in coords))


def parse_hand(points: Iterable[Any], handedness: Optional[str] = None, score: float = 1.0) -> HandObservation:
    """
    Build a validated hand observation.

    Args:
        points: 21 landmarks in any form accepted by to_landmark
        handedness: "Left" / "Right" label reported by the detector
        score: Detector confidence for the handedness label

    Returns:
        HandObservation with exactly 21 landmarks

    Raises:
        LandmarkParseError: if the landmark count is not 21
    """
    landmarks = tuple(to_landmark(p) for p in points)
    if len(landmarks) != NUM_LANDMARKS:
        raise LandmarkParseError(f"Expected {NUM_LANDMARKS} landmarks, got {len(landmarks)}")
    if handedness not in (None, "Left", "Right"):
        raise LandmarkParseError(f"Unknown handedness label: {handedness!r}")
    return HandObservation(landmarks=landmarks, handedness=handedness, score=float(score))


def coerce_hand(hand: Any) -> Optional[Sequence[Landmark]]:
    """Return the landmarks of a hand, or None if it is not a valid 21-point hand."""
    if hand is None:
        return None
    if isinstance(hand, HandObservation):
        return hand.landmarks if len(hand) == NUM_LANDMARKS else None
    try:
        points = [to_landmark(p) for p in hand]
    except (TypeError, ValueError):
        return None
    if len(points) != NUM_LANDMARKS:
        return None
    return points


def frame_from_hands(hands: Sequence[Tuple[Iterable[Any], Optional[str], float]], timestamp: float) -> Frame:
    """
    Build a frame from (points, handedness, score) triples.

    Hands that fail validation are dropped with a warning; at most two are kept.
    """
    parsed: List[HandObservation] = []
    for points, handedness, score in hands:
        try:
            parsed.append(parse_hand(points, handedness, score))
        except LandmarkParseError as e:
            logger.warning(f"Dropping malformed hand: {e}")
    return Frame(hands=tuple(parsed[:MAX_HANDS]), timestamp=timestamp)


def frame_from_results(results: Any, timestamp: float) -> Frame:
    """
    Convert a MediaPipe Hands result into a frame.

    Args:
        results: Object with multi_hand_landmarks and multi_handedness
        timestamp: Capture time in seconds

    Returns:
        Frame with zero, one or two hands
    """
    hand_landmarks = getattr(results, 'multi_hand_landmarks', None) or []
    handedness = getattr(results, 'multi_handedness', None) or []

    hands = []
    for i, landmark_list in enumerate(hand_landmarks):
        label, score = None, 1.0
        if i < len(handedness) and handedness[i].classification:
            classification = handedness[i].classification[0]
            label, score = classification.label, classification.score
        hands.append((landmark_list.landmark, label, score))

    return frame_from_hands(hands, timestamp)
