"""
Geometric primitives over hand landmarks.

All functions are pure and take a sequence of 21 landmarks (index with
HandLandmark). Coordinates follow MediaPipe: y grows downward, so "above"
means numerically smaller.
"""
import math
from typing import Sequence, Tuple

import numpy as np

from .landmarks import HandLandmark, FINGER_TIPS, FINGER_PIPS
from .types import Landmark


def distance(p: Sequence[float], q: Sequence[float]) -> float:
    """Euclidean distance in landmark space (not normalized)."""
    return float(np.linalg.norm(np.subtract(p, q)))


def palm_center(hand: Sequence[Landmark]) -> Landmark:
    """Mean of the index, middle, ring and pinky knuckles."""
    knuckles = np.array([hand[i] for i in (
        HandLandmark.INDEX_MCP,
        HandLandmark.MIDDLE_MCP,
        HandLandmark.RING_MCP,
        HandLandmark.PINKY_MCP,
    )], dtype=float)
    x, y, z = knuckles.mean(axis=0)
    return Landmark(float(x), float(y), float(z))


def palm_normal(hand: Sequence[Landmark]) -> Landmark:
    """
    Unit normal of the palm plane.

    Computed as (wrist -> index knuckle) x (wrist -> pinky knuckle); two palms
    facing each other give a dot product near -1.
    """
    wrist = np.array(hand[HandLandmark.WRIST], dtype=float)
    to_index = np.array(hand[HandLandmark.INDEX_MCP], dtype=float) - wrist
    to_pinky = np.array(hand[HandLandmark.PINKY_MCP], dtype=float) - wrist
    normal = np.cross(to_index, to_pinky)
    length = float(np.linalg.norm(normal)) or 1.0
    x, y, z = normal / length
    return Landmark(float(x), float(y), float(z))


def dot(a: Sequence[float], b: Sequence[float]) -> float:
    return float(np.dot(a, b))


def angle_between(a: Sequence[float], b: Sequence[float]) -> float:
    """Angle in degrees between two vectors (0 if either is degenerate)."""
    norm = float(np.linalg.norm(a) * np.linalg.norm(b))
    if norm == 0.0:
        return 0.0
    cosine = max(-1.0, min(1.0, float(np.dot(a, b)) / norm))
    return math.degrees(math.acos(cosine))


def finger_extended(hand: Sequence[Landmark], tip_idx: int, pip_idx: int, tolerance: float = 0.0) -> bool:
    """
    Screen-space extension test: the tip sits above its proximal joint.

    A positive tolerance relaxes the test by that many normalized units.
    """
    return hand[tip_idx].y < hand[pip_idx].y + tolerance


def thumb_extended(hand: Sequence[Landmark]) -> bool:
    """Radial test: the thumb tip is further from the wrist than the thumb MCP."""
    wrist = hand[HandLandmark.WRIST]
    return distance(wrist, hand[HandLandmark.THUMB_TIP]) > distance(wrist, hand[HandLandmark.THUMB_MCP])


def finger_states(hand: Sequence[Landmark], tolerance: float = 0.0) -> Tuple[bool, bool, bool, bool]:
    """Extension flags for index, middle, ring and pinky."""
    index, middle, ring, pinky = (
        finger_extended(hand, tip, pip, tolerance) for tip, pip in zip(FINGER_TIPS, FINGER_PIPS)
    )
    return index, middle, ring, pinky


def hand_span(hand: Sequence[Landmark]) -> float:
    """Index-to-pinky knuckle width, used to normalize distances (1.0 if degenerate)."""
    return distance(hand[HandLandmark.INDEX_MCP], hand[HandLandmark.PINKY_MCP]) or 1.0


def vector(p: Sequence[float], q: Sequence[float]) -> np.ndarray:
    """Vector from p to q."""
    return np.subtract(q, p)
