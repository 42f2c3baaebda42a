"""
Synthetic hand landmark fixtures for the gesture tests.

Hands are built from offsets relative to the wrist (y grows downward), for an
upright hand whose index knuckle sits on the frame-left side of the pinky
knuckle. That layout's palm normal points toward the camera (+z).
"""
from typing import Dict, Iterable, Optional, Sequence, Tuple

from gesturespeak.landmarks import HandLandmark as L
from gesturespeak.types import Frame, HandObservation, Landmark

Offset = Tuple[float, float]

BASE: Dict[int, Offset] = {
    L.WRIST: (0.0, 0.0),
    L.THUMB_CMC: (-0.04, -0.03),
    L.THUMB_MCP: (-0.07, -0.06),
    L.INDEX_MCP: (-0.06, -0.15),
    L.MIDDLE_MCP: (-0.02, -0.16),
    L.RING_MCP: (0.02, -0.155),
    L.PINKY_MCP: (0.06, -0.14),
}

FINGERS = {
    'index': (L.INDEX_MCP, L.INDEX_PIP, L.INDEX_DIP, L.INDEX_TIP),
    'middle': (L.MIDDLE_MCP, L.MIDDLE_PIP, L.MIDDLE_DIP, L.MIDDLE_TIP),
    'ring': (L.RING_MCP, L.RING_PIP, L.RING_DIP, L.RING_TIP),
    'pinky': (L.PINKY_MCP, L.PINKY_PIP, L.PINKY_DIP, L.PINKY_TIP),
}

ALL_DIGITS = ('thumb', 'index', 'middle', 'ring', 'pinky')

# Tips clustered around the palm centre
FIST_TIPS: Dict[int, Offset] = {
    L.THUMB_TIP: (-0.02, -0.11),
    L.INDEX_TIP: (-0.02, -0.12),
    L.MIDDLE_TIP: (0.0, -0.125),
    L.RING_TIP: (0.02, -0.12),
    L.PINKY_TIP: (0.03, -0.115),
}

# Index and middle straightened and spread 30 degrees either side of vertical
VICTORY_FINGERS: Dict[int, Offset] = {
    L.INDEX_PIP: (-0.09, -0.20196),
    L.INDEX_DIP: (-0.105, -0.22794),
    L.INDEX_TIP: (-0.12, -0.25392),
    L.MIDDLE_PIP: (0.01, -0.21196),
    L.MIDDLE_DIP: (0.025, -0.23794),
    L.MIDDLE_TIP: (0.04, -0.26392),
}


def hand_offsets(extended: Iterable[str] = ()) -> Dict[int, Offset]:
    """Offsets for a hand with the named digits extended and the rest curled."""
    extended = set(extended)
    offsets = dict(BASE)

    if 'thumb' in extended:
        offsets[L.THUMB_IP] = (-0.10, -0.09)
        offsets[L.THUMB_TIP] = (-0.13, -0.12)
    else:
        offsets[L.THUMB_IP] = (-0.05, -0.08)
        offsets[L.THUMB_TIP] = (-0.03, -0.06)

    for name, (mcp, pip, dip, tip) in FINGERS.items():
        mx, my = BASE[mcp]
        if name in extended:
            offsets[pip] = (mx, my - 0.06)
            offsets[dip] = (mx, my - 0.09)
            offsets[tip] = (mx, my - 0.12)
        else:
            offsets[pip] = (mx, my - 0.05)
            offsets[dip] = (mx, my - 0.03)
            offsets[tip] = (mx, my - 0.01)
    return offsets


def make_hand(extended: Iterable[str] = ALL_DIGITS, wrist: Tuple[float, float] = (0.7, 0.7),
              scale: float = 1.0, mirror: bool = False, upside_down: bool = False, z: float = 0.0,
              handedness: Optional[str] = None, overrides: Optional[Dict[int, Offset]] = None) -> HandObservation:
    """
    Build a 21-landmark hand.

    Args:
        extended: Digits to extend ('thumb', 'index', 'middle', 'ring', 'pinky')
        wrist: Wrist position in normalized image coordinates
        scale: Size multiplier applied to all offsets
        mirror: Flip horizontally (palm normal then points away from camera)
        upside_down: Flip vertically (fingers point down)
        z: Depth shared by every landmark
        handedness: Optional "Left" / "Right" label
        overrides: Offsets replacing individual landmarks before scaling
    """
    offsets = hand_offsets(extended)
    offsets.update(overrides or {})
    sx = -1.0 if mirror else 1.0
    sy = -1.0 if upside_down else 1.0
    wx, wy = wrist
    landmarks = tuple(
        Landmark(wx + sx * offsets[i][0] * scale, wy + sy * offsets[i][1] * scale, z)
        for i in range(21)
    )
    return HandObservation(landmarks=landmarks, handedness=handedness, score=0.95)


def open_palm(wrist: Tuple[float, float] = (0.7, 0.7), **kwargs) -> HandObservation:
    return make_hand(ALL_DIGITS, wrist=wrist, **kwargs)


def fist(wrist: Tuple[float, float] = (0.5, 0.6), scale: float = 1.0, **kwargs) -> HandObservation:
    return make_hand((), wrist=wrist, scale=scale, overrides=FIST_TIPS, **kwargs)


def victory(wrist: Tuple[float, float] = (0.7, 0.7), **kwargs) -> HandObservation:
    return make_hand(('index', 'middle'), wrist=wrist, overrides=VICTORY_FINGERS, **kwargs)


def truncated(hand: HandObservation, count: int = 20) -> Sequence[Landmark]:
    return list(hand.landmarks[:count])


def frame(*hands: HandObservation, t: float = 0.0) -> Frame:
    return Frame(hands=tuple(hands), timestamp=t)
