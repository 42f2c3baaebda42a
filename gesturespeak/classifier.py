"""
Static single-hand gesture classifier.

Rules live in an ordered table (label, predicate, confidence) evaluated top to
bottom; the first predicate that matches wins. Several rules can hold at once
for degenerate input, so the order is part of the contract.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, Tuple

from .config import StaticConfig
from .geometry import (
    angle_between,
    distance,
    finger_states,
    hand_span,
    palm_center,
    palm_normal,
    thumb_extended,
    vector,
)
from .landmarks import ALL_PIPS, ALL_TIPS, HandLandmark, coerce_hand
from .types import Gesture, GestureCandidate, Landmark

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HandFeatures:
    """Per-frame measurements shared by all static rules."""
    landmarks: Sequence[Landmark]
    fingers: Tuple[bool, bool, bool, bool]  # index, middle, ring, pinky
    thumb: bool
    extended_count: int
    span: float
    normal: Landmark
    palm: Landmark

    @property
    def wrist(self) -> Landmark:
        return self.landmarks[HandLandmark.WRIST]

    @classmethod
    def from_landmarks(cls, landmarks: Sequence[Landmark]) -> "HandFeatures":
        fingers = finger_states(landmarks)
        thumb = thumb_extended(landmarks)
        return cls(
            landmarks=landmarks,
            fingers=fingers,
            thumb=thumb,
            extended_count=sum(fingers) + (1 if thumb else 0),
            span=hand_span(landmarks),
            normal=palm_normal(landmarks),
            palm=palm_center(landmarks),
        )


@dataclass(frozen=True)
class Rule:
    """One entry of a first-match-wins rule table."""
    label: str
    predicate: Callable[..., bool]
    confidence: float


def is_fist(f: HandFeatures, cfg: StaticConfig) -> bool:
    hand = f.landmarks
    curled = sum(1 for tip, pip in zip(ALL_TIPS, ALL_PIPS) if hand[tip].y >= hand[pip].y - cfg.curl_margin)
    if curled < 4:
        return False

    avg_tip_to_palm = sum(distance(hand[tip], f.palm) for tip in ALL_TIPS) / len(ALL_TIPS)
    max_spread = max(
        distance(hand[a], hand[b])
        for i, a in enumerate(ALL_TIPS)
        for b in ALL_TIPS[i + 1:]
    )
    # Normalize by knuckle width so the test does not depend on distance to camera
    return avg_tip_to_palm / f.span < cfg.fist_compactness and max_spread / f.span < cfg.fist_spread


def is_thumbs_up(f: HandFeatures, cfg: StaticConfig) -> bool:
    return f.thumb and f.extended_count == 1


def is_pointing(f: HandFeatures, cfg: StaticConfig) -> bool:
    index, middle, ring, pinky = f.fingers
    if not index or f.extended_count != 1 or (middle and ring and pinky):
        return False
    hand = f.landmarks
    base = distance(hand[HandLandmark.WRIST], hand[HandLandmark.INDEX_MCP])
    if base == 0.0:
        return False
    ratio = distance(hand[HandLandmark.INDEX_MCP], hand[HandLandmark.INDEX_TIP]) / base
    return cfg.finger_ratio_min <= ratio <= cfg.finger_ratio_max


def _straightened(hand: Sequence[Landmark], mcp: int, pip: int, tip: int, ratio: float) -> bool:
    return distance(hand[tip], hand[pip]) >= ratio * distance(hand[mcp], hand[pip])


def is_victory(f: HandFeatures, cfg: StaticConfig) -> bool:
    index, middle, ring, pinky = f.fingers
    if not (index and middle) or ring or pinky or f.thumb or f.extended_count != 2:
        return False

    hand = f.landmarks
    index_tip = hand[HandLandmark.INDEX_TIP]
    middle_tip = hand[HandLandmark.MIDDLE_TIP]

    if not _straightened(hand, HandLandmark.INDEX_MCP, HandLandmark.INDEX_PIP, HandLandmark.INDEX_TIP,
                         cfg.victory_segment_ratio):
        return False
    if not _straightened(hand, HandLandmark.MIDDLE_MCP, HandLandmark.MIDDLE_PIP, HandLandmark.MIDDLE_TIP,
                         cfg.victory_segment_ratio):
        return False

    if distance(index_tip, middle_tip) / f.span < cfg.victory_min_spread:
        return False

    angle = angle_between(
        vector(hand[HandLandmark.INDEX_MCP], index_tip),
        vector(hand[HandLandmark.MIDDLE_MCP], middle_tip),
    )
    if not cfg.victory_min_angle <= angle <= cfg.victory_max_angle:
        return False

    # Index finger sits on the frame-centre side of the middle finger
    if f.wrist.x >= cfg.frame_mid_x:
        return index_tip.x < middle_tip.x
    return index_tip.x > middle_tip.x


def is_backhand(f: HandFeatures, cfg: StaticConfig) -> bool:
    return is_open_palm(f, cfg) and f.normal.z < cfg.backhand_normal_z


def is_open_palm(f: HandFeatures, cfg: StaticConfig) -> bool:
    return f.extended_count == 5 and f.wrist.x >= cfg.frame_mid_x


def is_stop(f: HandFeatures, cfg: StaticConfig) -> bool:
    return f.extended_count == 5 and f.wrist.x < cfg.frame_mid_x


def is_static_wave(f: HandFeatures, cfg: StaticConfig) -> bool:
    return f.extended_count >= 4


STATIC_RULES: Tuple[Rule, ...] = (
    Rule(Gesture.FIST, is_fist, 0.96),
    Rule(Gesture.THUMBS_UP, is_thumbs_up, 0.9),
    Rule(Gesture.POINTING, is_pointing, 0.9),
    Rule(Gesture.VICTORY, is_victory, 0.9),
    Rule(Gesture.BACKHAND, is_backhand, 0.9),
    Rule(Gesture.OPEN_PALM, is_open_palm, 0.95),
    Rule(Gesture.STOP, is_stop, 0.93),
    Rule(Gesture.WAVE, is_static_wave, 0.8),
)


def classify(hand: Any, cfg: Optional[StaticConfig] = None, timestamp: float = 0.0) -> Optional[GestureCandidate]:
    """
    Classify a single hand.

    Args:
        hand: HandObservation or sequence of 21 landmarks
        cfg: Static thresholds (defaults if None)
        timestamp: Frame time in seconds, copied to the candidate

    Returns:
        GestureCandidate for the first matching rule, or None
    """
    landmarks = coerce_hand(hand)
    if landmarks is None:
        logger.debug("Invalid landmarks for gesture classification")
        return None

    cfg = cfg or StaticConfig()
    features = HandFeatures.from_landmarks(landmarks)

    for rule in STATIC_RULES:
        if rule.predicate(features, cfg):
            logger.debug(f"Detected {rule.label} (extended={features.extended_count})")
            return GestureCandidate(label=rule.label, confidence=rule.confidence, timestamp=timestamp)

    logger.debug(f"No gesture detected for extended count: {features.extended_count}")
    return None
