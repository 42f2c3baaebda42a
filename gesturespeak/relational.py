"""
Two-hand relational gesture classifier.
"""
import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Optional, Sequence, Tuple

from .audio import TransientCell
from .classifier import Rule
from .config import RelationalConfig
from .geometry import distance, dot, finger_states, palm_center, palm_normal, thumb_extended
from .landmarks import HandLandmark, coerce_hand
from .types import Gesture, GestureCandidate, HandObservation, Landmark

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PairFeatures:
    """Measurements relating two hands in one frame."""
    a: Sequence[Landmark]
    b: Sequence[Landmark]
    handedness: Optional[Tuple[str, str]]
    palm_distance: float
    wrist_distance: float
    tip_distance: float
    normals_dot: float
    closing: Optional[float]  # drop in palm distance over the closing window
    audio_confirmed: bool
    clap_latched: bool = False  # palms still touching after a confirmed clap


def _pinky_only(hand: Sequence[Landmark]) -> bool:
    return finger_states(hand) == (False, False, False, True) and not thumb_extended(hand)


def is_namaste(f: PairFeatures, cfg: RelationalConfig) -> bool:
    if cfg.namaste_pinky_only and not (_pinky_only(f.a) and _pinky_only(f.b)):
        return False
    return (f.palm_distance < cfg.namaste_palm_distance
            and f.wrist_distance < cfg.namaste_wrist_distance
            and f.tip_distance < cfg.namaste_tip_distance
            and f.normals_dot < cfg.namaste_normal_dot)


def is_clap(f: PairFeatures, cfg: RelationalConfig) -> bool:
    if f.palm_distance >= cfg.clap_distance:
        return False
    if f.clap_latched:
        return True
    if cfg.clap_require_closure and (f.closing is None or f.closing <= cfg.clap_closing_delta):
        return False
    return f.audio_confirmed


def is_cross_hands(f: PairFeatures, cfg: RelationalConfig) -> bool:
    wrist_a = f.a[HandLandmark.WRIST]
    wrist_b = f.b[HandLandmark.WRIST]
    if f.handedness is not None:
        left, right = (wrist_a, wrist_b) if f.handedness[0] == "Left" else (wrist_b, wrist_a)
        return right.x < left.x
    # Without labels hand A is the nominal left hand
    return wrist_a.x > wrist_b.x + cfg.cross_margin


def _raised(hand: Sequence[Landmark], margin: float) -> bool:
    return hand[HandLandmark.WRIST].y < hand[HandLandmark.MIDDLE_MCP].y - margin


def is_raise_both(f: PairFeatures, cfg: RelationalConfig) -> bool:
    return _raised(f.a, cfg.raise_margin) and _raised(f.b, cfg.raise_margin)


PAIR_RULES: Tuple[Rule, ...] = (
    Rule(Gesture.NAMASTE, is_namaste, 0.96),
    Rule(Gesture.CLAP, is_clap, 0.92),
    Rule(Gesture.CROSS_HANDS, is_cross_hands, 0.88),
    Rule(Gesture.RAISE_BOTH_HANDS, is_raise_both, 0.8),
)


def _resolve_handedness(hand_a: Any, hand_b: Any,
                        handedness: Optional[Tuple[Optional[str], Optional[str]]]) -> Optional[Tuple[str, str]]:
    if handedness is None:
        handedness = (
            hand_a.handedness if isinstance(hand_a, HandObservation) else None,
            hand_b.handedness if isinstance(hand_b, HandObservation) else None,
        )
    if set(handedness) == {"Left", "Right"}:
        return handedness[0], handedness[1]
    return None


class RelationalClassifier:
    """
    Classifies a pair of hands.

    Features:
    - Ordered rule table, first match wins
    - Palm closing speed over the last few frames for claps
    - Optional microphone corroboration for claps
    """

    def __init__(self, cfg: Optional[RelationalConfig] = None, transients: Optional[TransientCell] = None):
        """
        Initialize the classifier.

        Args:
            cfg: Relational thresholds (defaults if None)
            transients: Shared audio transient cell, or None for vision only
        """
        self.cfg = cfg or RelationalConfig()
        self.transients = transients
        self.palm_distances: Deque[float] = deque(maxlen=self.cfg.clap_closing_frames + 1)
        self.clap_latched = False

    def reset(self) -> None:
        """Forget the closing history (called when the pair is lost)."""
        self.palm_distances.clear()
        self.clap_latched = False

    def _audio_confirmed(self, timestamp: Optional[float]) -> bool:
        if self.transients is None or not self.transients.available:
            return True
        if timestamp is None:
            return False
        return self.transients.seen_within(timestamp, self.cfg.clap_audio_window_ms / 1000.0)

    def classify_pair(self, hand_a: Any, hand_b: Any,
                      handedness: Optional[Tuple[Optional[str], Optional[str]]] = None,
                      timestamp: Optional[float] = None) -> Optional[GestureCandidate]:
        """
        Classify two hands seen in the same frame.

        Args:
            hand_a: First hand (nominal left when no handedness is known)
            hand_b: Second hand
            handedness: ("Left"/"Right", ...) labels for (hand_a, hand_b); taken
                from the observations when None
            timestamp: Frame time in seconds

        Returns:
            GestureCandidate for the first matching rule, or None
        """
        a = coerce_hand(hand_a)
        b = coerce_hand(hand_b)
        if a is None or b is None:
            return None

        palm_distance = distance(palm_center(a), palm_center(b))
        self.palm_distances.append(palm_distance)
        closing = None
        if len(self.palm_distances) > 1:
            closing = self.palm_distances[0] - palm_distance

        features = PairFeatures(
            a=a,
            b=b,
            handedness=_resolve_handedness(hand_a, hand_b, handedness),
            palm_distance=palm_distance,
            wrist_distance=distance(a[HandLandmark.WRIST], b[HandLandmark.WRIST]),
            tip_distance=distance(a[HandLandmark.MIDDLE_TIP], b[HandLandmark.MIDDLE_TIP]),
            normals_dot=dot(palm_normal(a), palm_normal(b)),
            closing=closing,
            audio_confirmed=self._audio_confirmed(timestamp),
            clap_latched=self.clap_latched,
        )

        self.clap_latched = False
        for rule in PAIR_RULES:
            if rule.predicate(features, self.cfg):
                # Hold the clap while the palms stay together so it can be confirmed
                self.clap_latched = rule.label == Gesture.CLAP
                logger.debug(f"Detected two-hand {rule.label} (palm distance={palm_distance:.3f})")
                return GestureCandidate(label=rule.label, confidence=rule.confidence,
                                        timestamp=timestamp if timestamp is not None else 0.0)
        return None
