"""
Hand Gesture Classification Engine

Turns streams of 21-point hand landmarks (up to two hands per frame) into
debounced, named gesture events that can drive an action such as speech.
"""

__version__ = "0.1.0"
__author__ = "Gesture Speech Team"

from .types import (
    Gesture,
    Landmark,
    HandObservation,
    Frame,
    GestureCandidate,
    GestureEvent,
    DebounceState,
    SpeechSinkProto,
)
from .config import load_config, Cfg, ConfigError
from .landmarks import HandLandmark, LandmarkParseError, parse_hand, frame_from_hands, frame_from_results
from .geometry import distance, palm_center, palm_normal, finger_extended, thumb_extended
from .classifier import classify, STATIC_RULES
from .relational import RelationalClassifier, PAIR_RULES
from .history import HandHistory
from .debounce import Debouncer, DebouncePhase, step
from .audio import TransientCell, AudioTransientDetector, MicrophoneListener
from .gestures import GestureEngine, LatestFrameSlot
from .controller_mock import MockSpeaker

__all__ = [
    "Gesture",
    "Landmark",
    "HandObservation",
    "Frame",
    "GestureCandidate",
    "GestureEvent",
    "DebounceState",
    "SpeechSinkProto",
    "load_config",
    "Cfg",
    "ConfigError",
    "HandLandmark",
    "LandmarkParseError",
    "parse_hand",
    "frame_from_hands",
    "frame_from_results",
    "distance",
    "palm_center",
    "palm_normal",
    "finger_extended",
    "thumb_extended",
    "classify",
    "STATIC_RULES",
    "RelationalClassifier",
    "PAIR_RULES",
    "HandHistory",
    "Debouncer",
    "DebouncePhase",
    "step",
    "TransientCell",
    "AudioTransientDetector",
    "MicrophoneListener",
    "GestureEngine",
    "LatestFrameSlot",
    "MockSpeaker",
]
