"""
Hand landmark detection using MediaPipe.
"""
import cv2
import mediapipe as mp
import numpy as np

from .landmarks import MAX_HANDS, frame_from_results
from .types import Frame


class HandsTracker:
    """Hand landmark tracker using MediaPipe Hands."""

    def __init__(self, min_detection_conf: float = 0.8, min_tracking_conf: float = 0.6):
        """
        Initialize the hands tracker.

        Args:
            min_detection_conf: Minimum confidence for hand detection
            min_tracking_conf: Minimum confidence for hand tracking
        """
        self.mp_hands = mp.solutions.hands
        self.hands = self.mp_hands.Hands(
            static_image_mode=False,
            max_num_hands=MAX_HANDS,
            model_complexity=1,
            min_detection_confidence=min_detection_conf,
            min_tracking_confidence=min_tracking_conf
        )

    def process(self, frame_bgr: np.ndarray, timestamp: float) -> Frame:
        """
        Process a camera frame and return detected hands.

        Args:
            frame_bgr: Input frame in BGR format
            timestamp: Capture time in seconds

        Returns:
            Frame with up to two 21-landmark hands
        """
        # Mirror for selfie view, then convert BGR to RGB for MediaPipe
        frame_rgb = cv2.cvtColor(cv2.flip(frame_bgr, 1), cv2.COLOR_BGR2RGB)
        results = self.hands.process(frame_rgb)
        return frame_from_results(results, timestamp)

    def close(self) -> None:
        self.hands.close()
