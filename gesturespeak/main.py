"""
Main application: camera → hand landmarks → gesture events → speech.
"""
import asyncio
import logging
import os
import threading
import time
from typing import Optional

import cv2
from dotenv import load_dotenv

from .audio import AudioTransientDetector, MicrophoneListener, TransientCell
from .config import load_config
from .controller_mock import MockSpeaker
from .gestures import GestureEngine, LatestFrameSlot
from .tracker import HandsTracker
from .types import GestureEvent, SpeechSinkProto

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class GestureSpeechApp:
    """Main application class for gesture-to-speech."""

    def __init__(self, config_path: Optional[str] = None, speaker: Optional[SpeechSinkProto] = None):
        """Initialize the application with configuration."""
        self.config = load_config(config_path)
        self.speaker = speaker or MockSpeaker()
        self.tracker = HandsTracker(
            min_detection_conf=self.config.mediapipe.min_detection_confidence,
            min_tracking_conf=self.config.mediapipe.min_tracking_confidence
        )

        # Optional microphone corroboration for claps
        self.transients: Optional[TransientCell] = None
        self.listener: Optional[MicrophoneListener] = None
        if self.config.audio.enabled:
            self.transients = TransientCell(available=False)
            detector = AudioTransientDetector(
                self.transients,
                threshold=self.config.audio.threshold,
                cooldown_ms=self.config.audio.cooldown_ms
            )
            self.listener = MicrophoneListener(detector, rate=self.config.audio.rate, chunk=self.config.audio.chunk)

        self.engine = GestureEngine(self.config, transients=self.transients)
        self.slot: LatestFrameSlot = LatestFrameSlot()
        self.is_running = False

        # Initialize camera
        self.cap = cv2.VideoCapture(self.config.camera.index)
        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.camera.width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.camera.height)
        self.cap.set(cv2.CAP_PROP_FPS, self.config.camera.fps)

        if not self.cap.isOpened():
            raise RuntimeError(f"Failed to open camera {self.config.camera.index}")

    def _capture_loop(self) -> None:
        """Read camera frames as fast as they come; only the newest is kept."""
        while self.is_running:
            ret, frame = self.cap.read()
            if not ret:
                logger.error("Failed to read frame from camera")
                self.is_running = False
                break
            self.slot.offer((frame, time.time()))

    async def handle_event(self, event: GestureEvent) -> None:
        """Speak the phrase mapped to a confirmed gesture."""
        mapping = self.config.find_mapping(event.label)
        if mapping is None:
            logger.info(f"⚠️ No enabled mapping for {event.label}")
            return
        await self.speaker.speak(mapping.text)

    async def run(self) -> None:
        """Run the main application loop."""
        logger.info("🎯 Gesture recognition started (Ctrl+C to quit)")
        if self.listener is not None and not self.listener.start():
            logger.info("🎤 Clap confirmation is vision-only")

        self.is_running = True
        capture = threading.Thread(target=self._capture_loop, daemon=True)
        capture.start()

        try:
            while self.is_running:
                item = self.slot.take()
                if item is None:
                    await asyncio.sleep(0.005)
                    continue

                frame_bgr, t_capture = item
                frame = self.tracker.process(frame_bgr, t_capture)
                event = self.engine.process_frame(frame)
                if event is not None:
                    await self.handle_event(event)
        finally:
            self.is_running = False
            capture.join(timeout=1.0)
            self.close()
            logger.info(f"Dropped {self.slot.dropped} stale frames")

    def close(self) -> None:
        """Release camera, microphone and detector."""
        if self.listener is not None:
            self.listener.stop()
        self.tracker.close()
        if self.cap.isOpened():
            self.cap.release()


async def main():
    """Entry point for the application."""
    load_dotenv()
    config_path = os.getenv("GESTURESPEAK_CONFIG")

    app = GestureSpeechApp(config_path=config_path)
    await app.run()


def cli():
    """Console script wrapper."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Application interrupted by user")


if __name__ == "__main__":
    cli()
