"""
Microphone transient detection used to corroborate claps.

The detector runs on its own thread and only ever writes a single timestamp
into a TransientCell; the relational classifier reads that value without
blocking. A stale read can only cost a missed corroboration.
"""
import logging
import threading
import time
from typing import Callable, Optional

import numpy as np

logger = logging.getLogger(__name__)


class TransientCell:
    """Last time an acoustic transient was heard."""

    def __init__(self, available: bool = True):
        self.last_event_at: Optional[float] = None
        self.available = available

    def mark(self, timestamp: float) -> None:
        self.last_event_at = timestamp

    def seen_within(self, now: float, window_s: float) -> bool:
        """True if a transient was recorded within window_s of now (either side)."""
        last = self.last_event_at
        return last is not None and abs(now - last) <= window_s


class AudioTransientDetector:
    """
    Amplitude-threshold clap detector.

    Features:
    - Normalized peak amplitude over each chunk
    - Cooldown so one clap is recorded once
    """

    def __init__(self, cell: TransientCell, threshold: float = 0.25, cooldown_ms: int = 400,
                 on_transient: Optional[Callable[[float], None]] = None):
        """
        Initialize the detector.

        Args:
            cell: Shared cell that receives transient timestamps
            threshold: Peak amplitude (0..1) that counts as a transient
            cooldown_ms: Minimum spacing between recorded transients
            on_transient: Optional callback invoked with the timestamp
        """
        self.cell = cell
        self.threshold = threshold
        self.cooldown_s = cooldown_ms / 1000.0
        self.on_transient = on_transient
        self._last_at: Optional[float] = None

    @staticmethod
    def peak(samples: np.ndarray) -> float:
        """Normalized peak amplitude; int16 is scaled by 32768, floats are taken as-is."""
        if samples.size == 0:
            return 0.0
        if np.issubdtype(samples.dtype, np.integer):
            return float(np.max(np.abs(samples.astype(np.int32)))) / 32768.0
        return float(np.max(np.abs(samples)))

    def process_chunk(self, samples: np.ndarray, timestamp: float) -> bool:
        """
        Inspect one chunk of audio.

        Returns:
            True if a transient was recorded for this chunk
        """
        if self.peak(samples) <= self.threshold:
            return False
        if self._last_at is not None and timestamp - self._last_at <= self.cooldown_s:
            return False

        self._last_at = timestamp
        self.cell.mark(timestamp)
        logger.debug(f"Audio transient at {timestamp:.3f}")
        if self.on_transient is not None:
            self.on_transient(timestamp)
        return True


class MicrophoneListener:
    """Reads microphone chunks on a background thread and feeds a detector."""

    def __init__(self, detector: AudioTransientDetector, rate: int = 16000, chunk: int = 1024):
        self.detector = detector
        self.rate = rate
        self.chunk = chunk
        self.is_running = False
        self._audio = None
        self._stream = None
        self._thread: Optional[threading.Thread] = None

    def start(self) -> bool:
        """
        Open the default input device and start listening.

        Returns:
            False if no microphone is available; claps then fall back to vision only
        """
        if self.is_running:
            return True
        import pyaudio

        self._audio = pyaudio.PyAudio()
        try:
            self._stream = self._audio.open(
                format=pyaudio.paInt16,
                channels=1,
                rate=self.rate,
                input=True,
                frames_per_buffer=self.chunk,
            )
        except OSError as e:
            logger.warning(f"Microphone not available: {e}")
            self._audio.terminate()
            self._audio = None
            self.detector.cell.available = False
            return False

        self.detector.cell.available = True
        self.is_running = True
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()
        logger.info("Microphone listener started")
        return True

    def _run(self) -> None:
        while self.is_running:
            try:
                data = self._stream.read(self.chunk, exception_on_overflow=False)
            except OSError as e:
                logger.warning(f"Microphone read failed: {e}")
                self.detector.cell.available = False
                self.is_running = False
                break
            self.detector.process_chunk(np.frombuffer(data, dtype=np.int16), time.time())

    def stop(self) -> None:
        """Stop listening and release the device."""
        self.is_running = False
        if self._thread is not None:
            self._thread.join(timeout=1.0)
            self._thread = None
        if self._stream is not None:
            self._stream.stop_stream()
            self._stream.close()
            self._stream = None
        if self._audio is not None:
            self._audio.terminate()
            self._audio = None
