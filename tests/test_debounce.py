"""
Test cases for the debounce / confirmation state machine with scripted timestamps.
"""
import unittest
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from gesturespeak.config import DebounceConfig
from gesturespeak.debounce import DebouncePhase, Debouncer, phase, step
from gesturespeak.types import DebounceState, GestureCandidate, GestureEvent

FPS = 30


def candidate(label, t, confidence=0.9):
    return GestureCandidate(label=label, confidence=confidence, timestamp=t)


def run(debouncer, labels, t0=0.0):
    """Feed one label per frame at 30 fps; returns the emitted events."""
    events = []
    for i, label in enumerate(labels):
        t = t0 + i / FPS
        event = debouncer.update(candidate(label, t) if label else None, t)
        if event is not None:
            events.append(event)
    return events


class TestStep(unittest.TestCase):
    """The pure transition function."""

    def setUp(self):
        self.cfg = DebounceConfig(stability_ms=200, cooldown_ms=2000)

    def test_idle_to_pending(self):
        state, event = step(DebounceState(), candidate("Fist", 0.0), 0.0, self.cfg)
        self.assertIsNone(event)
        self.assertEqual(state.pending_label, "Fist")
        self.assertEqual(state.pending_since, 0.0)
        self.assertEqual(phase(state, 0.0), DebouncePhase.PENDING)

    def test_pending_to_emit_to_cooldown(self):
        state, _ = step(DebounceState(), candidate("Fist", 0.0), 0.0, self.cfg)
        state, event = step(state, candidate("Fist", 0.1), 0.1, self.cfg)
        self.assertIsNone(event)
        state, event = step(state, candidate("Fist", 0.2), 0.2, self.cfg)
        self.assertEqual(event, GestureEvent("Fist", 0.9, 0.2))
        self.assertEqual(state.last_emitted_label, "Fist")
        self.assertAlmostEqual(state.suppress_until, 2.2)
        self.assertIsNone(state.pending_label)
        self.assertEqual(phase(state, 0.3), DebouncePhase.COOLDOWN)
        self.assertEqual(phase(state, 2.3), DebouncePhase.IDLE)

    def test_input_state_is_not_mutated(self):
        start = DebounceState()
        step(start, candidate("Fist", 0.0), 0.0, self.cfg)
        self.assertEqual(start, DebounceState())

    def test_emitted_event_uses_latest_candidate(self):
        state, _ = step(DebounceState(), candidate("Wave", 0.0, 0.8), 0.0, self.cfg)
        state, event = step(state, candidate("Wave", 0.25, 0.9), 0.25, self.cfg)
        self.assertEqual(event.confidence, 0.9)
        self.assertEqual(event.timestamp, 0.25)


class TestDebouncer(unittest.TestCase):
    """Scripted frame sequences through the stateful wrapper."""

    def setUp(self):
        self.debouncer = Debouncer(DebounceConfig(stability_ms=200, cooldown_ms=2000))

    def test_held_gesture_emits_once_within_cooldown(self):
        events = run(self.debouncer, ["Open Palm"] * 60)  # two seconds of frames
        self.assertEqual(len(events), 1)
        self.assertEqual(events[0].label, "Open Palm")
        self.assertAlmostEqual(events[0].timestamp, 0.2)

    def test_held_gesture_re_emits_after_cooldown(self):
        events = run(self.debouncer, ["Open Palm"] * 90)  # three seconds
        self.assertEqual(len(events), 2)
        self.assertGreaterEqual(events[1].timestamp - events[0].timestamp, 2.0)

    def test_interrupted_candidate_never_emits(self):
        events = run(self.debouncer, ["Fist", "Fist", "Fist", "Victory", "Fist", "Fist", "Fist", "Victory"] * 3)
        self.assertEqual(events, [])

    def test_last_candidate_wins(self):
        events = run(self.debouncer, ["Fist"] * 3 + ["Victory"] * 8)
        self.assertEqual([e.label for e in events], ["Victory"])
        self.assertAlmostEqual(events[0].timestamp, 9 / FPS)

    def test_frames_without_candidate_do_not_reset(self):
        events = run(self.debouncer, ["Fist", None, None, None, None, None, None])
        self.assertEqual([e.label for e in events], ["Fist"])

    def test_low_confidence_is_ignored(self):
        debouncer = Debouncer(DebounceConfig(min_confidence=0.85))
        for i in range(10):
            t = i / FPS
            self.assertIsNone(debouncer.update(candidate("Wave", t, confidence=0.8), t))
        self.assertEqual(debouncer.phase(10 / FPS), DebouncePhase.IDLE)

    def test_different_gesture_during_cooldown(self):
        events = run(self.debouncer, ["Fist"] * 8 + ["Thumbs-Up"] * 8)
        self.assertEqual([e.label for e in events], ["Fist", "Thumbs-Up"])

    def test_suppressed_label_does_not_cancel_pending(self):
        events = run(self.debouncer, ["Fist"] * 7 + ["Victory", "Fist", "Victory", "Fist", "Victory", "Victory",
                                                      "Victory", "Victory"])
        self.assertEqual([e.label for e in events], ["Fist", "Victory"])

    def test_cancelled_glimpse_never_emits(self):
        self.debouncer.update(candidate("Fist", 0.0), 0.0)
        self.debouncer.cancel_pending()  # hands left the frame
        self.assertIsNone(self.debouncer.update(None, 10.0))
        self.assertEqual(self.debouncer.phase(10.0), DebouncePhase.IDLE)

    def test_cancel_keeps_cooldown(self):
        run(self.debouncer, ["Fist"] * 8)
        self.debouncer.cancel_pending()
        self.assertEqual(self.debouncer.state.last_emitted_label, "Fist")
        self.assertIsNone(self.debouncer.update(candidate("Fist", 0.5), 0.5))

    def test_reset(self):
        run(self.debouncer, ["Fist"] * 8)
        self.debouncer.reset()
        self.assertEqual(self.debouncer.state, DebounceState())


if __name__ == '__main__':
    unittest.main()
