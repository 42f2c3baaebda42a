"""
Debounce / confirmation state machine.

Turns noisy per-frame candidates into discrete gesture events:

- IDLE: nothing pending, nothing suppressed
- PENDING: a candidate is being held for the stability window
- COOLDOWN: a gesture was emitted; the same label is suppressed

The state is an immutable DebounceState value; step() returns the next value
and the event (if any) so a scripted frame sequence replays deterministically.
"""
import logging
from dataclasses import replace
from enum import Enum
from typing import Optional, Tuple

from .config import DebounceConfig
from .types import DebounceState, GestureCandidate, GestureEvent

logger = logging.getLogger(__name__)

# Tolerance for float timestamps landing on a window boundary
_EPSILON = 1e-9


class DebouncePhase(Enum):
    IDLE = "idle"
    PENDING = "pending"
    COOLDOWN = "cooldown"


def phase(state: DebounceState, now: float) -> DebouncePhase:
    """Phase of a state as seen at time now (seconds)."""
    if state.pending_label is not None:
        return DebouncePhase.PENDING
    if state.suppress_until is not None and now + _EPSILON < state.suppress_until:
        return DebouncePhase.COOLDOWN
    return DebouncePhase.IDLE


def step(state: DebounceState, candidate: Optional[GestureCandidate], now: float,
         cfg: DebounceConfig) -> Tuple[DebounceState, Optional[GestureEvent]]:
    """
    Advance the state machine by one frame.

    Args:
        state: Current state
        candidate: This frame's candidate, or None if nothing was classified
        now: Frame time in seconds
        cfg: Stability / cooldown windows

    Returns:
        (next_state, event) where event is None unless a gesture was confirmed
    """
    # Cooldown expiry: the same label may be emitted again
    if state.suppress_until is not None and now + _EPSILON >= state.suppress_until:
        state = replace(state, last_emitted_label=None, suppress_until=None)

    if candidate is not None and candidate.confidence >= cfg.min_confidence:
        if candidate.label != state.last_emitted_label:
            if candidate.label == state.pending_label:
                state = replace(state, pending_candidate=candidate)
            else:
                # Last candidate wins: restart the timer for the new label
                state = replace(state, pending_label=candidate.label, pending_since=now,
                                pending_candidate=candidate)

    if state.pending_label is None or now - state.pending_since + _EPSILON < cfg.stability_ms / 1000.0:
        return state, None

    event = GestureEvent.from_candidate(state.pending_candidate, now)
    next_state = DebounceState(
        last_emitted_label=event.label,
        suppress_until=now + cfg.cooldown_ms / 1000.0,
    )
    return next_state, event


def cancel_pending(state: DebounceState) -> DebounceState:
    """Drop the pending candidate, keeping any active cooldown."""
    return replace(state, pending_label=None, pending_since=None, pending_candidate=None)


class Debouncer:
    """Owns the single, engine-wide debounce state."""

    def __init__(self, cfg: Optional[DebounceConfig] = None):
        """Initialize in the IDLE phase."""
        self.cfg = cfg or DebounceConfig()
        self.state = DebounceState()

    def update(self, candidate: Optional[GestureCandidate], now: float) -> Optional[GestureEvent]:
        """Feed one frame's candidate; returns the confirmed event, if any."""
        self.state, event = step(self.state, candidate, now, self.cfg)
        if event is not None:
            logger.debug(f"Confirmed {event.label} at {now:.3f}")
        return event

    def cancel_pending(self) -> None:
        """Forget the pending candidate (the hands left the frame)."""
        self.state = cancel_pending(self.state)

    def phase(self, now: float) -> DebouncePhase:
        return phase(self.state, now)

    def reset(self) -> None:
        """Discard pending and cooldown state."""
        self.state = DebounceState()
