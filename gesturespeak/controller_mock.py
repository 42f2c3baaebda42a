"""
Mock speech sink for testing gesture events without audio output.
"""
from typing import List


class MockSpeaker:
    """Mock speaker that prints phrases instead of speaking them."""

    def __init__(self):
        """Initialize the mock speaker."""
        self.spoken: List[str] = []

    async def speak(self, text: str) -> None:
        """Print the phrase instead of speaking it."""
        self.spoken.append(text)
        print(f"[MockSpeaker] Speak: {text!r} (call #{len(self.spoken)})")

    def reset(self) -> None:
        """Forget spoken phrases."""
        self.spoken.clear()
