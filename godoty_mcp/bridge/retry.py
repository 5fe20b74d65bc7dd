"""Reconnect delay policy for the Godot bridge."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class ReconnectPolicy:
    """Delay between reconnect attempts.

    With ``max_delay_seconds`` equal to ``base_delay_seconds`` the delay is fixed;
    a larger ceiling gives bounded exponential backoff.
    """

    base_delay_seconds: float = 2.0
    max_delay_seconds: float = 2.0

    @classmethod
    def from_millis(cls, interval_ms: int, max_interval_ms: int | None = None) -> "ReconnectPolicy":
        base = max(0, interval_ms) / 1000.0
        ceiling = max(base, (max_interval_ms or 0) / 1000.0)
        return cls(base_delay_seconds=base, max_delay_seconds=ceiling)

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait before the given (0-based) attempt."""
        if self.max_delay_seconds <= self.base_delay_seconds:
            return self.base_delay_seconds
        exponent = min(max(0, attempt), 32)
        return min(self.max_delay_seconds, self.base_delay_seconds * (2 ** exponent))
