"""
sessions/models.py -- Session dataclass.

Layer rule: no imports from auth/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Session:
    """An issued session token and when it was issued.

    created_at is a reading of the owning pool's clock (time.monotonic by
    default), not a wall-clock timestamp.
    """

    token: str
    created_at: float

    def age(self, now: float) -> float:
        return now - self.created_at
