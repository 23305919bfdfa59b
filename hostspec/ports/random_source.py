# /hostspec/ports/random_source.py
from __future__ import annotations

from typing import Protocol


class RandomSourcePort(Protocol):
    def randint(self, a: int, b: int) -> int:
        """Return a uniform integer N with a <= N <= b."""
