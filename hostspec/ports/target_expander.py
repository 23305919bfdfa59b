# /hostspec/ports/target_expander.py
from __future__ import annotations

from typing import Protocol

from hostspec.domain.models import ExpansionResult


class TargetExpanderPort(Protocol):
    def expand(
        self, host: str, filename: str = "", exclude: str = "", *, limit: int | None = None
    ) -> ExpansionResult:
        """Expand a host spec (plus optional host file, minus exclusions) into addresses."""
