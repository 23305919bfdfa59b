# /hostspec/domain/filters.py
from __future__ import annotations

from collections.abc import Iterable


def dedupe(hosts: Iterable[str]) -> list[str]:
    """Drop repeats, keeping first-seen order."""
    seen: set[str] = set()
    out: list[str] = []
    for h in hosts:
        if h not in seen:
            seen.add(h)
            out.append(h)
    return out


def exclude(hosts: Iterable[str], excluded: Iterable[str]) -> list[str]:
    """Subtract ``excluded`` and return the survivors in string order.

    The sort is lexical, not numeric: "10.0.0.10" comes before "10.0.0.9".
    """
    remaining = set(hosts)
    remaining.difference_update(excluded)
    return sorted(remaining)
