# /hostspec/domain/ranges.py
from __future__ import annotations

import re
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from ipaddress import AddressValueError, IPv4Address, IPv4Network

from hostspec.ports.random_source import RandomSourcePort

_OCTET = re.compile(r"[0-9]{1,3}")

# /8 sampler: per (second, third) octet pair
SAMPLE_FIXED_LOW = (1, 2, 4, 5)  # gateways / common servers
SAMPLE_BANDS = ((6, 55), (56, 100), (101, 150), (151, 200), (201, 253))
SAMPLE_FIXED_HIGH = 254
SAMPLES_PER_PAIR = len(SAMPLE_FIXED_LOW) + len(SAMPLE_BANDS) + 1


class InvalidTokenError(ValueError):
    """A single token cannot be expanded; callers log it and move on."""


def int_to_dotted(value: int) -> str:
    return f"{(value >> 24) & 0xFF}.{(value >> 16) & 0xFF}.{(value >> 8) & 0xFF}.{value & 0xFF}"


def _encode(octets: Sequence[int]) -> int:
    return octets[0] << 24 | octets[1] << 16 | octets[2] << 8 | octets[3]


def _octets(text: str) -> list[int] | None:
    parts = text.split(".")
    if len(parts) != 4 or not all(_OCTET.fullmatch(p) for p in parts):
        return None
    values = [int(p) for p in parts]
    if any(v > 255 for v in values):
        return None
    return values


@dataclass(slots=True, frozen=True)
class AddressRange:
    """Closed interval of IPv4 addresses held as 32-bit integers."""

    start: int
    end: int

    @classmethod
    def from_octets(cls, start: Sequence[int], end: Sequence[int]) -> AddressRange:
        # every octet of the start must be <= the same octet of the end
        if any(s > e for s, e in zip(start, end)):
            raise InvalidTokenError("range start exceeds range end")
        return cls(_encode(start), _encode(end))

    @classmethod
    def parse(cls, text: str) -> AddressRange:
        """Parse ``a.b.c.d-e.f.g.h``."""
        left, _, right = text.partition("-")
        start, end = _octets(left), _octets(right)
        if start is None or end is None:
            raise InvalidTokenError(f"malformed range endpoints: {text}")
        return cls.from_octets(start, end)

    def __len__(self) -> int:
        return self.end - self.start + 1

    def __iter__(self) -> Iterator[str]:
        for value in range(self.start, self.end + 1):
            yield int_to_dotted(value)

    def __str__(self) -> str:
        return f"{int_to_dotted(self.start)}-{int_to_dotted(self.end)}"


def is_shorthand(token: str) -> bool:
    _, _, right = token.partition("-")
    return len(right) < 4


def _shorthand_bounds(token: str) -> tuple[str, int, int]:
    left, _, right = token.partition("-")
    try:
        IPv4Address(left)
    except AddressValueError as e:
        raise InvalidTokenError(f"malformed range start: {left}") from e
    if not _OCTET.fullmatch(right) or int(right) > 255:
        raise InvalidTokenError(f"malformed range end: {right!r}")

    prefix, _, last = left.rpartition(".")
    start, end = int(last), int(right)
    if start > end:
        raise InvalidTokenError(f"range start exceeds range end: {start}-{end}")
    return prefix, start, end


def shorthand_size(token: str) -> int:
    _, start, end = _shorthand_bounds(token)
    return end - start + 1


def expand_shorthand(token: str) -> list[str]:
    """``a.b.c.d-n`` -> a.b.c.d .. a.b.c.n"""
    prefix, start, end = _shorthand_bounds(token)
    return [f"{prefix}.{i}" for i in range(start, end + 1)]


def expand_dash_range(token: str) -> list[str]:
    return list(AddressRange.parse(token))


def cidr_to_range(token: str) -> AddressRange:
    try:
        net = IPv4Network(token, strict=False)
    except ValueError as e:
        raise InvalidTokenError(f"malformed CIDR {token}: {e}") from e
    return AddressRange(int(net.network_address), int(net.broadcast_address))


def _slash8_first_octet(token: str) -> str:
    base = token[:-2]
    try:
        IPv4Address(base)
    except AddressValueError as e:
        raise InvalidTokenError(f"malformed network address: {base}") from e
    return base.split(".")[0]


def slash8_size(token: str) -> int:
    _slash8_first_octet(token)
    return SAMPLES_PER_PAIR * 65536


def sample_slash8(token: str, rng: RandomSourcePort) -> list[str]:
    """Sample a /8 instead of enumerating its 16.7M addresses.

    Every (second, third) octet pair gets the fixed low offsets, one random
    offset per band and the fixed high offset: 10 addresses per pair,
    655,360 for the whole network.
    """
    first = _slash8_first_octet(token)
    out: list[str] = []
    for b in range(256):
        for c in range(256):
            prefix = f"{first}.{b}.{c}"
            out.extend(f"{prefix}.{d}" for d in SAMPLE_FIXED_LOW)
            out.extend(f"{prefix}.{rng.randint(lo, hi)}" for lo, hi in SAMPLE_BANDS)
            out.append(f"{prefix}.{SAMPLE_FIXED_HIGH}")
    return out
