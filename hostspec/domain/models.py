# /hostspec/domain/models.py
from __future__ import annotations

from dataclasses import dataclass, field

USAGE = (
    "host parse error\n"
    "supported formats:\n"
    "192.168.1.1                   (single IP)\n"
    "192.168.1.1/8                 (/8 network, sampled)\n"
    "192.168.1.1/16                (/16 network)\n"
    "192.168.1.1/24                (/24 network)\n"
    "192.168.1.1,192.168.1.2       (IP list)\n"
    "192.168.1.1-192.168.255.255   (IP range)\n"
    "192.168.1.1-255               (last octet shorthand range)\n"
    "192.168.1.1:8080              (host with port)\n"
    "192, 172, 10                  (private network aliases)"
)

# ==== DTOs ====


@dataclass(slots=True, frozen=True)
class SkippedToken:
    token: str
    reason: str


@dataclass(slots=True)
class TokenOutcome:
    """Result of expanding one token: addresses, or why it was dropped."""

    token: str
    addresses: list[str] = field(default_factory=list)
    reason: str | None = None

    @classmethod
    def ok(cls, token: str, addresses: list[str]) -> TokenOutcome:
        return cls(token=token, addresses=addresses)

    @classmethod
    def skipped(cls, token: str, reason: str) -> TokenOutcome:
        return cls(token=token, reason=reason)

    @property
    def is_skipped(self) -> bool:
        return self.reason is not None


@dataclass(slots=True)
class ExpansionResult:
    addresses: list[str] = field(default_factory=list)
    port_bindings: list[str] = field(default_factory=list)  # "addr:port"
    default_port: str | None = None
    skipped: list[SkippedToken] = field(default_factory=list)

    def absorb(self, outcome: TokenOutcome) -> list[str]:
        if outcome.is_skipped:
            self.skipped.append(SkippedToken(outcome.token, outcome.reason or ""))
        return outcome.addresses

    def to_dict(self) -> dict:
        return {
            "addresses": self.addresses,
            "port_bindings": self.port_bindings,
            "default_port": self.default_port,
            "skipped": [{"token": s.token, "reason": s.reason} for s in self.skipped],
        }


# ==== Errors ====


class HostSpecError(ValueError):
    """Base for errors surfaced to the caller of an expansion."""


class HostsUnresolvedError(HostSpecError):
    def __init__(self, result: ExpansionResult | None = None) -> None:
        super().__init__(USAGE)
        self.result = result or ExpansionResult()


class HostFileError(HostSpecError):
    """The host list file could not be opened or read to the end."""

    def __init__(self, path: str, cause: Exception, partial: ExpansionResult) -> None:
        super().__init__(f"host file {path}: {cause}")
        self.path = path
        self.cause = cause
        self.partial = partial


class TooManyTargetsError(HostSpecError):
    """The spec would expand past the caller's limit; nothing was built."""

    def __init__(self, count: int, limit: int) -> None:
        super().__init__(f"host spec expands to {count} addresses, limit is {limit}")
        self.count = count
        self.limit = limit
