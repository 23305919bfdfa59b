# /hostspec/domain/expansion_service.py
from __future__ import annotations

import logging
from ipaddress import AddressValueError, IPv4Address

from hostspec.domain import filters
from hostspec.domain.grammar import PRIVATE_ALIASES, TokenKind, classify, parse_port
from hostspec.domain.models import (
    ExpansionResult,
    HostFileError,
    HostsUnresolvedError,
    SkippedToken,
    TokenOutcome,
    TooManyTargetsError,
)
from hostspec.domain.ranges import (
    AddressRange,
    InvalidTokenError,
    cidr_to_range,
    expand_dash_range,
    expand_shorthand,
    is_shorthand,
    sample_slash8,
    shorthand_size,
    slash8_size,
)
from hostspec.ports.host_file_reader import HostFileReaderPort
from hostspec.ports.random_source import RandomSourcePort

LOG = logging.getLogger("expansion_service")


def _literal(token: str) -> str:
    try:
        IPv4Address(token)
    except AddressValueError as e:
        raise InvalidTokenError(f"invalid IP: {token}") from e
    return token


class HostSpecExpander:
    """Turns host specs (plus an optional host file) into concrete IPv4 addresses."""

    def __init__(self, reader: HostFileReaderPort, rng: RandomSourcePort) -> None:
        self.reader = reader
        self.rng = rng

    # --- single token ---

    def _expand_classified(self, token: str, kind: TokenKind) -> list[str]:
        if kind is TokenKind.SLASH8:
            hosts = sample_slash8(token, self.rng)
            LOG.info("slash8.sampled", extra={"extra": {"token": token, "count": len(hosts)}})
            return hosts
        if kind is TokenKind.CIDR:
            span = cidr_to_range(token)
            LOG.info("cidr.resolved", extra={"extra": {"token": token, "range": str(span)}})
            return list(span)
        if kind is TokenKind.HOSTNAME:
            return [token]
        if kind is TokenKind.RANGE:
            hosts = expand_shorthand(token) if is_shorthand(token) else expand_dash_range(token)
            LOG.info("range.expanded", extra={"extra": {"token": token, "count": len(hosts)}})
            return hosts
        return [_literal(token)]

    def expand_token(self, token: str) -> TokenOutcome:
        token = token.strip()
        if not token:
            return TokenOutcome.ok(token, [])

        kind = classify(token)
        if kind is TokenKind.PRIVATE_ALIAS:
            return self.expand_token(PRIVATE_ALIASES[token])

        try:
            hosts = self._expand_classified(token, kind)
        except InvalidTokenError as e:
            LOG.error(
                "token.invalid",
                extra={"extra": {"token": token, "kind": kind.value, "reason": str(e)}},
            )
            return TokenOutcome.skipped(token, str(e))
        return TokenOutcome.ok(token, hosts)

    def _size_classified(self, token: str, kind: TokenKind) -> int:
        if kind is TokenKind.SLASH8:
            return slash8_size(token)
        if kind is TokenKind.CIDR:
            return len(cidr_to_range(token))
        if kind is TokenKind.RANGE:
            return shorthand_size(token) if is_shorthand(token) else len(AddressRange.parse(token))
        if kind is TokenKind.LITERAL:
            _literal(token)
        return 1

    def token_size(self, token: str) -> int:
        """Addresses ``token`` would expand to, computed without expanding it."""
        token = token.strip()
        if not token:
            return 0
        kind = classify(token)
        if kind is TokenKind.PRIVATE_ALIAS:
            return self.token_size(PRIVATE_ALIASES[token])
        try:
            return self._size_classified(token, kind)
        except InvalidTokenError:
            return 0

    def estimate(self, spec: str) -> int:
        """Upper bound on the addresses a comma list expands to (before dedupe)."""
        return sum(self.token_size(piece) for piece in spec.split(","))

    # --- lists and files ---

    def expand_list(self, spec: str) -> list[TokenOutcome]:
        return [self.expand_token(piece) for piece in spec.split(",")]

    def _collect(self, spec: str, result: ExpansionResult) -> list[str]:
        hosts: list[str] = []
        for outcome in self.expand_list(spec):
            hosts.extend(result.absorb(outcome))
        return hosts

    def read_host_file(self, path: str, result: ExpansionResult) -> None:
        """Merge a host list file into ``result``.

        Plain lines extend ``result.addresses``; ``host:port`` lines extend
        ``result.port_bindings``. On an open/read failure, raises
        HostFileError with ``result`` as it stood at that point.
        """
        added = 0
        try:
            for raw in self.reader.read_lines(path):
                line = raw.strip()
                if not line:
                    continue
                parts = line.split(":")
                if len(parts) != 2:
                    hosts = self._collect(line, result)
                    result.addresses.extend(hosts)
                    added += len(hosts)
                    continue

                port = parse_port(parts[1])
                if port is None:
                    LOG.warning("hostfile.port_invalid", extra={"extra": {"line": line}})
                    result.skipped.append(SkippedToken(line, "invalid port"))
                    continue
                for addr in self._collect(parts[0], result):
                    result.port_bindings.append(f"{addr}:{port}")
                LOG.info("hostfile.hostport", extra={"extra": {"line": line}})
        except (OSError, UnicodeError) as e:
            LOG.error("hostfile.read_failed", extra={"extra": {"path": path, "error": str(e)}})
            raise HostFileError(path, e, result) from e

        LOG.info("hostfile.parsed", extra={"extra": {"path": path, "addresses": added}})

    # --- primary entrypoint ---

    def _apply_default_port(self, port_text: str, result: ExpansionResult) -> None:
        port = parse_port(port_text)
        if port is None:
            LOG.warning("default_port.invalid", extra={"extra": {"port": port_text}})
            result.skipped.append(SkippedToken(port_text, "invalid port"))
            return
        result.default_port = port
        LOG.info("default_port.set", extra={"extra": {"port": port}})

    def _check_limit(self, spec: str, limit: int) -> None:
        count = self.estimate(spec)
        if count > limit:
            LOG.warning("hosts.over_limit", extra={"extra": {"count": count, "limit": limit}})
            raise TooManyTargetsError(count, limit)

    def _apply_exclusion(self, exclude: str, result: ExpansionResult) -> None:
        excluded = self._collect(exclude, result)
        if excluded:
            result.addresses = filters.exclude(result.addresses, excluded)
            LOG.info("hosts.excluded", extra={"extra": {"count": len(excluded)}})

    def expand(
        self, host: str, filename: str = "", exclude: str = "", *, limit: int | None = None
    ) -> ExpansionResult:
        """Expand ``host`` (plus ``filename``), minus ``exclude``.

        ``limit`` bounds the inline spec and the exclusion spec before anything
        is built; host file contents are not counted against it.
        """
        result = ExpansionResult()

        parts = host.split(":")
        shorthand_port = not filename and len(parts) == 2
        if limit is not None:
            self._check_limit(parts[0] if shorthand_port else host, limit)
            self._check_limit(exclude, limit)

        if shorthand_port:
            self._apply_default_port(parts[1], result)
            result.addresses = self._collect(parts[0], result)
        else:
            result.addresses = self._collect(host, result)
            if filename:
                try:
                    self.read_host_file(filename, result)
                except HostFileError as e:
                    if exclude:
                        self._apply_exclusion(exclude, e.partial)
                    e.partial.addresses = filters.dedupe(e.partial.addresses)
                    raise

        if exclude:
            self._apply_exclusion(exclude, result)

        result.addresses = filters.dedupe(result.addresses)
        LOG.info(
            "hosts.resolved",
            extra={
                "extra": {
                    "addresses": len(result.addresses),
                    "port_bindings": len(result.port_bindings),
                    "skipped": len(result.skipped),
                }
            },
        )

        if not result.addresses and not result.port_bindings and (host or filename):
            raise HostsUnresolvedError(result)
        return result
