# /hostspec/domain/grammar.py
from __future__ import annotations

import re
from enum import Enum

PRIVATE_ALIASES = {
    "192": "192.168.0.0/16",
    "172": "172.16.0.0/12",
    "10": "10.0.0.0/8",
}

_LETTERS = re.compile(r"[a-zA-Z]+")


class TokenKind(str, Enum):
    PRIVATE_ALIAS = "private_alias"
    SLASH8 = "slash8"
    CIDR = "cidr"
    HOSTNAME = "hostname"
    RANGE = "range"
    LITERAL = "literal"


def classify(token: str) -> TokenKind:
    """Pick the grammar for one comma-free token; first match wins.

    The order matters because some forms are textual subsets of others:
    a /8 token also contains "/", and hostnames may contain "-".
    """
    if token in PRIVATE_ALIASES:
        return TokenKind.PRIVATE_ALIAS
    if token.endswith("/8"):
        return TokenKind.SLASH8
    if "/" in token:
        return TokenKind.CIDR
    if _LETTERS.search(token):
        return TokenKind.HOSTNAME
    if "-" in token:
        return TokenKind.RANGE
    return TokenKind.LITERAL


_PORT = re.compile(r"[0-9]+")


def parse_port(text: str) -> str | None:
    """Port part of ``host:port``: digits up to the first space, 1..65535."""
    port = text.split(" ")[0]
    if not _PORT.fullmatch(port) or not 1 <= int(port) <= 65535:
        return None
    return port
