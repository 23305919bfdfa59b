# /hostspec/ports/host_file_reader.py
from __future__ import annotations

from collections.abc import Iterator
from typing import Protocol


class HostFileReaderPort(Protocol):
    def read_lines(self, path: str) -> Iterator[str]:
        """Yield raw lines of a host list file; raise OSError on open/read failure."""
