# /hostspec/adapters/system/file_host_reader.py
from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

LOG = logging.getLogger("adapter.host_file_reader")


class LocalHostFileReader:
    def __init__(self, encoding: str = "utf-8") -> None:
        self._encoding = encoding

    def read_lines(self, path: str) -> Iterator[str]:
        p = Path(path)
        LOG.info("hostfile.open", extra={"extra": {"path": str(p)}})
        with p.open("r", encoding=self._encoding) as fh:
            yield from fh
