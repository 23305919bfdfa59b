# /hostspec/adapters/system/service_factory.py
from __future__ import annotations

from hostspec.adapters.system.file_host_reader import LocalHostFileReader
from hostspec.adapters.system.random_source import make_random_source
from hostspec.config import Settings, settings
from hostspec.domain.expansion_service import HostSpecExpander


def build_expander(cfg: Settings = settings) -> HostSpecExpander:
    return HostSpecExpander(
        reader=LocalHostFileReader(cfg.HOSTS_FILE_ENCODING),
        rng=make_random_source(cfg.SAMPLER_SEED),
    )
