# /hostspec/config.py
from __future__ import annotations

import os

from pydantic import BaseModel


def _optional_int(name: str) -> int | None:
    raw = os.getenv(name)
    return int(raw) if raw else None


class Settings(BaseModel):
    API_KEY: str | None = os.getenv("API_KEY")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Expansion
    DEFAULT_PORTS: str = os.getenv(
        "DEFAULT_PORTS", "21,22,80,135,139,443,445,1433,3306,5432,6379,7001,8080,9200"
    )
    HOSTS_FILE_ENCODING: str = os.getenv("HOSTS_FILE_ENCODING", "utf-8")
    SAMPLER_SEED: int | None = _optional_int("SAMPLER_SEED")  # unset -> unpredictable /8 samples
    MAX_TARGETS: int = int(os.getenv("MAX_TARGETS", "65536"))  # cap for synchronous API replies

    # Celery / Redis
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    RESULT_TTL_SECONDS: int = int(os.getenv("RESULT_TTL_SECONDS", "86400"))  # /8 job results are large
    CELERY_WORKER_CONCURRENCY: int = int(os.getenv("CELERY_WORKER_CONCURRENCY", "4"))


settings = Settings()
