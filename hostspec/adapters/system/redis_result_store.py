# /hostspec/adapters/system/redis_result_store.py
from __future__ import annotations

import json
import logging
from typing import Any

import redis

from hostspec.domain.models import ExpansionResult, HostSpecError

LOG = logging.getLogger("adapter.result_store.redis")


class RedisResultStore:
    """Expansion job state, one hash per job, expiring after ``ttl_seconds``.

    Counts are stored next to the serialised result so a status poll can
    skip decoding a 655k-address /8 sample (``get(job_id, with_result=False)``).
    """

    def __init__(self, redis_url: str, prefix: str = "expand", ttl_seconds: int = 86400) -> None:
        self._r = redis.Redis.from_url(redis_url, decode_responses=True)
        self._prefix = prefix
        self._ttl = ttl_seconds

    def _key(self, job_id: str) -> str:
        return f"{self._prefix}:{job_id}"

    def _write(self, job_id: str, mapping: dict[str, str]) -> None:
        key = self._key(job_id)
        self._r.hset(key, mapping=mapping)
        self._r.expire(key, self._ttl)

    def set_pending(self, job_id: str) -> None:
        self._write(job_id, {"status": "pending"})
        LOG.info("store.set_pending", extra={"extra": {"job_id": job_id}})

    def set_error(self, job_id: str, error: HostSpecError | str) -> None:
        kind = type(error).__name__ if isinstance(error, HostSpecError) else "error"
        self._write(job_id, {"status": "error", "error": str(error), "error_type": kind})
        LOG.warning("store.set_error", extra={"extra": {"job_id": job_id, "error_type": kind}})

    def set_result(self, job_id: str, result: ExpansionResult) -> None:
        self._write(
            job_id,
            {
                "status": "done",
                "address_count": str(len(result.addresses)),
                "port_binding_count": str(len(result.port_bindings)),
                "result": json.dumps(result.to_dict()),
            },
        )
        LOG.info(
            "store.set_result",
            extra={"extra": {"job_id": job_id, "addresses": len(result.addresses)}},
        )

    def get(self, job_id: str, with_result: bool = True) -> dict | None:
        data = self._r.hgetall(self._key(job_id))
        if not data:
            return None
        out: dict[str, Any] = {"status": data.get("status")}
        if "error" in data:
            out["error"] = data["error"]
            out["error_type"] = data.get("error_type", "error")
        if "address_count" in data:
            out["address_count"] = int(data["address_count"])
            out["port_binding_count"] = int(data.get("port_binding_count", "0"))
        if with_result and data.get("result") is not None:
            try:
                out["result"] = json.loads(data["result"])
            except json.JSONDecodeError:
                LOG.warning("store.result_corrupt", extra={"extra": {"job_id": job_id}})
                out["result"] = None
        return out
