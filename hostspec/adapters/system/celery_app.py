# /hostspec/adapters/system/celery_app.py
from __future__ import annotations

import logging
from typing import Any

from celery import Celery

from hostspec.adapters.system.logging_cfg import configure_logger
from hostspec.adapters.system.redis_result_store import RedisResultStore
from hostspec.adapters.system.service_factory import build_expander
from hostspec.config import settings
from hostspec.domain.models import HostSpecError
from hostspec.ports.target_expander import TargetExpanderPort

LOG = logging.getLogger("adapter.celery")
configure_logger(settings.LOG_LEVEL)

celery_app = Celery("hostspec", broker=settings.REDIS_URL, backend=settings.REDIS_URL)
celery_app.conf.update(
    worker_prefetch_multiplier=1,
    worker_concurrency=settings.CELERY_WORKER_CONCURRENCY,
    task_acks_late=True,
    task_time_limit=300,
)

_store = RedisResultStore(settings.REDIS_URL, ttl_seconds=settings.RESULT_TTL_SECONDS)
_service: TargetExpanderPort | None = None


def _get_service() -> TargetExpanderPort:
    global _service
    if _service is None:
        _service = build_expander()
    return _service


@celery_app.task(
    name="expand_job",
    bind=True,
    autoretry_for=(ConnectionError, TimeoutError),
    retry_backoff=True,
    retry_kwargs={"max_retries": 3},
)
def expand_job(self, job_id: str, payload: dict[str, Any]) -> str:
    """Run one expansion and persist the result or the parse error."""
    LOG.info("expand.job.accepted", extra={"extra": {"job_id": job_id}})
    try:
        result = _get_service().expand(payload["host"], exclude=payload.get("exclude") or "")
    except HostSpecError as e:
        # bad input: never retried
        _store.set_error(job_id, e)
        LOG.info("expand.job.rejected", extra={"extra": {"job_id": job_id}})
        return "error"

    _store.set_result(job_id, result)
    LOG.info("expand.job.done", extra={"extra": {"job_id": job_id}})
    return "ok"
