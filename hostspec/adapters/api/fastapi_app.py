# /hostspec/adapters/api/fastapi_app.py
from __future__ import annotations
import logging
import uuid
from typing import Optional

from fastapi import FastAPI, Header, HTTPException
from pydantic import BaseModel

from hostspec.config import settings
from hostspec.adapters.system.logging_cfg import configure_logger
from hostspec.adapters.system.redis_result_store import RedisResultStore
from hostspec.adapters.system.celery_app import celery_app
from hostspec.adapters.system.service_factory import build_expander
from hostspec.domain.models import HostsUnresolvedError, TooManyTargetsError

LOG = logging.getLogger("adapter.api")
app = FastAPI(title="hostspec")
configure_logger(settings.LOG_LEVEL)

_store = RedisResultStore(settings.REDIS_URL, ttl_seconds=settings.RESULT_TTL_SECONDS)
_expander = build_expander()

class ExpandRequestModel(BaseModel):
    host: str
    exclude: Optional[str] = None

def _check_key(x_api_key: str | None) -> None:
    if settings.API_KEY and x_api_key != settings.API_KEY:
        raise HTTPException(status_code=401, detail="invalid api key")

@app.get("/health")
def health() -> dict:
    return {"status": "ok"}

@app.post("/expand")
def expand(payload: ExpandRequestModel, x_api_key: str | None = Header(default=None)) -> dict:
    _check_key(x_api_key)
    if not payload.host.strip():
        raise HTTPException(status_code=400, detail="host required")
    try:
        result = _expander.expand(
            payload.host, exclude=payload.exclude or "", limit=settings.MAX_TARGETS
        )
    except TooManyTargetsError as e:
        LOG.warning("expand.too_large", extra={"extra": {"count": e.count, "max": e.limit}})
        raise HTTPException(status_code=413, detail=f"{e}, submit it as a job") from e
    except HostsUnresolvedError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return result.to_dict()

@app.post("/jobs")
def job_start(payload: ExpandRequestModel, x_api_key: str | None = Header(default=None)) -> dict:
    _check_key(x_api_key)
    if not payload.host.strip():
        raise HTTPException(status_code=400, detail="host required")

    job_id = str(uuid.uuid4())
    _store.set_pending(job_id)

    task = celery_app.send_task("expand_job", args=[job_id, payload.model_dump()], kwargs=None)
    LOG.info("expand.enqueued", extra={"extra": {"job_id": job_id, "task_id": task.id}})
    return {"job_id": job_id, "status": "pending", "task_id": task.id}

@app.get("/jobs/{job_id}")
def job_result(
    job_id: str, with_result: bool = True, x_api_key: str | None = Header(default=None)
) -> dict:
    _check_key(x_api_key)
    entry = _store.get(job_id, with_result=with_result)
    if entry is None:
        raise HTTPException(status_code=404, detail="job_id not found")
    return entry
