# =========================
# indexing_insights/routers/health.py
# =========================
from __future__ import annotations

from datetime import datetime, timezone
import logging
import time

from fastapi import APIRouter, Depends

from indexing_insights.deps import repository, settings
from indexing_insights.core.indexing_repository import IndexingRunRepository
from indexing_insights.core.redact import redact
from indexing_insights.settings import Settings

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])
_STARTED = time.monotonic()


@router.get("/health", summary="Liveness check")
def health_check(s: Settings = Depends(settings)):
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - _STARTED, 1),
        "version": s.APP_VERSION,
    }


@router.get("/health/db", summary="MongoDB connectivity")
def db_health(repo: IndexingRunRepository = Depends(repository)):
    try:
        repo.ping()
        return {"ok": True}
    except Exception as ex:
        logger.warning("MongoDB ping failed: %s", redact(str(ex)))
        return {"ok": False, "error": redact(str(ex))}
