"""FastAPI entrypoint for the scoring engine."""

from __future__ import annotations

import logging
import os
import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import get_settings
from app.features.practice.endpoints import router as practice_router
from app.features.coding.endpoints import router as coding_router
from app.features.progress.endpoints import router as progress_router
from app.features.leaderboard.endpoints import router as leaderboard_router
from app.features.completions.endpoints import router as completions_router
from app.features.execution.service import execution_service
from app.db.base import list_models
from app.db import models as _models  # noqa: F401

_settings = get_settings()
logging.basicConfig(
    level=getattr(logging, _settings.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

app = FastAPI(title=_settings.app_name, debug=_settings.debug)
_START_TIME = datetime.now(timezone.utc)


# ------------------------
# CORS Setup
# ------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    incoming = request.headers.get("X-Request-Id") or request.headers.get("X-Request-ID")
    req_id = incoming or str(uuid.uuid4())
    request.state.request_id = req_id
    logger = logging.getLogger("request")
    logger.info("request.start", extra={"request_id": req_id, "path": request.url.path, "method": request.method})
    response = await call_next(request)
    response.headers["X-Request-Id"] = req_id
    logger.info("request.end", extra={"request_id": req_id, "path": request.url.path, "status_code": response.status_code})
    return response


# ------------------------
# Routers
# ------------------------
app.include_router(practice_router)
app.include_router(coding_router)
app.include_router(progress_router)
app.include_router(leaderboard_router)
app.include_router(completions_router)


# ------------------------
# Meta endpoints
# ------------------------
@app.get("/", tags=["meta"], summary="API Root")
async def root():
    return {
        "name": _settings.app_name,
        "status": "ok",
        "docs": "/docs",
        "health": "/healthz",
    }


@app.get("/healthz", tags=["meta"], summary="Liveness / readiness probe")
async def healthz() -> Dict[str, Any]:
    now = datetime.now(timezone.utc)
    supabase_ready = bool(_settings.supabase_url and _settings.supabase_key)
    execution_ready = bool(execution_service.base_url)
    return {
        "status": "ok" if supabase_ready else "degraded",
        "time_utc": now.isoformat(),
        "uptime_seconds": round((now - _START_TIME).total_seconds(), 2),
        "version": os.getenv("APP_VERSION", "dev"),
        "environment": "debug" if _settings.debug else "prod",
        "components": {
            "supabase": "configured" if supabase_ready else "missing-config",
            "execution": {
                "status": "configured" if execution_ready else "missing-config",
                "timeout_seconds": _settings.execution_timeout_s,
                "languages": execution_service.supported_languages(),
            },
        },
        "counts": {"routes": len(app.routes), "models": len(list_models())},
    }
