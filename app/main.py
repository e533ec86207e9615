"""FastAPI entrypoint: Judge0 proxy routes and the playground runner."""

from __future__ import annotations

import logging
import os
import re
import uuid
from datetime import datetime, timezone
from time import perf_counter

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.Core.config import get_settings
from app.common.schemas import HealthCheckResponse
from app.features.judge0.endpoints import router as judge0_router
from app.features.playground.endpoints import router as playground_router

_settings = get_settings()
logging.basicConfig(
    level=getattr(logging, _settings.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title=_settings.app_name)
_START_TIME = datetime.now(timezone.utc)


# ------------------------
# CORS Setup
# ------------------------
def _split_csv(raw: str):
    return [o.strip().rstrip("/") for o in raw.split(",") if o.strip()]


_FRONTEND_ORIGINS = _split_csv(_settings.allow_origins)
_CORS_ORIGIN_REGEX = re.compile(r"https?://(localhost|127\.0\.0\.1)(:\d+)?", re.I)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_FRONTEND_ORIGINS,
    allow_origin_regex=_CORS_ORIGIN_REGEX.pattern,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ------------------------
# Custom Middlewares
# ------------------------
@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    incoming = request.headers.get("X-Request-Id") or request.headers.get("X-Request-ID")
    req_id = incoming or str(uuid.uuid4())
    request.state.request_id = req_id
    logger = logging.getLogger("request")
    logger.info("request.start", extra={"request_id": req_id, "path": request.url.path, "method": request.method})
    t0 = perf_counter()
    response = await call_next(request)
    dt = int((perf_counter() - t0) * 1000)
    response.headers["X-Request-Id"] = req_id
    logger.info(
        "request.end",
        extra={"request_id": req_id, "path": request.url.path, "status_code": response.status_code, "duration_ms": dt},
    )
    return response


# ------------------------
# Routers
# ------------------------
app.include_router(judge0_router)
app.include_router(playground_router)


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


@app.get("/healthz", tags=["meta"], response_model=HealthCheckResponse, summary="Liveness / readiness probe")
async def healthz():
    now = datetime.now(timezone.utc)
    judge0_ready = bool(_settings.judge0_api_url)
    return HealthCheckResponse(
        status="ok" if judge0_ready else "degraded",
        time_utc=now,
        uptime_seconds=round((now - _START_TIME).total_seconds(), 2),
        version=os.getenv("APP_VERSION", "dev"),
        environment="debug" if _settings.debug else "prod",
        components={"judge0": "configured" if judge0_ready else "missing-config"},
    )
