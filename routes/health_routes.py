"""
Health check endpoint.

GET /health checks MongoDB and Redis connectivity.
- MongoDB failure → "unhealthy" (503); nothing works without the store.
- Redis failure or absence → "degraded" (200); only the resend cooldown
  depends on it.
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from redis.exceptions import RedisError

from schemas.dto.responses.common import HealthResponse
from shared.logging import get_logger

log = get_logger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> JSONResponse:
    checks: dict[str, str] = {}
    overall = "healthy"

    try:
        await request.app.state.db.client.admin.command("ping")
        checks["mongodb"] = "ok"
    except PyMongoError as e:
        log.error("health_mongodb_failed", error=str(e), error_type=type(e).__name__)
        checks["mongodb"] = "error"
        overall = "unhealthy"

    redis = request.app.state.redis
    if redis is None:
        checks["redis"] = "not_configured"
    else:
        try:
            await redis.ping()
            checks["redis"] = "ok"
        except RedisError as e:
            log.warning("health_redis_failed", error=str(e), error_type=type(e).__name__)
            checks["redis"] = "error"

    if overall == "healthy" and checks["redis"] != "ok":
        overall = "degraded"

    status_code = 503 if overall == "unhealthy" else 200
    return JSONResponse(
        status_code=status_code,
        content=HealthResponse(status=overall, checks=checks).model_dump(),
    )
