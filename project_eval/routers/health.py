"""
Health Check Router - Project Evaluation Platform
project_eval/routers/health.py

Returns health status of the document store and the cache with real
connection checks.
"""
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from typing import Dict
from datetime import datetime, timezone

import httpx
import redis

from project_eval.config import settings
from project_eval.services.pocketbase import get_pocketbase_client

router = APIRouter(tags=["Health"])



#  Schemas


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    version: str
    dependencies: Dict[str, str]



#  Dependency Health Checks


def _short(e: Exception) -> str:
    msg = str(e)
    return msg[:100] + "..." if len(msg) > 100 else msg


async def check_pocketbase() -> str:
    """Check PocketBase reachability via its health endpoint."""
    try:
        with get_pocketbase_client() as client:
            response = client.get("/api/health")
        if response.status_code >= 400:
            return f"unhealthy: HTTP {response.status_code}"
        return f"healthy (URL: {settings.POCKETBASE_URL})"
    except httpx.HTTPError as e:
        return f"unhealthy: {_short(e)}"


async def check_redis() -> str:
    """Check Redis connection health."""
    if not settings.CACHE_ENABLED:
        return "healthy (caching disabled)"
    try:
        client = redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=5,
        )
        client.ping()
        client.close()
        return f"healthy (URL: {settings.REDIS_URL})"
    except (redis.RedisError, ConnectionError) as e:
        return f"unhealthy: {_short(e)}"



#  Main Health Check Route


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={
        200: {"description": "All dependencies healthy"},
        503: {"description": "One or more dependencies unhealthy"},
    },
    summary="Health check",
    description="Check health of all dependencies.",
)
async def health_check():
    """Check health of all dependencies."""
    dependencies = {
        "pocketbase": await check_pocketbase(),
        "redis": await check_redis(),
    }

    all_healthy = all(v.startswith("healthy") for v in dependencies.values())

    response = HealthResponse(
        status="healthy" if all_healthy else "degraded",
        timestamp=datetime.now(timezone.utc),
        version=settings.APP_VERSION,
        dependencies=dependencies,
    )

    if all_healthy:
        return response
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=response.model_dump(mode="json"),
    )



#  Individual Service Health Checks


@router.get("/health/pocketbase", summary="Check PocketBase connection")
async def health_pocketbase():
    result = await check_pocketbase()
    return {
        "service": "pocketbase",
        "status": result,
        "is_healthy": result.startswith("healthy"),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/health/redis", summary="Check Redis connection")
async def health_redis():
    result = await check_redis()
    return {
        "service": "redis",
        "status": result,
        "is_healthy": result.startswith("healthy"),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
