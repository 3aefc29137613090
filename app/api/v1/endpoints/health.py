"""Liveness and readiness endpoints."""

from typing import Literal

from fastapi import APIRouter, Response, status
from pydantic import BaseModel

from app.config import settings
from app.core.redis_client import check_redis_connection
from app.database import check_database_connection

router = APIRouter()

ComponentState = Literal["up", "down", "unconfigured"]


class LivenessResponse(BaseModel):
    """The process answers requests."""

    status: Literal["ok"] = "ok"
    service: str
    version: str


class ReadinessResponse(BaseModel):
    """Dependencies a booking needs, and whether bookings can be taken."""

    ready: bool
    store: ComponentState
    cache: ComponentState
    payments: ComponentState


@router.get("/health", response_model=LivenessResponse, summary="Liveness")
async def health_check() -> LivenessResponse:
    """Answer as long as the process is serving."""
    return LivenessResponse(service=settings.app_name, version=settings.app_version)


@router.get(
    "/health/detailed",
    response_model=ReadinessResponse,
    responses={status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ReadinessResponse}},
    summary="Readiness",
)
async def detailed_health_check(response: Response) -> ReadinessResponse:
    """
    Check the store, the cache and the payment gateway key.

    Only the store and the gateway key decide readiness. The cache fails
    open, so a down cache is reported but still ready.
    """
    store: ComponentState = "up" if await check_database_connection() else "down"
    cache: ComponentState = "up" if await check_redis_connection() else "down"
    payments: ComponentState = "up" if settings.stripe_secret_key else "unconfigured"

    ready = store == "up" and payments == "up"
    if not ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return ReadinessResponse(ready=ready, store=store, cache=cache, payments=payments)
