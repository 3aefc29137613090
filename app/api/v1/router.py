"""API v1 router configuration."""

from fastapi import APIRouter

from app.api.v1.endpoints import (
    appointments,
    banners,
    health,
    listings,
    locations,
    payments,
    session,
    users,
)

api_router = APIRouter()

# Include routers
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(session.router, prefix="/session", tags=["Session"])
api_router.include_router(users.router)
api_router.include_router(banners.router)
api_router.include_router(listings.router)
api_router.include_router(payments.router)
api_router.include_router(appointments.router)
api_router.include_router(locations.router)
