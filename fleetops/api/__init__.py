"""Routes API / API routes."""

from fastapi import APIRouter

from fleetops.api import (
    alerts,
    reports,
    stats,
    trips,
)

api_router = APIRouter(prefix="/api")

api_router.include_router(alerts.router, prefix="/alerts", tags=["alerts"])
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
api_router.include_router(stats.router, prefix="/stats", tags=["stats"])
api_router.include_router(trips.router, prefix="/trips", tags=["trips"])
