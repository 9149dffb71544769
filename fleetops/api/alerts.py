"""
Fil d'alertes flotte / Fleet alert feed.
Alertes trajet recentes, soldes de missions impayes, alertes maintenance vehicule.
"""

import datetime as dt

from fastapi import APIRouter, Depends, HTTPException, Query

from fleetops.api.deps import get_trip_source, optional_period
from fleetops.schemas.alert import AlertFeedItem
from fleetops.services.alert_evaluator import AlertEvaluatorService
from fleetops.services.trip_source import TripSource

router = APIRouter()


@router.get("/", response_model=list[AlertFeedItem])
async def list_alerts(
    limit: int = Query(default=10, ge=1, le=100),
    period: tuple[dt.date | None, dt.date | None] = Depends(optional_period),
    source: TripSource = Depends(get_trip_source),
):
    """Alertes actives, plus recentes en premier / Active alerts, newest first."""
    date_from, date_to = period
    trips = await source.fetch_trips(date_from, date_to)
    missions = await source.fetch_missions(date_from, date_to)
    return AlertEvaluatorService.active_alerts(trips, missions, limit=limit)


@router.get("/payments", response_model=list[AlertFeedItem])
async def pending_payments(source: TripSource = Depends(get_trip_source)):
    """Soldes de 10 % en attente / Pending 10 % balances."""
    return AlertEvaluatorService.pending_payment_alerts(await source.fetch_missions())


@router.get("/vehicles/{vehicle_id}", response_model=list[AlertFeedItem])
async def vehicle_maintenance_alerts(
    vehicle_id: int,
    source: TripSource = Depends(get_trip_source),
):
    vehicle = await source.get_vehicle(vehicle_id)
    if vehicle is None:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    return AlertEvaluatorService.maintenance_alerts(vehicle)
