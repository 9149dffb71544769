"""
Endpoints statistiques chauffeurs / vehicules / Driver and vehicle statistics endpoints.
Statistiques d'entite, evolution mensuelle et classements.
"""

import datetime as dt

from fastapi import APIRouter, Depends, HTTPException, Query

from fleetops.api.deps import get_trip_source, optional_period
from fleetops.schemas.stats import AggregateStat, MonthlyBucket, RankedEntity
from fleetops.services.entity_stats import EntityStatsService
from fleetops.services.period_bucketer import PeriodBucketerService
from fleetops.services.ranking import RankingService
from fleetops.services.trip_source import TripSource

router = APIRouter()


def months_back_start(today: dt.date, months: int) -> dt.date:
    """1er jour du mois situe months-1 mois avant / First day of the month months-1 back."""
    index = today.year * 12 + (today.month - 1) - (max(months, 1) - 1)
    return dt.date(index // 12, index % 12 + 1, 1)


# ── Chauffeurs / Drivers ─────────────────────────────────────────────


@router.get("/drivers/{driver_id}", response_model=AggregateStat)
async def driver_stats(
    driver_id: int,
    period: tuple[dt.date | None, dt.date | None] = Depends(optional_period),
    source: TripSource = Depends(get_trip_source),
):
    if await source.get_driver(driver_id) is None:
        raise HTTPException(status_code=404, detail="Driver not found")
    date_from, date_to = period
    trips = await source.fetch_trips(date_from, date_to, driver_id=driver_id)
    return EntityStatsService.aggregate(driver_id, trips, date_from, date_to)


@router.get("/drivers/{driver_id}/evolution", response_model=list[MonthlyBucket])
async def driver_evolution(
    driver_id: int,
    months: int = Query(default=6, ge=1, le=36),
    source: TripSource = Depends(get_trip_source),
):
    """Evolution mensuelle du chauffeur / Driver monthly evolution."""
    if await source.get_driver(driver_id) is None:
        raise HTTPException(status_code=404, detail="Driver not found")
    today = dt.date.today()
    trips = await source.fetch_trips(months_back_start(today, months), today, driver_id=driver_id)
    return PeriodBucketerService.monthly_series(driver_id, trips)


# ── Vehicules / Vehicles ─────────────────────────────────────────────


@router.get("/vehicles/{vehicle_id}", response_model=AggregateStat)
async def vehicle_stats(
    vehicle_id: int,
    period: tuple[dt.date | None, dt.date | None] = Depends(optional_period),
    source: TripSource = Depends(get_trip_source),
):
    if await source.get_vehicle(vehicle_id) is None:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    date_from, date_to = period
    trips = await source.fetch_trips(date_from, date_to, vehicle_id=vehicle_id)
    return EntityStatsService.aggregate(vehicle_id, trips, date_from, date_to)


@router.get("/vehicles/{vehicle_id}/evolution", response_model=list[MonthlyBucket])
async def vehicle_evolution(
    vehicle_id: int,
    months: int = Query(default=6, ge=1, le=36),
    source: TripSource = Depends(get_trip_source),
):
    """Evolution mensuelle du vehicule / Vehicle monthly evolution."""
    if await source.get_vehicle(vehicle_id) is None:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    today = dt.date.today()
    trips = await source.fetch_trips(months_back_start(today, months), today, vehicle_id=vehicle_id)
    return PeriodBucketerService.monthly_series(vehicle_id, trips)


# ── Classements / Rankings ───────────────────────────────────────────


async def _driver_stats(source: TripSource, period) -> tuple[list[AggregateStat], dict[int, str]]:
    trips = await source.fetch_trips(*period)
    labels = {d.id: d.full_name for d in await source.fetch_drivers()}
    return EntityStatsService.aggregate_all(trips, "driver"), labels


async def _vehicle_stats(source: TripSource, period) -> tuple[list[AggregateStat], dict[int, str]]:
    trips = await source.fetch_trips(*period)
    labels = {v.id: v.plate for v in await source.fetch_vehicles()}
    return EntityStatsService.aggregate_all(trips, "vehicle"), labels


@router.get("/rankings/drivers/containers", response_model=list[RankedEntity])
async def top_drivers_by_containers(
    limit: int = Query(default=10, ge=1, le=100),
    period: tuple[dt.date | None, dt.date | None] = Depends(optional_period),
    source: TripSource = Depends(get_trip_source),
):
    """Chauffeurs par conteneurs transportes / Drivers by containers carried."""
    stats, labels = await _driver_stats(source, period)
    return RankingService.by_volume(stats, limit=limit, labels=labels)


@router.get("/rankings/drivers/economical", response_model=list[RankedEntity])
async def most_economical_drivers(
    limit: int = Query(default=10, ge=1, le=100),
    period: tuple[dt.date | None, dt.date | None] = Depends(optional_period),
    source: TripSource = Depends(get_trip_source),
):
    stats, labels = await _driver_stats(source, period)
    return RankingService.by_efficiency(stats, ascending=True, limit=limit, labels=labels)


@router.get("/rankings/vehicles/economical", response_model=list[RankedEntity])
async def most_economical_vehicles(
    limit: int = Query(default=10, ge=1, le=100),
    period: tuple[dt.date | None, dt.date | None] = Depends(optional_period),
    source: TripSource = Depends(get_trip_source),
):
    stats, labels = await _vehicle_stats(source, period)
    return RankingService.by_efficiency(stats, ascending=True, limit=limit, labels=labels)


@router.get("/rankings/vehicles/problematic", response_model=list[RankedEntity])
async def problematic_vehicles(
    limit: int = Query(default=10, ge=1, le=100),
    period: tuple[dt.date | None, dt.date | None] = Depends(optional_period),
    source: TripSource = Depends(get_trip_source),
):
    """Vehicules les plus gourmands / Highest-consumption vehicles."""
    stats, labels = await _vehicle_stats(source, period)
    return RankingService.by_efficiency(stats, ascending=False, limit=limit, labels=labels)
