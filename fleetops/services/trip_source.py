"""
Source des trajets / Trip source.

Une seule agregation canonique ; seule la strategie de recuperation varie.
One canonical aggregation; only the fetch strategy varies.
- SqlTripSource : session SQLAlchemy async, chargement anticipe des relations
- InMemoryTripSource : collections en memoire (tests, jeux de donnees importes)

Toutes les lignes sont converties en enregistrements immuables avant d'atteindre
le moteur. Les erreurs de stockage remontent en TripSourceError.
Rows are converted to immutable records before reaching the engine. Storage
errors surface as TripSourceError.
"""

import datetime as dt
import logging
from collections.abc import Iterable
from typing import Protocol

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from fleetops.exceptions import TripSourceError
from fleetops.models.driver import Driver
from fleetops.models.mission import SubcontractMission
from fleetops.models.trip import Trip, TripContainer
from fleetops.models.vehicle import Vehicle
from fleetops.schemas.records import DriverRecord, MissionRecord, TripRecord, VehicleRecord
from fleetops.services.entity_stats import in_window

logger = logging.getLogger(__name__)


class TripSource(Protocol):
    async def fetch_trips(
        self,
        date_from: dt.date | None = None,
        date_to: dt.date | None = None,
        driver_id: int | None = None,
        vehicle_id: int | None = None,
    ) -> list[TripRecord]: ...

    async def fetch_drivers(self) -> list[DriverRecord]: ...

    async def fetch_vehicles(self) -> list[VehicleRecord]: ...

    async def fetch_missions(
        self, date_from: dt.date | None = None, date_to: dt.date | None = None
    ) -> list[MissionRecord]: ...

    async def get_trip(self, trip_id: int) -> TripRecord | None: ...

    async def get_driver(self, driver_id: int) -> DriverRecord | None: ...

    async def get_vehicle(self, vehicle_id: int) -> VehicleRecord | None: ...


def trip_query():
    """Trajet + frais, conteneurs (et leur type), localites / Trip with its relations."""
    return select(Trip).options(
        selectinload(Trip.fees),
        selectinload(Trip.containers).selectinload(TripContainer.container_type),
        selectinload(Trip.departure),
        selectinload(Trip.destination),
    )


class SqlTripSource:
    """Lecture depuis la base / Database-backed source."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _scalars(self, query, record_type):
        try:
            result = await self.db.execute(query)
            return [record_type.model_validate(row) for row in result.scalars().unique().all()]
        except SQLAlchemyError as e:
            logger.exception("Trip source query failed")
            raise TripSourceError(f"Storage error: {e}") from e
        except ValidationError as e:
            logger.exception("Invalid %s row", record_type.__name__)
            raise TripSourceError(f"Invalid {record_type.__name__} data: {e}") from e

    async def fetch_trips(
        self,
        date_from: dt.date | None = None,
        date_to: dt.date | None = None,
        driver_id: int | None = None,
        vehicle_id: int | None = None,
    ) -> list[TripRecord]:
        # Dates stockees en YYYY-MM-DD : comparaison lexicographique
        # Dates stored as YYYY-MM-DD: lexicographic comparison
        query = trip_query()
        if date_from is not None:
            query = query.where(Trip.date >= date_from.isoformat())
        if date_to is not None:
            query = query.where(Trip.date <= date_to.isoformat())
        if driver_id is not None:
            query = query.where(Trip.driver_id == driver_id)
        if vehicle_id is not None:
            query = query.where(Trip.vehicle_id == vehicle_id)
        trips = await self._scalars(query.order_by(Trip.date, Trip.id), TripRecord)
        logger.debug("Fetched %d trips (%s..%s)", len(trips), date_from, date_to)
        return trips

    async def fetch_drivers(self) -> list[DriverRecord]:
        return await self._scalars(select(Driver).order_by(Driver.id), DriverRecord)

    async def fetch_vehicles(self) -> list[VehicleRecord]:
        return await self._scalars(select(Vehicle).order_by(Vehicle.id), VehicleRecord)

    async def fetch_missions(
        self, date_from: dt.date | None = None, date_to: dt.date | None = None
    ) -> list[MissionRecord]:
        query = select(SubcontractMission)
        if date_from is not None:
            query = query.where(SubcontractMission.date >= date_from.isoformat())
        if date_to is not None:
            query = query.where(SubcontractMission.date <= date_to.isoformat())
        return await self._scalars(query.order_by(SubcontractMission.date), MissionRecord)

    async def get_trip(self, trip_id: int) -> TripRecord | None:
        rows = await self._scalars(trip_query().where(Trip.id == trip_id), TripRecord)
        return rows[0] if rows else None

    async def get_driver(self, driver_id: int) -> DriverRecord | None:
        rows = await self._scalars(select(Driver).where(Driver.id == driver_id), DriverRecord)
        return rows[0] if rows else None

    async def get_vehicle(self, vehicle_id: int) -> VehicleRecord | None:
        rows = await self._scalars(select(Vehicle).where(Vehicle.id == vehicle_id), VehicleRecord)
        return rows[0] if rows else None


class InMemoryTripSource:
    """Source en memoire / In-memory source."""

    def __init__(
        self,
        trips: Iterable[TripRecord] = (),
        drivers: Iterable[DriverRecord] = (),
        vehicles: Iterable[VehicleRecord] = (),
        missions: Iterable[MissionRecord] = (),
    ):
        self.trips = list(trips)
        self.drivers = list(drivers)
        self.vehicles = list(vehicles)
        self.missions = list(missions)

    async def fetch_trips(
        self,
        date_from: dt.date | None = None,
        date_to: dt.date | None = None,
        driver_id: int | None = None,
        vehicle_id: int | None = None,
    ) -> list[TripRecord]:
        return [
            t for t in self.trips
            if in_window(t.date, date_from, date_to)
            and (driver_id is None or t.driver_id == driver_id)
            and (vehicle_id is None or t.vehicle_id == vehicle_id)
        ]

    async def fetch_drivers(self) -> list[DriverRecord]:
        return list(self.drivers)

    async def fetch_vehicles(self) -> list[VehicleRecord]:
        return list(self.vehicles)

    async def fetch_missions(
        self, date_from: dt.date | None = None, date_to: dt.date | None = None
    ) -> list[MissionRecord]:
        return [m for m in self.missions if in_window(m.date, date_from, date_to)]

    async def get_trip(self, trip_id: int) -> TripRecord | None:
        return next((t for t in self.trips if t.id == trip_id), None)

    async def get_driver(self, driver_id: int) -> DriverRecord | None:
        return next((d for d in self.drivers if d.id == driver_id), None)

    async def get_vehicle(self, vehicle_id: int) -> VehicleRecord | None:
        return next((v for v in self.vehicles if v.id == vehicle_id), None)
