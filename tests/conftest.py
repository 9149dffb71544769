"""Fixtures partagees / Shared fixtures."""

import datetime as dt

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from fleetops.database import Base
from fleetops.models.trip import TripStatus
from fleetops.schemas.records import ContainerRecord, DriverRecord, FeeRecord, TripRecord, VehicleRecord


def build_trip(
    id: int,
    date: str = "2024-01-15",
    driver_id: int | None = 1,
    vehicle_id: int | None = 1,
    start_km: int = 1000,
    km: int | None = None,
    end_km: int | None = None,
    planned: float | None = None,
    purchased: float | None = None,
    price: float | None = None,
    fees: tuple = (),
    containers: int = 1,
    destination: str | None = "Douala",
    status: TripStatus | None = None,
) -> TripRecord:
    """Trajet de test ; km fixe le compteur de fin / Test trip; km sets the end odometer."""
    if km is not None:
        end_km = start_km + km
    if status is None:
        status = TripStatus.CLOSED if end_km is not None else TripStatus.OPEN
    return TripRecord(
        id=id,
        number=f"TR-{id:04d}",
        date=dt.date.fromisoformat(date),
        driver_id=driver_id,
        vehicle_id=vehicle_id,
        departure_name="Yaounde",
        destination_name=destination,
        start_km=start_km,
        end_km=end_km,
        planned_fuel_l=planned,
        purchased_fuel_l=purchased,
        price_per_liter=price,
        fees=tuple(FeeRecord(label="toll", amount=a) for a in fees),
        containers=tuple(ContainerRecord(container_type_id=1) for _ in range(containers)),
        status=status,
    )


@pytest.fixture
def make_trip():
    return build_trip


@pytest.fixture
def drivers():
    return [
        DriverRecord(id=1, last_name="Mballa", first_name="Paul"),
        DriverRecord(id=2, last_name="Nkoulou", first_name="Marie"),
    ]


@pytest.fixture
def vehicles():
    return [
        VehicleRecord(id=1, plate="LT-101-AA", make="Renault", model="Kerax"),
        VehicleRecord(id=2, plate="LT-202-BB", make="Volvo", model="FMX"),
    ]


@pytest.fixture
async def db_session():
    """Base SQLite en memoire, tables creees / In-memory SQLite with tables created."""
    import fleetops.models  # noqa: F401

    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session
    await engine.dispose()
