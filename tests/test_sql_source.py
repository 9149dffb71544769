"""Tests source SQL et retour de trajet / SQL source and trip return tests."""

import datetime as dt

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import update

from fleetops.database import get_db
from fleetops.exceptions import TripNotFoundError, TripSourceError, TripStateError, TripValidationError
from fleetops.main import app
from fleetops.models import (
    ContainerType,
    Driver,
    DriverStatus,
    Locality,
    SubcontractMission,
    Trip,
    TripContainer,
    TripFee,
    TripStatus,
    Vehicle,
)
from fleetops.schemas.trip import FeeCreate, TripClose
from fleetops.services.trip_lifecycle import TripLifecycleService
from fleetops.services.trip_source import SqlTripSource


@pytest.fixture
async def seeded(db_session):
    """Un chauffeur en trajet, un vehicule, deux trajets / One driver on trip, one vehicle, two trips."""
    yaounde = Locality(name="Yaounde", region="Centre")
    douala = Locality(name="Douala", region="Littoral")
    box = ContainerType(label="Dry 20", nominal_size_ft=20)
    driver = Driver(last_name="Mballa", first_name="Paul", status=DriverStatus.ON_TRIP)
    vehicle = Vehicle(plate="LT-101-AA", make="Renault", model="Kerax", current_km=1000)
    db_session.add_all([yaounde, douala, box, driver, vehicle])
    await db_session.flush()

    closed = Trip(
        number="TR-0001", date="2024-01-05", driver_id=driver.id, vehicle_id=vehicle.id,
        departure_id=yaounde.id, destination_id=douala.id, start_km=800, end_km=950,
        planned_fuel_l=40, purchased_fuel_l=55, price_per_liter=650, status=TripStatus.CLOSED,
    )
    closed.fees = [TripFee(label="toll", amount=2500)]
    closed.containers = [TripContainer(container_type_id=box.id, serial="MSCU1234567", quantity=2)]
    open_trip = Trip(
        number="TR-0002", date="2024-02-10", driver_id=driver.id, vehicle_id=vehicle.id,
        departure_id=douala.id, destination_id=yaounde.id, start_km=1000, planned_fuel_l=45,
    )
    open_trip.fees = [TripFee(label="parking", amount=1000)]
    db_session.add_all([
        closed,
        open_trip,
        SubcontractMission(date="2024-01-20", subcontractor_name="TransKam", transport_cost=40000),
    ])
    await db_session.flush()
    ids = {"driver": driver.id, "vehicle": vehicle.id, "closed": closed.id, "open": open_trip.id}
    # Repartir d'une session vide : tout est relu depuis la base
    # Start from an empty identity map: everything is read back from the database
    db_session.expunge_all()
    return ids


@pytest.mark.asyncio
async def test_fetch_trips_as_records(db_session, seeded):
    source = SqlTripSource(db_session)
    trips = await source.fetch_trips(dt.date(2024, 1, 1), dt.date(2024, 1, 31))
    assert len(trips) == 1
    trip = trips[0]
    assert trip.date == dt.date(2024, 1, 5)
    assert trip.destination_name == "Douala"
    assert trip.fees[0].amount == 2500
    assert trip.containers[0].type_label == "Dry 20"
    assert trip.containers[0].quantity == 2

    all_trips = await source.fetch_trips(driver_id=seeded["driver"])
    assert [t.number for t in all_trips] == ["TR-0001", "TR-0002"]


@pytest.mark.asyncio
async def test_fetch_references(db_session, seeded):
    source = SqlTripSource(db_session)
    assert [d.full_name for d in await source.fetch_drivers()] == ["Paul Mballa"]
    assert (await source.get_vehicle(seeded["vehicle"])).plate == "LT-101-AA"
    assert await source.get_driver(999) is None
    missions = await source.fetch_missions(dt.date(2024, 1, 1), dt.date(2024, 1, 31))
    assert missions[0].transport_cost == 40000
    assert await source.get_trip(999) is None


@pytest.mark.asyncio
async def test_invalid_row_raises_source_error(db_session, seeded):
    # Trajet ouvert avec compteur de fin / Open trip with an end odometer
    await db_session.execute(update(Trip).where(Trip.id == seeded["open"]).values(end_km=1200))
    with pytest.raises(TripSourceError):
        await SqlTripSource(db_session).fetch_trips()


@pytest.mark.asyncio
async def test_close_trip(db_session, seeded):
    result = await TripLifecycleService.close_trip(
        db_session, seeded["open"],
        TripClose(end_km=1180, purchased_fuel_l=60, price_per_liter=650,
                  fees=[FeeCreate(label="toll", amount=3000)]),
    )
    assert result.trip.status == TripStatus.CLOSED
    assert [f.amount for f in result.trip.fees] == [3000]
    assert result.metrics.distance_km == 180
    assert result.metrics.fuel_variance_l == 15
    assert result.metrics.fuel_cost == 39000
    assert (await db_session.get(Vehicle, seeded["vehicle"])).current_km == 1180
    assert (await db_session.get(Driver, seeded["driver"])).status == DriverStatus.ACTIVE

    with pytest.raises(TripStateError):
        await TripLifecycleService.close_trip(db_session, seeded["open"], TripClose(end_km=1300))


@pytest.mark.asyncio
async def test_close_trip_keeps_higher_odometer(db_session, seeded):
    vehicle = await db_session.get(Vehicle, seeded["vehicle"])
    vehicle.current_km = 5000
    await TripLifecycleService.close_trip(db_session, seeded["open"], TripClose(end_km=1100))
    assert vehicle.current_km == 5000


@pytest.mark.asyncio
async def test_close_trip_errors(db_session, seeded):
    with pytest.raises(TripNotFoundError):
        await TripLifecycleService.close_trip(db_session, 999, TripClose(end_km=1100))
    with pytest.raises(TripValidationError):
        await TripLifecycleService.close_trip(db_session, seeded["open"], TripClose(end_km=1000))


@pytest.mark.asyncio
async def test_close_endpoint(db_session, seeded):
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.post(f"/api/trips/{seeded['open']}/close", json={"end_km": 1150})
            assert resp.status_code == 200
            assert resp.json()["trip"]["status"] == "closed"
            assert resp.json()["metrics"]["distance_km"] == 150

            resp = await ac.post(f"/api/trips/{seeded['open']}/close", json={"end_km": 1200})
            assert resp.status_code == 409

            resp = await ac.post(f"/api/trips/{seeded['closed']}/close", json={"end_km": 100})
            assert resp.status_code == 409

            resp = await ac.post("/api/trips/999/close", json={"end_km": 100})
            assert resp.status_code == 404
    finally:
        app.dependency_overrides.clear()
