"""Tests API / API tests."""

import datetime as dt

import pytest
from httpx import ASGITransport, AsyncClient

from fleetops.api.deps import get_trip_source
from fleetops.exceptions import TripSourceError
from fleetops.main import app
from fleetops.schemas.records import MissionRecord, VehicleRecord
from fleetops.services.trip_source import InMemoryTripSource


@pytest.fixture
def source(make_trip, drivers, vehicles):
    trips = [
        make_trip(i, date=f"2024-01-{i + 4:02d}", driver_id=1 + i % 2, km=100, planned=30,
                  purchased=30, price=650, containers=i)
        for i in range(1, 5)
    ]
    trips.append(make_trip(5, date="2024-01-20", vehicle_id=2, km=100, planned=30, purchased=60, price=650))
    trips.append(make_trip(6, date="2023-12-20", km=100, purchased=30, price=650))
    missions = [MissionRecord(id=1, date=dt.date(2024, 1, 10), subcontractor_name="TransKam", transport_cost=100000)]
    return InMemoryTripSource(trips, drivers, vehicles, missions)


@pytest.fixture
async def client(source):
    app.dependency_overrides[get_trip_source] = lambda: source
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.mark.asyncio
async def test_root(client):
    resp = await client.get("/api/")
    assert resp.status_code == 200
    assert resp.json()["status"] == "running"
    assert "X-Request-ID" in resp.headers


@pytest.mark.asyncio
async def test_monthly_report(client):
    resp = await client.get("/api/reports/monthly", params={"date_from": "2024-01-01", "date_to": "2024-01-31"})
    assert resp.status_code == 200
    data = resp.json()
    kpis = data["executive_summary"]["kpis"]
    assert kpis["total_trips"] == 5
    assert kpis["trips_change"] == 400
    assert kpis["active_alerts"] == 1
    assert data["detailed_trips"] is None
    assert data["fleet_performance"]["top_drivers"][0]["id"] == 1


@pytest.mark.asyncio
async def test_monthly_report_with_trips(client):
    resp = await client.get(
        "/api/reports/monthly",
        params={"date_from": "2024-01-01", "date_to": "2024-01-31", "include_trips": True},
    )
    rows = resp.json()["detailed_trips"]
    assert [r["id"] for r in rows] == [5, 4, 3, 2, 1]


@pytest.mark.asyncio
async def test_invalid_period(client):
    resp = await client.get("/api/reports/monthly", params={"date_from": "2024-02-01", "date_to": "2024-01-01"})
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_export_xlsx(client):
    resp = await client.get(
        "/api/reports/monthly/export",
        params={"date_from": "2024-01-01", "date_to": "2024-01-31", "format": "xlsx"},
    )
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("application/vnd.openxmlformats")
    assert resp.content[:2] == b"PK"


@pytest.mark.asyncio
async def test_export_csv(client):
    resp = await client.get(
        "/api/reports/monthly/export",
        params={"date_from": "2024-01-01", "date_to": "2024-01-31", "format": "csv"},
    )
    assert resp.status_code == 200
    assert 'filename="fleet-report-2024-01-01-2024-01-31.csv"' in resp.headers["content-disposition"]
    assert len(resp.content.decode("utf-8-sig").splitlines()) == 6


@pytest.mark.asyncio
async def test_driver_stats(client):
    resp = await client.get("/api/stats/drivers/2", params={"date_from": "2024-01-01", "date_to": "2024-01-31"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["entity_id"] == 2
    assert data["trip_count"] == 2
    assert data["total_containers"] == 4

    resp = await client.get("/api/stats/drivers/99")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_vehicle_stats(client):
    resp = await client.get("/api/stats/vehicles/1")
    assert resp.status_code == 200
    assert resp.json()["trip_count"] == 5


@pytest.mark.asyncio
async def test_vehicle_evolution(client):
    resp = await client.get("/api/stats/vehicles/1/evolution", params={"months": 3})
    assert resp.status_code == 200
    assert isinstance(resp.json(), list)

    resp = await client.get("/api/stats/vehicles/42/evolution")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_rankings(client):
    resp = await client.get("/api/stats/rankings/drivers/containers", params={"limit": 1})
    assert resp.json() == [
        {"rank": 1, "entity_id": 1, "label": "Paul Mballa", "value": 8.0, "trip_count": 4},
    ]

    resp = await client.get("/api/stats/rankings/vehicles/economical")
    assert [r["entity_id"] for r in resp.json()] == [1]

    resp = await client.get("/api/stats/rankings/vehicles/problematic")
    assert [r["label"] for r in resp.json()] == ["LT-101-AA"]

    resp = await client.get("/api/stats/rankings/drivers/economical")
    assert [r["entity_id"] for r in resp.json()] == [1]


@pytest.mark.asyncio
async def test_trip_alerts(client):
    resp = await client.get("/api/trips/5/alerts")
    assert resp.status_code == 200
    data = resp.json()
    assert data["trip_id"] == 5
    assert [a["kind"] for a in data["alerts"]] == ["fuel_variance"]
    assert data["alerts"][0]["severity"] == "critical"

    resp = await client.get("/api/trips/999/alerts")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_source_failure_maps_to_503(client, source):
    async def broken(*args, **kwargs):
        raise TripSourceError("database unreachable")

    source.fetch_trips = broken
    resp = await client.get("/api/reports/monthly", params={"date_from": "2024-01-01", "date_to": "2024-01-31"})
    assert resp.status_code == 503
    assert resp.json()["detail"] == "database unreachable"


@pytest.mark.asyncio
async def test_alert_feed(client):
    resp = await client.get("/api/alerts/")
    assert resp.status_code == 200
    assert [a["alert_id"] for a in resp.json()] == ["fuel-variance-5", "pending-payment-1"]

    resp = await client.get("/api/alerts/", params={"date_from": "2024-01-15", "limit": 5})
    assert [a["alert_id"] for a in resp.json()] == ["fuel-variance-5"]

    resp = await client.get("/api/alerts/", params={"limit": 0})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_pending_payments(client):
    resp = await client.get("/api/alerts/payments")
    data = resp.json()
    assert [a["mission_id"] for a in data] == [1]
    assert data[0]["severity"] == "critical"


@pytest.mark.asyncio
async def test_vehicle_maintenance_alerts(client, source):
    source.vehicles.append(VehicleRecord(id=3, plate="LT-303-CC", current_km=650_000))
    resp = await client.get("/api/alerts/vehicles/3")
    assert [a["kind"] for a in resp.json()] == ["high_mileage"]

    resp = await client.get("/api/alerts/vehicles/1")
    assert resp.json() == []

    resp = await client.get("/api/alerts/vehicles/42")
    assert resp.status_code == 404
