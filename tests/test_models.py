"""Tests des modèles / Model tests."""

import pytest
from pydantic import ValidationError

from fleetops.models.driver import Driver, DriverStatus
from fleetops.models.trip import DeliveryStatus, Trip, TripStatus
from fleetops.models.vehicle import FuelType, VehicleStatus
from fleetops.schemas.records import DriverRecord, TripRecord


def test_trip_repr():
    t = Trip(id=1, number="TR-0001", date="2024-01-05", start_km=1000)
    assert "TR-0001" in repr(t)


def test_driver_repr():
    d = Driver(id=1, last_name="Mballa", first_name="Paul")
    assert "Mballa" in repr(d)


def test_enums():
    assert DriverStatus.ON_TRIP.value == "on_trip"
    assert VehicleStatus.IN_REPAIR.value == "in_repair"
    assert FuelType.DIESEL.value == "diesel"
    assert TripStatus.CLOSED.value == "closed"
    assert DeliveryStatus.DELIVERED.value == "delivered"


def test_record_rejects_backwards_odometer():
    with pytest.raises(ValidationError):
        TripRecord(id=1, date="2024-01-05", start_km=1000, end_km=900, status=TripStatus.CLOSED)


def test_open_record_has_no_end_odometer():
    with pytest.raises(ValidationError):
        TripRecord(id=1, date="2024-01-05", start_km=1000, end_km=1100)


def test_record_is_frozen():
    record = TripRecord(id=1, date="2024-01-05", start_km=1000)
    with pytest.raises(ValidationError):
        record.start_km = 10


def test_driver_full_name():
    assert DriverRecord(id=1, last_name="Mballa", first_name="Paul").full_name == "Paul Mballa"
    assert DriverRecord(id=2, last_name="Nkoulou").full_name == "Nkoulou"
