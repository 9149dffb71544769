"""Tests du calcul des metriques trajet / Trip metrics tests."""

import pytest

from fleetops.services.alert_evaluator import AlertEvaluatorService
from fleetops.services.trip_metrics import TripMetricsService, as_number


def test_reference_trip(make_trip):
    trip = make_trip(1, start_km=1000, end_km=1150, planned=40, purchased=55, price=650)
    m = TripMetricsService.compute(trip)
    assert m.distance_km == 150
    assert m.fuel_variance_l == 15
    assert m.consumption_l_100km == pytest.approx(36.67, abs=0.01)
    assert m.fuel_cost == 35750
    assert m.total_cost == 35750
    assert AlertEvaluatorService.fuel_variance_alert(m.fuel_variance_l)


def test_distance():
    assert TripMetricsService.distance(1000, 1150) == 150
    assert TripMetricsService.distance(1000, None) == 0
    assert TripMetricsService.distance(1000, 1000) == 0
    assert TripMetricsService.distance(1000, 900) == 0
    assert TripMetricsService.distance(None, 900) == 0


def test_fuel_variance_keeps_sign():
    assert TripMetricsService.fuel_variance(50, 42) == -8
    assert TripMetricsService.fuel_variance(None, 42) is None
    assert TripMetricsService.fuel_variance(50, None) is None


def test_consumption_undefined_without_distance():
    assert TripMetricsService.consumption_per_100(40, 0) is None
    assert TripMetricsService.consumption_per_100(None, 100) is None
    assert TripMetricsService.consumption_per_100(30, 100) == 30


def test_fuel_cost_missing_operand():
    assert TripMetricsService.fuel_cost(None, 650) == 0
    assert TripMetricsService.fuel_cost(40, None) == 0
    assert TripMetricsService.fuel_cost(40, 650) == 26000


def test_total_cost_with_fees(make_trip):
    trip = make_trip(1, km=100, purchased=30, price=600, fees=(2000, 1500))
    m = TripMetricsService.compute(trip)
    assert m.fee_cost == 3500
    assert m.total_cost == 18000 + 3500
    assert TripMetricsService.total_cost(100, [10, 20]) == 130


def test_open_trip_degrades(make_trip):
    trip = make_trip(1, planned=40)
    m = TripMetricsService.compute(trip)
    assert m.distance_km == 0
    assert m.consumption_l_100km is None
    assert m.fuel_variance_l is None
    assert m.fuel_cost == 0


def test_container_count(make_trip):
    assert TripMetricsService.compute(make_trip(1, containers=3)).container_count == 3
    assert TripMetricsService.container_count(None) == 0


def test_as_number():
    assert as_number("12.5") == 12.5
    assert as_number(float("nan")) is None
    assert as_number(float("inf")) is None
    assert as_number("abc") is None
    assert as_number(True) is None
    assert as_number(None) is None
