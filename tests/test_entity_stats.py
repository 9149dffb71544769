"""Tests des agregats chauffeur / vehicule / Entity aggregate tests."""

import datetime as dt

from fleetops.schemas.stats import AggregateStat
from fleetops.services.entity_stats import EntityStatsService, in_window


def test_no_trip_gives_zero_record():
    stat = EntityStatsService.aggregate(5, [])
    assert stat == AggregateStat(entity_id=5)
    assert stat.average_consumption == 0


def test_average_consumption_counts_every_trip(make_trip):
    trips = [
        make_trip(1, km=100, purchased=30, price=600, fees=(1000,), containers=2),
        make_trip(2),
    ]
    stat = EntityStatsService.aggregate(1, trips)
    assert stat.trip_count == 2
    assert stat.total_km == 100
    assert stat.total_containers == 3
    assert stat.consumption_sum == 30
    assert stat.consumption_count == 1
    assert stat.average_consumption == 15
    assert stat.efficiency_consumption == 30
    assert stat.total_fuel_cost == 18000
    assert stat.total_cost == 19000


def test_window_is_inclusive(make_trip):
    trips = [
        make_trip(1, date="2024-01-01", km=10),
        make_trip(2, date="2024-01-31", km=20),
        make_trip(3, date="2024-02-01", km=40),
    ]
    stat = EntityStatsService.aggregate(1, trips, dt.date(2024, 1, 1), dt.date(2024, 1, 31))
    assert stat.trip_count == 2
    assert stat.total_km == 30
    assert in_window(dt.date(2024, 1, 1), None, None)


def test_group_by_entity_keeps_order(make_trip):
    trips = [
        make_trip(1, driver_id=2),
        make_trip(2, driver_id=1),
        make_trip(3, driver_id=2),
        make_trip(4, driver_id=None),
    ]
    groups = EntityStatsService.group_by_entity(trips, "driver")
    assert list(groups) == [2, 1]
    assert [t.id for t in groups[2]] == [1, 3]


def test_aggregate_all_sorted_and_windowed(make_trip):
    trips = [
        make_trip(1, vehicle_id=3, date="2024-01-10", km=50),
        make_trip(2, vehicle_id=1, date="2024-01-11", km=70),
        make_trip(3, vehicle_id=2, date="2023-12-11", km=70),
    ]
    stats = EntityStatsService.aggregate_all(trips, "vehicle", dt.date(2024, 1, 1), dt.date(2024, 1, 31))
    assert [s.entity_id for s in stats] == [1, 3]
    assert stats[1].total_km == 50
