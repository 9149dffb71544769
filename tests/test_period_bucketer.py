"""Tests du decoupage mensuel / Monthly bucketing tests."""

import datetime as dt

from fleetops.schemas.records import MissionRecord
from fleetops.services.period_bucketer import PeriodBucketerService


def test_sparse_months(make_trip):
    trips = [make_trip(1, date="2024-03-12", km=10), make_trip(2, date="2024-01-05", km=20)]
    series = PeriodBucketerService.monthly_series(1, trips)
    assert [b.month for b in series] == ["2024-01", "2024-03"]
    assert series[0].total_km == 20
    assert series[1].trip_count == 1


def test_month_key():
    assert PeriodBucketerService.month_key(dt.date(2024, 2, 29)) == "2024-02"


def test_monthly_costs_with_missions(make_trip):
    trips = [
        make_trip(1, date="2024-01-05", km=100, purchased=30, price=600, fees=(500,)),
        make_trip(2, date="2024-02-05", km=100, purchased=10, price=600),
    ]
    missions = [
        MissionRecord(id=1, date=dt.date(2024, 2, 20), subcontractor_name="TransKam", transport_cost=40000),
        MissionRecord(id=2, date=dt.date(2024, 4, 2), subcontractor_name="TransKam", transport_cost=10000),
    ]
    costs = PeriodBucketerService.monthly_costs(trips, missions)
    assert [c.month for c in costs] == ["2024-01", "2024-02", "2024-04"]
    assert costs[0].fuel == 18000
    assert costs[0].fees == 500
    assert costs[0].total == 18500
    assert costs[1].subcontracting == 40000
    assert costs[1].total == 46000
    assert costs[2].total == 10000
