"""
Service de decoupage mensuel / Monthly bucketing service.
Series chronologiques creuses : un mois sans trajet n'apparait pas.
Sparse time series: a month without trips is omitted.
"""

import datetime as dt
from collections.abc import Iterable

from fleetops.schemas.records import MissionRecord, TripRecord
from fleetops.schemas.report import MonthlyCost
from fleetops.schemas.stats import MonthlyBucket
from fleetops.services.entity_stats import EntityStatsService
from fleetops.services.trip_metrics import TripMetricsService


class PeriodBucketerService:
    """Regroupement par mois calendaire / Calendar-month grouping."""

    @staticmethod
    def month_key(day: dt.date) -> str:
        """Cle YYYY-MM depuis la date du trajet / YYYY-MM key from the trip date."""
        return f"{day.year:04d}-{day.month:02d}"

    @classmethod
    def bucket(cls, trips: Iterable[TripRecord]) -> dict[str, list[TripRecord]]:
        """Trajets par mois, mois croissants / Trips per month, ascending months."""
        buckets: dict[str, list[TripRecord]] = {}
        for trip in trips:
            buckets.setdefault(cls.month_key(trip.date), []).append(trip)
        return dict(sorted(buckets.items()))

    @classmethod
    def monthly_series(cls, entity_id: int | None, trips: Iterable[TripRecord]) -> list[MonthlyBucket]:
        """Evolution mensuelle d'une entite / Monthly evolution of one entity."""
        return [
            MonthlyBucket(month=month, **EntityStatsService.aggregate(entity_id, month_trips).model_dump())
            for month, month_trips in cls.bucket(trips).items()
        ]

    @classmethod
    def monthly_costs(
        cls,
        trips: Iterable[TripRecord],
        missions: Iterable[MissionRecord] = (),
    ) -> list[MonthlyCost]:
        """Couts par mois : carburant, frais, sous-traitance / Monthly fuel, fees and subcontracting costs."""
        months: dict[str, dict[str, float]] = {}

        def slot(day: dt.date) -> dict[str, float]:
            return months.setdefault(cls.month_key(day), {"fuel": 0.0, "fees": 0.0, "subcontracting": 0.0})

        for trip in trips:
            metrics = TripMetricsService.compute(trip)
            data = slot(trip.date)
            data["fuel"] += metrics.fuel_cost
            data["fees"] += metrics.fee_cost

        for mission in missions:
            slot(mission.date)["subcontracting"] += mission.transport_cost

        return [
            MonthlyCost(
                month=month,
                fuel=round(data["fuel"], 2),
                fees=round(data["fees"], 2),
                subcontracting=round(data["subcontracting"], 2),
                total=round(data["fuel"] + data["fees"] + data["subcontracting"], 2),
            )
            for month, data in sorted(months.items())
        ]
