"""
Service d'agregation par chauffeur / vehicule / Per-driver / per-vehicle aggregation service.
Un seul passage sur les trajets, aucune comparaison ni classement ici.
A single pass over the trips, no ranking or comparison here.
"""

import datetime as dt
from collections.abc import Iterable
from typing import Literal

from fleetops.schemas.records import TripRecord
from fleetops.schemas.stats import AggregateStat
from fleetops.services.trip_metrics import TripMetricsService

EntityKey = Literal["driver", "vehicle"]

_KEY_ATTRS = {"driver": "driver_id", "vehicle": "vehicle_id"}


def in_window(day: dt.date, date_from: dt.date | None, date_to: dt.date | None) -> bool:
    """Fenetre inclusive [from, to], bornes optionnelles / Inclusive window, optional bounds."""
    if date_from is not None and day < date_from:
        return False
    if date_to is not None and day > date_to:
        return False
    return True


class EntityStatsService:
    """Statistiques d'entite / Entity statistics."""

    @staticmethod
    def aggregate(
        entity_id: int | None,
        trips: Iterable[TripRecord],
        date_from: dt.date | None = None,
        date_to: dt.date | None = None,
    ) -> AggregateStat:
        """
        Replier les trajets d'une entite / Fold the trips of one entity.

        Les trajets doivent deja etre filtres sur l'entite. Aucun trajet donne un
        enregistrement a zero, pas une erreur.
        Trips must already be filtered to the entity. No trip yields an all-zero
        record, not an error.
        """
        trip_count = 0
        total_km = 0.0
        total_containers = 0
        total_fuel_l = 0.0
        consumption_sum = 0.0
        consumption_count = 0
        total_fuel_cost = 0.0
        total_fee_cost = 0.0

        for trip in trips:
            if not in_window(trip.date, date_from, date_to):
                continue
            metrics = TripMetricsService.compute(trip)
            trip_count += 1
            total_km += metrics.distance_km
            total_containers += metrics.container_count
            total_fuel_l += trip.purchased_fuel_l or 0.0
            if metrics.consumption_l_100km is not None:
                consumption_sum += metrics.consumption_l_100km
                consumption_count += 1
            total_fuel_cost += metrics.fuel_cost
            total_fee_cost += metrics.fee_cost

        return AggregateStat(
            entity_id=entity_id,
            trip_count=trip_count,
            total_km=total_km,
            total_containers=total_containers,
            total_fuel_l=total_fuel_l,
            consumption_sum=consumption_sum,
            consumption_count=consumption_count,
            average_consumption=consumption_sum / trip_count if trip_count else 0.0,
            efficiency_consumption=consumption_sum / consumption_count if consumption_count else 0.0,
            total_fuel_cost=total_fuel_cost,
            total_fee_cost=total_fee_cost,
            total_cost=total_fuel_cost + total_fee_cost,
        )

    @staticmethod
    def group_by_entity(trips: Iterable[TripRecord], key: EntityKey) -> dict[int, list[TripRecord]]:
        """
        Regrouper par chauffeur ou vehicule, ordre d'entree conserve.
        Group by driver or vehicle, input order preserved. Trips without a
        reference are left out.
        """
        attr = _KEY_ATTRS[key]
        groups: dict[int, list[TripRecord]] = {}
        for trip in trips:
            entity_id = getattr(trip, attr)
            if entity_id is None:
                continue
            groups.setdefault(entity_id, []).append(trip)
        return groups

    @classmethod
    def aggregate_all(
        cls,
        trips: Iterable[TripRecord],
        key: EntityKey,
        date_from: dt.date | None = None,
        date_to: dt.date | None = None,
    ) -> list[AggregateStat]:
        """Statistiques de toutes les entites, triees par id / Stats for every entity, sorted by id."""
        windowed = (t for t in trips if in_window(t.date, date_from, date_to))
        groups = cls.group_by_entity(windowed, key)
        return [cls.aggregate(entity_id, groups[entity_id]) for entity_id in sorted(groups)]
