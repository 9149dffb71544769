"""
Service de calcul des metriques trajet / Trip metrics calculation service.
Distance, ecart carburant, consommation aux 100 km et couts.

Toutes les fonctions sont totales : une donnee absente ou invalide donne None
(metrique inconnue) ou 0 (montant nul), jamais une exception. Les trajets en
cours sont le plus souvent incomplets.
Every function is total: missing or invalid data yields None (unknown metric)
or 0 (zero amount), never an exception.
"""

import math
from collections.abc import Iterable
from typing import Any

from fleetops.schemas.records import TripRecord
from fleetops.schemas.stats import TripMetrics


def as_number(value: Any) -> float | None:
    """Convertir en nombre fini ou None / Coerce to a finite number or None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


class TripMetricsService:
    """Metriques derivees d'un trajet / Derived trip metrics."""

    @staticmethod
    def distance(start_km: Any, end_km: Any) -> int | float:
        """Distance parcourue en km, jamais negative / Distance travelled in km, never negative."""
        start, end = as_number(start_km), as_number(end_km)
        if start is None or end is None or end <= start:
            return 0
        km = end - start
        return int(km) if km.is_integer() else km

    @staticmethod
    def fuel_variance(planned_l: Any, purchased_l: Any) -> float | None:
        """
        Ecart de litrage / Fuel variance.
        Positif = plus achete que prevu / Positive = bought more than planned.
        """
        planned, purchased = as_number(planned_l), as_number(purchased_l)
        if planned is None or purchased is None:
            return None
        return purchased - planned

    @staticmethod
    def consumption_per_100(purchased_l: Any, distance_km: Any) -> float | None:
        """Consommation L/100 km / Consumption in L/100 km."""
        purchased, distance = as_number(purchased_l), as_number(distance_km)
        if purchased is None or distance is None or distance <= 0:
            return None
        return purchased / distance * 100

    @staticmethod
    def fuel_cost(purchased_l: Any, price_per_liter: Any) -> float:
        """Montant carburant, 0 sans achat / Fuel amount, 0 without a purchase."""
        purchased, price = as_number(purchased_l), as_number(price_per_liter)
        if purchased is None or price is None:
            return 0.0
        return purchased * price

    @staticmethod
    def fee_cost(fees: Iterable[Any] | None) -> float:
        """Somme des frais / Sum of fees (FeeRecord ou montants / or plain amounts)."""
        total = 0.0
        for fee in fees or ():
            amount = as_number(getattr(fee, "amount", fee))
            if amount is not None:
                total += amount
        return total

    @staticmethod
    def total_cost(fuel_cost: Any, fees: Iterable[Any] | None) -> float:
        """Cout total = carburant + frais / Total cost = fuel + fees."""
        return (as_number(fuel_cost) or 0.0) + TripMetricsService.fee_cost(fees)

    @staticmethod
    def container_count(containers: Iterable[Any] | None) -> int:
        """Nombre de conteneurs (quantites cumulees) / Container count (summed quantities)."""
        count = 0
        for container in containers or ():
            quantity = as_number(getattr(container, "quantity", 1))
            if quantity is not None and quantity > 0:
                count += int(quantity)
        return count

    @classmethod
    def compute(cls, trip: TripRecord) -> TripMetrics:
        """Toutes les metriques d'un trajet / All metrics of one trip."""
        distance = cls.distance(trip.start_km, trip.end_km)
        fuel_cost = cls.fuel_cost(trip.purchased_fuel_l, trip.price_per_liter)
        fee_cost = cls.fee_cost(trip.fees)
        return TripMetrics(
            distance_km=int(distance),
            fuel_variance_l=cls.fuel_variance(trip.planned_fuel_l, trip.purchased_fuel_l),
            consumption_l_100km=cls.consumption_per_100(trip.purchased_fuel_l, distance),
            fuel_cost=fuel_cost,
            fee_cost=fee_cost,
            total_cost=fuel_cost + fee_cost,
            container_count=cls.container_count(trip.containers),
        )
