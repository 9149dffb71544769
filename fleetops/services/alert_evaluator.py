"""
Service d'evaluation des alertes trajet / Trip alert evaluation service.

Trois alertes independantes par trajet :
- ecart carburant : |ecart| > 10 L (seuil fixe, non parametrable par vehicule)
- consommation anormale : > moyenne de reference x 1.3
- cout inhabituel : prix au litre > prix moyen x 1.2
Three independent per-trip alerts: fuel variance, abnormal consumption, unusual cost.

Hors trajet : solde de 10 % impaye des missions sous-traitees, kilometrage
eleve d'un vehicule. Le fil flotte regroupe les alertes recentes.
Beyond trips: unpaid 10 % mission balances and high vehicle mileage. The
fleet feed gathers recent alerts.
"""

import datetime as dt
import logging
from collections import defaultdict
from collections.abc import Iterable

from fleetops.config import settings
from fleetops.schemas.alert import (
    AlertFeedItem,
    AlertKind,
    AlertResult,
    AlertSeverity,
    FleetBaselines,
    RaisedAlert,
)
from fleetops.schemas.records import MissionRecord, TripRecord, VehicleRecord
from fleetops.schemas.stats import TripMetrics
from fleetops.services.trip_metrics import TripMetricsService, as_number

log = logging.getLogger(__name__)

FUEL_VARIANCE_THRESHOLD_L = 10.0
FUEL_VARIANCE_CRITICAL_L = 20.0
CONSUMPTION_FACTOR = 1.3
CONSUMPTION_CRITICAL_PCT = 50.0
PRICE_FACTOR = 1.2
# Echantillon minimal pour une moyenne vehicule / Minimum sample for a vehicle average
MIN_BASELINE_SAMPLE = 3

# Missions : solde de 10 % verse apres livraison / Missions: 10 % balance paid after delivery
BALANCE_SHARE = 0.10
PAYMENT_WARNING_DAYS = 15
PAYMENT_CRITICAL_DAYS = 30
HIGH_MILEAGE_KM = 500_000


class AlertEvaluatorService:
    """Detection des trajets anormaux / Anomalous trip detection."""

    @staticmethod
    def fuel_variance_alert(variance_l: float | None) -> bool:
        """Vrai si |ecart| > 10 L (borne exclue) / True when |variance| > 10 L (exclusive)."""
        variance = as_number(variance_l)
        if variance is None:
            return False
        return abs(variance) > FUEL_VARIANCE_THRESHOLD_L

    @staticmethod
    def abnormal_consumption_alert(consumption: float | None, baseline: float | None) -> bool:
        value, reference = as_number(consumption), as_number(baseline)
        if value is None or reference is None:
            return False
        return value > reference * CONSUMPTION_FACTOR

    @staticmethod
    def unusual_cost_alert(price_per_liter: float | None, baseline_price: float | None) -> bool:
        price, reference = as_number(price_per_liter), as_number(baseline_price)
        if price is None or reference is None:
            return False
        return price > reference * PRICE_FACTOR

    @classmethod
    def evaluate(
        cls,
        metrics: TripMetrics,
        price_per_liter: float | None = None,
        baselines: FleetBaselines | None = None,
        trip_id: int | None = None,
    ) -> AlertResult:
        """Evaluer les trois alertes d'un trajet / Evaluate the three alerts of a trip."""
        baselines = baselines or FleetBaselines()
        alerts: list[RaisedAlert] = []

        variance = metrics.fuel_variance_l
        if cls.fuel_variance_alert(variance):
            gap = abs(variance)
            alerts.append(RaisedAlert(
                kind=AlertKind.FUEL_VARIANCE,
                severity=AlertSeverity.CRITICAL if gap > FUEL_VARIANCE_CRITICAL_L else AlertSeverity.WARNING,
                message=f"Fuel variance of {gap:.1f} L between planned and purchased fuel",
            ))

        consumption = metrics.consumption_l_100km
        reference = baselines.consumption_l_100km
        if cls.abnormal_consumption_alert(consumption, reference):
            pct_above = (consumption - reference) / reference * 100 if reference else 0.0
            alerts.append(RaisedAlert(
                kind=AlertKind.ABNORMAL_CONSUMPTION,
                severity=AlertSeverity.CRITICAL if pct_above > CONSUMPTION_CRITICAL_PCT else AlertSeverity.WARNING,
                message=(
                    f"Consumption of {consumption:.2f} L/100km is {pct_above:.0f}% above "
                    f"the reference average ({reference:.2f} L/100km)"
                ),
            ))

        if cls.unusual_cost_alert(price_per_liter, baselines.price_per_liter):
            alerts.append(RaisedAlert(
                kind=AlertKind.UNUSUAL_COST,
                severity=AlertSeverity.WARNING,
                message=(
                    f"Price per liter {float(price_per_liter):.2f} exceeds the average "
                    f"({baselines.price_per_liter:.2f}) by more than 20%"
                ),
            ))

        return AlertResult(trip_id=trip_id, alerts=tuple(alerts))

    @staticmethod
    def fleet_baselines(trips: Iterable[TripRecord]) -> FleetBaselines:
        """
        Moyennes flotte : consommation (trajets avec taux calculable) et prix au litre.
        Fleet averages: consumption (trips with a computable rate) and price per liter.
        """
        consumptions: list[float] = []
        prices: list[float] = []
        for trip in trips:
            distance = TripMetricsService.distance(trip.start_km, trip.end_km)
            rate = TripMetricsService.consumption_per_100(trip.purchased_fuel_l, distance)
            if rate is not None:
                consumptions.append(rate)
            price = as_number(trip.price_per_liter)
            if price is not None:
                prices.append(price)
        return FleetBaselines(
            consumption_l_100km=sum(consumptions) / len(consumptions) if consumptions else None,
            price_per_liter=sum(prices) / len(prices) if prices else None,
        )

    @staticmethod
    def vehicle_consumption_baselines(trips: Iterable[TripRecord]) -> dict[int, float]:
        """
        Consommation moyenne par vehicule (3 trajets mesures minimum).
        Average consumption per vehicle (at least 3 measured trips).
        """
        rates: dict[int, list[float]] = defaultdict(list)
        for trip in trips:
            if trip.vehicle_id is None:
                continue
            distance = TripMetricsService.distance(trip.start_km, trip.end_km)
            rate = TripMetricsService.consumption_per_100(trip.purchased_fuel_l, distance)
            if rate is not None:
                rates[trip.vehicle_id].append(rate)
        return {
            vid: sum(values) / len(values)
            for vid, values in rates.items()
            if len(values) >= MIN_BASELINE_SAMPLE
        }

    @classmethod
    def evaluate_trips(cls, trips: Iterable[TripRecord]) -> dict[int, AlertResult]:
        """
        Evaluer un lot de trajets : consommation comparee a la moyenne du vehicule,
        prix compare a la moyenne flotte.
        Evaluate a batch: consumption against the vehicle average, price against
        the fleet average.
        """
        trips = list(trips)
        fleet = cls.fleet_baselines(trips)
        per_vehicle = cls.vehicle_consumption_baselines(trips)

        results: dict[int, AlertResult] = {}
        for trip in trips:
            baselines = FleetBaselines(
                consumption_l_100km=per_vehicle.get(trip.vehicle_id),
                price_per_liter=fleet.price_per_liter,
            )
            metrics = TripMetricsService.compute(trip)
            results[trip.id] = cls.evaluate(metrics, trip.price_per_liter, baselines, trip_id=trip.id)

        raised = sum(1 for r in results.values() if r.has_alerts)
        log.debug("Evaluated %d trips, %d with alerts", len(results), raised)
        return results

    # ── Alertes hors trajet / Non-trip alerts ───────────────────────

    @staticmethod
    def payment_severity(days_overdue: int) -> AlertSeverity:
        """> 30 j critique, > 15 j avertissement, sinon info / > 30 d critical, > 15 d warning, else info."""
        if days_overdue > PAYMENT_CRITICAL_DAYS:
            return AlertSeverity.CRITICAL
        if days_overdue > PAYMENT_WARNING_DAYS:
            return AlertSeverity.WARNING
        return AlertSeverity.INFO

    @classmethod
    def pending_payment_alerts(
        cls,
        missions: Iterable[MissionRecord],
        today: dt.date | None = None,
    ) -> list[AlertFeedItem]:
        """
        Missions dont le solde de 10 % reste impaye, plus anciennes en premier.
        Missions whose 10 % balance is still unpaid, oldest first.
        """
        today = today or dt.date.today()
        alerts = []
        for mission in sorted(missions, key=lambda m: (m.date, m.id)):
            balance = mission.transport_cost * BALANCE_SHARE
            if mission.balance_paid or balance <= 0:
                continue
            days = max((today - mission.date).days, 0)
            message = (
                f"Balance of {balance:,.0f} {settings.CURRENCY_LABEL} for {mission.subcontractor_name} "
                f"pending for {days} days"
            )
            if not mission.advance_paid:
                message += " (advance not paid either)"
            alerts.append(AlertFeedItem(
                alert_id=f"pending-payment-{mission.id}",
                kind=AlertKind.PENDING_PAYMENT,
                severity=cls.payment_severity(days),
                message=message,
                date=mission.date,
                mission_id=mission.id,
            ))
        return alerts

    @staticmethod
    def maintenance_alerts(vehicle: VehicleRecord, today: dt.date | None = None) -> list[AlertFeedItem]:
        """Kilometrage > 500 000 km / Mileage above 500,000 km."""
        if vehicle.current_km <= HIGH_MILEAGE_KM:
            return []
        return [AlertFeedItem(
            alert_id=f"high-mileage-{vehicle.id}",
            kind=AlertKind.HIGH_MILEAGE,
            severity=AlertSeverity.WARNING,
            message=f"High mileage ({vehicle.current_km:,} km) - major service recommended",
            date=today or dt.date.today(),
            vehicle_id=vehicle.id,
        )]

    @classmethod
    def active_alerts(
        cls,
        trips: Iterable[TripRecord],
        missions: Iterable[MissionRecord] = (),
        limit: int = 10,
        today: dt.date | None = None,
    ) -> list[AlertFeedItem]:
        """
        Fil des alertes : alertes trajet et paiements en attente, plus recentes
        en premier, tronque a limit.
        Alert feed: trip alerts and pending payments, newest first, cut to limit.
        """
        trips = list(trips)
        results = cls.evaluate_trips(trips)

        feed: list[AlertFeedItem] = []
        for trip in trips:
            for alert in results[trip.id].alerts:
                feed.append(AlertFeedItem(
                    alert_id=f"{alert.kind.value.replace('_', '-')}-{trip.id}",
                    kind=alert.kind,
                    severity=alert.severity,
                    message=alert.message,
                    date=trip.date,
                    trip_id=trip.id,
                    vehicle_id=trip.vehicle_id,
                ))
        feed.extend(cls.pending_payment_alerts(missions, today))

        feed.sort(key=lambda a: a.date, reverse=True)
        return feed[:max(limit, 0)]
