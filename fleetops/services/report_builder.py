"""
Service de construction du rapport flotte / Fleet report builder service.

Transformation pure sur des collections deja chargees : resume executif
(KPI + variation vs periode precedente), performance flotte (classements),
analyse financiere et trajets detailles. Aucune E/S.
Pure transform over already-fetched collections. No I/O.
"""

import datetime as dt
import logging
from collections.abc import Iterable, Sequence

from fleetops.config import settings
from fleetops.schemas.alert import AlertResult
from fleetops.schemas.records import DriverRecord, MissionRecord, TripRecord, VehicleRecord
from fleetops.schemas.report import (
    CostCategoryShare,
    CostTotals,
    DestinationCost,
    DriverPerformance,
    ExecutiveSummary,
    FinancialAnalysis,
    FinancialAverages,
    FleetAverages,
    FleetPerformance,
    KpiSnapshot,
    Report,
    ReportPeriod,
    ReportTrip,
    Trend,
    VehiclePerformance,
)
from fleetops.schemas.stats import AggregateStat, TripMetrics
from fleetops.services.alert_evaluator import AlertEvaluatorService
from fleetops.services.entity_stats import EntityStatsService
from fleetops.services.period_bucketer import PeriodBucketerService
from fleetops.services.ranking import MIN_EFFICIENCY_SAMPLE, RankingService
from fleetops.services.trip_metrics import TripMetricsService

log = logging.getLogger(__name__)

# Seuils de tendance et de faits marquants / Trend and highlight thresholds
CONSUMPTION_TREND_BAND_PCT = 5.0
COST_TREND_BAND_PCT = 10.0
HIGHLIGHT_TRIPS_CHANGE_PCT = 10.0
HIGHLIGHT_FUEL_COST_CHANGE_PCT = 15.0
HIGHLIGHT_ALERT_COUNT = 5

UNKNOWN_DESTINATION = "Unknown"


def percent_change(current: float, previous: float) -> float:
    """
    Variation en % / Percentage change.
    100 si precedent = 0 et courant > 0 ; 0 si les deux sont nuls.
    100 when previous is 0 and current positive; 0 when both are 0.
    """
    if previous == 0:
        if current > 0:
            return 100.0
        if current < 0:
            return -100.0
        return 0.0
    return (current - previous) / previous * 100


def trend(current: float, previous: float, band_pct: float) -> Trend:
    """Tendance hors bande morte de +/- band_pct % / Trend outside a +/- band_pct % dead band."""
    if previous <= 0:
        return Trend.STABLE
    change = percent_change(current, previous)
    if change > band_pct:
        return Trend.UP
    if change < -band_pct:
        return Trend.DOWN
    return Trend.STABLE


def _safe_div(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator else 0.0


class _PeriodTotals:
    """Totaux d'un lot de trajets / Totals of a batch of trips."""

    def __init__(self, trips: Sequence[TripRecord], metrics: dict[int, TripMetrics], alerts: dict[int, AlertResult]):
        self.trips = len(trips)
        self.containers = sum(metrics[t.id].container_count for t in trips)
        self.fuel_cost = sum(metrics[t.id].fuel_cost for t in trips)
        self.fee_cost = sum(metrics[t.id].fee_cost for t in trips)
        self.total_cost = self.fuel_cost + self.fee_cost
        consumption_sum = sum(metrics[t.id].consumption_l_100km or 0.0 for t in trips)
        self.average_consumption = _safe_div(consumption_sum, self.trips)
        self.alerts = sum(1 for t in trips if alerts[t.id].has_alerts)


class ReportBuilderService:
    """Assemblage du rapport / Report assembly."""

    def __init__(
        self,
        top_drivers: int = settings.REPORT_TOP_DRIVERS,
        top_vehicles: int = settings.REPORT_TOP_VEHICLES,
        bottom_vehicles: int = settings.REPORT_BOTTOM_VEHICLES,
        top_destinations: int = settings.REPORT_TOP_DESTINATIONS,
        bottom_drivers: int = settings.REPORT_BOTTOM_DRIVERS,
    ):
        self.top_drivers = top_drivers
        self.bottom_drivers = bottom_drivers
        self.top_vehicles = top_vehicles
        self.bottom_vehicles = bottom_vehicles
        self.top_destinations = top_destinations

    # ── Periodes / Periods ──────────────────────────────────────────

    @staticmethod
    def previous_period(date_from: dt.date, date_to: dt.date) -> tuple[dt.date, dt.date]:
        """Periode precedente de meme longueur / Preceding period of equal length."""
        length = max((date_to - date_from).days + 1, 1)
        return date_from - dt.timedelta(days=length), date_from - dt.timedelta(days=1)

    @staticmethod
    def period_label(date_from: dt.date, date_to: dt.date) -> str:
        return f"{date_from.day} {date_from:%b} - {date_to.day} {date_to:%b %Y}"

    # ── Construction / Build ────────────────────────────────────────

    def build(
        self,
        date_from: dt.date,
        date_to: dt.date,
        trips: Iterable[TripRecord],
        previous_trips: Iterable[TripRecord] = (),
        drivers: Iterable[DriverRecord] = (),
        vehicles: Iterable[VehicleRecord] = (),
        missions: Iterable[MissionRecord] | None = None,
        include_trips: bool = False,
        generated_at: dt.datetime | None = None,
    ) -> Report:
        """Construire le rapport complet / Build the complete report."""
        trips = list(trips)
        previous_trips = list(previous_trips)
        driver_map = {d.id: d for d in drivers}
        vehicle_map = {v.id: v for v in vehicles}

        metrics = {t.id: TripMetricsService.compute(t) for t in trips}
        alerts = AlertEvaluatorService.evaluate_trips(trips)
        previous_metrics = {t.id: TripMetricsService.compute(t) for t in previous_trips}
        previous_alerts = AlertEvaluatorService.evaluate_trips(previous_trips)

        summary = self.executive_summary(
            date_from, date_to,
            _PeriodTotals(trips, metrics, alerts),
            _PeriodTotals(previous_trips, previous_metrics, previous_alerts),
        )
        fleet = self.fleet_performance(trips, alerts, driver_map, vehicle_map)
        financial = self.financial_analysis(date_from, date_to, trips, metrics, missions)
        detailed = self.detailed_trips(trips, metrics, alerts, driver_map, vehicle_map) if include_trips else None

        log.info(
            "Report %s..%s built: %d trips (%d previous), %d alerts",
            date_from, date_to, len(trips), len(previous_trips), summary.kpis.active_alerts,
        )
        return Report(
            executive_summary=summary,
            fleet_performance=fleet,
            financial_analysis=financial,
            detailed_trips=detailed,
            generated_at=generated_at or dt.datetime.now(),
        )

    # ── Resume executif / Executive summary ─────────────────────────

    def executive_summary(
        self,
        date_from: dt.date,
        date_to: dt.date,
        current: _PeriodTotals,
        previous: _PeriodTotals,
    ) -> ExecutiveSummary:
        prev_from, prev_to = self.previous_period(date_from, date_to)
        kpis = KpiSnapshot(
            total_trips=current.trips,
            trips_change=round(percent_change(current.trips, previous.trips), 2),
            total_containers=current.containers,
            containers_change=round(percent_change(current.containers, previous.containers), 2),
            total_cost=round(current.total_cost, 2),
            cost_change=round(percent_change(current.total_cost, previous.total_cost), 2),
            total_fuel_cost=round(current.fuel_cost, 2),
            fuel_cost_change=round(percent_change(current.fuel_cost, previous.fuel_cost), 2),
            total_fee_cost=round(current.fee_cost, 2),
            fee_cost_change=round(percent_change(current.fee_cost, previous.fee_cost), 2),
            average_consumption=round(current.average_consumption, 2),
            consumption_change=round(
                percent_change(current.average_consumption, previous.average_consumption), 2
            ),
            consumption_trend=trend(
                current.average_consumption, previous.average_consumption, CONSUMPTION_TREND_BAND_PCT
            ),
            active_alerts=current.alerts,
            alerts_change=round(percent_change(current.alerts, previous.alerts), 2),
        )
        return ExecutiveSummary(
            period=ReportPeriod(
                date_from=date_from, date_to=date_to, label=self.period_label(date_from, date_to)
            ),
            previous_period=ReportPeriod(
                date_from=prev_from, date_to=prev_to, label=self.period_label(prev_from, prev_to)
            ),
            kpis=kpis,
            highlights=tuple(self.highlights(kpis)),
        )

    @staticmethod
    def highlights(kpis: KpiSnapshot) -> list[str]:
        """Faits marquants / Key insights."""
        lines = []
        if abs(kpis.trips_change) > HIGHLIGHT_TRIPS_CHANGE_PCT:
            direction = "up" if kpis.trips_change > 0 else "down"
            lines.append(f"Trips {direction} {abs(kpis.trips_change):.1f}% vs previous period")
        if abs(kpis.fuel_cost_change) > HIGHLIGHT_FUEL_COST_CHANGE_PCT:
            direction = "up" if kpis.fuel_cost_change > 0 else "down"
            lines.append(f"Fuel cost {direction} {abs(kpis.fuel_cost_change):.1f}% vs previous period")
        if kpis.active_alerts > HIGHLIGHT_ALERT_COUNT:
            lines.append(f"{kpis.active_alerts} trips with active alerts need attention")
        if kpis.consumption_trend == Trend.UP:
            lines.append("Average consumption rising - analysis recommended")
        elif kpis.consumption_trend == Trend.DOWN:
            lines.append("Average consumption improving")
        return lines

    # ── Performance flotte / Fleet performance ──────────────────────

    def fleet_performance(
        self,
        trips: Sequence[TripRecord],
        alerts: dict[int, AlertResult],
        driver_map: dict[int, DriverRecord],
        vehicle_map: dict[int, VehicleRecord],
    ) -> FleetPerformance:
        driver_stats = {s.entity_id: s for s in EntityStatsService.aggregate_all(trips, "driver")}
        vehicle_stats = {s.entity_id: s for s in EntityStatsService.aggregate_all(trips, "vehicle")}
        # Chauffeurs : au moins un trajet mesure ; vehicules : candidats du classement
        # Drivers: at least one measured trip; vehicles: efficiency ranking candidates
        driver_scores = RankingService.efficiency_scores(driver_stats.values())
        vehicle_scores = RankingService.efficiency_scores(
            vehicle_stats.values(), cost_attr="total_fuel_cost", min_sample=MIN_EFFICIENCY_SAMPLE
        )

        vehicle_alerts: dict[int, int] = {}
        for trip in trips:
            if trip.vehicle_id is not None and alerts[trip.id].has_alerts:
                vehicle_alerts[trip.vehicle_id] = vehicle_alerts.get(trip.vehicle_id, 0) + 1

        driver_ranking = RankingService.by_volume(driver_stats.values())
        top_drivers = [
            self._driver_row(entry.rank, driver_stats[entry.entity_id], driver_map, driver_scores)
            for entry in driver_ranking[:max(self.top_drivers, 0)]
        ]
        # Fin du classement, dernier en premier / Tail of the ranking, last first
        tail = driver_ranking[-self.bottom_drivers:] if self.bottom_drivers > 0 else []
        bottom_drivers = [
            self._driver_row(entry.rank, driver_stats[entry.entity_id], driver_map, driver_scores)
            for entry in reversed(tail)
        ]
        top_vehicles = [
            self._vehicle_row(entry.rank, vehicle_stats[entry.entity_id], vehicle_map, vehicle_scores, vehicle_alerts)
            for entry in RankingService.by_efficiency(vehicle_stats.values(), ascending=True, limit=self.top_vehicles)
        ]
        bottom_vehicles = [
            self._vehicle_row(entry.rank, vehicle_stats[entry.entity_id], vehicle_map, vehicle_scores, vehicle_alerts)
            for entry in RankingService.by_efficiency(
                vehicle_stats.values(), ascending=False, limit=self.bottom_vehicles
            )
        ]

        driver_trips = sum(s.trip_count for s in driver_stats.values())
        averages = FleetAverages(
            trips_per_driver=round(_safe_div(driver_trips, len(driver_stats)), 2),
            containers_per_driver=round(
                _safe_div(sum(s.total_containers for s in driver_stats.values()), len(driver_stats)), 2
            ),
            consumption_per_vehicle=round(
                _safe_div(sum(s.average_consumption for s in vehicle_stats.values()), len(vehicle_stats)), 2
            ),
            cost_per_trip=round(
                _safe_div(sum(s.total_cost for s in driver_stats.values()), driver_trips), 2
            ),
        )
        return FleetPerformance(
            top_drivers=tuple(top_drivers),
            bottom_drivers=tuple(bottom_drivers),
            top_vehicles=tuple(top_vehicles),
            bottom_vehicles=tuple(bottom_vehicles),
            averages=averages,
        )

    @staticmethod
    def _driver_row(rank: int, stat: AggregateStat, driver_map, scores) -> DriverPerformance:
        driver = driver_map.get(stat.entity_id)
        return DriverPerformance(
            rank=rank,
            id=stat.entity_id,
            last_name=driver.last_name if driver else f"#{stat.entity_id}",
            first_name=driver.first_name if driver else "",
            total_trips=stat.trip_count,
            total_containers=stat.total_containers,
            total_km=round(stat.total_km, 1),
            average_consumption=round(stat.average_consumption, 2),
            total_cost=round(stat.total_cost, 2),
            efficiency=scores.get(stat.entity_id),
        )

    @staticmethod
    def _vehicle_row(rank: int, stat: AggregateStat, vehicle_map, scores, alert_counts) -> VehiclePerformance:
        vehicle = vehicle_map.get(stat.entity_id)
        return VehiclePerformance(
            rank=rank,
            id=stat.entity_id,
            plate=vehicle.plate if vehicle else f"#{stat.entity_id}",
            make=(vehicle.make or "") if vehicle else "",
            model=(vehicle.model or "") if vehicle else "",
            total_trips=stat.trip_count,
            total_km=round(stat.total_km, 1),
            average_consumption=round(stat.efficiency_consumption, 2),
            total_fuel_cost=round(stat.total_fuel_cost, 2),
            alert_count=alert_counts.get(stat.entity_id, 0),
            efficiency=scores.get(stat.entity_id),
        )

    # ── Analyse financiere / Financial analysis ─────────────────────

    def financial_analysis(
        self,
        date_from: dt.date,
        date_to: dt.date,
        trips: Sequence[TripRecord],
        metrics: dict[int, TripMetrics],
        missions: Iterable[MissionRecord] | None = None,
    ) -> FinancialAnalysis:
        mission_list = list(missions) if missions is not None else []
        fuel = sum(metrics[t.id].fuel_cost for t in trips)
        fees = sum(metrics[t.id].fee_cost for t in trips)
        subcontracting = sum(m.transport_cost for m in mission_list)
        total = fuel + fees + subcontracting

        amounts = [("fuel", fuel), ("fees", fees)]
        if missions is not None:
            amounts.append(("subcontracting", subcontracting))
        categories = self.cost_by_category(amounts)

        trip_cost = fuel + fees
        km = sum(metrics[t.id].distance_km for t in trips)
        liters = sum(t.purchased_fuel_l or 0.0 for t in trips if metrics[t.id].fuel_cost > 0)
        containers = sum(metrics[t.id].container_count for t in trips)
        averages = FinancialAverages(
            fuel_price_per_liter=round(_safe_div(fuel, liters), 2),
            cost_per_km=round(_safe_div(trip_cost, km), 2),
            cost_per_trip=round(_safe_div(trip_cost, len(trips)), 2),
            cost_per_container=round(_safe_div(trip_cost, containers), 2),
        )

        # Tendance : premiere moitie vs seconde moitie / First half vs second half
        midpoint = date_from + (date_to - date_from) / 2
        first = [t for t in trips if t.date < midpoint]
        second = [t for t in trips if t.date >= midpoint]
        fuel_trend = trend(
            sum(metrics[t.id].fuel_cost for t in second),
            sum(metrics[t.id].fuel_cost for t in first),
            COST_TREND_BAND_PCT,
        )
        total_trend = trend(
            sum(metrics[t.id].total_cost for t in second),
            sum(metrics[t.id].total_cost for t in first),
            COST_TREND_BAND_PCT,
        )

        return FinancialAnalysis(
            totals=CostTotals(
                fuel=round(fuel, 2),
                fees=round(fees, 2),
                subcontracting=round(subcontracting, 2),
                total=round(total, 2),
            ),
            costs_by_category=tuple(categories),
            costs_by_month=tuple(PeriodBucketerService.monthly_costs(trips, mission_list)),
            costs_by_destination=tuple(self.cost_by_destination(trips, metrics)),
            averages=averages,
            fuel_cost_trend=fuel_trend,
            total_cost_trend=total_trend,
        )

    @staticmethod
    def cost_by_category(amounts: Sequence[tuple[str, float]]) -> list[CostCategoryShare]:
        """
        Repartition par categorie, pourcentages sommant a 100 ; vide si total nul.
        Category split with percentages summing to 100; empty when the total is 0.
        """
        total = sum(amount for _, amount in amounts)
        if total <= 0:
            return []
        return [
            CostCategoryShare(
                category=category,
                amount=round(amount, 2),
                percentage=round(amount / total * 100, 2),
            )
            for category, amount in amounts
        ]

    def cost_by_destination(
        self,
        trips: Sequence[TripRecord],
        metrics: dict[int, TripMetrics],
    ) -> list[DestinationCost]:
        """Top destinations par cout total / Top destinations by total cost."""
        groups: dict[str, dict] = {}
        for trip in trips:
            name = trip.destination_name or UNKNOWN_DESTINATION
            data = groups.setdefault(name, {"trips": 0, "cost": 0.0, "containers": 0})
            data["trips"] += 1
            data["cost"] += metrics[trip.id].total_cost
            data["containers"] += metrics[trip.id].container_count

        ordered = sorted(groups.items(), key=lambda item: (-item[1]["cost"], item[0]))
        return [
            DestinationCost(
                destination=name,
                trips=data["trips"],
                total_cost=round(data["cost"], 2),
                average_cost=round(_safe_div(data["cost"], data["trips"]), 2),
                containers=data["containers"],
            )
            for name, data in ordered[:self.top_destinations]
        ]

    # ── Trajets detailles / Detailed trips ──────────────────────────

    @staticmethod
    def detailed_trips(
        trips: Sequence[TripRecord],
        metrics: dict[int, TripMetrics],
        alerts: dict[int, AlertResult],
        driver_map: dict[int, DriverRecord],
        vehicle_map: dict[int, VehicleRecord],
    ) -> tuple[ReportTrip, ...]:
        """Lignes detaillees, plus recent en premier / Detail rows, newest first."""
        rows = []
        for trip in sorted(trips, key=lambda t: (t.date, t.id), reverse=True):
            m = metrics[trip.id]
            driver = driver_map.get(trip.driver_id)
            vehicle = vehicle_map.get(trip.vehicle_id)
            rows.append(ReportTrip(
                id=trip.id,
                number=trip.number,
                date=trip.date,
                driver=driver.full_name if driver else "",
                vehicle=vehicle.plate if vehicle else "",
                departure=trip.departure_name or "",
                destination=trip.destination_name or "",
                km=m.distance_km,
                containers=m.container_count,
                fuel_liters=trip.purchased_fuel_l or 0.0,
                fuel_variance=round(m.fuel_variance_l, 2) if m.fuel_variance_l is not None else None,
                consumption=round(m.consumption_l_100km, 2) if m.consumption_l_100km is not None else None,
                fuel_cost=round(m.fuel_cost, 2),
                fee_cost=round(m.fee_cost, 2),
                total_cost=round(m.total_cost, 2),
                status=trip.status.value,
                alerts=tuple(a.kind.value for a in alerts[trip.id].alerts),
            ))
        return tuple(rows)
