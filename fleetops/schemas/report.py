"""
Schemas du rapport flotte / Fleet report schemas.
Structure immuable remise aux moteurs d'export (xlsx, csv, pdf).
Immutable structure handed over to export renderers (xlsx, csv, pdf).
"""

import datetime as dt
import enum

from pydantic import BaseModel, ConfigDict

_REPORT_CONFIG = ConfigDict(frozen=True)


class Trend(str, enum.Enum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


# --- Executive summary ---

class ReportPeriod(BaseModel):
    model_config = _REPORT_CONFIG

    date_from: dt.date
    date_to: dt.date
    label: str


class KpiSnapshot(BaseModel):
    """KPI de la periode et variation vs periode precedente (%) / Period KPIs and change vs previous period (%)."""
    model_config = _REPORT_CONFIG

    total_trips: int
    trips_change: float
    total_containers: int
    containers_change: float
    total_cost: float
    cost_change: float
    total_fuel_cost: float
    fuel_cost_change: float
    total_fee_cost: float
    fee_cost_change: float
    average_consumption: float
    consumption_change: float
    consumption_trend: Trend
    active_alerts: int
    alerts_change: float


class ExecutiveSummary(BaseModel):
    model_config = _REPORT_CONFIG

    period: ReportPeriod
    previous_period: ReportPeriod
    kpis: KpiSnapshot
    highlights: tuple[str, ...] = ()


# --- Fleet performance ---

class DriverPerformance(BaseModel):
    model_config = _REPORT_CONFIG

    rank: int
    id: int | None
    last_name: str
    first_name: str
    total_trips: int
    total_containers: int
    total_km: float
    average_consumption: float
    total_cost: float
    efficiency: float | None = None  # score 0-100, None si non note / None when not scored


class VehiclePerformance(BaseModel):
    model_config = _REPORT_CONFIG

    rank: int
    id: int | None
    plate: str
    make: str
    model: str
    total_trips: int
    total_km: float
    average_consumption: float
    total_fuel_cost: float
    alert_count: int
    efficiency: float | None = None  # score 0-100, None si non note / None when not scored


class FleetAverages(BaseModel):
    model_config = _REPORT_CONFIG

    trips_per_driver: float
    containers_per_driver: float
    consumption_per_vehicle: float
    cost_per_trip: float


class FleetPerformance(BaseModel):
    model_config = _REPORT_CONFIG

    top_drivers: tuple[DriverPerformance, ...] = ()
    bottom_drivers: tuple[DriverPerformance, ...] = ()
    top_vehicles: tuple[VehiclePerformance, ...] = ()
    bottom_vehicles: tuple[VehiclePerformance, ...] = ()
    averages: FleetAverages


# --- Financial analysis ---

class CostTotals(BaseModel):
    model_config = _REPORT_CONFIG

    fuel: float
    fees: float
    subcontracting: float
    total: float


class CostCategoryShare(BaseModel):
    model_config = _REPORT_CONFIG

    category: str
    amount: float
    percentage: float


class MonthlyCost(BaseModel):
    model_config = _REPORT_CONFIG

    month: str  # YYYY-MM
    fuel: float
    fees: float
    subcontracting: float
    total: float


class DestinationCost(BaseModel):
    model_config = _REPORT_CONFIG

    destination: str
    trips: int
    total_cost: float
    average_cost: float
    containers: int


class FinancialAverages(BaseModel):
    model_config = _REPORT_CONFIG

    fuel_price_per_liter: float
    cost_per_km: float
    cost_per_trip: float
    cost_per_container: float


class FinancialAnalysis(BaseModel):
    model_config = _REPORT_CONFIG

    totals: CostTotals
    costs_by_category: tuple[CostCategoryShare, ...] = ()
    costs_by_month: tuple[MonthlyCost, ...] = ()
    costs_by_destination: tuple[DestinationCost, ...] = ()
    averages: FinancialAverages
    fuel_cost_trend: Trend = Trend.STABLE
    total_cost_trend: Trend = Trend.STABLE


# --- Detailed trips ---

class ReportTrip(BaseModel):
    """Ligne detaillee pour la feuille trajets / Detail-sheet trip row."""
    model_config = _REPORT_CONFIG

    id: int
    number: str | None
    date: dt.date
    driver: str
    vehicle: str
    departure: str
    destination: str
    km: int
    containers: int
    fuel_liters: float
    fuel_variance: float | None
    consumption: float | None
    fuel_cost: float
    fee_cost: float
    total_cost: float
    status: str
    alerts: tuple[str, ...] = ()


class Report(BaseModel):
    """Rapport flotte complet / Complete fleet report."""
    model_config = _REPORT_CONFIG

    executive_summary: ExecutiveSummary
    fleet_performance: FleetPerformance
    financial_analysis: FinancialAnalysis
    detailed_trips: tuple[ReportTrip, ...] | None = None
    generated_at: dt.datetime
