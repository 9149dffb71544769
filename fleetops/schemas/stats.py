"""Schemas statistiques derivees / Derived statistics schemas."""

from pydantic import BaseModel, ConfigDict

_DERIVED_CONFIG = ConfigDict(frozen=True)


class TripMetrics(BaseModel):
    """Metriques recalculees d'un trajet / Recomputed trip metrics."""
    model_config = _DERIVED_CONFIG

    distance_km: int = 0
    fuel_variance_l: float | None = None
    consumption_l_100km: float | None = None
    fuel_cost: float = 0.0
    fee_cost: float = 0.0
    total_cost: float = 0.0
    container_count: int = 0


class AggregateStat(BaseModel):
    """Statistiques d'un chauffeur ou vehicule / Driver or vehicle statistics.

    average_consumption divise par le nombre de trajets (0 sans trajet).
    efficiency_consumption ne moyenne que les trajets avec une consommation
    calculable ; c'est elle qui sert aux classements d'efficacite.
    average_consumption divides by trip count (0 with no trip).
    efficiency_consumption averages only trips with a computable rate and is
    the one used by efficiency rankings.
    """
    model_config = _DERIVED_CONFIG

    entity_id: int | None = None
    trip_count: int = 0
    total_km: float = 0.0
    total_containers: int = 0
    total_fuel_l: float = 0.0
    consumption_sum: float = 0.0
    consumption_count: int = 0
    average_consumption: float = 0.0
    efficiency_consumption: float = 0.0
    total_fuel_cost: float = 0.0
    total_fee_cost: float = 0.0
    total_cost: float = 0.0


class MonthlyBucket(AggregateStat):
    """Agregat d'un mois calendaire / One calendar-month aggregate."""
    month: str  # YYYY-MM


class RankedEntity(BaseModel):
    """Ligne de classement / Leaderboard row."""
    model_config = _DERIVED_CONFIG

    rank: int
    entity_id: int | None
    label: str
    value: float
    trip_count: int
