"""Schemas retour de trajet / Trip return schemas."""

from pydantic import BaseModel, Field

from fleetops.schemas.records import TripRecord
from fleetops.schemas.stats import TripMetrics


class FeeCreate(BaseModel):
    label: str = Field(min_length=1, max_length=100)
    amount: float = Field(ge=0)


class TripClose(BaseModel):
    """Saisie au retour du vehicule / Entry recorded when the vehicle returns."""
    end_km: int
    purchased_fuel_l: float | None = Field(default=None, ge=0)
    price_per_liter: float | None = Field(default=None, ge=0)
    notes: str | None = None
    # None = frais inchanges ; liste = remplacement complet
    # None = fees untouched; a list replaces them all
    fees: list[FeeCreate] | None = None


class TripClosed(BaseModel):
    trip: TripRecord
    metrics: TripMetrics
