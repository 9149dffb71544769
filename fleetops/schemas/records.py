"""
Enregistrements d'entree du moteur / Engine input records.

Instantanes immuables construits depuis les lignes ORM (from_attributes) ou
depuis des dictionnaires. Le moteur ne voit jamais d'objet SQLAlchemy.
Immutable snapshots built from ORM rows (from_attributes) or plain dicts.
The engine never sees a SQLAlchemy object.
"""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field, model_validator

from fleetops.models.driver import DriverStatus
from fleetops.models.trip import DeliveryStatus, TripStatus
from fleetops.models.vehicle import FuelType, VehicleStatus

_RECORD_CONFIG = ConfigDict(frozen=True, from_attributes=True)


class FeeRecord(BaseModel):
    model_config = _RECORD_CONFIG

    label: str
    amount: float = Field(default=0.0, ge=0)


class ContainerRecord(BaseModel):
    model_config = _RECORD_CONFIG

    container_type_id: int | None = None
    type_label: str | None = None
    nominal_size_ft: int | None = None
    serial: str | None = None
    quantity: int = Field(default=1, ge=0)
    delivery_status: DeliveryStatus = DeliveryStatus.IN_TRANSIT


class TripRecord(BaseModel):
    """Trajet brut / Raw trip.

    Invariants : end_km > start_km des qu'il est renseigne ; un trajet ouvert
    n'a pas de compteur de fin.
    Invariants: end_km > start_km once set; an open trip has no end odometer.
    """
    model_config = _RECORD_CONFIG

    id: int
    number: str | None = None
    date: dt.date
    driver_id: int | None = None
    vehicle_id: int | None = None
    departure_name: str | None = None
    destination_name: str | None = None
    start_km: int
    end_km: int | None = None
    planned_fuel_l: float | None = None
    purchased_fuel_l: float | None = None
    price_per_liter: float | None = None
    fees: tuple[FeeRecord, ...] = ()
    containers: tuple[ContainerRecord, ...] = ()
    status: TripStatus = TripStatus.OPEN
    notes: str | None = None

    @model_validator(mode="after")
    def _check_odometer(self):
        if self.end_km is not None and self.end_km <= self.start_km:
            raise ValueError("end_km must be greater than start_km")
        if self.status == TripStatus.OPEN and self.end_km is not None:
            raise ValueError("an open trip cannot have an end odometer")
        return self


class DriverRecord(BaseModel):
    model_config = _RECORD_CONFIG

    id: int
    last_name: str
    first_name: str = ""
    status: DriverStatus = DriverStatus.ACTIVE

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class VehicleRecord(BaseModel):
    model_config = _RECORD_CONFIG

    id: int
    plate: str
    make: str | None = None
    model: str | None = None
    year: int | None = None
    fuel_type: FuelType | None = None
    current_km: int = 0
    status: VehicleStatus = VehicleStatus.ACTIVE


class MissionRecord(BaseModel):
    """Mission sous-traitee / Subcontracted mission."""
    model_config = _RECORD_CONFIG

    id: int
    date: dt.date
    subcontractor_name: str
    transport_cost: float = Field(default=0.0, ge=0)
    advance_paid: bool = False
    balance_paid: bool = False
