"""Schemas alertes trajet / Trip alert schemas."""

import datetime as dt
import enum

from pydantic import BaseModel, ConfigDict


class AlertKind(str, enum.Enum):
    """Type d'alerte / Alert kind."""
    FUEL_VARIANCE = "fuel_variance"
    ABNORMAL_CONSUMPTION = "abnormal_consumption"
    UNUSUAL_COST = "unusual_cost"
    PENDING_PAYMENT = "pending_payment"
    HIGH_MILEAGE = "high_mileage"


class AlertSeverity(str, enum.Enum):
    """Severite de l'alerte / Alert severity."""
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class RaisedAlert(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: AlertKind
    severity: AlertSeverity
    message: str


class AlertResult(BaseModel):
    """Alertes levees pour un trajet / Alerts raised for one trip."""
    model_config = ConfigDict(frozen=True)

    trip_id: int | None = None
    alerts: tuple[RaisedAlert, ...] = ()

    @property
    def kinds(self) -> frozenset[AlertKind]:
        return frozenset(a.kind for a in self.alerts)

    @property
    def has_alerts(self) -> bool:
        return bool(self.alerts)


class FleetBaselines(BaseModel):
    """Moyennes de reference / Reference averages."""
    model_config = ConfigDict(frozen=True)

    consumption_l_100km: float | None = None
    price_per_liter: float | None = None


class AlertFeedItem(BaseModel):
    """
    Alerte du fil flotte, rattachee a un trajet, une mission ou un vehicule.
    Fleet feed alert, attached to a trip, a mission or a vehicle.
    """
    model_config = ConfigDict(frozen=True)

    alert_id: str
    kind: AlertKind
    severity: AlertSeverity
    message: str
    date: dt.date
    trip_id: int | None = None
    mission_id: int | None = None
    vehicle_id: int | None = None
