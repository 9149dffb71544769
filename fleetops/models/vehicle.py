"""Modele Vehicule / Vehicle model.

Le compteur courant (current_km) ne fait que croitre : il est releve a la
cloture de chaque trajet.
The current odometer only ever grows: it is raised when a trip closes.
"""

import enum

from sqlalchemy import Enum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fleetops.database import Base


class VehicleStatus(str, enum.Enum):
    """Statut du vehicule / Vehicle status."""
    ACTIVE = "active"
    IN_REPAIR = "in_repair"
    INACTIVE = "inactive"


class FuelType(str, enum.Enum):
    """Type de carburant / Fuel type."""
    DIESEL = "diesel"
    GASOLINE = "gasoline"
    HYBRID = "hybrid"
    ELECTRIC = "electric"


class Vehicle(Base):
    """Vehicule du parc / Fleet vehicle."""
    __tablename__ = "vehicles"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    plate: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    make: Mapped[str | None] = mapped_column(String(50))
    model: Mapped[str | None] = mapped_column(String(50))
    year: Mapped[int | None] = mapped_column(Integer)
    fuel_type: Mapped[FuelType | None] = mapped_column(Enum(FuelType))
    current_km: Mapped[int] = mapped_column(Integer, default=0)
    status: Mapped[VehicleStatus] = mapped_column(Enum(VehicleStatus), default=VehicleStatus.ACTIVE)
    notes: Mapped[str | None] = mapped_column(Text)

    # Relations
    trips: Mapped[list["Trip"]] = relationship(back_populates="vehicle")

    def __repr__(self) -> str:
        return f"<Vehicle {self.plate}>"
