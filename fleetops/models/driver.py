"""Modele Chauffeur / Driver model."""

import enum

from sqlalchemy import Enum, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fleetops.database import Base


class DriverStatus(str, enum.Enum):
    """Statut du chauffeur / Driver status."""
    ACTIVE = "active"
    ON_TRIP = "on_trip"
    ON_LEAVE = "on_leave"
    SUSPENDED = "suspended"
    INACTIVE = "inactive"


class Driver(Base):
    """Chauffeur / Driver."""
    __tablename__ = "drivers"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(30))
    hire_date: Mapped[str | None] = mapped_column(String(10))  # YYYY-MM-DD
    status: Mapped[DriverStatus] = mapped_column(Enum(DriverStatus), default=DriverStatus.ACTIVE)
    notes: Mapped[str | None] = mapped_column(Text)

    # Relations
    trips: Mapped[list["Trip"]] = relationship(back_populates="driver")

    def __repr__(self) -> str:
        return f"<Driver {self.first_name} {self.last_name}>"
