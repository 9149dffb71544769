"""Modele Trajet / Trip model.

Seules les saisies brutes sont stockees (compteurs, litrages, prix, frais).
Distance, ecart, consommation et couts sont recalcules a chaque lecture.
Only raw entries are stored (odometers, liters, price, fees). Distance,
variance, consumption and costs are recomputed on every read.
"""

import enum

from sqlalchemy import Enum, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fleetops.database import Base


class TripStatus(str, enum.Enum):
    """Statut du trajet / Trip status."""
    OPEN = "open"
    CLOSED = "closed"
    CANCELLED = "cancelled"


class DeliveryStatus(str, enum.Enum):
    """Statut de livraison du conteneur / Container delivery status."""
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"
    RETURNED = "returned"


class Trip(Base):
    __tablename__ = "trips"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    number: Mapped[str | None] = mapped_column(String(30), unique=True)
    date: Mapped[str] = mapped_column(String(10), nullable=False, index=True)  # YYYY-MM-DD
    driver_id: Mapped[int] = mapped_column(ForeignKey("drivers.id", ondelete="RESTRICT"), nullable=False)
    vehicle_id: Mapped[int] = mapped_column(ForeignKey("vehicles.id", ondelete="RESTRICT"), nullable=False)
    departure_id: Mapped[int | None] = mapped_column(ForeignKey("localities.id"))
    destination_id: Mapped[int | None] = mapped_column(ForeignKey("localities.id"))

    # Compteurs / Odometers
    start_km: Mapped[int] = mapped_column(Integer, nullable=False)
    end_km: Mapped[int | None] = mapped_column(Integer)  # NULL tant que le trajet est ouvert / NULL while open

    # Carburant / Fuel
    planned_fuel_l: Mapped[float | None] = mapped_column(Numeric(8, 2))
    purchased_fuel_l: Mapped[float | None] = mapped_column(Numeric(8, 2))
    price_per_liter: Mapped[float | None] = mapped_column(Numeric(10, 2))

    status: Mapped[TripStatus] = mapped_column(Enum(TripStatus), default=TripStatus.OPEN)
    notes: Mapped[str | None] = mapped_column(Text)

    # Relations
    driver: Mapped["Driver"] = relationship(back_populates="trips")
    vehicle: Mapped["Vehicle"] = relationship(back_populates="trips")
    departure: Mapped["Locality | None"] = relationship(foreign_keys=[departure_id])
    destination: Mapped["Locality | None"] = relationship(foreign_keys=[destination_id])
    fees: Mapped[list["TripFee"]] = relationship(
        back_populates="trip", cascade="all, delete-orphan"
    )
    containers: Mapped[list["TripContainer"]] = relationship(
        back_populates="trip", cascade="all, delete-orphan"
    )

    @property
    def departure_name(self) -> str | None:
        return self.departure.name if self.departure else None

    @property
    def destination_name(self) -> str | None:
        return self.destination.name if self.destination else None

    def __repr__(self) -> str:
        return f"<Trip {self.number or self.id} - {self.date}>"


class TripFee(Base):
    """Frais ponctuel d'un trajet (peage, douane...) / Ad-hoc trip fee (toll, customs...)."""
    __tablename__ = "trip_fees"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    trip_id: Mapped[int] = mapped_column(ForeignKey("trips.id"), nullable=False)
    label: Mapped[str] = mapped_column(String(100), nullable=False)
    amount: Mapped[float] = mapped_column(Numeric(12, 2), nullable=False, default=0)

    trip: Mapped["Trip"] = relationship(back_populates="fees")

    def __repr__(self) -> str:
        return f"<TripFee {self.label} {self.amount}>"


class TripContainer(Base):
    """Conteneur transporte / Carried container (compte, non valorise / counted, not costed)."""
    __tablename__ = "trip_containers"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    trip_id: Mapped[int] = mapped_column(ForeignKey("trips.id"), nullable=False)
    container_type_id: Mapped[int] = mapped_column(ForeignKey("container_types.id"), nullable=False)
    serial: Mapped[str | None] = mapped_column(String(30))
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    delivery_status: Mapped[DeliveryStatus] = mapped_column(
        Enum(DeliveryStatus), default=DeliveryStatus.IN_TRANSIT
    )

    trip: Mapped["Trip"] = relationship(back_populates="containers")
    container_type: Mapped["ContainerType"] = relationship()

    @property
    def type_label(self) -> str | None:
        return self.container_type.label if self.container_type else None

    @property
    def nominal_size_ft(self) -> int | None:
        return self.container_type.nominal_size_ft if self.container_type else None

    def __repr__(self) -> str:
        return f"<TripContainer trip={self.trip_id} x{self.quantity}>"
