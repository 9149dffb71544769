"""Modele Localite / Locality model."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from fleetops.database import Base


class Locality(Base):
    __tablename__ = "localities"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    region: Mapped[str | None] = mapped_column(String(100))

    def __repr__(self) -> str:
        return f"<Locality {self.name}>"
