"""Modele Type de conteneur / Container type model."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from fleetops.database import Base


class ContainerType(Base):
    __tablename__ = "container_types"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    label: Mapped[str] = mapped_column(String(50), nullable=False)
    nominal_size_ft: Mapped[int] = mapped_column(Integer, nullable=False)  # 20 | 40 | 45

    def __repr__(self) -> str:
        return f"<ContainerType {self.label} ({self.nominal_size_ft}ft)>"
