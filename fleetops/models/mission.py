"""Modele Mission de sous-traitance / Subcontract mission model.

Paiement en deux temps : avance de 90 % puis solde de 10 %.
Two-step payment: 90 % advance then 10 % balance.
"""

from sqlalchemy import Boolean, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from fleetops.database import Base


class SubcontractMission(Base):
    __tablename__ = "subcontract_missions"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    date: Mapped[str] = mapped_column(String(10), nullable=False, index=True)  # YYYY-MM-DD
    subcontractor_name: Mapped[str] = mapped_column(String(150), nullable=False)
    transport_cost: Mapped[float] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    advance_paid: Mapped[bool] = mapped_column(Boolean, default=False)
    balance_paid: Mapped[bool] = mapped_column(Boolean, default=False)
    notes: Mapped[str | None] = mapped_column(Text)

    def __repr__(self) -> str:
        return f"<SubcontractMission {self.date} - {self.subcontractor_name}>"
