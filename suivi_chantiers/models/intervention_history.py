"""Modèle Historique des interventions / Intervention history model."""

import enum
from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from suivi_chantiers.database import Base


class HistoryEventType(str, enum.Enum):
    """Type d'événement / Event type."""
    STATUS_CHANGE = "status_change"
    EDIT = "edit"


class InterventionHistory(Base):
    """Entrée d'audit immuable / Immutable audit entry.

    Pas de clé étrangère : l'historique survit à la suppression de l'intervention.
    No foreign key: history outlives the intervention row.
    """

    __tablename__ = "intervention_history"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    intervention_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    event_type: Mapped[str] = mapped_column(String(20), nullable=False)  # status_change, edit
    old_status: Mapped[str | None] = mapped_column(String(20))
    new_status: Mapped[str | None] = mapped_column(String(20))
    persons: Mapped[str | None] = mapped_column(Text)
    event_date: Mapped[str | None] = mapped_column(String(10))  # YYYY-MM-DD
    actor_email: Mapped[str | None] = mapped_column(String(150))
    actor_name: Mapped[str | None] = mapped_column(String(200))
    note: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    def __repr__(self) -> str:
        return f"<InterventionHistory {self.event_type} intervention:{self.intervention_id}>"
