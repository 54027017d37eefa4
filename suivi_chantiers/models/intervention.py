"""Modèle Intervention / Intervention model."""

import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from suivi_chantiers.database import Base


class InterventionStatus(str, enum.Enum):
    """Statut d'une intervention / Intervention status (fixed set)."""
    A_FAIRE = "a faire"
    EN_COURS = "en cours"
    TERMINE = "terminé"


class Intervention(Base):
    __tablename__ = "interventions"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[str | None] = mapped_column(String(150))  # email du créateur / creator email

    # Noms figés à la création / Names frozen at creation time
    old_floor_name: Mapped[str | None] = mapped_column(String(100))
    old_room_name: Mapped[str | None] = mapped_column(String(100))

    lot: Mapped[str] = mapped_column(String(200), nullable=False)
    task: Mapped[str] = mapped_column(String(500), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    status: Mapped[InterventionStatus] = mapped_column(
        Enum(
            InterventionStatus,
            values_callable=lambda e: [m.value for m in e],
            native_enum=False,
            length=20,
        ),
        default=InterventionStatus.A_FAIRE,
        nullable=False,
    )
    person: Mapped[str] = mapped_column(Text, default="")  # "Qui", noms joints par ", "
    action: Mapped[str] = mapped_column(Text, default="")  # journal texte, une ligne par événement

    # NULL seulement pendant la migration des anciennes lignes / NULL only while migrating legacy rows
    floor_id: Mapped[int | None] = mapped_column(ForeignKey("floors.id", ondelete="SET NULL"), index=True)
    room_id: Mapped[int | None] = mapped_column(ForeignKey("rooms.id", ondelete="SET NULL"), index=True)

    # Relations
    floor: Mapped["Floor | None"] = relationship(foreign_keys=[floor_id])
    room: Mapped["Room | None"] = relationship(foreign_keys=[room_id])

    def __repr__(self) -> str:
        return f"<Intervention {self.id} {self.lot} / {self.task} [{self.status}]>"
