"""
Modèles Chantier, Étage, Pièce / Site, Floor and Room models.
Un chantier possède ses étages, un étage possède ses pièces.
A site owns its floors, a floor owns its rooms.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from suivi_chantiers.database import Base


class Chantier(Base):
    """Chantier / Construction site."""

    __tablename__ = "chantiers"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    nom: Mapped[str | None] = mapped_column(String(200))
    name: Mapped[str | None] = mapped_column(String(200))
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    # Relations
    floors: Mapped[list["Floor"]] = relationship(back_populates="chantier", cascade="all, delete-orphan")

    @property
    def display_name(self) -> str:
        """Nom affiché : nom si renseigné, sinon name / Display name: nom if set, else name."""
        if self.nom:
            return self.nom
        return self.name or ""

    def __repr__(self) -> str:
        return f"<Chantier {self.id} - {self.display_name}>"


class Floor(Base):
    """Étage d'un chantier / Floor of a site."""

    __tablename__ = "floors"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    chantier_id: Mapped[int] = mapped_column(ForeignKey("chantiers.id", ondelete="CASCADE"), nullable=False)

    # Relations
    chantier: Mapped["Chantier"] = relationship(back_populates="floors")
    rooms: Mapped[list["Room"]] = relationship(back_populates="floor", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<Floor {self.name}>"


class Room(Base):
    """Pièce d'un étage / Room of a floor."""

    __tablename__ = "rooms"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    floor_id: Mapped[int] = mapped_column(ForeignKey("floors.id", ondelete="CASCADE"), nullable=False)

    # Relations
    floor: Mapped["Floor"] = relationship(back_populates="rooms")

    def __repr__(self) -> str:
        return f"<Room {self.name}>"
