"""Modèle Catalogue lot/tâche / Lot-task catalog model."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from suivi_chantiers.database import Base


class CatalogEntry(Base):
    """Modèle de tâche réutilisable / Reusable task template.

    chantier_id NULL = catalogue global / global catalog.
    """

    __tablename__ = "catalog_entries"
    __table_args__ = (
        UniqueConstraint("chantier_id", "lot", "task", name="uq_catalog_chantier_lot_task"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    chantier_id: Mapped[int | None] = mapped_column(ForeignKey("chantiers.id", ondelete="CASCADE"), index=True)
    lot: Mapped[str] = mapped_column(String(200), nullable=False)
    task: Mapped[str] = mapped_column(String(500), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    @property
    def is_global(self) -> bool:
        return self.chantier_id is None

    def __repr__(self) -> str:
        return f"<CatalogEntry {self.lot} / {self.task}>"
