"""
Dépôt des interventions / Intervention repository.
Listing filtré, lecture verrouillée, insertion et mise à jour de champs.
Filtered listing, locked read, insert and field update.
"""

from dataclasses import dataclass
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from suivi_chantiers.models.chantier import Floor, Room
from suivi_chantiers.models.intervention import Intervention


@dataclass
class InterventionFilters:
    """Contraintes d'égalité optionnelles / Optional equality constraints.

    Une valeur absente (None ou "") ne contraint rien / An absent value constrains nothing.
    """
    floor_id: int | None = None
    room_id: int | None = None
    lot: str | None = None
    status: str | None = None

    def predicates(self) -> list:
        clauses = []
        if self.floor_id:
            clauses.append(Floor.id == self.floor_id)
        if self.room_id:
            clauses.append(Room.id == self.room_id)
        if self.lot:
            clauses.append(Intervention.lot == self.lot)
        if self.status:
            clauses.append(Intervention.status == self.status)
        return clauses


class InterventionRepository:
    """Accès aux lignes d'intervention / Intervention row access."""

    @staticmethod
    async def list_for_chantier(
        db: AsyncSession,
        chantier_id: int,
        filters: InterventionFilters | None = None,
    ) -> list[tuple[Intervention, str | None, str | None]]:
        """Interventions d'un chantier avec noms d'étage/pièce courants /
        Site interventions with current floor/room names.
        """
        query = (
            select(Intervention, Floor.name, Room.name)
            .outerjoin(Floor, Intervention.floor_id == Floor.id)
            .outerjoin(Room, Intervention.room_id == Room.id)
            .where(Floor.chantier_id == chantier_id)
        )
        if filters is not None:
            query = query.where(*filters.predicates())
        query = query.order_by(Floor.name, Room.name, Intervention.created_at, Intervention.id)

        result = await db.execute(query)
        return [(i, floor_name, room_name) for i, floor_name, room_name in result.all()]

    @staticmethod
    async def get(db: AsyncSession, intervention_id: int) -> Intervention | None:
        return await db.get(Intervention, intervention_id)

    @staticmethod
    async def get_for_update(db: AsyncSession, intervention_id: int) -> Intervention | None:
        """Lire la ligne sous verrou exclusif / Read the row under an exclusive lock.

        populate_existing : relire l'état validé même si l'objet est déjà dans la session.
        """
        result = await db.execute(
            select(Intervention)
            .where(Intervention.id == intervention_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def add_all(db: AsyncSession, interventions: list[Intervention]) -> int:
        """Insérer un lot d'interventions / Insert a batch of interventions."""
        db.add_all(interventions)
        await db.flush()
        return len(interventions)

    @staticmethod
    def update_fields(intervention: Intervention, **fields: Any) -> Intervention:
        for key, value in fields.items():
            setattr(intervention, key, value)
        return intervention
