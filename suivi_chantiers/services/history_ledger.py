"""
Journal d'historique des interventions / Intervention history ledger.
Ajout seul : aucune API de modification ni de suppression.
Append-only: no update or delete API.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from suivi_chantiers.models.intervention_history import HistoryEventType, InterventionHistory
from suivi_chantiers.services.identity import Actor


class HistoryLedger:
    """Trace d'audit structurée / Structured audit trail."""

    @staticmethod
    async def record(
        db: AsyncSession,
        intervention_id: int,
        event_type: HistoryEventType,
        actor: Actor,
        old_status: str | None,
        new_status: str | None,
        persons: str | None,
        event_date: str | None,
        note: str | None,
    ) -> InterventionHistory:
        """Enregistrer un événement / Record an event."""
        entry = InterventionHistory(
            intervention_id=intervention_id,
            event_type=event_type.value,
            old_status=old_status,
            new_status=new_status,
            persons=persons,
            event_date=event_date,
            actor_email=actor.email,
            actor_name=actor.display_name,
            note=note,
        )
        db.add(entry)
        await db.flush()
        return entry

    @staticmethod
    async def list_for(db: AsyncSession, intervention_id: int) -> list[InterventionHistory]:
        """Historique d'une intervention, du plus ancien au plus récent / Oldest first."""
        result = await db.execute(
            select(InterventionHistory)
            .where(InterventionHistory.intervention_id == intervention_id)
            .order_by(InterventionHistory.created_at, InterventionHistory.id)
        )
        return list(result.scalars().all())
