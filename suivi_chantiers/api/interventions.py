"""Routes Interventions / Intervention API routes (statut, correction, historique)."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from suivi_chantiers.database import get_db
from suivi_chantiers.models.intervention import Intervention
from suivi_chantiers.models.user import User
from suivi_chantiers.schemas.intervention import HistoryRead, InterventionEdit, InterventionRead, StatusChange
from suivi_chantiers.services.history_ledger import HistoryLedger
from suivi_chantiers.services.identity import Actor
from suivi_chantiers.services.intervention_repository import InterventionRepository
from suivi_chantiers.services.lifecycle_engine import LifecycleEngine
from suivi_chantiers.api.deps import get_current_actor, get_current_user, require_admin

router = APIRouter()


def intervention_read(
    intervention: Intervention, floor_name: str | None = None, room_name: str | None = None,
) -> InterventionRead:
    """Vue d'une intervention avec noms courants / Intervention view with current names."""
    data = InterventionRead.model_validate(intervention)
    data.floor_name = floor_name
    data.room_name = room_name
    return data


@router.get("/{intervention_id}", response_model=InterventionRead)
async def get_intervention(
    intervention_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    intervention = await InterventionRepository.get(db, intervention_id)
    if not intervention:
        raise HTTPException(status_code=404, detail="Intervention introuvable")
    return intervention_read(intervention)


@router.post("/{intervention_id}/status", response_model=InterventionRead)
async def change_status(
    intervention_id: int,
    data: StatusChange,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Changer le statut (a faire / en cours / terminé) / Change status."""
    intervention = await LifecycleEngine.change_status(
        db,
        intervention_id,
        actor,
        data.new_status,
        effective_date=data.date,
        selected_persons=data.persons,
    )
    return intervention_read(intervention)


@router.put("/{intervention_id}", response_model=InterventionRead)
async def edit_intervention(
    intervention_id: int,
    data: InterventionEdit,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_admin),
):
    """Corriger une intervention (admin) / Edit an intervention (admin)."""
    intervention = await LifecycleEngine.edit_intervention(
        db,
        intervention_id,
        Actor.from_user(user),
        floor_id=data.floor_id,
        room_id=data.room_id,
        lot=data.lot,
        task=data.task,
        selected_persons=data.persons,
        effective_date=data.date,
    )
    return intervention_read(intervention)


@router.get("/{intervention_id}/history", response_model=list[HistoryRead])
async def intervention_history(
    intervention_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_admin),
):
    """Historique structuré (admin) / Structured history (admin)."""
    return await HistoryLedger.list_for(db, intervention_id)
