"""Routes Chantiers / Site API routes (étages, pièces, interventions du chantier)."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from suivi_chantiers.database import get_db
from suivi_chantiers.models.chantier import Chantier
from suivi_chantiers.models.user import User
from suivi_chantiers.schemas.chantier import (
    ChantierCreate,
    ChantierRead,
    FloorCreate,
    FloorRead,
    RoomCreate,
    RoomRead,
)
from suivi_chantiers.schemas.intervention import (
    CatalogSelectionCreate,
    CreationResult,
    InterventionRead,
    ManualSelectionCreate,
)
from suivi_chantiers.services.identity import Actor
from suivi_chantiers.services.intervention_repository import InterventionFilters, InterventionRepository
from suivi_chantiers.services.lifecycle_engine import LifecycleEngine
from suivi_chantiers.services.location_registry import LocationRegistry
from suivi_chantiers.api.deps import get_chantier_or_404, get_current_actor, get_current_user, require_admin
from suivi_chantiers.api.interventions import intervention_read

router = APIRouter()


@router.get("/", response_model=list[ChantierRead])
async def list_chantiers(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Lister les chantiers, plus récents d'abord / List sites, newest first."""
    return await LocationRegistry.list_chantiers(db)


@router.post("/", response_model=ChantierRead, status_code=201)
async def create_chantier(
    data: ChantierCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_admin),
):
    return await LocationRegistry.create_chantier(db, data.nom.strip(), data.name)


@router.get("/{chantier_id}", response_model=ChantierRead)
async def get_chantier(
    chantier: Chantier = Depends(get_chantier_or_404),
    user: User = Depends(get_current_user),
):
    return chantier


@router.get("/{chantier_id}/floors", response_model=list[FloorRead])
async def list_floors(
    chantier: Chantier = Depends(get_chantier_or_404),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await LocationRegistry.list_floors(db, chantier.id)


@router.post("/{chantier_id}/floors", response_model=FloorRead, status_code=201)
async def create_floor(
    data: FloorCreate,
    chantier: Chantier = Depends(get_chantier_or_404),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_admin),
):
    return await LocationRegistry.create_floor(db, chantier.id, data.name.strip())


@router.get("/{chantier_id}/rooms", response_model=list[RoomRead])
async def list_rooms(
    chantier: Chantier = Depends(get_chantier_or_404),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Pièces du chantier triées par étage / Site rooms ordered by floor."""
    rooms = await LocationRegistry.list_rooms_for_chantier(db, chantier.id)
    return [
        RoomRead(id=room.id, name=room.name, floor_id=room.floor_id, floor_name=floor_name)
        for room, floor_name in rooms
    ]


@router.post("/floors/{floor_id}/rooms", response_model=RoomRead, status_code=201)
async def create_room(
    floor_id: int,
    data: RoomCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_admin),
):
    floor = await LocationRegistry.get_floor(db, floor_id)
    if not floor:
        raise HTTPException(status_code=404, detail="Étage introuvable")
    room = await LocationRegistry.create_room(db, floor.id, data.name.strip())
    return RoomRead(id=room.id, name=room.name, floor_id=room.floor_id, floor_name=floor.name)


@router.get("/{chantier_id}/interventions", response_model=list[InterventionRead])
async def list_interventions(
    floor: int | None = None,
    room: int | None = None,
    lot: str | None = None,
    status: str | None = None,
    chantier: Chantier = Depends(get_chantier_or_404),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Interventions du chantier, filtres optionnels / Site interventions, optional filters."""
    filters = InterventionFilters(floor_id=floor, room_id=room, lot=lot, status=status)
    rows = await InterventionRepository.list_for_chantier(db, chantier.id, filters)
    return [intervention_read(i, floor_name, room_name) for i, floor_name, room_name in rows]


@router.post("/{chantier_id}/interventions", response_model=CreationResult, status_code=201)
async def create_interventions(
    data: ManualSelectionCreate,
    chantier: Chantier = Depends(get_chantier_or_404),
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Création manuelle sur plusieurs pièces / Manual creation over several rooms."""
    created = await LifecycleEngine.create_from_manual_selection(
        db, chantier.id, data.floor_id, data.room_ids, data.lot, data.task, actor,
    )
    return CreationResult(created=created)


@router.post("/{chantier_id}/interventions/catalog", response_model=CreationResult, status_code=201)
async def create_interventions_from_catalog(
    data: CatalogSelectionCreate,
    chantier: Chantier = Depends(get_chantier_or_404),
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Création pièces × lots × tâches du catalogue / Rooms × lots × catalog tasks creation."""
    created = await LifecycleEngine.create_from_catalog_selection(
        db,
        chantier.id,
        data.floor_id,
        data.lots,
        actor,
        room_ids=data.room_ids,
        all_rooms=data.all_rooms,
    )
    return CreationResult(created=created)
