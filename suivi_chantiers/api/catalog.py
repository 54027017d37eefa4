"""Routes Catalogue lots/tâches / Lot-task catalog API routes."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from suivi_chantiers.database import get_db
from suivi_chantiers.models.chantier import Chantier
from suivi_chantiers.models.user import User
from suivi_chantiers.schemas.catalog import CatalogEntryCreate, CatalogEntryRead, CatalogLot
from suivi_chantiers.schemas.intervention import CreationResult
from suivi_chantiers.services.catalog_service import CatalogService
from suivi_chantiers.api.deps import get_chantier_or_404, get_current_user, require_admin

router = APIRouter()


def _as_lots(grouped: dict[str, list[str]]) -> list[CatalogLot]:
    return [CatalogLot(lot=lot, tasks=tasks) for lot, tasks in sorted(grouped.items())]


@router.get("/catalog/", response_model=list[CatalogLot])
async def list_global_catalog(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Catalogue global / Global catalog."""
    return _as_lots(await CatalogService.grouped_by_lot(db, None))


@router.post("/catalog/", response_model=CatalogEntryRead, status_code=201)
async def add_global_entry(
    data: CatalogEntryCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_admin),
):
    entry, _ = await CatalogService.add_entry(db, None, data.lot, data.task)
    return entry


@router.get("/chantiers/{chantier_id}/catalog", response_model=list[CatalogLot])
async def list_chantier_catalog(
    chantier: Chantier = Depends(get_chantier_or_404),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Catalogue du chantier / Site catalog."""
    return _as_lots(await CatalogService.grouped_by_lot(db, chantier.id))


@router.post("/chantiers/{chantier_id}/catalog", response_model=CatalogEntryRead, status_code=201)
async def add_chantier_entry(
    data: CatalogEntryCreate,
    chantier: Chantier = Depends(get_chantier_or_404),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_admin),
):
    entry, _ = await CatalogService.add_entry(db, chantier.id, data.lot, data.task)
    return entry


@router.post("/chantiers/{chantier_id}/catalog/copy-global", response_model=CreationResult)
async def copy_global_catalog(
    chantier: Chantier = Depends(get_chantier_or_404),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_admin),
):
    """Copier le catalogue global dans le chantier / Copy the global catalog into the site."""
    return CreationResult(created=await CatalogService.copy_global_to_chantier(db, chantier.id))
