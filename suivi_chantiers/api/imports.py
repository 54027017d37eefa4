"""Routes Import Excel/CSV des tâches / Task import API routes."""

import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from suivi_chantiers.config import settings
from suivi_chantiers.database import get_db
from suivi_chantiers.services.identity import Actor
from suivi_chantiers.services.import_service import ImportService
from suivi_chantiers.services.lifecycle_engine import LifecycleEngine
from suivi_chantiers.services.location_registry import LocationRegistry
from suivi_chantiers.api.deps import get_current_actor

logger = logging.getLogger(__name__)

router = APIRouter()


class ImportResult(BaseModel):
    created: int
    skipped: list[str]
    message: str


@router.post("/taches", response_model=ImportResult)
async def import_taches(
    chantier_id: int = Form(...),
    fichier: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Importer un fichier (A: étage | B: pièce | C: lot | D: tâche) / Import a task file."""
    if await LocationRegistry.get_chantier(db, chantier_id) is None:
        raise HTTPException(status_code=404, detail="Chantier introuvable")

    content = await fichier.read()
    try:
        rows = ImportService.parse_task_rows(content, fichier.filename or "")
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except Exception:
        logger.exception("Lecture impossible du fichier %s", fichier.filename)
        raise HTTPException(status_code=400, detail="Impossible de lire le fichier Excel.")

    report = await LifecycleEngine.create_from_rows(db, chantier_id, rows, actor)

    message = f"Import terminé : {report.created} tâches créées (statut: a faire)."
    reported = report.skipped[: settings.IMPORT_MAX_SKIPPED_REPORTED]
    if reported:
        message += " Certaines lignes ont été ignorées : " + " ".join(reported)
    return ImportResult(created=report.created, skipped=reported, message=message)
