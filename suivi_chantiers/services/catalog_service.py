"""
Service Catalogue lots/tâches / Lot-task catalog service.
Catalogue global (chantier_id NULL) et catalogue propre à chaque chantier.
Global catalog (chantier_id NULL) and per-site catalog.
"""

import logging
from collections import defaultdict

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from suivi_chantiers.models.catalog import CatalogEntry

log = logging.getLogger(__name__)


def _scope(chantier_id: int | None):
    if chantier_id is None:
        return CatalogEntry.chantier_id.is_(None)
    return CatalogEntry.chantier_id == chantier_id


class CatalogService:
    """Lecture et alimentation du catalogue / Catalog reads and writes."""

    @staticmethod
    async def list_tasks_for_lot(db: AsyncSession, chantier_id: int, lot: str) -> list[str]:
        """Tâches d'un lot dans le catalogue du chantier / Tasks of a lot in the site catalog.

        Un lot absent du catalogue du chantier donne une liste vide.
        """
        result = await db.execute(
            select(CatalogEntry.task)
            .where(CatalogEntry.chantier_id == chantier_id, CatalogEntry.lot == lot)
            .order_by(CatalogEntry.id)
        )
        return list(result.scalars().all())

    @staticmethod
    async def list_entries(db: AsyncSession, chantier_id: int | None) -> list[CatalogEntry]:
        result = await db.execute(
            select(CatalogEntry)
            .where(_scope(chantier_id))
            .order_by(CatalogEntry.lot, CatalogEntry.id)
        )
        return list(result.scalars().all())

    @staticmethod
    async def grouped_by_lot(db: AsyncSession, chantier_id: int | None) -> dict[str, list[str]]:
        """Catalogue regroupé lot -> tâches / Catalog grouped lot -> tasks."""
        grouped: dict[str, list[str]] = defaultdict(list)
        for entry in await CatalogService.list_entries(db, chantier_id):
            grouped[entry.lot].append(entry.task)
        return dict(grouped)

    @staticmethod
    async def add_entry(db: AsyncSession, chantier_id: int | None, lot: str, task: str) -> tuple[CatalogEntry, bool]:
        """Ajouter un couple lot/tâche, sans doublon / Add a lot/task pair, no duplicates.

        Retourne (entrée, créée) / Returns (entry, created).
        """
        lot = lot.strip()
        task = task.strip()
        result = await db.execute(
            select(CatalogEntry).where(
                _scope(chantier_id),
                CatalogEntry.lot == lot,
                CatalogEntry.task == task,
            ).limit(1)
        )
        existing = result.scalar_one_or_none()
        if existing:
            return existing, False

        entry = CatalogEntry(chantier_id=chantier_id, lot=lot, task=task)
        db.add(entry)
        await db.flush()
        await db.refresh(entry)
        return entry, True

    @staticmethod
    async def copy_global_to_chantier(db: AsyncSession, chantier_id: int) -> int:
        """Copier le catalogue global dans celui du chantier / Copy the global catalog into the site catalog."""
        existing = {
            (e.lot, e.task) for e in await CatalogService.list_entries(db, chantier_id)
        }
        count = 0
        for entry in await CatalogService.list_entries(db, None):
            if (entry.lot, entry.task) in existing:
                continue
            db.add(CatalogEntry(chantier_id=chantier_id, lot=entry.lot, task=entry.task))
            existing.add((entry.lot, entry.task))
            count += 1
        await db.flush()
        log.info("Catalogue global copie dans le chantier %s : %d entrees", chantier_id, count)
        return count
