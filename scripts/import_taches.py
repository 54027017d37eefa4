"""
Import en lot d'un fichier de tâches / Batch import of a task file.

Usage:
    DATABASE_URL=sqlite+aiosqlite:///./suivi_chantiers.db \
    python -m scripts.import_taches --chantier 3 --email admin@suivi-chantiers.app taches.xlsx

Format attendu (ligne 1 = en-tête) / Expected layout (row 1 = header):
    A: étage | B: pièce | C: lot | D: tâche
"""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

from sqlalchemy import select

# Rendre le package importable / Make package importable
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from suivi_chantiers.database import async_session, init_db
from suivi_chantiers.exceptions import ChantierError
from suivi_chantiers.models.user import User
from suivi_chantiers.services.identity import Actor
from suivi_chantiers.services.import_service import ImportService
from suivi_chantiers.services.lifecycle_engine import LifecycleEngine

logger = logging.getLogger("suivi_chantiers.import")


async def run_import(path: Path, chantier_id: int, email: str) -> int:
    await init_db()
    rows = ImportService.parse_task_rows(path.read_bytes(), path.name)
    logger.info("[import] %d ligne(s) lue(s) dans %s", len(rows), path)

    async with async_session() as session:
        result = await session.execute(select(User).where(User.email == email.strip().lower()))
        user = result.scalar_one_or_none()
        actor = Actor.from_user(user) if user else Actor(email=email)
        report = await LifecycleEngine.create_from_rows(session, chantier_id, rows, actor)
        await session.commit()

    logger.info("[import] %d tâche(s) créée(s) (statut: a faire)", report.created)
    for message in report.skipped:
        logger.warning("[import] %s", message)
    return report.created


def main() -> None:
    parser = argparse.ArgumentParser(description="Importer des tâches dans un chantier")
    parser.add_argument("fichier", type=Path)
    parser.add_argument("--chantier", type=int, required=True)
    parser.add_argument("--email", required=True, help="email enregistré comme créateur")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(message)s")
    try:
        asyncio.run(run_import(args.fichier, args.chantier, args.email))
    except (ChantierError, ValueError) as exc:
        logger.error("[import] ERREUR : %s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
