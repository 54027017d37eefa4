"""
Seed de l'administrateur / Admin seeding.
Crée le compte admin par défaut au premier démarrage si aucun utilisateur n'existe.
Creates default admin account on first startup if no users exist.
"""

import logging

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from suivi_chantiers.config import settings
from suivi_chantiers.models.user import User, UserRole
from suivi_chantiers.utils.auth import hash_password

logger = logging.getLogger(__name__)


async def seed_admin(session: AsyncSession) -> None:
    """Créer l'admin si aucun utilisateur n'existe / Create admin if no users exist."""
    result = await session.execute(select(func.count(User.id)))
    count = result.scalar()

    if count == 0:
        admin = User(
            email=settings.DEFAULT_ADMIN_EMAIL,
            prenom="Admin",
            nom="",
            hashed_password=hash_password(settings.DEFAULT_ADMIN_PASSWORD),
            role=UserRole.ADMIN.value,
            is_active=True,
        )
        session.add(admin)
        await session.commit()
        logger.info("[OK] Admin créé / Admin created: %s", settings.DEFAULT_ADMIN_EMAIL)
    else:
        logger.info("[OK] %d utilisateur(s) existant(s), seed ignoré / seed skipped", count)
