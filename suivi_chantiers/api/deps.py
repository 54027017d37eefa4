"""
Dépendances d'authentification et d'autorisation / Authentication and authorization dependencies.
Injectées dans les routes via Depends().
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from suivi_chantiers.database import get_db
from suivi_chantiers.models.chantier import Chantier
from suivi_chantiers.models.user import User
from suivi_chantiers.services.identity import Actor
from suivi_chantiers.utils.auth import decode_token

security = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Extraire et valider l'utilisateur depuis le JWT / Extract and validate user from JWT."""
    payload = decode_token(credentials.credentials)
    if payload is None or payload.get("type") != "access":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")

    user_id = int(payload["sub"])
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if user is None or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found or inactive")

    return user


async def get_current_actor(user: User = Depends(get_current_user)) -> Actor:
    """Identité transmise au moteur / Identity handed to the engine."""
    return Actor.from_user(user)


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """Réservé aux administrateurs / Admins only."""
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin only")
    return user


async def get_chantier_or_404(chantier_id: int, db: AsyncSession = Depends(get_db)) -> Chantier:
    """Chantier du chemin, 404 sinon / Path site, 404 otherwise."""
    chantier = await db.get(Chantier, chantier_id)
    if chantier is None:
        raise HTTPException(status_code=404, detail="Chantier introuvable")
    return chantier
