"""
Routes d'authentification / Authentication routes.
Login, refresh token, profil utilisateur.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from suivi_chantiers.config import settings
from suivi_chantiers.database import get_db
from suivi_chantiers.models.user import User
from suivi_chantiers.rate_limit import client_ip, limiter
from suivi_chantiers.schemas.auth import LoginRequest, RefreshRequest, TokenResponse
from suivi_chantiers.schemas.user import UserMe
from suivi_chantiers.utils.auth import create_access_token, create_refresh_token, decode_token, verify_password
from suivi_chantiers.api.deps import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()


def _tokens(user: User) -> TokenResponse:
    return TokenResponse(
        access_token=create_access_token(user.id),
        refresh_token=create_refresh_token(user.id),
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


@router.post("/login", response_model=TokenResponse)
@limiter.limit(settings.RATE_LIMIT_LOGIN)
async def login(request: Request, data: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Connexion par email et mot de passe / Login with email and password."""
    email = data.email
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()

    if user is None or not verify_password(data.password.strip(), user.hashed_password):
        logger.warning("Connexion refusee pour %s depuis %s", email, client_ip(request))
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Email ou mot de passe invalide")

    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Account disabled")

    logger.info("Connexion de %s depuis %s", email, client_ip(request))
    return _tokens(user)


@router.post("/refresh", response_model=TokenResponse)
async def refresh(data: RefreshRequest, db: AsyncSession = Depends(get_db)):
    """Rafraîchir les tokens / Refresh tokens."""
    payload = decode_token(data.refresh_token)
    if payload is None or payload.get("type") != "refresh":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")

    user = await db.get(User, int(payload["sub"]))
    if user is None or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found or inactive")

    return _tokens(user)


@router.get("/me", response_model=UserMe)
async def me(user: User = Depends(get_current_user)):
    """Profil de l'utilisateur connecté / Current user profile."""
    return user
