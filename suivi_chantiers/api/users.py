"""
Routes Utilisateurs / User routes.
Liste des personnes pour le choix « Qui ? » et création de comptes (admin).
People list for the "Qui ?" picker and account creation (admin).
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from suivi_chantiers.database import get_db
from suivi_chantiers.models.user import User
from suivi_chantiers.schemas.user import PersonRead, UserCreate, UserRead
from suivi_chantiers.api.deps import get_current_user, require_admin
from suivi_chantiers.utils.auth import hash_password

router = APIRouter()


@router.get("/", response_model=list[PersonRead])
async def list_people(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Utilisateurs actifs / Active users."""
    result = await db.execute(
        select(User).where(User.is_active.is_(True)).order_by(User.prenom, User.nom, User.email)
    )
    return result.scalars().all()


@router.get("/all", response_model=list[UserRead])
async def list_users(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_admin),
):
    """Tous les comptes / All accounts."""
    result = await db.execute(select(User).order_by(User.email))
    return result.scalars().all()


@router.post("/", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_user(
    data: UserCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_admin),
):
    """Créer un utilisateur / Create a user."""
    email = data.email.strip().lower()
    existing = await db.execute(select(User).where(User.email == email))
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=400, detail="Email already exists")

    new_user = User(
        email=email,
        prenom=data.prenom.strip(),
        nom=data.nom.strip(),
        hashed_password=hash_password(data.password.strip()),
        role=data.role.value,
        is_active=True,
    )
    db.add(new_user)
    await db.flush()
    await db.refresh(new_user)
    return new_user
