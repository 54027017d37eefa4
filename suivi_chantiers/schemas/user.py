"""
Schémas User / User schemas.
"""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from suivi_chantiers.models.user import UserRole


class UserCreate(BaseModel):
    email: EmailStr
    prenom: str = ""
    nom: str = ""
    password: str = Field(min_length=4, max_length=200)
    role: UserRole = UserRole.USER


class UserRead(BaseModel):
    id: int
    email: str
    prenom: str
    nom: str
    full_name: str
    role: str
    is_active: bool
    created_at: datetime | None = None
    model_config = {"from_attributes": True}


class PersonRead(BaseModel):
    """Entrée du choix « Qui ? » / Entry of the "Qui ?" picker."""
    email: str
    full_name: str
    model_config = {"from_attributes": True}


class UserMe(BaseModel):
    """Profil courant / Current profile."""
    id: int
    email: str
    prenom: str
    nom: str
    full_name: str
    role: str
    is_admin: bool
    model_config = {"from_attributes": True}
