"""
Modèle Utilisateur / User model.
Remplace l'ancien fichier users.csv / Replaces the former users.csv store.
"""

import enum
from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from suivi_chantiers.database import Base


class UserRole(str, enum.Enum):
    """Rôle applicatif / Application role."""
    ADMIN = "admin"
    USER = "user"


class User(Base):
    """Utilisateur de l'application / Application user."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(150), unique=True, nullable=False)
    prenom: Mapped[str] = mapped_column(String(100), default="")
    nom: Mapped[str] = mapped_column(String(100), default="")
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), default=UserRole.USER.value)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    @property
    def full_name(self) -> str:
        """Prénom Nom, ou l'email si vide / First Last, or email when blank."""
        return f"{self.prenom or ''} {self.nom or ''}".strip() or self.email

    def __repr__(self) -> str:
        return f"<User {self.email}>"
