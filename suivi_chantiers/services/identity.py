"""
Identité de l'acteur / Acting identity.
Le moteur ne connaît que Actor, fourni à chaque appel par la couche API ou le script d'import.
The engine only sees Actor, supplied per call by the API layer or the import script.
"""

from dataclasses import dataclass

from suivi_chantiers.models.user import User, UserRole


@dataclass(frozen=True)
class Actor:
    """Utilisateur agissant / Acting user."""
    email: str
    first_name: str = ""
    last_name: str = ""
    role: str = UserRole.USER.value

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    @property
    def display_name(self) -> str:
        """Prénom Nom, repli sur l'email / First Last, falls back to email."""
        return f"{self.first_name or ''} {self.last_name or ''}".strip() or self.email

    @classmethod
    def from_user(cls, user: User) -> "Actor":
        return cls(
            email=user.email,
            first_name=user.prenom or "",
            last_name=user.nom or "",
            role=user.role or UserRole.USER.value,
        )
