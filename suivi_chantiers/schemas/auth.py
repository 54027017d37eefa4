"""
Schémas d'authentification / Authentication schemas.
Connexion par email ; l'email est normalisé (minuscules, sans espaces) avant la recherche.
Email login; the email is normalised (lowercase, trimmed) before lookup.
"""

from pydantic import BaseModel, Field, field_validator


class LoginRequest(BaseModel):
    email: str = Field(min_length=1, max_length=150)
    password: str = Field(min_length=1, max_length=200)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class TokenResponse(BaseModel):
    """Jetons JWT ; expires_in = durée de l'access token en secondes /
    JWT pair; expires_in = access token lifetime in seconds.
    """
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class RefreshRequest(BaseModel):
    refresh_token: str
