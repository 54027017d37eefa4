"""Schémas Intervention / Intervention schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from suivi_chantiers.models.intervention import InterventionStatus


class InterventionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    user_id: str | None = None
    floor_id: int | None = None
    room_id: int | None = None
    old_floor_name: str | None = None
    old_room_name: str | None = None
    floor_name: str | None = None  # nom courant / current name
    room_name: str | None = None
    lot: str
    task: str
    status: InterventionStatus
    person: str | None = None
    action: str | None = None
    created_at: datetime | None = None


class StatusChange(BaseModel):
    """Changement de statut / Status change.

    new_status reste une chaîne libre : la validation appartient au moteur.
    """
    new_status: str
    date: str | None = None
    persons: list[str] | str | None = None


class InterventionEdit(BaseModel):
    """Correction admin / Admin edit."""
    floor_id: int | None = None
    room_id: int | None = None
    lot: str
    task: str
    persons: list[str] | str | None = None
    date: str | None = None


class ManualSelectionCreate(BaseModel):
    """Création manuelle multi-pièces / Manual multi-room creation."""
    floor_id: int | str | None = None
    room_ids: list[int | str] | int | str | None = None
    lot: str | None = None
    task: str | None = None


class CatalogSelectionCreate(BaseModel):
    """Création depuis le catalogue / Creation from the catalog."""
    floor_id: int | str | None = None
    room_ids: list[int | str] | int | str | None = None
    all_rooms: bool = False
    lots: list[str] | str | None = None


class CreationResult(BaseModel):
    created: int


class HistoryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    intervention_id: int
    event_type: str
    old_status: str | None = None
    new_status: str | None = None
    persons: str | None = None
    event_date: str | None = None
    actor_email: str | None = None
    actor_name: str | None = None
    note: str | None = None
    created_at: datetime | None = None
