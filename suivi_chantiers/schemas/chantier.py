"""Schémas Chantier, Étage, Pièce / Site, floor and room schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ChantierCreate(BaseModel):
    nom: str = Field(min_length=1, max_length=200)
    name: str | None = None


class ChantierRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    nom: str | None = None
    name: str | None = None
    display_name: str
    created_at: datetime | None = None


class FloorCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)


class FloorRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    name: str
    chantier_id: int


class RoomCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)


class RoomRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    name: str
    floor_id: int
    floor_name: str | None = None
