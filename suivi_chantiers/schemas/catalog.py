"""Schémas Catalogue / Catalog schemas."""

from pydantic import BaseModel, ConfigDict, Field


class CatalogEntryCreate(BaseModel):
    lot: str = Field(min_length=1, max_length=200)
    task: str = Field(min_length=1, max_length=500)


class CatalogEntryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    chantier_id: int | None = None
    lot: str
    task: str


class CatalogLot(BaseModel):
    """Lot et ses tâches / Lot with its tasks."""
    lot: str
    tasks: list[str]
