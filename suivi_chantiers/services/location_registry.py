"""
Registre des chantiers, étages et pièces / Site, floor and room registry.
Requêtes de lecture et créations simples / Read queries and simple creations.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from suivi_chantiers.models.chantier import Chantier, Floor, Room


class LocationRegistry:
    """Accès aux lieux d'un chantier / Access to site locations."""

    # -- Chantiers --

    @staticmethod
    async def list_chantiers(db: AsyncSession) -> list[Chantier]:
        """Chantiers, plus récents d'abord / Sites, newest first."""
        result = await db.execute(
            select(Chantier).order_by(Chantier.created_at.desc(), Chantier.id.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_chantier(db: AsyncSession, chantier_id: int) -> Chantier | None:
        return await db.get(Chantier, chantier_id)

    @staticmethod
    async def create_chantier(db: AsyncSession, nom: str, name: str | None = None) -> Chantier:
        chantier = Chantier(nom=nom, name=name)
        db.add(chantier)
        await db.flush()
        await db.refresh(chantier)
        return chantier

    # -- Étages / Floors --

    @staticmethod
    async def get_floor(db: AsyncSession, floor_id: int) -> Floor | None:
        return await db.get(Floor, floor_id)

    @staticmethod
    async def get_floor_in_chantier(db: AsyncSession, floor_id: int, chantier_id: int) -> Floor | None:
        """Étage seulement s'il appartient au chantier / Floor only if it belongs to the site."""
        result = await db.execute(
            select(Floor).where(Floor.id == floor_id, Floor.chantier_id == chantier_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def find_floor_by_name(db: AsyncSession, chantier_id: int, name: str) -> Floor | None:
        result = await db.execute(
            select(Floor).where(Floor.chantier_id == chantier_id, Floor.name == name).limit(1)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def list_floors(db: AsyncSession, chantier_id: int) -> list[Floor]:
        result = await db.execute(
            select(Floor).where(Floor.chantier_id == chantier_id).order_by(Floor.name)
        )
        return list(result.scalars().all())

    @staticmethod
    async def create_floor(db: AsyncSession, chantier_id: int, name: str) -> Floor:
        floor = Floor(chantier_id=chantier_id, name=name)
        db.add(floor)
        await db.flush()
        await db.refresh(floor)
        return floor

    # -- Pièces / Rooms --

    @staticmethod
    async def get_room(db: AsyncSession, room_id: int) -> Room | None:
        return await db.get(Room, room_id)

    @staticmethod
    async def get_room_in_floor(db: AsyncSession, room_id: int, floor_id: int) -> Room | None:
        """Pièce seulement si elle appartient à l'étage / Room only if it belongs to the floor."""
        result = await db.execute(
            select(Room).where(Room.id == room_id, Room.floor_id == floor_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def find_room_by_name(db: AsyncSession, floor_id: int, name: str) -> Room | None:
        result = await db.execute(
            select(Room).where(Room.floor_id == floor_id, Room.name == name).limit(1)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def list_rooms_by_floor(db: AsyncSession, floor_id: int) -> list[Room]:
        result = await db.execute(
            select(Room).where(Room.floor_id == floor_id).order_by(Room.name, Room.id)
        )
        return list(result.scalars().all())

    @staticmethod
    async def list_rooms_for_chantier(db: AsyncSession, chantier_id: int) -> list[tuple[Room, str]]:
        """Pièces du chantier avec le nom de leur étage / Site rooms with their floor name."""
        result = await db.execute(
            select(Room, Floor.name)
            .join(Floor, Room.floor_id == Floor.id)
            .where(Floor.chantier_id == chantier_id)
            .order_by(Floor.name, Room.name)
        )
        return [(room, floor_name) for room, floor_name in result.all()]

    @staticmethod
    async def create_room(db: AsyncSession, floor_id: int, name: str) -> Room:
        room = Room(floor_id=floor_id, name=name)
        db.add(room)
        await db.flush()
        await db.refresh(room)
        return room
