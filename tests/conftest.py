"""Fixtures de test / Test fixtures.

Base SQLite en mémoire par test / In-memory SQLite database per test.
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import suivi_chantiers.models  # noqa: F401
from suivi_chantiers.database import Base, get_db
from suivi_chantiers.main import app
from suivi_chantiers.models.user import User, UserRole
from suivi_chantiers.services.catalog_service import CatalogService
from suivi_chantiers.services.identity import Actor
from suivi_chantiers.services.location_registry import LocationRegistry
from suivi_chantiers.utils.auth import create_access_token, hash_password


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def actor():
    return Actor(email="alice@chantier.fr", first_name="Alice", last_name="Martin")


@pytest.fixture
def admin_actor():
    return Actor(email="admin@chantier.fr", first_name="Paul", last_name="Durand", role=UserRole.ADMIN.value)


@pytest.fixture
async def site(db):
    """Chantier "Tower A" : F1 (101, 102), F2 (201) ; catalogue Plumbing / Electrical.

    Un second chantier "Tower B" avec son étage B1 sert aux contrôles de portée.
    """
    tower = await LocationRegistry.create_chantier(db, "Tower A")
    f1 = await LocationRegistry.create_floor(db, tower.id, "F1")
    f2 = await LocationRegistry.create_floor(db, tower.id, "F2")
    r101 = await LocationRegistry.create_room(db, f1.id, "101")
    r102 = await LocationRegistry.create_room(db, f1.id, "102")
    r201 = await LocationRegistry.create_room(db, f2.id, "201")

    other = await LocationRegistry.create_chantier(db, "Tower B")
    b1 = await LocationRegistry.create_floor(db, other.id, "B1")
    rb1 = await LocationRegistry.create_room(db, b1.id, "B101")

    await CatalogService.add_entry(db, tower.id, "Plumbing", "Check pipes")
    await CatalogService.add_entry(db, tower.id, "Plumbing", "Test pressure")
    await CatalogService.add_entry(db, tower.id, "Electrical", "Install sockets")
    await CatalogService.add_entry(db, None, "Painting", "Prime walls")
    await db.commit()

    return {
        "chantier": tower,
        "f1": f1,
        "f2": f2,
        "r101": r101,
        "r102": r102,
        "r201": r201,
        "other": other,
        "b1": b1,
        "rb1": rb1,
    }


@pytest.fixture
async def client(session_factory):
    async def _get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def _make_user(db, email: str, prenom: str, nom: str, role: str) -> User:
    user = User(
        email=email,
        prenom=prenom,
        nom=nom,
        hashed_password=hash_password("secret"),
        role=role,
        is_active=True,
    )
    db.add(user)
    await db.commit()
    return user


@pytest.fixture
async def user_headers(db):
    user = await _make_user(db, "alice@chantier.fr", "Alice", "Martin", UserRole.USER.value)
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
async def admin_headers(db):
    user = await _make_user(db, "admin@chantier.fr", "Paul", "Durand", UserRole.ADMIN.value)
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}
