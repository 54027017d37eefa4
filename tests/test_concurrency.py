"""Tests de concurrence sur base SQLite fichier / Concurrency tests on a file SQLite database."""

import asyncio

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import suivi_chantiers.models  # noqa: F401
from suivi_chantiers.database import Base, enable_sqlite_write_lock
from suivi_chantiers.models.intervention import InterventionStatus
from suivi_chantiers.services.history_ledger import HistoryLedger
from suivi_chantiers.services.identity import Actor
from suivi_chantiers.services.intervention_repository import InterventionRepository
from suivi_chantiers.services.lifecycle_engine import CREATION_ACTION, LifecycleEngine
from suivi_chantiers.services.location_registry import LocationRegistry


@pytest.fixture
async def file_session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'chantiers.db'}")
    enable_sqlite_write_lock(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


async def _seed_intervention(factory) -> int:
    creator = Actor(email="chef@chantier.fr")
    async with factory() as session:
        chantier = await LocationRegistry.create_chantier(session, "Tower A")
        floor = await LocationRegistry.create_floor(session, chantier.id, "F1")
        room = await LocationRegistry.create_room(session, floor.id, "101")
        await LifecycleEngine.create_from_manual_selection(
            session, chantier.id, floor.id, [room.id], "Plumbing", "Check pipes", creator,
        )
        await session.commit()
        rows = await InterventionRepository.list_for_chantier(session, chantier.id)
        return rows[0][0].id


async def _change(factory, intervention_id: int, actor: Actor, status: str, day: str) -> None:
    async with factory() as session:
        await LifecycleEngine.change_status(session, intervention_id, actor, status, effective_date=day)
        await asyncio.sleep(0.05)  # garder la transaction ouverte / keep the transaction open
        await session.commit()


@pytest.mark.asyncio
async def test_concurrent_status_changes_keep_both_events(file_session_factory):
    intervention_id = await _seed_intervention(file_session_factory)
    alice = Actor(email="alice@chantier.fr", first_name="Alice")
    bob = Actor(email="bob@chantier.fr", first_name="Bob")

    await asyncio.gather(
        _change(file_session_factory, intervention_id, alice, "en cours", "2024-01-10"),
        _change(file_session_factory, intervention_id, bob, "a faire", "2024-01-11"),
    )

    async with file_session_factory() as session:
        intervention = await InterventionRepository.get_for_update(session, intervention_id)
        history = await HistoryLedger.list_for(session, intervention_id)

    lines = intervention.action.split("\n")
    assert lines[0] == CREATION_ACTION
    assert sorted(lines[1:]) == [
        "En cours depuis le 2024-01-10 (par Alice)",
        "Réinitialisé le 2024-01-11 par Bob",
    ]
    assert len(history) == 2
    # le dernier événement écrit fixe le statut et la dernière ligne / last writer sets status and last line
    assert intervention.status == InterventionStatus(history[-1].new_status)
    assert lines[-1] == history[-1].note
    assert history[1].old_status == history[0].new_status
