"""Tests du dépôt, du registre et du catalogue / Repository, registry and catalog tests."""

import pytest

from suivi_chantiers.models.intervention import Intervention, InterventionStatus
from suivi_chantiers.services.catalog_service import CatalogService
from suivi_chantiers.services.history_ledger import HistoryLedger
from suivi_chantiers.services.intervention_repository import InterventionFilters, InterventionRepository
from suivi_chantiers.services.lifecycle_engine import LifecycleEngine
from suivi_chantiers.services.location_registry import LocationRegistry


@pytest.fixture
async def populated(db, site, actor):
    """Trois interventions sur F1/101, F1/102 et F2/201."""
    await LifecycleEngine.create_from_manual_selection(
        db, site["chantier"].id, site["f1"].id, [site["r101"].id, site["r102"].id], "Plumbing", "Check pipes", actor,
    )
    await LifecycleEngine.create_from_manual_selection(
        db, site["chantier"].id, site["f2"].id, [site["r201"].id], "Electrical", "Install sockets", actor,
    )
    await db.commit()
    return site


def test_empty_filters_have_no_predicates():
    assert InterventionFilters().predicates() == []
    assert InterventionFilters(floor_id=None, lot="", status="").predicates() == []
    assert len(InterventionFilters(floor_id=1, lot="Plumbing").predicates()) == 2


@pytest.mark.asyncio
async def test_list_without_filters(db, populated):
    rows = await InterventionRepository.list_for_chantier(db, populated["chantier"].id)

    assert [(floor, room) for _, floor, room in rows] == [("F1", "101"), ("F1", "102"), ("F2", "201")]


@pytest.mark.asyncio
async def test_list_filters_are_conjunctive(db, populated):
    chantier_id = populated["chantier"].id

    by_floor = await InterventionRepository.list_for_chantier(
        db, chantier_id, InterventionFilters(floor_id=populated["f1"].id),
    )
    assert len(by_floor) == 2

    by_room = await InterventionRepository.list_for_chantier(
        db, chantier_id, InterventionFilters(room_id=populated["r102"].id),
    )
    assert [room for _, _, room in by_room] == ["102"]

    by_lot = await InterventionRepository.list_for_chantier(db, chantier_id, InterventionFilters(lot="Electrical"))
    assert [i.task for i, _, _ in by_lot] == ["Install sockets"]

    none = await InterventionRepository.list_for_chantier(
        db, chantier_id, InterventionFilters(floor_id=populated["f1"].id, lot="Electrical"),
    )
    assert none == []


@pytest.mark.asyncio
async def test_list_by_status(db, populated, actor):
    chantier_id = populated["chantier"].id
    rows = await InterventionRepository.list_for_chantier(db, chantier_id)
    await LifecycleEngine.change_status(db, rows[0][0].id, actor, "en cours", effective_date="2024-01-10")
    await db.commit()

    en_cours = await InterventionRepository.list_for_chantier(db, chantier_id, InterventionFilters(status="en cours"))
    a_faire = await InterventionRepository.list_for_chantier(db, chantier_id, InterventionFilters(status="a faire"))

    assert [i.id for i, _, _ in en_cours] == [rows[0][0].id]
    assert len(a_faire) == 2


@pytest.mark.asyncio
async def test_list_is_scoped_to_chantier(db, populated):
    rows = await InterventionRepository.list_for_chantier(db, populated["other"].id)

    assert rows == []


@pytest.mark.asyncio
async def test_listing_does_not_modify_rows(db, populated):
    chantier_id = populated["chantier"].id
    first = await InterventionRepository.list_for_chantier(db, chantier_id)
    snapshot = [(i.id, i.status, i.person, i.action) for i, _, _ in first]

    second = await InterventionRepository.list_for_chantier(db, chantier_id)

    assert [(i.id, i.status, i.person, i.action) for i, _, _ in second] == snapshot


@pytest.mark.asyncio
async def test_history_is_oldest_first(db, populated, actor):
    rows = await InterventionRepository.list_for_chantier(db, populated["chantier"].id)
    intervention_id = rows[0][0].id
    for status, day in (("en cours", "2024-01-10"), ("a faire", "2024-01-11"), ("terminé", "2024-01-12")):
        await LifecycleEngine.change_status(db, intervention_id, actor, status, effective_date=day)
        await db.commit()

    history = await HistoryLedger.list_for(db, intervention_id)

    assert [h.event_date for h in history] == ["2024-01-10", "2024-01-11", "2024-01-12"]
    assert [h.old_status for h in history] == ["a faire", "en cours", "a faire"]
    assert await HistoryLedger.list_for(db, rows[1][0].id) == []


@pytest.mark.asyncio
async def test_rooms_for_chantier(db, site):
    rooms = await LocationRegistry.list_rooms_for_chantier(db, site["chantier"].id)

    assert [(floor_name, room.name) for room, floor_name in rooms] == [("F1", "101"), ("F1", "102"), ("F2", "201")]


@pytest.mark.asyncio
async def test_find_by_name(db, site):
    assert (await LocationRegistry.find_floor_by_name(db, site["chantier"].id, "F2")).id == site["f2"].id
    assert await LocationRegistry.find_floor_by_name(db, site["chantier"].id, "B1") is None
    assert (await LocationRegistry.find_room_by_name(db, site["f1"].id, "102")).id == site["r102"].id
    assert await LocationRegistry.find_room_by_name(db, site["f1"].id, "201") is None


@pytest.mark.asyncio
async def test_catalog_is_grouped_by_lot(db, site):
    grouped = await CatalogService.grouped_by_lot(db, site["chantier"].id)

    assert grouped == {"Electrical": ["Install sockets"], "Plumbing": ["Check pipes", "Test pressure"]}
    assert await CatalogService.grouped_by_lot(db, None) == {"Painting": ["Prime walls"]}


@pytest.mark.asyncio
async def test_catalog_add_entry_is_idempotent(db, site):
    entry, created = await CatalogService.add_entry(db, site["chantier"].id, " Plumbing ", "Check pipes ")

    assert created is False
    assert entry.lot == "Plumbing"
    assert await CatalogService.list_tasks_for_lot(db, site["chantier"].id, "Plumbing") == [
        "Check pipes",
        "Test pressure",
    ]


@pytest.mark.asyncio
async def test_copy_global_catalog(db, site):
    copied = await CatalogService.copy_global_to_chantier(db, site["chantier"].id)
    again = await CatalogService.copy_global_to_chantier(db, site["chantier"].id)

    assert copied == 1
    assert again == 0
    assert await CatalogService.list_tasks_for_lot(db, site["chantier"].id, "Painting") == ["Prime walls"]


@pytest.mark.asyncio
async def test_add_all_inserts_batch(db, site):
    batch = [
        Intervention(
            user_id="chef@chantier.fr",
            old_floor_name="F2",
            old_room_name="201",
            lot="Electrical",
            task=task,
            status=InterventionStatus.A_FAIRE,
            person="",
            action="Création",
            floor_id=site["f2"].id,
            room_id=site["r201"].id,
        )
        for task in ("Install sockets", "Test circuits")
    ]

    assert await InterventionRepository.add_all(db, batch) == 2
    assert all(i.id is not None for i in batch)
    rows = await InterventionRepository.list_for_chantier(
        db, site["chantier"].id, InterventionFilters(room_id=site["r201"].id),
    )
    assert [i.task for i, _, _ in rows] == ["Install sockets", "Test circuits"]
    assert await InterventionRepository.add_all(db, []) == 0


@pytest.mark.asyncio
async def test_get_room_and_floor(db, site):
    room = await LocationRegistry.get_room(db, site["r102"].id)
    assert room.name == "102"
    assert room.floor_id == site["f1"].id
    assert await LocationRegistry.get_room(db, 9999) is None
    assert (await LocationRegistry.get_floor(db, site["b1"].id)).chantier_id == site["other"].id
