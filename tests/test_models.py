"""Tests des modèles / Model tests."""

from suivi_chantiers.models.catalog import CatalogEntry
from suivi_chantiers.models.chantier import Chantier, Floor, Room
from suivi_chantiers.models.intervention import Intervention, InterventionStatus
from suivi_chantiers.models.intervention_history import HistoryEventType
from suivi_chantiers.models.user import User, UserRole
from suivi_chantiers.services.identity import Actor


def test_chantier_display_name():
    assert Chantier(id=1, nom="Tour A", name="Tower A").display_name == "Tour A"
    assert Chantier(id=2, nom="", name="Tower B").display_name == "Tower B"
    assert Chantier(id=3).display_name == ""
    assert "Tour A" in repr(Chantier(id=1, nom="Tour A"))


def test_location_repr():
    assert "F1" in repr(Floor(name="F1"))
    assert "101" in repr(Room(name="101"))


def test_enums():
    assert InterventionStatus.A_FAIRE.value == "a faire"
    assert InterventionStatus.EN_COURS.value == "en cours"
    assert InterventionStatus.TERMINE.value == "terminé"
    assert InterventionStatus("en cours") is InterventionStatus.EN_COURS
    assert HistoryEventType.STATUS_CHANGE.value == "status_change"
    assert HistoryEventType.EDIT.value == "edit"
    assert UserRole.ADMIN.value == "admin"


def test_intervention_repr():
    i = Intervention(id=7, lot="Plumbing", task="Check pipes", status=InterventionStatus.A_FAIRE)
    assert "Plumbing" in repr(i)
    assert "Check pipes" in repr(i)


def test_catalog_scope():
    assert CatalogEntry(chantier_id=None, lot="Painting", task="Prime walls").is_global
    assert not CatalogEntry(chantier_id=3, lot="Plumbing", task="Check pipes").is_global


def test_user_names():
    user = User(email="alice@chantier.fr", prenom="Alice", nom="Martin", role=UserRole.ADMIN.value)
    assert user.full_name == "Alice Martin"
    assert user.is_admin
    assert User(email="bob@chantier.fr", prenom="", nom="", role="user").full_name == "bob@chantier.fr"


def test_actor_display_name():
    assert Actor(email="a@b.fr", first_name=" Alice", last_name="").display_name == "Alice"
    assert Actor(email="a@b.fr").display_name == "a@b.fr"
    assert not Actor(email="a@b.fr").is_admin
    assert Actor(email="a@b.fr", role="admin").is_admin


def test_actor_from_user():
    user = User(email="paul@chantier.fr", prenom="Paul", nom="Durand", role=UserRole.ADMIN.value)
    actor = Actor.from_user(user)
    assert actor.email == "paul@chantier.fr"
    assert actor.display_name == "Paul Durand"
    assert actor.is_admin
