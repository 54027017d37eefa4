"""
Moteur de cycle de vie des interventions / Intervention lifecycle engine.

Changements de statut, corrections, créations en masse (sélection manuelle,
catalogue, lignes importées). Chaque opération s'exécute dans la transaction
de la session appelante ; le journal texte `action` et l'historique structuré
sont écrits ensemble.

Status changes, edits and bulk creations (manual selection, catalog, imported
rows). Every operation runs inside the caller's session transaction; the
`action` text log and the structured history are written together.
"""

import logging
from collections.abc import Iterable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from suivi_chantiers.exceptions import (
    InvalidScopeError,
    InvalidStatusError,
    NotFoundError,
    StoreFailureError,
    ValidationError,
)
from suivi_chantiers.models.chantier import Floor, Room
from suivi_chantiers.models.intervention import Intervention, InterventionStatus
from suivi_chantiers.models.intervention_history import HistoryEventType
from suivi_chantiers.services.catalog_service import CatalogService
from suivi_chantiers.services.history_ledger import HistoryLedger
from suivi_chantiers.services.identity import Actor
from suivi_chantiers.services.import_service import TaskRow
from suivi_chantiers.services.intervention_repository import InterventionRepository
from suivi_chantiers.services.location_registry import LocationRegistry

log = logging.getLogger(__name__)

ALLOWED_STATUSES = tuple(s.value for s in InterventionStatus)

CREATION_ACTION = "Création"
CATALOG_CREATION_ACTION = "Création (catalogue)"
NO_VISIBLE_CHANGE_NOTE = "Aucune modification visible"


@dataclass
class ImportReport:
    """Résultat d'une création depuis des lignes / Result of a row-based creation."""
    created: int = 0
    skipped: list[str] = field(default_factory=list)


def today_iso() -> str:
    """Date UTC du jour, YYYY-MM-DD / Today's UTC date."""
    return datetime.now(timezone.utc).date().isoformat()


def clean_date(effective_date: str | None) -> str:
    """Date saisie nettoyée, "" si absente / Trimmed input date, "" when absent.

    Format YYYY-MM-DD sinon ValidationError / YYYY-MM-DD or ValidationError.
    """
    text = (effective_date or "").strip()
    if not text:
        return ""
    try:
        datetime.strptime(text, "%Y-%m-%d")
    except ValueError:
        raise ValidationError(f"Date invalide : {text} (format attendu AAAA-MM-JJ)")
    return text


def normalize_persons(persons: str | Iterable[str] | None) -> list[str]:
    """Noms nettoyés, vides retirés / Trimmed names, empties dropped."""
    if persons is None:
        return []
    if isinstance(persons, str):
        persons = [persons]
    return [p.strip() for p in persons if p and p.strip()]


def append_action(previous: str | None, line: str) -> str:
    """Ajouter une ligne au journal texte / Append one line to the text log."""
    if not previous:
        return line
    return f"{previous}\n{line}"


def _status_value(status) -> str | None:
    if isinstance(status, InterventionStatus):
        return status.value
    return status


def _to_int(value) -> int | None:
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        return None


def _clean_ids(values: Iterable | None) -> list[int]:
    """Identifiants non vides convertis en int, sans doublon / Non-empty ids as ints, deduplicated."""
    if isinstance(values, (str, int)):
        values = [values]
    ids: list[int] = []
    for value in values or []:
        parsed = _to_int(value)
        if parsed is not None and parsed not in ids:
            ids.append(parsed)
    return ids


def _new_intervention(floor: Floor, room: Room, lot: str, task: str, creator: Actor, action: str) -> Intervention:
    return Intervention(
        user_id=creator.email,
        old_floor_name=floor.name,
        old_room_name=room.name,
        lot=lot,
        task=task,
        status=InterventionStatus.A_FAIRE,
        person="",
        action=action,
        floor_id=floor.id,
        room_id=room.id,
    )


@asynccontextmanager
async def _atomic(db: AsyncSession, operation: str):
    """Traduire une erreur base en StoreFailureError après rollback /
    Turn a store error into StoreFailureError after rolling back.
    """
    try:
        yield
    except SQLAlchemyError as exc:
        log.exception("Echec base de donnees pendant %s", operation)
        await db.rollback()
        raise StoreFailureError(f"Erreur base de données pendant {operation}") from exc


class LifecycleEngine:
    """Transitions de statut et créations d'interventions / Status transitions and creations."""

    @staticmethod
    def status_line(new_status: str, date_text: str, actor: Actor, persons_text: str) -> str:
        """Ligne de journal pour un changement de statut / Log line for a status change."""
        if new_status == InterventionStatus.A_FAIRE.value:
            return f"Réinitialisé le {date_text} par {actor.display_name}"
        if new_status == InterventionStatus.EN_COURS.value:
            return f"En cours depuis le {date_text} (par {persons_text})"
        return f"Terminé le {date_text} (validé par {actor.display_name})"

    @staticmethod
    async def change_status(
        db: AsyncSession,
        intervention_id: int,
        actor: Actor,
        new_status: str,
        effective_date: str | None = None,
        selected_persons: str | Iterable[str] | None = None,
    ) -> Intervention:
        """Changer le statut d'une intervention / Change an intervention's status.

        - a faire : personne inchangée / person unchanged
        - en cours : personne = sélection, sinon l'acteur / person = selection, else the actor
        - terminé : personne inchangée, validation attribuée à l'acteur ;
          la ligne n'est ajoutée au journal texte que pour un non-admin
        """
        if new_status not in ALLOWED_STATUSES:
            raise InvalidStatusError(f"Statut invalide : {new_status}")
        status = InterventionStatus(new_status)

        persons = normalize_persons(selected_persons)
        persons_text = ", ".join(persons) or actor.display_name
        date_text = clean_date(effective_date) or today_iso()
        line = LifecycleEngine.status_line(status.value, date_text, actor, persons_text)

        async with _atomic(db, "le changement de statut"):
            intervention = await InterventionRepository.get_for_update(db, intervention_id)
            if intervention is None:
                raise NotFoundError(f"Intervention {intervention_id} introuvable")

            old_status = _status_value(intervention.status)
            person = intervention.person or ""
            action = intervention.action or ""

            if status is InterventionStatus.EN_COURS:
                person = persons_text
                action = append_action(action, line)
            elif status is InterventionStatus.A_FAIRE:
                action = append_action(action, line)
            elif not actor.is_admin:
                # TODO: confirmer si la validation par un admin doit aussi apparaître dans le journal texte
                action = append_action(action, line)

            InterventionRepository.update_fields(intervention, status=status, person=person, action=action)
            await HistoryLedger.record(
                db,
                intervention_id=intervention.id,
                event_type=HistoryEventType.STATUS_CHANGE,
                actor=actor,
                old_status=old_status,
                new_status=status.value,
                persons=persons_text,
                event_date=date_text,
                note=line,
            )
            await db.flush()

        log.info(
            "Intervention %s : %s -> %s par %s", intervention_id, old_status, status.value, actor.email,
        )
        return intervention

    @staticmethod
    async def _location_label(db: AsyncSession, lookup, location_id: int | None, fallback: str | None) -> str:
        """Nom courant du lieu, sinon l'instantané / Current location name, else the snapshot."""
        if location_id is None:
            return fallback or "-"
        location = await lookup(db, location_id)
        if location is None:
            return fallback or f"#{location_id}"
        return location.name

    @staticmethod
    async def edit_intervention(
        db: AsyncSession,
        intervention_id: int,
        actor: Actor,
        floor_id: int | None,
        room_id: int | None,
        lot: str | None,
        task: str | None,
        selected_persons: str | Iterable[str] | None = None,
        effective_date: str | None = None,
    ) -> Intervention:
        """Corriger une intervention sans changer son statut / Edit an intervention, status untouched."""
        new_lot = (lot or "").strip()
        new_task = (task or "").strip()
        if not new_lot or not new_task:
            raise ValidationError("Lot et tâche sont obligatoires.")

        persons = normalize_persons(selected_persons)
        date_text = clean_date(effective_date)

        async with _atomic(db, "la modification"):
            intervention = await InterventionRepository.get_for_update(db, intervention_id)
            if intervention is None:
                raise NotFoundError(f"Intervention {intervention_id} introuvable")

            new_floor_id = _to_int(floor_id) or intervention.floor_id
            new_room_id = _to_int(room_id) or intervention.room_id

            # Portée : étage du même chantier, pièce de cet étage / Scope checks
            if new_floor_id != intervention.floor_id:
                floor = await LocationRegistry.get_floor(db, new_floor_id)
                if floor is None:
                    raise InvalidScopeError("Étage invalide")
                if intervention.floor_id is not None:
                    current = await LocationRegistry.get_floor(db, intervention.floor_id)
                    if current is not None and current.chantier_id != floor.chantier_id:
                        raise InvalidScopeError("Étage invalide pour ce chantier")
            if new_room_id is not None and (
                new_room_id != intervention.room_id or new_floor_id != intervention.floor_id
            ):
                if new_floor_id is None or await LocationRegistry.get_room_in_floor(db, new_room_id, new_floor_id) is None:
                    raise InvalidScopeError("Pièce invalide pour cet étage")

            old_person = intervention.person or ""
            new_person = ", ".join(persons) if persons else old_person

            changes: list[str] = []
            if intervention.lot != new_lot:
                changes.append(f"Lot : « {intervention.lot} » → « {new_lot} »")
            if intervention.task != new_task:
                changes.append(f"Tâche : « {intervention.task} » → « {new_task} »")
            if intervention.floor_id != new_floor_id:
                old_label = await LifecycleEngine._location_label(db, LocationRegistry.get_floor, intervention.floor_id, intervention.old_floor_name)
                new_label = await LifecycleEngine._location_label(db, LocationRegistry.get_floor, new_floor_id, None)
                changes.append(f"Étage : « {old_label} » → « {new_label} »")
            if intervention.room_id != new_room_id:
                old_label = await LifecycleEngine._location_label(db, LocationRegistry.get_room, intervention.room_id, intervention.old_room_name)
                new_label = await LifecycleEngine._location_label(db, LocationRegistry.get_room, new_room_id, None)
                changes.append(f"Pièce : « {old_label} » → « {new_label} »")
            if old_person != new_person:
                changes.append(f"Qui : « {old_person} » → « {new_person} »")
            if date_text:
                changes.append(f"Quand : {date_text}")
            note = "; ".join(changes) or NO_VISIBLE_CHANGE_NOTE

            fragments = []
            if persons:
                fragments.append(f"Qui = {new_person}")
            if date_text:
                fragments.append(f"Quand = {date_text}")
            action = intervention.action or ""
            if fragments:
                correction = f"Correction le {today_iso()} par {actor.display_name} : {', '.join(fragments)}"
                action = append_action(action, correction)

            status = _status_value(intervention.status)
            InterventionRepository.update_fields(
                intervention,
                floor_id=new_floor_id,
                room_id=new_room_id,
                lot=new_lot,
                task=new_task,
                person=new_person,
                action=action,
            )
            await HistoryLedger.record(
                db,
                intervention_id=intervention.id,
                event_type=HistoryEventType.EDIT,
                actor=actor,
                old_status=status,
                new_status=status,
                persons=new_person,
                event_date=date_text or today_iso(),
                note=note,
            )
            await db.flush()

        log.info("Intervention %s corrigee par %s : %s", intervention_id, actor.email, note)
        return intervention

    @staticmethod
    async def create_from_manual_selection(
        db: AsyncSession,
        chantier_id: int,
        floor_id: int | str | None,
        room_ids: Iterable | None,
        lot: str | None,
        task: str | None,
        creator: Actor,
    ) -> int:
        """Créer une intervention par pièce sélectionnée / Create one intervention per selected room.

        Les pièces hors de l'étage sont ignorées sans erreur / Rooms outside the floor are skipped.
        """
        lot = (lot or "").strip()
        task = (task or "").strip()
        floor_pk = _to_int(floor_id)
        if floor_pk is None or not lot or not task:
            raise ValidationError("Étage, lot et tâche sont obligatoires.")
        room_pks = _clean_ids(room_ids)
        if not room_pks:
            raise ValidationError("Veuillez sélectionner au moins une pièce.")

        async with _atomic(db, "la création des interventions"):
            floor = await LocationRegistry.get_floor_in_chantier(db, floor_pk, chantier_id)
            if floor is None:
                raise InvalidScopeError("Étage invalide pour ce chantier")

            new_rows: list[Intervention] = []
            for room_pk in room_pks:
                room = await LocationRegistry.get_room_in_floor(db, room_pk, floor.id)
                if room is None:
                    log.debug("Piece %s ignoree (hors etage %s)", room_pk, floor.id)
                    continue
                new_rows.append(_new_intervention(floor, room, lot, task, creator, CREATION_ACTION))
            created = await InterventionRepository.add_all(db, new_rows)

        log.info("%d intervention(s) creee(s) sur le chantier %s par %s", created, chantier_id, creator.email)
        return created

    @staticmethod
    async def create_from_catalog_selection(
        db: AsyncSession,
        chantier_id: int,
        floor_id: int | str | None,
        lots: Iterable[str] | None,
        creator: Actor,
        room_ids: Iterable | None = None,
        all_rooms: bool = False,
    ) -> int:
        """Créer pièces × lots × tâches du catalogue du chantier /
        Create rooms × lots × site-catalog tasks.
        """
        floor_pk = _to_int(floor_id)
        if isinstance(lots, str):
            lots = [lots]
        selected_lots: list[str] = []
        for lot in lots or []:
            lot = (lot or "").strip()
            if lot and lot not in selected_lots:
                selected_lots.append(lot)
        if floor_pk is None or not selected_lots:
            raise ValidationError("Étage et au moins un lot sont obligatoires.")

        async with _atomic(db, "la création depuis le catalogue"):
            floor = await LocationRegistry.get_floor_in_chantier(db, floor_pk, chantier_id)
            if floor is None:
                raise InvalidScopeError("Étage invalide pour ce chantier")

            if all_rooms:
                rooms = await LocationRegistry.list_rooms_by_floor(db, floor.id)
            else:
                rooms = []
                for room_pk in _clean_ids(room_ids):
                    room = await LocationRegistry.get_room_in_floor(db, room_pk, floor.id)
                    if room is None:
                        log.debug("Piece %s ignoree (hors etage %s)", room_pk, floor.id)
                        continue
                    rooms.append(room)
            if not rooms:
                raise ValidationError("Veuillez sélectionner au moins une pièce.")

            tasks_by_lot = {
                lot: await CatalogService.list_tasks_for_lot(db, chantier_id, lot)
                for lot in selected_lots
            }

            created = await InterventionRepository.add_all(db, [
                _new_intervention(floor, room, lot, task, creator, CATALOG_CREATION_ACTION)
                for room in rooms
                for lot in selected_lots
                for task in tasks_by_lot[lot]
            ])

        log.info(
            "%d intervention(s) creee(s) depuis le catalogue (chantier %s, %d piece(s), %d lot(s))",
            created, chantier_id, len(rooms), len(selected_lots),
        )
        return created

    @staticmethod
    async def create_from_rows(
        db: AsyncSession,
        chantier_id: int,
        rows: Iterable[TaskRow],
        creator: Actor,
    ) -> ImportReport:
        """Créer les interventions d'une source de lignes (import Excel/CSV) /
        Create interventions from a row source (Excel/CSV import).

        Étage ou pièce introuvable : ligne ignorée et signalée / Unknown floor or room: row skipped and reported.
        """
        report = ImportReport()
        async with _atomic(db, "l'import"):
            if await LocationRegistry.get_chantier(db, chantier_id) is None:
                raise NotFoundError(f"Chantier {chantier_id} introuvable")

            floors: dict[str, Floor | None] = {}
            rooms: dict[tuple[int, str], Room | None] = {}
            new_rows: list[Intervention] = []
            for row in rows:
                if row.floor_name not in floors:
                    floors[row.floor_name] = await LocationRegistry.find_floor_by_name(db, chantier_id, row.floor_name)
                floor = floors[row.floor_name]
                if floor is None:
                    report.skipped.append(
                        f'Ligne avec étage "{row.floor_name}", pièce "{row.room_name}" ignorée (étage introuvable).'
                    )
                    continue

                key = (floor.id, row.room_name)
                if key not in rooms:
                    rooms[key] = await LocationRegistry.find_room_by_name(db, floor.id, row.room_name)
                room = rooms[key]
                if room is None:
                    report.skipped.append(
                        f'Ligne avec étage "{row.floor_name}", pièce "{row.room_name}" ignorée (pièce introuvable).'
                    )
                    continue

                new_rows.append(_new_intervention(floor, room, row.lot, row.task, creator, CREATION_ACTION))
            report.created = await InterventionRepository.add_all(db, new_rows)

        log.info(
            "Import chantier %s : %d creee(s), %d ignoree(s)", chantier_id, report.created, len(report.skipped),
        )
        return report
