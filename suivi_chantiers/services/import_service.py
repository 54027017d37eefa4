"""
Service d'import CSV/Excel des tâches / CSV/Excel task import service.
Parse les fichiers et retourne une suite de lignes (étage, pièce, lot, tâche).
Parses files and returns a sequence of (floor, room, lot, task) rows.
"""

import csv
import io
from collections.abc import Iterable
from typing import Any, NamedTuple

from openpyxl import load_workbook


class TaskRow(NamedTuple):
    """Ligne de tâche à créer / Task row to create."""
    floor_name: str
    room_name: str
    lot: str
    task: str


def _cell_text(value: Any) -> str:
    """Valeur de cellule en texte nettoyé / Cell value as trimmed text."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def rows_from_cells(cells: Iterable[tuple]) -> list[TaskRow]:
    """Construire les lignes à partir des cellules (A étage, B pièce, C lot, D tâche).

    Build rows from raw cells. Un lot vide reprend le dernier lot non vide
    (current_lot) ; les lignes sans tâche sont ignorées.
    A blank lot carries forward the last non-empty lot; rows without a task are dropped.
    """
    rows: list[TaskRow] = []
    current_lot = ""
    for raw in cells:
        values = [_cell_text(v) for v in list(raw)[:4]]
        values += [""] * (4 - len(values))
        floor_name, room_name, lot, task = values

        if lot:
            current_lot = lot
        if not task:
            continue
        rows.append(TaskRow(floor_name, room_name, lot or current_lot, task))
    return rows


class ImportService:
    """Import de tâches depuis fichiers / Task import from files."""

    @staticmethod
    def parse_csv(content: bytes) -> list[TaskRow]:
        """Parser un fichier CSV / Parse a CSV file."""
        text = content.decode("utf-8-sig")  # BOM-safe
        lines = text.splitlines()
        if not lines:
            return []
        # Point-virgule si présent dans l'en-tête, sinon virgule / Semicolon if in header, else comma
        delimiter = ";" if ";" in lines[0] else ","
        reader = csv.reader(io.StringIO(text), delimiter=delimiter)
        next(reader, None)  # en-tête / header
        return rows_from_cells(tuple(r) for r in reader if any(c.strip() for c in r))

    @staticmethod
    def parse_excel(content: bytes) -> list[TaskRow]:
        """Parser la première feuille Excel / Parse the first Excel sheet."""
        wb = load_workbook(filename=io.BytesIO(content), read_only=True, data_only=True)
        try:
            ws = wb.worksheets[0] if wb.worksheets else None
            if ws is None:
                return []
            rows_iter = ws.iter_rows(min_row=2, max_col=4, values_only=True)
            return rows_from_cells(
                row for row in rows_iter if any(v is not None for v in row)
            )
        finally:
            wb.close()

    @staticmethod
    def parse_task_rows(content: bytes, filename: str) -> list[TaskRow]:
        """Parser un fichier selon son extension / Parse file based on extension."""
        ext = filename.rsplit(".", 1)[-1].lower()
        if ext == "csv":
            return ImportService.parse_csv(content)
        elif ext in ("xlsx", "xlsm"):
            return ImportService.parse_excel(content)
        raise ValueError(f"Unsupported file type: {ext}")
