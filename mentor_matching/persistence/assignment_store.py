# mentor_matching/persistence/assignment_store.py
from __future__ import annotations

import os
from typing import Dict, List, Optional, Sequence

import pandas as pd

from ..config import ASSIGNMENT_COLUMNS, ASSIGNMENTS_CSV_PATH
from ..exceptions import AssignmentSaveError

# One saved pairing: {"mentee_id": ..., "mentor_id": ..., "assigned_by": ...}
AssignmentRow = Dict[str, Optional[str]]


def _check_rows(rows: Sequence[AssignmentRow]) -> None:
    for row in rows:
        if not row.get("mentee_id") or not row.get("mentor_id"):
            raise AssignmentSaveError(
                f"Assignment rows need both mentee_id and mentor_id, got {row!r}."
            )


class AssignmentStore:
    """
    Persistence for saved pairings. Writes are upserts keyed by mentee_id:
    saving the same pairings twice leaves the store unchanged, and saving a
    new mentor for a mentee replaces the old row.
    """

    def upsert(self, rows: Sequence[AssignmentRow]) -> int:
        raise NotImplementedError

    def load(self) -> List[AssignmentRow]:
        raise NotImplementedError


class InMemoryAssignmentStore(AssignmentStore):
    def __init__(self):
        self._rows: Dict[str, AssignmentRow] = {}

    def upsert(self, rows: Sequence[AssignmentRow]) -> int:
        _check_rows(rows)
        for row in rows:
            self._rows[row["mentee_id"]] = {c: row.get(c) for c in ASSIGNMENT_COLUMNS}
        return len(rows)

    def load(self) -> List[AssignmentRow]:
        return [dict(r) for r in self._rows.values()]


class CsvAssignmentStore(AssignmentStore):
    """
    Assignments kept in a CSV file with columns mentee_id, mentor_id,
    assigned_by. The file is rewritten through a temporary file so a failed
    write leaves the previous contents in place.
    """

    def __init__(self, path: str = ASSIGNMENTS_CSV_PATH):
        self.path = path

    def _read(self) -> pd.DataFrame:
        if not os.path.exists(self.path):
            return pd.DataFrame(columns=ASSIGNMENT_COLUMNS)
        try:
            df = pd.read_csv(self.path, dtype=str, keep_default_na=False)
        except (pd.errors.ParserError, pd.errors.EmptyDataError, OSError) as exc:
            raise AssignmentSaveError(
                f"Could not read existing assignments from {self.path}: {exc}"
            ) from exc
        for col in ASSIGNMENT_COLUMNS:
            if col not in df.columns:
                df[col] = ""
        return df[ASSIGNMENT_COLUMNS]

    def load(self) -> List[AssignmentRow]:
        df = self._read()
        return [
            {c: (row[c] if row[c] != "" else None) for c in ASSIGNMENT_COLUMNS}
            for _, row in df.iterrows()
        ]

    def upsert(self, rows: Sequence[AssignmentRow]) -> int:
        _check_rows(rows)
        if not rows:
            return 0
        existing = self._read()

        new = pd.DataFrame(
            [{c: (row.get(c) or "") for c in ASSIGNMENT_COLUMNS} for row in rows],
            columns=ASSIGNMENT_COLUMNS,
        )
        # Later rows win per mentee_id; existing order kept, new mentees appended
        frames = [existing, new] if not existing.empty else [new]
        merged = (
            pd.concat(frames, ignore_index=True)
            .drop_duplicates(subset="mentee_id", keep="last")
        )
        order = list(dict.fromkeys(list(existing["mentee_id"]) + list(new["mentee_id"])))
        merged = merged.set_index("mentee_id").loc[order].reset_index()[ASSIGNMENT_COLUMNS]

        directory = os.path.dirname(self.path)
        tmp_path = f"{self.path}.tmp"
        try:
            if directory:
                os.makedirs(directory, exist_ok=True)
            merged.to_csv(tmp_path, index=False)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise AssignmentSaveError(
                f"Could not write assignments to {self.path}: {exc}"
            ) from exc

        return len(rows)
