# mentor_matching/data_generation/roster_loader.py
from __future__ import annotations

from typing import List, Tuple

import pandas as pd

from ..config import (
    CHOICE_COLUMNS,
    DEFAULT_MENTOR_CAPACITY,
    RANKED_CHOICES_COLUMN,
    RANKED_CHOICES_SEPARATOR,
)
from ..exceptions import RosterLoadError
from ..models import Mentee, Mentor


def _read_csv(path: str) -> pd.DataFrame:
    # Everything as str; blank cells stay "" instead of NaN
    try:
        return pd.read_csv(path, dtype=str, keep_default_na=False)
    except FileNotFoundError as exc:
        raise RosterLoadError(f"Roster file not found: {path}") from exc
    except OSError as exc:
        raise RosterLoadError(f"Could not read roster file {path}: {exc}") from exc
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as exc:
        raise RosterLoadError(f"Could not parse roster file {path}: {exc}") from exc


def _cell(row: pd.Series, column: str) -> str:
    value = row.get(column, "")
    if value is None or pd.isna(value):
        return ""
    return str(value).strip()


def _require_id_column(df: pd.DataFrame, what: str) -> None:
    if "id" not in df.columns:
        raise RosterLoadError(
            f"{what} roster is missing the 'id' column. "
            f"Columns found: {list(df.columns)}"
        )


def _ranked_choices(row: pd.Series, df: pd.DataFrame) -> Tuple[str, ...]:
    """
    Ranked choices from either first/second/third_choice columns or a single
    ';'-separated column. Blank entries are dropped, order is kept.
    """
    if RANKED_CHOICES_COLUMN in df.columns:
        raw = _cell(row, RANKED_CHOICES_COLUMN).split(RANKED_CHOICES_SEPARATOR)
    else:
        raw = [_cell(row, c) for c in CHOICE_COLUMNS if c in df.columns]
    return tuple(c.strip() for c in raw if c.strip())


def _mentee_name(row: pd.Series) -> str:
    name = _cell(row, "name")
    if name:
        return name
    return " ".join(p for p in (_cell(row, "first_name"), _cell(row, "last_name")) if p)


def mentees_from_dataframe(df: pd.DataFrame) -> List[Mentee]:
    """
    Build Mentee records from a DataFrame, keeping row order.

    Expected columns:
        id, [name | first_name, last_name],
        first_choice, second_choice, third_choice   (or ranked_choices)
    """
    _require_id_column(df, "Mentee")

    mentees: List[Mentee] = []
    for _, row in df.iterrows():
        mentee_id = _cell(row, "id")
        if not mentee_id:
            continue
        mentees.append(
            Mentee(
                id=mentee_id,
                ranked_choices=_ranked_choices(row, df),
                name=_mentee_name(row),
            )
        )
    return mentees


def mentors_from_dataframe(
    df: pd.DataFrame,
    default_capacity: int = DEFAULT_MENTOR_CAPACITY,
) -> List[Mentor]:
    """
    Build Mentor records from a DataFrame, keeping row order (roster order).

    Expected columns:
        id, [full_name | name], [capacity]
    """
    _require_id_column(df, "Mentor")

    mentors: List[Mentor] = []
    for _, row in df.iterrows():
        mentor_id = _cell(row, "id")
        if not mentor_id:
            continue

        raw_cap = _cell(row, "capacity")
        try:
            capacity = int(raw_cap) if raw_cap else default_capacity
        except ValueError as exc:
            raise RosterLoadError(
                f"Mentor {mentor_id} has a non-integer capacity: {raw_cap!r}"
            ) from exc

        mentors.append(
            Mentor(
                id=mentor_id,
                name=_cell(row, "full_name") or _cell(row, "name"),
                capacity=capacity,
            )
        )
    return mentors


def load_mentees_csv(path: str) -> List[Mentee]:
    return mentees_from_dataframe(_read_csv(path))


def load_mentors_csv(
    path: str,
    default_capacity: int = DEFAULT_MENTOR_CAPACITY,
) -> List[Mentor]:
    return mentors_from_dataframe(_read_csv(path), default_capacity=default_capacity)
