# mentor_matching/models.py
from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Optional, Tuple

from .config import DEFAULT_MENTOR_CAPACITY


@dataclass(frozen=True)
class Mentor:
    id: str
    name: str = ""
    capacity: int = DEFAULT_MENTOR_CAPACITY   # only used when capacity is enforced


@dataclass(frozen=True)
class Mentee:
    id: str
    ranked_choices: Tuple[str, ...] = ()   # mentor IDs, most preferred first
    name: str = ""


@dataclass(frozen=True)
class Assignment:
    mentee_id: str
    mentor_id: Optional[str] = None   # None = unmatched

    @property
    def is_matched(self) -> bool:
        return self.mentor_id is not None

    def with_mentor(self, mentor_id: Optional[str]) -> "Assignment":
        return replace(self, mentor_id=mentor_id)


@dataclass(frozen=True)
class MatchingRun:
    """
    Result of one matching run (optionally followed by reconciliation passes).

    Assignments are kept in mentee input order. A run is never modified in
    place; every stage returns a new MatchingRun.
    """
    assignments: Tuple[Assignment, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.assignments)

    def __iter__(self):
        return iter(self.assignments)

    def matched(self) -> List[Assignment]:
        return [a for a in self.assignments if a.mentor_id is not None]

    def unmatched(self) -> List[Assignment]:
        return [a for a in self.assignments if a.mentor_id is None]

    def claimed_mentor_ids(self) -> set:
        return {a.mentor_id for a in self.assignments if a.mentor_id is not None}

    def claim_counts(self) -> Dict[str, int]:
        return dict(Counter(a.mentor_id for a in self.assignments if a.mentor_id is not None))

    def mentor_for(self, mentee_id: str) -> Optional[str]:
        for a in self.assignments:
            if a.mentee_id == mentee_id:
                return a.mentor_id
        return None

    def as_pairs(self) -> List[Tuple[str, Optional[str]]]:
        return [(a.mentee_id, a.mentor_id) for a in self.assignments]


MentorIndex = Dict[str, Mentor]


def index_mentors_by_id(mentors: Iterable[Mentor]) -> MentorIndex:
    # dict keeps roster order, which the reconciler relies on
    return {m.id: m for m in mentors}
