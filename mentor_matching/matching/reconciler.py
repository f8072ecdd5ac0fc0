# mentor_matching/matching/reconciler.py
from __future__ import annotations

from collections import deque
from collections.abc import Mapping
from typing import Deque, Iterable, List, Union

from ..config import ENFORCE_MENTOR_CAPACITY
from ..models import Assignment, MatchingRun, Mentor, index_mentors_by_id
from .preference_matcher import slots_for


def _roster(mentors: Union[Mapping[str, Mentor], Iterable[Mentor]]) -> List[Mentor]:
    # Duplicate roster rows collapse to one mentor, as in the matcher's index
    if not isinstance(mentors, Mapping):
        mentors = index_mentors_by_id(mentors)
    return list(mentors.values())


def available_mentor_ids(
    run: MatchingRun,
    mentors: Union[Mapping[str, Mentor], Iterable[Mentor]],
    enforce_capacity: bool = ENFORCE_MENTOR_CAPACITY,
) -> List[str]:
    """
    Mentor IDs not yet claimed in `run`, in roster order.

    With capacity enforcement a mentor appears once per free slot,
    consecutively.
    """
    claim_counts = run.claim_counts()
    available: List[str] = []
    for m in _roster(mentors):
        free = slots_for(m, enforce_capacity) - claim_counts.get(m.id, 0)
        available.extend([m.id] * max(free, 0))
    return available


def pair_remaining(
    run: MatchingRun,
    mentors: Union[Mapping[str, Mentor], Iterable[Mentor]],
    enforce_capacity: bool = ENFORCE_MENTOR_CAPACITY,
) -> MatchingRun:
    """
    Fill the gaps left by the preference pass, ignoring preferences.

    Unmatched mentees (in run order) take mentors from the queue of
    unclaimed mentors (in roster order) until one side runs out. Calling it
    again keeps consuming from whatever is still available, so callers must
    thread the returned run forward.
    """
    queue: Deque[str] = deque(available_mentor_ids(run, mentors, enforce_capacity))
    if not queue or not run.unmatched():
        return run

    updated: List[Assignment] = []
    for a in run.assignments:
        if a.mentor_id is None and queue:
            a = a.with_mentor(queue.popleft())
        updated.append(a)

    return MatchingRun(assignments=tuple(updated))
