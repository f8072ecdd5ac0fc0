# mentor_matching/matching/preference_matcher.py
from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Sequence

from ..config import ENFORCE_MENTOR_CAPACITY
from ..models import Assignment, MatchingRun, Mentee, Mentor


def slots_for(mentor: Mentor, enforce_capacity: bool) -> int:
    """
    Number of mentees `mentor` may take in one run.
    Without capacity enforcement every mentor is capacity 1.
    """
    if not enforce_capacity:
        return 1
    return max(mentor.capacity, 0)


def first_available_choice(
    mentee: Mentee,
    mentor_index: Mapping[str, Mentor],
    claim_counts: Mapping[str, int],
    enforce_capacity: bool = ENFORCE_MENTOR_CAPACITY,
) -> Optional[str]:
    """
    Walk the mentee's ranked choices and return the first mentor ID that is
    in the roster and still has a free slot, or None.

    Choices that are not in the roster are skipped silently.
    """
    for choice_id in mentee.ranked_choices:
        mentor = mentor_index.get(choice_id)
        if mentor is None:
            continue
        if claim_counts.get(choice_id, 0) < slots_for(mentor, enforce_capacity):
            return choice_id
    return None


def run_matching(
    mentees: Sequence[Mentee],
    mentor_index: Mapping[str, Mentor],
    enforce_capacity: bool = ENFORCE_MENTOR_CAPACITY,
) -> MatchingRun:
    """
    Greedy first-available matching over ranked preferences.

    Mentees are processed in the order given, so input order is a priority:
    an earlier mentee always wins a contested mentor, even when a later
    mentee ranked that mentor higher. There is no backtracking.

    Returns one Assignment per mentee, in input order. Never raises for
    empty choice lists, duplicate choices or unknown mentor IDs; those
    simply end up unmatched.
    """
    claim_counts: Dict[str, int] = {}
    assignments: List[Assignment] = []

    for mentee in mentees:
        chosen = first_available_choice(
            mentee, mentor_index, claim_counts, enforce_capacity
        )
        if chosen is not None:
            claim_counts[chosen] = claim_counts.get(chosen, 0) + 1
        assignments.append(Assignment(mentee_id=mentee.id, mentor_id=chosen))

    return MatchingRun(assignments=tuple(assignments))


def choice_rank(mentee: Mentee, mentor_id: Optional[str]) -> Optional[int]:
    """1-based position of `mentor_id` in the mentee's ranked choices, or None."""
    if mentor_id is None:
        return None
    for rank, choice_id in enumerate(mentee.ranked_choices, start=1):
        if choice_id == mentor_id:
            return rank
    return None
