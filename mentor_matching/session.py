# mentor_matching/session.py
"""
The three operator actions around one matching run:

  run matching    -> run_matching_action
  pair remaining  -> pair_remaining_action
  save pairings   -> save_pairings_action

Session state is an immutable value. Each action takes the previous state
plus the current roster snapshot and returns a new state (or, for saving, a
SaveResult), so nothing is kept in a module-level singleton.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence

from .config import ENFORCE_MENTOR_CAPACITY
from .exceptions import NoMatchingRunError
from .matching.preference_matcher import run_matching
from .matching.reconciler import available_mentor_ids, pair_remaining
from .models import MatchingRun, Mentee, Mentor, index_mentors_by_id
from .persistence.assignment_store import AssignmentRow, AssignmentStore


@dataclass(frozen=True)
class MatchingSession:
    run: Optional[MatchingRun] = None
    enforce_capacity: bool = ENFORCE_MENTOR_CAPACITY
    reconcile_passes: int = 0

    @property
    def has_run(self) -> bool:
        return self.run is not None


@dataclass(frozen=True)
class SaveResult:
    saved: int
    rows: List[AssignmentRow] = field(default_factory=list)


def run_matching_action(
    state: MatchingSession,
    mentees: Sequence[Mentee],
    mentors: Sequence[Mentor],
    verbose: bool = False,
) -> MatchingSession:
    """Recompute the run from scratch; any previous run is discarded."""
    mentor_index = index_mentors_by_id(mentors)
    run = run_matching(mentees, mentor_index, state.enforce_capacity)

    if verbose:
        print(
            f"[MATCHING] {len(run.matched())}/{len(run)} mentees matched "
            f"against {len(mentor_index)} mentors."
        )

    return replace(state, run=run, reconcile_passes=0)


def pair_remaining_action(
    state: MatchingSession,
    mentors: Sequence[Mentor],
    verbose: bool = False,
) -> MatchingSession:
    """
    Pair unmatched mentees with unclaimed mentors. Does nothing before a
    run exists, or when there are no unmatched mentees or no free mentors.
    """
    if state.run is None:
        if verbose:
            print("[RECONCILE] No matching run yet; nothing to pair.")
        return state

    mentor_index = index_mentors_by_id(mentors)
    unmatched = state.run.unmatched()
    available = available_mentor_ids(state.run, mentor_index, state.enforce_capacity)
    if not unmatched or not available:
        if verbose:
            print(
                f"[RECONCILE] Nothing to pair: {len(unmatched)} unmatched mentee(s), "
                f"{len(available)} free mentor slot(s)."
            )
        return state

    run = pair_remaining(state.run, mentor_index, state.enforce_capacity)

    if verbose:
        filled = len(unmatched) - len(run.unmatched())
        print(
            f"[RECONCILE] Paired {filled} mentee(s); "
            f"{len(run.unmatched())} still unmatched."
        )

    return replace(state, run=run, reconcile_passes=state.reconcile_passes + 1)


def pairing_rows(run: MatchingRun, assigned_by: Optional[str] = None) -> List[AssignmentRow]:
    """Payload for the store: matched assignments only."""
    return [
        {"mentee_id": a.mentee_id, "mentor_id": a.mentor_id, "assigned_by": assigned_by}
        for a in run.matched()
    ]


def save_pairings_action(
    state: MatchingSession,
    store: AssignmentStore,
    assigned_by: Optional[str] = None,
    verbose: bool = False,
) -> SaveResult:
    """
    Hand the matched pairs to the store (upsert by mentee_id).

    Raises NoMatchingRunError before a run exists. Store failures propagate
    as AssignmentSaveError. With no matched pairs the store is not called.
    """
    if state.run is None:
        raise NoMatchingRunError("Run matching before saving pairings.")

    rows = pairing_rows(state.run, assigned_by=assigned_by)
    if not rows:
        if verbose:
            print("[SAVE] No matched pairs to save.")
        return SaveResult(saved=0, rows=[])

    saved = store.upsert(rows)

    if verbose:
        print(f"[SAVE] Saved {saved} pairing(s).")

    return SaveResult(saved=saved, rows=rows)
