# mentor_matching/matching/diagnostics.py
from __future__ import annotations

from collections import Counter
from typing import Any, Dict, List, Mapping, Optional, Sequence

import pandas as pd

from ..config import ENFORCE_MENTOR_CAPACITY
from ..models import MatchingRun, Mentee, Mentor
from .milp_model import solve_max_preference_matching
from .preference_matcher import choice_rank
from .reconciler import available_mentor_ids


def unchosen_mentor_ids(
    mentees: Sequence[Mentee],
    mentor_index: Mapping[str, Mentor],
) -> List[str]:
    """Roster mentors that no mentee ranked at all, in roster order."""
    chosen = {c for m in mentees for c in m.ranked_choices}
    return [mid for mid in mentor_index if mid not in chosen]


def unknown_choice_ids(
    mentees: Sequence[Mentee],
    mentor_index: Mapping[str, Mentor],
) -> List[str]:
    """Ranked mentor IDs that are not in the roster (stale references)."""
    seen: Dict[str, None] = {}
    for m in mentees:
        for c in m.ranked_choices:
            if c not in mentor_index:
                seen.setdefault(c, None)
    return list(seen)


def analyze_run(
    mentees: Sequence[Mentee],
    mentor_index: Mapping[str, Mentor],
    run: MatchingRun,
    enforce_capacity: bool = ENFORCE_MENTOR_CAPACITY,
    include_bound: bool = False,
) -> Dict[str, Any]:
    """
    Summarise a matching run.

    Returns a dict with:
      - 'ok': bool  (False if a reconciliation pass could still pair someone)
      - 'messages': list[str] (human-readable diagnostics)
      - 'suggestion': str (summary)

      - 'num_mentees', 'num_mentors': int
      - 'num_matched', 'num_unmatched': int
      - 'num_available_mentors': int  (free slots left in the roster)
      - 'expected_unmatched_after_reconcile': int
            max(0, unmatched - available)
      - 'choice_rank_counts': Dict[Optional[int], int]
            rank of each matched mentor in the mentee's list;
            None = paired outside the ranked choices
      - 'unchosen_mentor_ids': List[str]
      - 'unknown_choice_ids': List[str]

    With include_bound=True also:
      - 'preference_bound_status': str  (PuLP status)
      - 'preference_bound': int  (largest matching using ranked choices only)
      - 'preference_matched': int  (pairs in `run` that honour a ranked choice)
    """
    messages: List[str] = []
    mentee_by_id = {m.id: m for m in mentees}

    matched = run.matched()
    unmatched = run.unmatched()
    available = available_mentor_ids(run, mentor_index, enforce_capacity)
    expected_left = max(0, len(unmatched) - len(available))

    ranks: Counter = Counter()
    for a in matched:
        mentee = mentee_by_id.get(a.mentee_id)
        ranks[choice_rank(mentee, a.mentor_id) if mentee else None] += 1

    unchosen = unchosen_mentor_ids(mentees, mentor_index)
    unknown = unknown_choice_ids(mentees, mentor_index)

    # ---------- 1. Could a reconciliation pass still pair anyone? ----------
    pairable = len(unmatched) - expected_left
    ok = pairable == 0
    if not ok:
        messages.append(
            f"{pairable} unmatched mentee(s) could still be paired with "
            f"{len(available)} available mentor slot(s)."
        )

    # ---------- 2. Roster hygiene ----------
    if unknown:
        messages.append(
            f"Ranked choices reference {len(unknown)} mentor(s) not in the roster: "
            f"{', '.join(unknown)}"
        )
    if unchosen:
        messages.append(
            f"{len(unchosen)} mentor(s) were not ranked by any mentee: "
            f"{', '.join(unchosen)}"
        )

    result: Dict[str, Any] = {
        "ok": ok,
        "messages": messages,
        "num_mentees": len(run),
        "num_mentors": len(mentor_index),
        "num_matched": len(matched),
        "num_unmatched": len(unmatched),
        "num_available_mentors": len(available),
        "expected_unmatched_after_reconcile": expected_left,
        "choice_rank_counts": dict(ranks),
        "unchosen_mentor_ids": unchosen,
        "unknown_choice_ids": unknown,
    }

    # ---------- 3. Greedy vs. best preference-only matching ----------
    if include_bound:
        status, best = solve_max_preference_matching(
            mentees, mentor_index, enforce_capacity
        )
        honoured = sum(c for r, c in ranks.items() if r is not None)
        result["preference_bound_status"] = status
        result["preference_bound"] = len(best)
        result["preference_matched"] = honoured
        if status == "Optimal" and len(best) > honoured:
            messages.append(
                f"Input order cost {len(best) - honoured} preference match(es): "
                f"{honoured} honoured, {len(best)} possible."
            )

    if ok and not messages:
        result["suggestion"] = "Run is complete; nothing left to pair."
    elif not ok:
        result["suggestion"] = "Run 'pair remaining' to fill the open slots."
    else:
        result["suggestion"] = "No further pairing possible; review messages."

    return result


def assignment_table(
    run: MatchingRun,
    mentees: Sequence[Mentee],
    mentor_index: Mapping[str, Mentor],
) -> pd.DataFrame:
    """
    One row per mentee with the matched mentor's name and a
    Matched/Unmatched status, in run order.
    """
    mentee_by_id = {m.id: m for m in mentees}
    rows = []
    for a in run.assignments:
        mentee = mentee_by_id.get(a.mentee_id)
        mentor: Optional[Mentor] = mentor_index.get(a.mentor_id) if a.mentor_id else None
        rows.append(
            {
                "mentee_id": a.mentee_id,
                "mentee_name": mentee.name if mentee else "",
                "mentor_id": a.mentor_id,
                "mentor_name": mentor.name if mentor else None,
                "choice_rank": choice_rank(mentee, a.mentor_id) if mentee else None,
                "status": "Matched" if a.mentor_id is not None else "Unmatched",
            }
        )
    return pd.DataFrame(
        rows,
        columns=["mentee_id", "mentee_name", "mentor_id", "mentor_name", "choice_rank", "status"],
        dtype=object,
    )
