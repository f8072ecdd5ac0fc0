# mentor_matching/matching/milp_model.py
from __future__ import annotations

from typing import Dict, List, Mapping, Sequence, Tuple

import pulp

from ..config import ENFORCE_MENTOR_CAPACITY
from ..models import Mentee, Mentor
from .preference_matcher import slots_for


def build_preference_edges(
    mentees: Sequence[Mentee],
    mentor_index: Mapping[str, Mentor],
) -> Dict[Tuple[str, str], int]:
    """
    edges[(mentee_id, mentor_id)] = 1-based rank of that mentor in the
    mentee's list. Unknown mentors are dropped; duplicates keep the best rank.
    """
    edges: Dict[Tuple[str, str], int] = {}
    for mentee in mentees:
        for rank, choice_id in enumerate(mentee.ranked_choices, start=1):
            if choice_id not in mentor_index:
                continue
            edges.setdefault((mentee.id, choice_id), rank)
    return edges


def build_max_preference_model(
    mentees: Sequence[Mentee],
    mentor_index: Mapping[str, Mentor],
    enforce_capacity: bool = ENFORCE_MENTOR_CAPACITY,
) -> Tuple[pulp.LpProblem, Dict[Tuple[str, str], pulp.LpVariable]]:
    """
    Binary model for the largest matching that only uses ranked choices.

    Variables:
        x[e, m] = 1 if mentee e is paired with mentor m (m ranked by e).

    Rules encoded:

      1) Each mentee gets at most one mentor:
           ∀e: sum_m x[e,m] ≤ 1

      2) Each mentor takes at most its slot count (1 unless capacity is
         enforced):
           ∀m: sum_e x[e,m] ≤ slots(m)

    Objective: maximise the number of pairs first, then prefer higher-ranked
    choices. Each pair is worth BIG - (rank - 1) with BIG larger than the
    total rank penalty any solution can collect.
    """
    edges = build_preference_edges(mentees, mentor_index)

    mentee_pos = {m.id: i for i, m in enumerate(mentees)}
    mentor_pos = {mid: j for j, mid in enumerate(mentor_index)}

    longest = max((len(m.ranked_choices) for m in mentees), default=0)
    big = len(mentees) * max(longest, 1) + 1

    prob = pulp.LpProblem("Mentee_Preference_Matching", pulp.LpMaximize)

    # Indices instead of raw IDs; IDs may contain characters PuLP rejects
    x: Dict[Tuple[str, str], pulp.LpVariable] = {}
    for (e, m) in edges:
        x[(e, m)] = pulp.LpVariable(
            f"x_{mentee_pos[e]}_{mentor_pos[m]}", lowBound=0, upBound=1, cat="Binary"
        )

    prob += (
        pulp.lpSum((big - (rank - 1)) * x[key] for key, rank in edges.items()),
        "PreferencePairs",
    )

    # (1) One mentor per mentee
    by_mentee: Dict[str, List[Tuple[str, str]]] = {}
    for key in x:
        by_mentee.setdefault(key[0], []).append(key)
    for e, keys in by_mentee.items():
        prob += (
            pulp.lpSum(x[k] for k in keys) <= 1,
            f"OneMentor_e_{mentee_pos[e]}",
        )

    # (2) Mentor slots
    by_mentor: Dict[str, List[Tuple[str, str]]] = {}
    for key in x:
        by_mentor.setdefault(key[1], []).append(key)
    for m, keys in by_mentor.items():
        prob += (
            pulp.lpSum(x[k] for k in keys) <= slots_for(mentor_index[m], enforce_capacity),
            f"MentorSlots_m_{mentor_pos[m]}",
        )

    return prob, x


def solve_max_preference_matching(
    mentees: Sequence[Mentee],
    mentor_index: Mapping[str, Mentor],
    enforce_capacity: bool = ENFORCE_MENTOR_CAPACITY,
) -> Tuple[str, Dict[str, str]]:
    """
    Solve the model and return (status, {mentee_id: mentor_id}).
    Only mentees that got a ranked mentor appear in the dict.
    """
    prob, x = build_max_preference_model(mentees, mentor_index, enforce_capacity)

    if not x:
        # nothing rankable; an empty model is trivially optimal
        return "Optimal", {}

    solver = pulp.PULP_CBC_CMD(msg=False)
    prob.solve(solver)

    status = pulp.LpStatus[prob.status]

    pairs: Dict[str, str] = {}
    if status in ("Optimal", "Feasible"):
        for (e, m), var in x.items():
            val = var.varValue
            if val is not None and val > 0.5:
                pairs[e] = m

    return status, pairs
