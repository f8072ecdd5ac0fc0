# run_toy.py

import pandas as pd

from mentor_matching.config import NUM_MENTEES_DEFAULT, NUM_MENTORS_DEFAULT
from mentor_matching.data_generation.toy_dataset import make_toy_dataset
from mentor_matching.matching.diagnostics import analyze_run, assignment_table
from mentor_matching.models import index_mentors_by_id
from mentor_matching.persistence.assignment_store import InMemoryAssignmentStore
from mentor_matching.session import (
    MatchingSession,
    pair_remaining_action,
    run_matching_action,
    save_pairings_action,
)


def print_diagnostics(diag: dict) -> None:
    print(f"- Matched            : {diag['num_matched']}/{diag['num_mentees']}")
    print(f"- Free mentor slots  : {diag['num_available_mentors']}")
    print(f"- Left after pairing : {diag['expected_unmatched_after_reconcile']}")
    if "preference_bound" in diag:
        print(
            f"- Preference matches : {diag['preference_matched']} "
            f"(best possible {diag['preference_bound']}, {diag['preference_bound_status']})"
        )
    if diag["messages"]:
        print("\n=== DIAGNOSTICS ===")
        for msg in diag["messages"]:
            print("-", msg)
    print("\nSuggestion:", diag["suggestion"])


def main():
    # ---- Session settings ----
    num_mentees = NUM_MENTEES_DEFAULT
    num_mentors = NUM_MENTORS_DEFAULT

    # ---- Generate toy mentees + mentors ----
    mentees, mentors = make_toy_dataset(
        num_mentees=num_mentees,
        num_mentors=num_mentors,
        stale_choice_rate=0.05,
    )
    mentor_index = index_mentors_by_id(mentors)

    # ============================
    #  PRINT PREFERENCES (PANDAS)
    # ============================
    df_prefs = pd.DataFrame(
        [list(m.ranked_choices) for m in mentees],
        index=[m.id for m in mentees],
    )
    df_prefs.columns = [f"Choice {i}" for i in range(1, len(df_prefs.columns) + 1)]

    print("=== MENTEE RANKED CHOICES ===")
    print(df_prefs.fillna("-"))
    print()

    # =====================================
    #  FIRST PASS: PREFERENCE MATCHING
    # =====================================
    print("=== RUN MATCHING ===")
    state = run_matching_action(MatchingSession(), mentees, mentors, verbose=True)
    print(assignment_table(state.run, mentees, mentor_index).to_string(index=False))
    print()
    print_diagnostics(analyze_run(mentees, mentor_index, state.run, include_bound=True))
    print()

    # =====================================
    #  SECOND PASS: PAIR REMAINING
    # =====================================
    print("=== PAIR REMAINING ===")
    state = pair_remaining_action(state, mentors, verbose=True)
    print(assignment_table(state.run, mentees, mentor_index).to_string(index=False))
    print()

    # ---- Save into an in-memory store (twice, to show the upsert) ----
    print("=== SAVE PAIRINGS ===")
    store = InMemoryAssignmentStore()
    save_pairings_action(state, store, verbose=True)
    save_pairings_action(state, store, verbose=True)
    print(f"Rows in store after two saves: {len(store.load())}")
    print()


if __name__ == "__main__":
    main()
