# run_interactive.py

from __future__ import annotations

import argparse

from mentor_matching.config import ENFORCE_MENTOR_CAPACITY
from mentor_matching.data_generation.roster_loader import load_mentees_csv, load_mentors_csv
from mentor_matching.data_generation.toy_dataset import make_toy_dataset
from mentor_matching.exceptions import MentorMatchingError
from mentor_matching.matching.diagnostics import analyze_run, assignment_table
from mentor_matching.models import index_mentors_by_id
from mentor_matching.persistence.assignment_store import (
    AssignmentStore,
    CsvAssignmentStore,
    InMemoryAssignmentStore,
)
from mentor_matching.session import (
    MatchingSession,
    pair_remaining_action,
    run_matching_action,
    save_pairings_action,
)


def interactive_session(
    mentees,
    mentors,
    store: AssignmentStore,
    read_choice=input,
    enforce_capacity: bool = ENFORCE_MENTOR_CAPACITY,
):
    """
    Operator loop over one roster snapshot: run matching, pair remaining,
    save pairings. Returns the final session state.
    """
    mentor_index = index_mentors_by_id(mentors)
    state = MatchingSession(enforce_capacity=enforce_capacity)

    while True:
        print(
            "\nChoose an action:\n"
            "  1) Run matching (resets any previous results)\n"
            "  2) Pair remaining unmatched mentees\n"
            "  3) Save pairings\n"
            "  4) Show current pairings\n"
            "  5) Quit\n"
        )
        choice = read_choice("Your choice [1-5]: ").strip()

        if choice == "1":
            state = run_matching_action(state, mentees, mentors, verbose=True)
            diag = analyze_run(mentees, mentor_index, state.run, state.enforce_capacity)
            for msg in diag["messages"]:
                print("-", msg)
            print("Suggestion:", diag["suggestion"])

        elif choice == "2":
            state = pair_remaining_action(state, mentors, verbose=True)

        elif choice == "3":
            try:
                save_pairings_action(state, store, verbose=True)
            except MentorMatchingError as exc:
                print(f"[SAVE] Failed: {exc}")

        elif choice == "4":
            if state.run is None:
                print("No matching run yet.")
            else:
                print(assignment_table(state.run, mentees, mentor_index).to_string(index=False))

        elif choice == "5":
            print("Done.")
            return state

        else:
            print("Invalid choice, please select 1–5.")


def main():
    p = argparse.ArgumentParser(description="Interactive mentor matching")
    p.add_argument("--mentees", help="Mentee preferences CSV (toy data if omitted)")
    p.add_argument("--mentors", help="Mentor roster CSV (toy data if omitted)")
    p.add_argument("--out", help="Assignments CSV; in-memory store if omitted")
    p.add_argument(
        "--enforce-capacity",
        action="store_true",
        default=ENFORCE_MENTOR_CAPACITY,
        help="Let mentors take up to their capacity instead of one mentee",
    )
    args = p.parse_args()

    if args.mentees and args.mentors:
        try:
            mentees = load_mentees_csv(args.mentees)
            mentors = load_mentors_csv(args.mentors)
        except MentorMatchingError as exc:
            print(f"[LOAD] Failed: {exc}")
            return
    else:
        mentees, mentors = make_toy_dataset()

    store = CsvAssignmentStore(args.out) if args.out else InMemoryAssignmentStore()

    print("\n========== SESSION SUMMARY ==========")
    print(f"- Number of mentees : {len(mentees)}")
    print(f"- Number of mentors : {len(mentors)}")

    interactive_session(mentees, mentors, store, enforce_capacity=args.enforce_capacity)


if __name__ == "__main__":
    main()
