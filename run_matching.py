# run_matching.py
"""
Match mentees to mentors from CSV rosters and save the pairings.

Usage:
  python run_matching.py --mentees mentees.csv --mentors mentors.csv \
      --out data/mentor_assignments.csv [--no-pair-remaining] [--enforce-capacity]

Mentee CSV columns: id, first_name, last_name, first_choice, second_choice, third_choice
Mentor CSV columns: id, full_name, [capacity]
"""

import argparse
import sys

from mentor_matching.config import ASSIGNMENTS_CSV_PATH, ENFORCE_MENTOR_CAPACITY
from mentor_matching.data_generation.roster_loader import load_mentees_csv, load_mentors_csv
from mentor_matching.exceptions import MentorMatchingError
from mentor_matching.matching.diagnostics import analyze_run, assignment_table
from mentor_matching.models import index_mentors_by_id
from mentor_matching.persistence.assignment_store import CsvAssignmentStore
from mentor_matching.session import (
    MatchingSession,
    pair_remaining_action,
    run_matching_action,
    save_pairings_action,
)


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Ranked-preference mentor matching")
    p.add_argument("--mentees", required=True, help="Mentee preferences CSV")
    p.add_argument("--mentors", required=True, help="Mentor roster CSV")
    p.add_argument("--out", default=ASSIGNMENTS_CSV_PATH, help="Assignments CSV (upserted)")
    p.add_argument("--assigned-by", default=None, help="Recorded with each saved pairing")
    p.add_argument(
        "--no-pair-remaining",
        action="store_true",
        help="Skip the pass that pairs leftover mentees with free mentors",
    )
    p.add_argument(
        "--enforce-capacity",
        action="store_true",
        default=ENFORCE_MENTOR_CAPACITY,
        help="Let mentors take up to their capacity instead of one mentee",
    )
    p.add_argument("--dry-run", action="store_true", help="Print results without saving")
    p.add_argument(
        "--bound",
        action="store_true",
        help="Also solve for the best preference-only matching (PuLP/CBC)",
    )
    return p.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    try:
        mentees = load_mentees_csv(args.mentees)
        mentors = load_mentors_csv(args.mentors)
    except MentorMatchingError as exc:
        print(f"[LOAD] Failed: {exc}", file=sys.stderr)
        return 2

    print(f"[LOAD] {len(mentees)} mentees, {len(mentors)} mentors.")
    mentor_index = index_mentors_by_id(mentors)

    state = MatchingSession(enforce_capacity=args.enforce_capacity)
    state = run_matching_action(state, mentees, mentors, verbose=True)

    diag = analyze_run(
        mentees, mentor_index, state.run, args.enforce_capacity, include_bound=args.bound
    )
    for msg in diag["messages"]:
        print("-", msg)

    if not args.no_pair_remaining:
        state = pair_remaining_action(state, mentors, verbose=True)

    print()
    print(assignment_table(state.run, mentees, mentor_index).to_string(index=False))
    print()

    if args.dry_run:
        print("[SAVE] Dry run; nothing written.")
        return 0

    try:
        save_pairings_action(
            state, CsvAssignmentStore(args.out), assigned_by=args.assigned_by, verbose=True
        )
    except MentorMatchingError as exc:
        print(f"[SAVE] Failed: {exc}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
