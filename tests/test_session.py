# tests/test_session.py
import unittest
import tempfile
from unittest import mock
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pandas as pd

from mentor_matching.exceptions import AssignmentSaveError, NoMatchingRunError
from mentor_matching.models import Mentee, Mentor
from mentor_matching.persistence.assignment_store import (
    AssignmentStore,
    CsvAssignmentStore,
    InMemoryAssignmentStore,
)
from mentor_matching.session import (
    MatchingSession,
    pair_remaining_action,
    pairing_rows,
    run_matching_action,
    save_pairings_action,
)


class FailingStore(AssignmentStore):
    def __init__(self):
        self.calls = 0

    def upsert(self, rows):
        self.calls += 1
        raise AssignmentSaveError("database unavailable")

    def load(self):
        return []


class TestSessionActions(unittest.TestCase):

    def setUp(self):
        self.mentees = [
            Mentee("A", ("M1", "M2"), name="Ada"),
            Mentee("B", ("M1", "M3"), name="Ben"),
            Mentee("C", ("M3",), name="Cy"),
        ]
        self.mentors = [Mentor("M1", "Mo"), Mentor("M2", "Mia"), Mentor("M3", "Max")]

    def test_full_flow(self):
        state = MatchingSession()
        self.assertFalse(state.has_run)

        state = run_matching_action(state, self.mentees, self.mentors)
        self.assertEqual(state.run.as_pairs(), [("A", "M1"), ("B", "M3"), ("C", None)])

        state = pair_remaining_action(state, self.mentors)
        self.assertEqual(state.run.mentor_for("C"), "M2")
        self.assertEqual(state.reconcile_passes, 1)

        store = InMemoryAssignmentStore()
        result = save_pairings_action(state, store, assigned_by="admin")
        self.assertEqual(result.saved, 3)
        self.assertEqual(
            store.load(),
            [
                {"mentee_id": "A", "mentor_id": "M1", "assigned_by": "admin"},
                {"mentee_id": "B", "mentor_id": "M3", "assigned_by": "admin"},
                {"mentee_id": "C", "mentor_id": "M2", "assigned_by": "admin"},
            ],
        )

    def test_actions_do_not_mutate_previous_state(self):
        first = run_matching_action(MatchingSession(), self.mentees, self.mentors)
        second = pair_remaining_action(first, self.mentors)
        self.assertIsNone(first.run.mentor_for("C"))
        self.assertEqual(second.run.mentor_for("C"), "M2")

    def test_rerun_resets_results(self):
        state = run_matching_action(MatchingSession(), self.mentees, self.mentors)
        state = pair_remaining_action(state, self.mentors)
        state = run_matching_action(state, self.mentees, self.mentors)
        self.assertIsNone(state.run.mentor_for("C"))
        self.assertEqual(state.reconcile_passes, 0)

    def test_pair_remaining_before_run_is_noop(self):
        state = MatchingSession()
        self.assertIs(pair_remaining_action(state, self.mentors), state)

    def test_pair_remaining_with_nothing_left_is_noop(self):
        state = run_matching_action(MatchingSession(), self.mentees, self.mentors)
        state = pair_remaining_action(state, self.mentors)
        self.assertIs(pair_remaining_action(state, self.mentors), state)

    def test_save_before_run_raises(self):
        with self.assertRaises(NoMatchingRunError):
            save_pairings_action(MatchingSession(), InMemoryAssignmentStore())

    def test_save_with_no_pairs_skips_store(self):
        store = FailingStore()
        state = run_matching_action(MatchingSession(), [Mentee("A", ("M9",))], [])
        result = save_pairings_action(state, store)
        self.assertEqual(result.saved, 0)
        self.assertEqual(store.calls, 0)

    def test_save_failure_propagates(self):
        store = FailingStore()
        state = run_matching_action(MatchingSession(), self.mentees, self.mentors)
        with self.assertRaises(AssignmentSaveError):
            save_pairings_action(state, store)
        self.assertEqual(store.calls, 1)

    def test_pairing_rows_skip_unmatched(self):
        state = run_matching_action(MatchingSession(), self.mentees, self.mentors)
        rows = pairing_rows(state.run)
        self.assertEqual([r["mentee_id"] for r in rows], ["A", "B"])
        self.assertTrue(all(r["assigned_by"] is None for r in rows))

    def test_duplicate_roster_rows_count_once(self):
        mentors = [Mentor("M1", "Mo"), Mentor("M1", "Mo")]
        mentees = [Mentee("A", ()), Mentee("B", ())]

        state = run_matching_action(MatchingSession(), mentees, mentors)
        state = pair_remaining_action(state, mentors)

        self.assertEqual(state.run.as_pairs(), [("A", "M1"), ("B", None)])
        self.assertEqual(state.run.claim_counts(), {"M1": 1})

    def test_enforced_capacity_session(self):
        mentors = [Mentor("M1", capacity=2)]
        mentees = [Mentee("A", ("M1",)), Mentee("B", ("M1",)), Mentee("C", ())]
        state = MatchingSession(enforce_capacity=True)
        state = run_matching_action(state, mentees, mentors)
        state = pair_remaining_action(state, mentors)
        self.assertEqual(state.run.as_pairs(), [("A", "M1"), ("B", "M1"), ("C", None)])


class TestAssignmentStores(unittest.TestCase):

    def test_in_memory_upsert_is_idempotent(self):
        store = InMemoryAssignmentStore()
        rows = [{"mentee_id": "A", "mentor_id": "M1"}, {"mentee_id": "B", "mentor_id": "M2"}]
        store.upsert(rows)
        first = store.load()
        store.upsert(rows)
        self.assertEqual(store.load(), first)
        self.assertEqual(len(first), 2)

    def test_in_memory_upsert_replaces_by_mentee(self):
        store = InMemoryAssignmentStore()
        store.upsert([{"mentee_id": "A", "mentor_id": "M1"}])
        store.upsert([{"mentee_id": "A", "mentor_id": "M2"}])
        self.assertEqual(store.load(), [{"mentee_id": "A", "mentor_id": "M2", "assigned_by": None}])

    def test_rows_need_both_ids(self):
        store = InMemoryAssignmentStore()
        with self.assertRaises(AssignmentSaveError):
            store.upsert([{"mentee_id": "A", "mentor_id": None}])
        self.assertEqual(store.load(), [])

    def test_csv_store_round_trip_and_upsert(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "nested", "assignments.csv")
            store = CsvAssignmentStore(path)
            self.assertEqual(store.load(), [])

            store.upsert([
                {"mentee_id": "A", "mentor_id": "M1", "assigned_by": "admin"},
                {"mentee_id": "B", "mentor_id": "M2"},
            ])
            store.upsert([
                {"mentee_id": "B", "mentor_id": "M3"},
                {"mentee_id": "C", "mentor_id": "M1"},
            ])
            store.upsert([{"mentee_id": "B", "mentor_id": "M3"}])

            self.assertEqual(
                store.load(),
                [
                    {"mentee_id": "A", "mentor_id": "M1", "assigned_by": "admin"},
                    {"mentee_id": "B", "mentor_id": "M3", "assigned_by": None},
                    {"mentee_id": "C", "mentor_id": "M1", "assigned_by": None},
                ],
            )
            df = pd.read_csv(path, dtype=str, keep_default_na=False)
            self.assertEqual(list(df.columns), ["mentee_id", "mentor_id", "assigned_by"])
            self.assertEqual(len(df), 3)
            self.assertFalse(os.path.exists(path + ".tmp"))

    def test_csv_store_failed_write_leaves_no_temp_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "assignments.csv")
            store = CsvAssignmentStore(path)
            store.upsert([{"mentee_id": "A", "mentor_id": "M1"}])
            with open(path) as f:
                before = f.read()

            with mock.patch(
                "mentor_matching.persistence.assignment_store.os.replace",
                side_effect=PermissionError("read-only"),
            ):
                with self.assertRaises(AssignmentSaveError):
                    store.upsert([{"mentee_id": "A", "mentor_id": "M2"}])

            self.assertFalse(os.path.exists(path + ".tmp"))
            with open(path) as f:
                self.assertEqual(f.read(), before)

    def test_csv_store_resave_same_run(self):
        mentees = [Mentee("A", ("M1",)), Mentee("B", ("M2",))]
        mentors = [Mentor("M1"), Mentor("M2")]
        state = run_matching_action(MatchingSession(), mentees, mentors)

        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "assignments.csv")
            store = CsvAssignmentStore(path)
            save_pairings_action(state, store)
            with open(path) as f:
                first = f.read()
            save_pairings_action(state, store)
            with open(path) as f:
                second = f.read()
            self.assertEqual(first, second)


if __name__ == '__main__':
    unittest.main()
