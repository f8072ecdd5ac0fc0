# tests/test_loaders.py
import unittest
import tempfile
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pandas as pd

from mentor_matching.data_generation.roster_loader import (
    load_mentees_csv,
    load_mentors_csv,
    mentees_from_dataframe,
    mentors_from_dataframe,
)
from mentor_matching.data_generation.toy_dataset import create_mentees, create_mentors, make_toy_dataset
from mentor_matching.exceptions import RosterLoadError
from mentor_matching.models import Mentor


class TestRosterLoader(unittest.TestCase):

    def write(self, tmp, name, text):
        path = os.path.join(tmp, name)
        with open(path, "w") as f:
            f.write(text)
        return path

    def test_mentees_from_choice_columns(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = self.write(
                tmp,
                "mentees.csv",
                "id,first_name,last_name,first_choice,second_choice,third_choice\n"
                "e1,Ada,Lovelace,2,5,7\n"
                "e2,Ben,,2,,8\n"
                "e3,Cy,Young,,,\n",
            )
            mentees = load_mentees_csv(path)

        self.assertEqual([m.id for m in mentees], ["e1", "e2", "e3"])
        self.assertEqual(mentees[0].ranked_choices, ("2", "5", "7"))
        self.assertEqual(mentees[0].name, "Ada Lovelace")
        self.assertEqual(mentees[1].ranked_choices, ("2", "8"))
        self.assertEqual(mentees[1].name, "Ben")
        self.assertEqual(mentees[2].ranked_choices, ())

    def test_mentees_from_ranked_choices_column(self):
        df = pd.DataFrame(
            {"id": ["a", "b", ""], "name": ["A", "B", "C"], "ranked_choices": ["M1; M2;M3;M4", "", "M1"]}
        )
        mentees = mentees_from_dataframe(df)
        self.assertEqual(len(mentees), 2)
        self.assertEqual(mentees[0].ranked_choices, ("M1", "M2", "M3", "M4"))
        self.assertEqual(mentees[1].ranked_choices, ())

    def test_mentors_with_capacity(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = self.write(
                tmp,
                "mentors.csv",
                "id,full_name,capacity\n"
                "1,Sarah Chen,3\n"
                "2,Marcus Rodriguez,\n",
            )
            mentors = load_mentors_csv(path)

        self.assertEqual(mentors, [Mentor("1", "Sarah Chen", 3), Mentor("2", "Marcus Rodriguez", 1)])

    def test_mentors_default_capacity_override(self):
        df = pd.DataFrame({"id": ["1"], "name": ["Priya"]})
        self.assertEqual(mentors_from_dataframe(df, default_capacity=3), [Mentor("1", "Priya", 3)])

    def test_bad_capacity(self):
        df = pd.DataFrame({"id": ["1"], "capacity": ["lots"]})
        with self.assertRaises(RosterLoadError):
            mentors_from_dataframe(df)

    def test_missing_id_column(self):
        with self.assertRaises(RosterLoadError):
            mentees_from_dataframe(pd.DataFrame({"name": ["x"]}))
        with self.assertRaises(RosterLoadError):
            mentors_from_dataframe(pd.DataFrame({"name": ["x"]}))

    def test_missing_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(RosterLoadError):
                load_mentors_csv(os.path.join(tmp, "nope.csv"))

    def test_unreadable_path(self):
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(RosterLoadError):
                load_mentors_csv(tmp)
            with self.assertRaises(RosterLoadError):
                load_mentees_csv(tmp)

    def test_load_error_is_value_error(self):
        self.assertTrue(issubclass(RosterLoadError, ValueError))


class TestToyDataset(unittest.TestCase):

    def test_reproducible(self):
        self.assertEqual(make_toy_dataset(seed=3), make_toy_dataset(seed=3))

    def test_shapes(self):
        mentees, mentors = make_toy_dataset(num_mentees=5, num_mentors=2, capacity=2)
        self.assertEqual(len(mentees), 5)
        self.assertEqual([m.id for m in mentors], ["M001", "M002"])
        self.assertTrue(all(m.capacity == 2 for m in mentors))
        for mentee in mentees:
            self.assertEqual(len(mentee.ranked_choices), 2)
            self.assertEqual(len(set(mentee.ranked_choices)), 2)

    def test_stale_choices(self):
        mentors = create_mentors(4)
        ids = {m.id for m in mentors}
        all_stale = create_mentees(mentors, num_mentees=3, stale_choice_rate=1.0)
        none_stale = create_mentees(mentors, num_mentees=3, stale_choice_rate=0.0)
        self.assertTrue(all(c not in ids for m in all_stale for c in m.ranked_choices))
        self.assertTrue(all(c in ids for m in none_stale for c in m.ranked_choices))

    def test_invalid_arguments(self):
        with self.assertRaises(ValueError):
            create_mentors(-1)
        with self.assertRaises(ValueError):
            create_mentees(create_mentors(2), stale_choice_rate=1.5)


if __name__ == '__main__':
    unittest.main()
