# mentor_matching/config.py
import os

# Registration form collects first/second/third choice
MAX_RANKED_CHOICES = 3

# Mentor capacity
DEFAULT_MENTOR_CAPACITY = 1
PROFILE_CAPACITY_DEFAULT = 3   # value shown on mentor profile forms

# Observed behaviour: a mentor is taken after its first claim in a run.
# Switch on to let both passes honour Mentor.capacity instead.
ENFORCE_MENTOR_CAPACITY = False

# Toy data knobs
NUM_MENTEES_DEFAULT = 10
NUM_MENTORS_DEFAULT = 8
DEFAULT_SEED = 42

# -----------------------------------------------------------
# CSV layout for roster / assignment files
# -----------------------------------------------------------

CHOICE_COLUMNS = ["first_choice", "second_choice", "third_choice"]
RANKED_CHOICES_COLUMN = "ranked_choices"
RANKED_CHOICES_SEPARATOR = ";"

ASSIGNMENT_COLUMNS = ["mentee_id", "mentor_id", "assigned_by"]

# Where "save pairings" writes to when no path is given
ASSIGNMENTS_CSV_PATH = os.environ.get(
    "MENTOR_MATCHING_ASSIGNMENTS_CSV", "data/mentor_assignments.csv"
)
