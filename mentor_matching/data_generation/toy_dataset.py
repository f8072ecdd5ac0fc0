# mentor_matching/data_generation/toy_dataset.py
from __future__ import annotations
from typing import List, Tuple
import random

from ..models import Mentee, Mentor
from ..config import (
    NUM_MENTEES_DEFAULT,
    NUM_MENTORS_DEFAULT,
    MAX_RANKED_CHOICES,
    DEFAULT_MENTOR_CAPACITY,
    DEFAULT_SEED,
)


def create_mentors(
    num_mentors: int = NUM_MENTORS_DEFAULT,
    capacity: int = DEFAULT_MENTOR_CAPACITY,
) -> List[Mentor]:
    """Mentors M001..Mnnn, all with the same capacity."""
    if num_mentors < 0:
        raise ValueError(f"num_mentors must be >= 0, got {num_mentors}.")
    return [
        Mentor(id=f"M{i:03d}", name=f"Mentor {i}", capacity=capacity)
        for i in range(1, num_mentors + 1)
    ]


def create_mentees(
    mentors: List[Mentor],
    num_mentees: int = NUM_MENTEES_DEFAULT,
    choices_per_mentee: int = MAX_RANKED_CHOICES,
    seed: int = DEFAULT_SEED,
    stale_choice_rate: float = 0.0,
) -> List[Mentee]:
    """
    Mentees E001..Ennn, each ranking `choices_per_mentee` distinct mentors.

    Earlier mentors in the roster are more popular (weight 1/position), so
    first choices collide the way they do with real sign-ups.
    With stale_choice_rate > 0, that fraction of choices points at mentor
    IDs that are not in the roster.
    """
    if not 0.0 <= stale_choice_rate <= 1.0:
        raise ValueError(f"stale_choice_rate must be in [0, 1], got {stale_choice_rate}.")

    rng = random.Random(seed)
    mentor_ids = [m.id for m in mentors]
    k = min(choices_per_mentee, len(mentor_ids))

    mentees: List[Mentee] = []
    for i in range(1, num_mentees + 1):
        pool = list(mentor_ids)
        weights = [1.0 / (pos + 1) for pos in range(len(pool))]
        choices: List[str] = []
        for _ in range(k):
            pick = rng.choices(range(len(pool)), weights=weights, k=1)[0]
            choices.append(pool.pop(pick))
            weights.pop(pick)

        choices = [
            f"X{i:03d}{r}" if rng.random() < stale_choice_rate else c
            for r, c in enumerate(choices, start=1)
        ]

        mentees.append(
            Mentee(id=f"E{i:03d}", ranked_choices=tuple(choices), name=f"Mentee {i}")
        )

    return mentees


def make_toy_dataset(
    num_mentees: int = NUM_MENTEES_DEFAULT,
    num_mentors: int = NUM_MENTORS_DEFAULT,
    choices_per_mentee: int = MAX_RANKED_CHOICES,
    seed: int = DEFAULT_SEED,
    capacity: int = DEFAULT_MENTOR_CAPACITY,
    stale_choice_rate: float = 0.0,
) -> Tuple[List[Mentee], List[Mentor]]:
    """
    Return mentees and mentors for a reproducible toy session.
    """
    mentors = create_mentors(num_mentors=num_mentors, capacity=capacity)
    mentees = create_mentees(
        mentors,
        num_mentees=num_mentees,
        choices_per_mentee=choices_per_mentee,
        seed=seed,
        stale_choice_rate=stale_choice_rate,
    )
    return mentees, mentors
