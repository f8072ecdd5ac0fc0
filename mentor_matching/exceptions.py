# mentor_matching/exceptions.py
"""
Errors raised at the I/O boundary (loading rosters, saving pairings).

The matching passes themselves never raise: every input shape degrades to an
unmatched assignment instead.
"""


class MentorMatchingError(Exception):
    """Base exception for the mentor matching package."""


class RosterLoadError(MentorMatchingError, ValueError):
    """Mentee or mentor roster could not be read."""


class AssignmentSaveError(MentorMatchingError):
    """Pairings could not be written to the assignment store."""


class NoMatchingRunError(MentorMatchingError):
    """An action needs a matching run but none has been executed yet."""
