"""Problem status values."""

from enum import IntEnum


class Status(IntEnum):
    """Progress of a Problem through the solve.

    NO_PROBLEM < PARSED < PHASE1_DONE < PHASE2_DONE < OPTIMAL mark progress.
    NO_SOLUTION is terminal: once set it is never replaced and every later
    phase returns immediately. It has the largest value only so that
    "status >= PHASE1_DONE"-style checks short-circuit on it.
    """

    NO_PROBLEM = 0
    PARSED = 1
    PHASE1_DONE = 2
    PHASE2_DONE = 3
    OPTIMAL = 4
    NO_SOLUTION = 5
