"""
Two-phase simplex method with branch and bound for LP and MILP problems.

The engine works in floating point but makes every zero / minimum / tie
decision on values rounded to a fixed number of significant digits, and keeps
every tableau so a solve can be traced step by step.
"""

from .branch_and_bound import SearchContext, find_fractional_index
from .context import SolveContext
from .errors import (DegeneratePivotError, ExpressionError, PhaseOrderError,
                     ProblemSetupError, TooManyTableausError)
from .formatting import (format_last_objective_value, format_last_solution, format_solutions,
                         format_unknowns, last_solution_to_string, solution_to_string)
from .phases import do_phase1, do_phase2, ratio_test
from .precision import round_sig_dig
from .problem import Problem
from .solver import solve, solve_problem
from .status import Status
from .tableau import Tableau
from .tiebreak import FirstIndexTieBreak, LastIndexTieBreak, RandomTieBreak

__version__ = "0.1.0"

__all__ = [
    "Problem",
    "Status",
    "Tableau",
    "SolveContext",
    "SearchContext",
    "solve",
    "solve_problem",
    "do_phase1",
    "do_phase2",
    "ratio_test",
    "find_fractional_index",
    "round_sig_dig",
    "RandomTieBreak",
    "FirstIndexTieBreak",
    "LastIndexTieBreak",
    "ProblemSetupError",
    "ExpressionError",
    "TooManyTableausError",
    "PhaseOrderError",
    "DegeneratePivotError",
    "format_unknowns",
    "format_solutions",
    "format_last_solution",
    "format_last_objective_value",
    "last_solution_to_string",
    "solution_to_string",
]
