"""
Error types and user-facing messages.

Two kinds of outcome leave a solve early:

- Setup / structural failures (bad input, too many tableaus, phases run out of
  order, pivoting on a zero) raise a ProblemSetupError. They abort the solve.
- "No optimum" outcomes (empty feasible region, unbounded objective) are NOT
  exceptions. They set problem.status to Status.NO_SOLUTION and put one of the
  messages below in problem.message.

The messages are plain module attributes so an embedding application can
replace them (for instance with translations) before solving.
"""

NO_LP_ERR = "No LP problem given"
ILLEGAL_CHARS_ERR = "Illegal characters"
UNSPECIFIED_MAX_MIN_ERR = "Max or min not specified"
NO_RELATION_CONSTRAINT_ERR = "Constraints must contain '=', '<=', or '>='"
TOO_MANY_TABLEAUS_ERR = "Number of tableaus exceeds "
EMPTY_FEASIBLE_REGION_ERR = "No solution; feasible region empty"
NO_MAX_ERR = "No maximum value; the objective function can be arbitrarily large"
NO_MIN_ERR = "No minimum value; the objective function can be arbitrarily large negative"
PHASE2_TOO_SOON_ERR = "Attempting to do Phase 2 when Phase 1 is not complete."
BAD_EXPR_ERR = "Something's wrong in the expression "
ILLEGAL_COEFF_ERR = "illegal coefficient of "
NONLINEAR_ERR = "Expression is not linear: "
OBJECTIVE_NOT_SET_ERR = "Objective not set"
DEGENERATE_PIVOT_ERR = "Pivot element is zero at row {row}, column {col}"
NO_INTEGER_SOLUTION_ERR = "No solution with the desired integer values exists"
INTEGER_NEEDS_MATRIX_ERR = "Integer problems need a system matrix to branch on"


class ProblemSetupError(ValueError):
    """The problem is malformed or the solver was driven incorrectly."""


class ExpressionError(ProblemSetupError):
    """An objective, constraint or coefficient could not be read."""


class TooManyTableausError(ProblemSetupError):
    """The per-problem tableau cap (max_num_tableaus) was exceeded."""


class PhaseOrderError(ProblemSetupError):
    """Phase 2 was requested before Phase 1 finished."""


class DegeneratePivotError(ProblemSetupError):
    """The chosen pivot element rounds to zero at working precision."""


def unbounded_message(maximize):
    """Direction-specific message for an unbounded objective."""
    return NO_MAX_ERR if maximize else NO_MIN_ERR
