"""
Two-phase simplex driver.

Phase 1 removes the stars from the tableau (rows whose basic surplus variable
is negative, i.e. the current basic solution is infeasible). Phase 2 then
optimizes the objective row. Both loops work on the newest tableau of the
problem and append every new tableau to its history.

Outcomes:
    - status PHASE1_DONE / PHASE2_DONE on success
    - status NO_SOLUTION with a message for an empty feasible region or an
      unbounded objective (normal return, not an exception)
    - TooManyTableausError / PhaseOrderError for a solve that cannot go on
"""

import math
from typing import List, Optional, Tuple

from . import errors
from .context import DEBUG_PIVOTS, DEBUG_SOLUTIONS, SolveContext
from .formatting import last_solution_to_string
from .precision import round_sig_dig, round_values
from .solution import calculate_solution
from .status import Status
from .tiebreak import TieBreak


def push_tableau(problem, tabl, context: SolveContext, highlight=None) -> None:
    """Append tabl to the history, trace it and record its solution."""
    problem.tableaus.append(tabl)
    context.log_tableau(problem, highlight)
    calculate_solution(problem)
    context.log(DEBUG_SOLUTIONS, last_solution_to_string(problem))


def check_tableau_count(problem) -> None:
    if len(problem.tableaus) > problem.max_num_tableaus:
        raise errors.TooManyTableausError(errors.TOO_MANY_TABLEAUS_ERR + str(problem.max_num_tableaus))


def ratio_test(tabl, col: int, sig_digits: int, tie_break: TieBreak) -> Tuple[Optional[int], List[float]]:
    """Choose the leaving row for entering column col.

    For each constraint row with a positive entry in col the ratio
    RHS / entry, rounded to sig_digits, is computed; other rows get +inf.
    The row with the smallest finite ratio wins, ties go to tie_break.

    Returns:
        (row or None when no entry is positive, list of ratios per row)
    """
    ratios = []
    for i in range(tabl.num_constraints):
        entry = tabl[i, col]
        if round_sig_dig(entry, sig_digits) > 0:
            ratios.append(round_sig_dig(tabl.rhs(i) / entry, sig_digits))
        else:
            ratios.append(math.inf)

    finite = [r for r in ratios if r != math.inf]
    if not finite:
        return None, ratios
    ratio_min = min(finite)
    tied = [i for i, r in enumerate(ratios) if r == ratio_min]
    row = tied[0] if len(tied) == 1 else tie_break.choose(tied)
    return row, ratios


def _describe_pivot(tabl, row, col, ratios, phase):
    lines = [f"Phase {phase}: entering {tabl.variable_names[col]}, "
             f"leaving {tabl.basic_variable(row)} (row {row + 1})"]
    for i, r in enumerate(ratios):
        if r != math.inf:
            lines.append(f"  ratio row {i + 1} ({tabl.row_labels[i]}): {r:g}")
    return "\n".join(lines)


def do_phase1(problem, context: SolveContext) -> None:
    """Pivot until no row is starred, or until the feasible region is shown to be empty."""
    if problem.status < Status.PARSED:
        raise errors.ProblemSetupError(errors.NO_LP_ERR)
    if problem.status >= Status.PHASE1_DONE:
        return
    if True not in problem.row_is_starred:
        problem.advance(Status.PHASE1_DONE)
        return

    digits = problem.max_sig_digits
    while problem.status < Status.PHASE1_DONE:
        check_tableau_count(problem)
        tabl = problem.tableaus[-1]

        # 1. Starred rows with zero right-hand side: flip the inequality instead of pivoting
        zero_rows = [i for i, starred in enumerate(problem.row_is_starred)
                     if starred and round_sig_dig(tabl.rhs(i), digits) == 0]
        if zero_rows:
            for i in zero_rows:
                problem.row_is_starred[i] = False
            tabl = tabl.negate_rows(zero_rows)
            context.log(DEBUG_PIVOTS, "Phase 1: unstarred rows with zero right-hand side: "
                        + ", ".join(str(i + 1) for i in zero_rows))
            push_tableau(problem, tabl, context)
            if True not in problem.row_is_starred:
                problem.advance(Status.PHASE1_DONE)
                return

        # 2. First starred row decides the pivot column
        first_starred = problem.row_is_starred.index(True)
        entries = tabl.variable_entries(first_starred)
        if max(round_values(entries, digits)) <= 0:
            problem.fail(errors.EMPTY_FEASIBLE_REGION_ERR)
            context.log(DEBUG_SOLUTIONS, problem.message)
            return
        col = entries.index(max(entries))

        # 3. Ratio test
        row, ratios = ratio_test(tabl, col, digits, context.tie_break)
        if row is None:
            problem.fail(errors.unbounded_message(problem.maximize))
            context.log(DEBUG_SOLUTIONS, problem.message)
            return

        context.log(DEBUG_PIVOTS, _describe_pivot(tabl, row, col, ratios, 1))
        problem.row_is_starred[row] = False
        push_tableau(problem, tabl.pivot(row, col, digits), context, highlight=(row, col))

        if True not in problem.row_is_starred:
            problem.advance(Status.PHASE1_DONE)


def do_phase2(problem, context: SolveContext) -> None:
    """Pivot on the most negative objective-row entry until none is negative."""
    if problem.status < Status.PHASE1_DONE:
        raise errors.PhaseOrderError(errors.PHASE2_TOO_SOON_ERR)
    if problem.status >= Status.PHASE2_DONE:
        return

    digits = problem.max_sig_digits
    while problem.status < Status.PHASE2_DONE:
        check_tableau_count(problem)
        tabl = problem.tableaus[-1]

        # locate the minimum on the rounded row so the index matches the value compared
        bottom = round_values(tabl.variable_entries(tabl.num_constraints), digits)
        min_entry = min(bottom)
        if min_entry >= 0:
            problem.advance(Status.PHASE2_DONE)
            return
        col = bottom.index(min_entry)

        row, ratios = ratio_test(tabl, col, digits, context.tie_break)
        if row is None:
            problem.fail(errors.unbounded_message(problem.maximize))
            context.log(DEBUG_SOLUTIONS, problem.message)
            return

        context.log(DEBUG_PIVOTS, _describe_pivot(tabl, row, col, ratios, 2))
        push_tableau(problem, tabl.pivot(row, col, digits), context, highlight=(row, col))


def parse_problem(problem, context: SolveContext) -> None:
    """Build the first tableau if needed and trace it. Setup errors are stored in problem.error."""
    try:
        if problem.parse():
            context.log_tableau(problem)
            context.log(DEBUG_SOLUTIONS, last_solution_to_string(problem))
    except errors.ProblemSetupError as e:
        problem.error = str(e)
        raise


def solve_relaxation(problem, context: SolveContext) -> None:
    """Parse, then run Phase 1 and Phase 2 (integer requirements ignored).

    Setup errors are stored in problem.error and re-raised.
    """
    parse_problem(problem, context)
    try:
        do_phase1(problem, context)
        do_phase2(problem, context)
    except errors.ProblemSetupError as e:
        problem.error = str(e)
        raise
