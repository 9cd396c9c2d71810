"""
Branch and bound for integer and mixed integer problems.

The LP relaxation of a node is solved with the two-phase simplex method. If
some integer variable x_k has a fractional value v, two child problems are
solved depth-first, one with x_k <= floor(v) and one with x_k >= ceil(v).
A node is only branched on while its relaxed objective could still strictly
beat the best integer solution found so far (the incumbent).

The incumbent lives in a SearchContext that is passed down the recursion.
Children are solved one after the other, so it is updated strictly in order.

Every child's tableau history is appended to its parent's for tracing. The
per-problem tableau cap applies to each node separately; nothing limits the
total size of the search tree or of the merged history.
"""

import math
from typing import List, Optional

from . import errors
from .context import DEBUG_SOLUTIONS, SolveContext
from .phases import solve_relaxation
from .precision import is_integral, round_sig_dig
from .status import Status


class SearchContext:
    """Best integer solution found so far in one branch-and-bound search."""

    def __init__(self):
        self.found = False
        self.best_objective: Optional[float] = None
        self.best_solution: Optional[List[float]] = None
        self.best_unknowns: Optional[List[str]] = None
        self.nodes_explored = 0
        # objective value of every incumbent, in the order they were accepted
        self.incumbent_history: List[float] = []

    def __repr__(self):
        if not self.found:
            return f"SearchContext(no incumbent, {self.nodes_explored} nodes)"
        return f"SearchContext(best={self.best_objective}, {self.nodes_explored} nodes)"


def find_fractional_index(problem) -> int:
    """Index into problem.unknowns of the first integer variable with a fractional value, or -1."""
    last = problem.solutions[-1]
    for name in problem.integer_unknowns:
        j = problem.unknowns.index(name)
        if not is_integral(last[j], problem.max_sig_digits):
            return j
    return -1


def is_strictly_better(value, incumbent, maximize, sig_digits) -> bool:
    """value beats incumbent in the solve direction; equal values do not."""
    value = round_sig_dig(value, sig_digits)
    incumbent = round_sig_dig(incumbent, sig_digits)
    return value > incumbent if maximize else value < incumbent


def could_improve(problem, search: SearchContext) -> bool:
    """True if this node's relaxed objective could still strictly beat the incumbent."""
    if not search.found:
        return True
    return is_strictly_better(problem.objective_values[-1], search.best_objective,
                              problem.maximize, problem.max_sig_digits)


def update_incumbent(problem, search: SearchContext, context: SolveContext) -> bool:
    """Take problem's integral solution as incumbent if it is strictly better.

    Returns:
        True if the incumbent changed
    """
    value = problem.objective_values[-1]
    if search.found and not is_strictly_better(value, search.best_objective,
                                                problem.maximize, problem.max_sig_digits):
        return False
    search.found = True
    search.best_objective = value
    search.best_solution = list(problem.solutions[-1])
    search.best_unknowns = list(problem.unknowns)
    search.incumbent_history.append(value)
    context.log(DEBUG_SOLUTIONS, "Best solution so far.")
    return True


def branch(problem, index: int, search: SearchContext, context: SolveContext) -> None:
    """Solve the two children obtained by bounding unknowns[index] below floor / above ceil."""
    value = problem.solutions[-1][index]
    name = problem.unknowns[index]
    k = problem.integer_unknowns.index(name)
    floor_val, ceil_val = math.floor(value), math.ceil(value)

    down = problem.clone_for_branch()
    down.integer_maxs[k] = floor_val
    up = problem.clone_for_branch()
    up.integer_mins[k] = ceil_val

    for child, bound in ((down, f"{name} <= {floor_val}"), (up, f"{name} >= {ceil_val}")):
        context.log(DEBUG_SOLUTIONS, f"Branching: {bound}")
        try:
            solve_node(child, search, context)
        except errors.ProblemSetupError as e:
            context.log(DEBUG_SOLUTIONS, f"Branch {bound} failed: {e}")
        finally:
            if child.message:
                context.log(DEBUG_SOLUTIONS, child.message)
            problem.tableaus.extend(child.tableaus)


def solve_node(problem, search: SearchContext, context: SolveContext) -> None:
    """Solve one node: relaxation, then incumbent update, pruning or branching."""
    solve_relaxation(problem, context)
    search.nodes_explored += 1
    if problem.status == Status.NO_SOLUTION:
        return

    index = find_fractional_index(problem)
    if index == -1:
        update_incumbent(problem, search, context)
    elif could_improve(problem, search):
        branch(problem, index, search, context)
    else:
        context.log(DEBUG_SOLUTIONS, "Abandoning branch, no better solution to be found here.")
    problem.advance(Status.OPTIMAL)
