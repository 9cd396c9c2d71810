"""
Solve entry point.

    problem = Problem.from_text('''
        maximize p = x + y subject to
        x + 2y <= 4
        4x + 2y <= 12
        integer x, y''')
    solve(problem)
    print(solution_to_string(problem))

After solve() returns, problem.status is Status.OPTIMAL or Status.NO_SOLUTION
(with the reason in problem.message). Every tableau is kept in
problem.tableaus with the matching intermediate results in problem.solutions
and problem.objective_values. For integer problems the answer is in
problem.integer_solution / problem.integer_objective_value.

Malformed input and runaway solves raise ProblemSetupError.
"""

from typing import Optional

from . import errors
from .branch_and_bound import SearchContext, solve_node
from .context import DEBUG_SOLUTIONS, SolveContext
from .phases import parse_problem, solve_relaxation
from .problem import Problem
from .status import Status


def solve(problem, context: Optional[SolveContext] = None, **options) -> bool:
    """Solve problem in place.

    Args:
        problem: Problem to solve
        context: SolveContext for tracing and tie-breaking; built from options when omitted
        **options: print_debug, echo, tie_break, seed (see SolveContext)

    Returns:
        True; the outcome is in problem.status
    """
    if context is None:
        context = SolveContext(**options)
    elif options:
        raise TypeError("Pass either a SolveContext or keyword options, not both")

    # parse first: a problem statement may declare integer variables
    parse_problem(problem, context)

    if not problem.is_integral:
        solve_relaxation(problem, context)
        if problem.status >= Status.PHASE2_DONE:
            problem.advance(Status.OPTIMAL)
        return True

    if problem.tableaus and not problem.system_matrix:
        problem.error = errors.INTEGER_NEEDS_MATRIX_ERR
        raise errors.ProblemSetupError(errors.INTEGER_NEEDS_MATRIX_ERR)

    search = SearchContext()
    solve_node(problem, search, context)
    problem.nodes_explored = search.nodes_explored

    if search.found:
        problem.integer_solution = search.best_solution
        problem.integer_objective_value = search.best_objective
        problem.integer_solution_unknowns = search.best_unknowns
    elif problem.status != Status.NO_SOLUTION:
        problem.fail(errors.NO_INTEGER_SOLUTION_ERR)
        context.log(DEBUG_SOLUTIONS, problem.message)
    return True


def solve_problem(problem_str: str, print_debug: int = 0, **settings):
    """Convenience wrapper: build a Problem from text, solve it, return (problem, context)."""
    problem = Problem.from_text(problem_str, **settings)
    context = SolveContext(print_debug=print_debug)
    solve(problem, context)
    return problem, context


if __name__ == "__main__":
    from .formatting import solution_to_string

    example = """maximize p = x + y subject to
    x + 2y <= 4
    4x + 2y <= 12
    integer x, y"""

    problem, context = solve_problem(example, print_debug=2)
    print(context.trace_text())
    print("\nResult:")
    print(solution_to_string(problem))
    print(f"Nodes explored: {problem.nodes_explored}")
