import pytest

from simplex_bnb import Problem, SearchContext, SolveContext, Status, find_fractional_index, solve
from simplex_bnb import errors
from simplex_bnb.branch_and_bound import could_improve, is_strictly_better, solve_node
from simplex_bnb.formatting import format_integer_solution, integer_solution_unknowns, solution_to_string
from simplex_bnb.phases import solve_relaxation

ILP_TEXT = """maximize p = x + y subject to
x + 2y <= 4
4x + 2y <= 12
integer x, y"""


def test_integer_problem_from_text(context):
    problem = Problem.from_text(ILP_TEXT)
    solve(problem, context)

    assert problem.integer_unknowns == ["x", "y"]
    assert problem.status == Status.OPTIMAL
    assert problem.integer_objective_value == pytest.approx(3)
    x, y = problem.integer_solution[:2]
    assert x == pytest.approx(round(x))
    assert y == pytest.approx(round(y))
    assert x + 2 * y <= 4 + 1e-9
    assert 4 * x + 2 * y <= 12 + 1e-9
    assert problem.nodes_explored == 3
    # the relaxation optimum is kept as the last intermediate solution of the root
    assert problem.objective_values[-1] == pytest.approx(10 / 3)
    assert "Best solution so far." in context.trace


def test_first_incumbent_is_kept_on_ties(first_context):
    problem = Problem.from_text(ILP_TEXT)
    solve(problem, first_context)
    # x <= 2 is explored first and finds (2, 1); (3, 0) ties and does not replace it
    assert problem.integer_solution[:2] == pytest.approx([2, 1])
    assert format_integer_solution(problem) == ["2", "1"]
    assert solution_to_string(problem) == "p = 3; x = 2, y = 1"


def test_child_histories_merge_into_parent(first_context):
    problem = Problem.from_text(ILP_TEXT)
    solve(problem, first_context)
    # root relaxation has 3 tableaus; both children add their own
    assert len(problem.tableaus) > 3
    assert len(problem.solutions) == 3
    assert first_context.tableau_count == len(problem.tableaus)


def test_integer_problem_from_matrix_with_indices():
    problem = Problem.from_matrix([1, 1], [[1, 2], [4, 2]], [4, 12], integer_unknowns=[0, 1])
    assert problem.integer_unknowns == ["x1", "x2"]
    solve(problem, tie_break="first")
    assert problem.integer_objective_value == pytest.approx(3)


def test_mixed_integer_problem():
    # only x integer: x <= 2 gives (2, 1) and x >= 3 gives (3, 0), both worth 3
    problem = Problem.from_expressions("p = x + y", ["x + 2y <= 4", "4x + 2y <= 12"],
                                       integer_unknowns=["x"])
    solve(problem, tie_break="first")
    assert problem.integer_objective_value == pytest.approx(3)
    assert integer_solution_unknowns(problem) == ["x", "y"]


def test_incumbent_history_improves_monotonically():
    problem = Problem.from_expressions("p = 5x + 4y", ["6x + 4y <= 24", "x + 2y <= 6"],
                                       integer_unknowns=["x", "y"], max_num_tableaus=50)
    search = SearchContext()
    solve_node(problem, search, SolveContext(tie_break="first"))
    assert search.found
    history = search.incumbent_history
    assert history == sorted(history)
    assert len(set(history)) == len(history)
    assert search.best_objective == pytest.approx(20)


def test_integer_minimization():
    problem = Problem.from_expressions("c = x + y", ["2x + 2y >= 3"], maximize=False,
                                       integer_unknowns=["x", "y"])
    solve(problem, tie_break="first")
    assert problem.integer_objective_value == pytest.approx(2)


def test_no_integer_solution():
    # 1.2 <= 2x <= 1.8 has real solutions but no integer one
    problem = Problem.from_expressions("p = x", ["2x >= 1.2", "2x <= 1.8"], integer_unknowns=["x"])
    solve(problem, tie_break="first")
    assert problem.integer_solution is None
    assert problem.integer_objective_value is None
    assert problem.status == Status.NO_SOLUTION
    assert problem.message == errors.NO_INTEGER_SOLUTION_ERR
    assert solution_to_string(problem) == errors.NO_INTEGER_SOLUTION_ERR


def test_infeasible_root_keeps_its_message():
    problem = Problem.from_expressions("p = x", ["x >= 5", "x <= 2"], integer_unknowns=["x"])
    solve(problem, tie_break="first")
    assert problem.status == Status.NO_SOLUTION
    assert problem.message == errors.EMPTY_FEASIBLE_REGION_ERR


def test_unknown_integer_variable_is_rejected():
    problem = Problem.from_expressions("p = x", ["x <= 2"], integer_unknowns=["z"])
    with pytest.raises(errors.ExpressionError):
        solve(problem)


def test_child_failure_is_traced_not_raised():
    # the root fits in 2 tableaus; x <= 1 is infeasible, x >= 2 needs a third tableau
    problem = Problem.from_expressions("c = x", ["2x >= 3"], maximize=False,
                                       integer_unknowns=["x"], max_num_tableaus=2)
    context = SolveContext(print_debug=2, tie_break="first")
    solve(problem, context)
    assert problem.integer_solution is None
    assert problem.message == errors.NO_INTEGER_SOLUTION_ERR
    assert "Branch x >= 2 failed: " + errors.TOO_MANY_TABLEAUS_ERR + "2" in context.trace


def test_find_fractional_index(first_context):
    problem = Problem.from_text(ILP_TEXT)
    solve_relaxation(problem, first_context)
    assert find_fractional_index(problem) == 0
    problem.solutions.append([2.0, 1.0, 0.0, 2.0])
    assert find_fractional_index(problem) == -1
    problem.solutions.append([2.0, 0.5, 1.0, 3.0])
    assert find_fractional_index(problem) == 1


def test_clone_for_branch_owns_its_bounds():
    problem = Problem.from_matrix([1, 1], [[1, 2], [4, 2]], [4, 12], unknowns=["x", "y"],
                                  integer_unknowns=["x", "y"])
    child = problem.clone_for_branch()
    child.integer_maxs[0] = 2
    assert problem.integer_maxs[0] == float("inf")
    assert child.system_matrix == problem.system_matrix
    assert child.system_matrix is not problem.system_matrix
    assert child.status == Status.NO_PROBLEM
    assert child.tableaus == []


def test_bounds_become_rows(first_context):
    problem = Problem.from_matrix([1, 1], [[1, 2], [4, 2]], [4, 12], unknowns=["x", "y"],
                                  integer_unknowns=["x"], integer_bounds={"x": (3, None)})
    solve_relaxation(problem, first_context)
    first = problem.tableaus[0]
    assert first.num_constraints == 3
    assert first.row_labels[2] == "*s3"
    assert problem.solutions[-1][0] == pytest.approx(3)


def test_is_strictly_better_and_could_improve():
    assert is_strictly_better(3.5, 3, True, 13)
    assert not is_strictly_better(3.0000000000000004, 3, True, 13)
    assert is_strictly_better(2, 3, False, 13)

    problem = Problem.from_text(ILP_TEXT)
    problem.objective_values.append(10 / 3)
    search = SearchContext()
    assert could_improve(problem, search)
    search.found, search.best_objective = True, 3.0
    assert could_improve(problem, search)
    search.best_objective = 10 / 3
    assert not could_improve(problem, search)
