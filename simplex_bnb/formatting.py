"""
Rounded, display-ready views of a problem's results.

Values are rounded to problem.sig_digits (display precision), never to the
working precision used inside the solver. Slack/surplus variables are left
out unless requested or problem.show_artificial_variables is set.
"""

from . import errors
from .precision import nearest_integer, round_sig_dig
from .status import Status


def format_number(x, sig_digits):
    """Round for display; integral values print without a decimal point."""
    if x is None:
        return ""
    value = round_sig_dig(x, sig_digits)
    if value == int(value) and abs(value) < 1e15:
        return str(int(value))
    return repr(value)


def _include_slack(problem, include_slack_variables):
    if include_slack_variables is None:
        return problem.show_artificial_variables
    return include_slack_variables


def format_unknowns(problem, include_slack_variables=None):
    if _include_slack(problem, include_slack_variables):
        return list(problem.unknowns)
    return problem.unknowns[:problem.num_actual_unknowns]


def _format_solution(problem, solution, include_slack_variables):
    count = len(format_unknowns(problem, include_slack_variables))
    return [format_number(v, problem.sig_digits) for v in solution[:count]]


def format_solutions(problem, include_slack_variables=None):
    """Every recorded solution, one list of strings per tableau."""
    return [_format_solution(problem, s, include_slack_variables) for s in problem.solutions]


def format_last_solution(problem, include_slack_variables=None):
    return _format_solution(problem, problem.solutions[-1], include_slack_variables)


def format_objective_values(problem):
    return [format_number(v, problem.sig_digits) for v in problem.objective_values]


def format_last_objective_value(problem):
    return format_number(problem.objective_values[-1], problem.sig_digits)


def format_integer_objective_value(problem):
    return format_number(problem.integer_objective_value, problem.sig_digits)


def format_integer_solution(problem, include_slack_variables=None):
    """Integer incumbent; integer variables are shown exactly, the rest rounded."""
    names = integer_solution_unknowns(problem, include_slack_variables)
    values = []
    for name, v in zip(names, problem.integer_solution):
        if name in problem.integer_unknowns:
            values.append(str(nearest_integer(v)))
        else:
            values.append(format_number(v, problem.sig_digits))
    return values


def integer_solution_unknowns(problem, include_slack_variables=None):
    """Names matching integer_solution; its slack variables belong to the branch that found it."""
    names = problem.integer_solution_unknowns or problem.unknowns
    if _include_slack(problem, include_slack_variables):
        return list(names)
    return names[:problem.num_actual_unknowns]


def _assignment_string(name, objective, names, values):
    pairs = ", ".join(f"{n} = {v}" for n, v in zip(names, values))
    return f"{name} = {objective}; {pairs}"


def last_solution_to_string(problem):
    """The latest intermediate solution, even for integer problems."""
    return _assignment_string(problem.objective_name, format_last_objective_value(problem),
                              format_unknowns(problem), format_last_solution(problem))


def solution_to_string(problem):
    """Final answer: the message when there is no solution, otherwise objective and variables."""
    if problem.status == Status.NO_SOLUTION:
        return problem.message
    if problem.is_integral:
        if problem.integer_solution is None:
            return errors.NO_INTEGER_SOLUTION_ERR
        return _assignment_string(problem.objective_name, format_integer_objective_value(problem),
                                  integer_solution_unknowns(problem), format_integer_solution(problem))
    return last_solution_to_string(problem)
