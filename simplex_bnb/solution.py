"""Reading the current assignment and objective value out of a tableau."""


def calculate_solution(problem):
    """Append the solution and objective value of problem's latest tableau.

    Each unknown (structural variables first, then slack/surplus variables)
    takes the value RHS / coefficient of the constraint row whose basic
    variable it is, or 0 when it is non-basic. The objective value is the
    objective row's RHS divided by its own coefficient, negated for
    minimization because the tableau always encodes a maximization.

    Returns:
        (solution, objective_value) just appended
    """
    tabl = problem.tableaus[-1]
    columns = {name: j for j, name in enumerate(tabl.variable_names)}

    basic_rows = {}
    for i in range(tabl.num_constraints):
        basic_rows.setdefault(tabl.basic_variable(i), i)

    solution = []
    for name in problem.unknowns:
        i = basic_rows.get(name)
        if i is None:
            solution.append(0.0)
        else:
            solution.append(tabl.rhs(i) / tabl[i, columns[name]])

    m = tabl.num_constraints
    objective_value = tabl.rhs(m) / tabl[m, tabl.objective_col]
    if not problem.maximize:
        objective_value = -objective_value
    # no negative zeros in reported values
    solution = [v + 0.0 for v in solution]
    objective_value += 0.0

    problem.solutions.append(solution)
    problem.objective_values.append(objective_value)
    return solution, objective_value
