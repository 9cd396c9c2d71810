"""
LP / MILP problem object.

A Problem carries everything about one solve attempt: the normalized system
(matrix, right-hand sides, which rows are starred), the integer requirements,
the growing history of tableaus and the solution snapshots read from them,
and the status.

Ways to set up a problem, checked in this order by parse():
    1) Problem.from_tableau     an initial tableau and its unknowns
    2) Problem.from_matrix      objective coefficients, constraint matrix, right-hand sides
    3) Problem.from_expressions an objective string and a list of constraint strings
    4) Problem.from_text        a whole problem statement

Normalization of constraints:
    - "a.x = b" becomes "a.x >= b" in place plus "a.x <= b" appended at the end
    - a row with negative right-hand side is multiplied by -1, flipping its relation
    - ">=" rows are starred (their surplus variable makes the initial basis infeasible)
"""

import math
from typing import Dict, List, Optional, Sequence, Tuple

from . import errors
from .expressions import split_objective, split_problem, to_matrix, to_number
from .solution import calculate_solution
from .status import Status
from .tableau import STAR, Tableau, is_starred

DEFAULT_MAX_NUM_TABLEAUS = 50
DEFAULT_MAX_SIG_DIGITS = 13
DEFAULT_SIG_DIGITS = 6

_RELATIONS = {"<=": "<=", "=<": "<=", "≤": "<=", ">=": ">=", "=>": ">=", "≥": ">=", "=": "=", "==": "="}
_FLIPPED = {"<=": ">=", ">=": "<="}


def normalize_row(coeffs: Sequence[float], relation: str, rhs: float) -> Tuple[List[float], float, bool]:
    """Bring one inequality to non-negative right-hand side form.

    Returns:
        (coefficients, rhs, starred) where starred means the relation is ">="
    """
    coeffs = [float(c) for c in coeffs]
    if rhs < 0:
        coeffs = [-c + 0.0 for c in coeffs]
        rhs = -rhs
        relation = _FLIPPED[relation]
    return coeffs, float(rhs), relation == ">="


class Problem:
    """One LP or MILP together with its solve history."""

    def __init__(self, objective: str = "", constraints: Optional[Sequence[str]] = None,
                 problem_str: str = "", maximize: bool = True, objective_name: str = "Obj",
                 integer_unknowns: Optional[Sequence[str]] = None,
                 max_num_tableaus: int = DEFAULT_MAX_NUM_TABLEAUS,
                 max_sig_digits: int = DEFAULT_MAX_SIG_DIGITS,
                 sig_digits: int = DEFAULT_SIG_DIGITS,
                 show_artificial_variables: bool = False):
        """
        Args:
            objective: Objective expression, optionally "name = expression"
            constraints: Constraint strings ("x + 2y <= 4")
            problem_str: Whole problem statement (used when objective/constraints are empty)
            maximize: False to minimize
            objective_name: Label of the objective
            integer_unknowns: Names of variables that must take integer values
            max_num_tableaus: Cap on the number of tableaus per problem (fatal when exceeded)
            max_sig_digits: Working precision in significant digits
            sig_digits: Display precision in significant digits
            show_artificial_variables: Include slack/surplus values in formatted solutions
        """
        if max_sig_digits < 1 or sig_digits < 1:
            raise errors.ProblemSetupError("Significant digits must be at least 1")
        if max_num_tableaus < 1:
            raise errors.ProblemSetupError("max_num_tableaus must be at least 1")

        self.objective = objective or ""
        self.constraints = list(constraints) if constraints else []
        self.problem_str = problem_str or ""
        self.maximize = maximize
        self.objective_name = objective_name

        # names of unknowns; slack/surplus names get appended by create_first_tableau
        self.unknowns: List[str] = []
        self.num_actual_unknowns = 0

        # normalized system, rows in tableau order
        self.system_matrix: List[List[float]] = []
        self.constraint_rhs: List[float] = []
        self.system_row_is_starred: List[bool] = []
        self.objective_coeffs: List[float] = []

        # integer requirements, bounds indexed like integer_unknowns
        self.integer_unknowns: List[str] = list(integer_unknowns) if integer_unknowns else []
        self.integer_mins: List[float] = [-math.inf] * len(self.integer_unknowns)
        self.integer_maxs: List[float] = [math.inf] * len(self.integer_unknowns)

        self.row_is_starred: List[bool] = []
        self.tableaus: List[Tableau] = []
        self.solutions: List[List[float]] = []
        self.objective_values: List[float] = []

        self.status = Status.NO_PROBLEM
        self.message = ""
        self.error = ""

        self.integer_solution: Optional[List[float]] = None
        self.integer_objective_value: Optional[float] = None
        self.integer_solution_unknowns: Optional[List[str]] = None
        self.nodes_explored = 0

        self.max_num_tableaus = max_num_tableaus
        self.max_sig_digits = max_sig_digits
        self.sig_digits = sig_digits
        self.show_artificial_variables = show_artificial_variables

    # ---------- Construction ----------
    @classmethod
    def from_matrix(cls, objective: Sequence, matrix: Sequence[Sequence], rhs: Sequence,
                    relations: Optional[Sequence[str]] = None, maximize: bool = True,
                    unknowns: Optional[Sequence[str]] = None,
                    integer_unknowns: Optional[Sequence] = None,
                    integer_bounds: Optional[Dict[str, Tuple[Optional[float], Optional[float]]]] = None,
                    **settings) -> "Problem":
        """Set up a problem from coefficients.

        Args:
            objective: Objective coefficients (n entries)
            matrix: Constraint coefficients (m rows of n entries)
            rhs: Right-hand sides (m entries)
            relations: '<=', '>=' or '=' per row (all '<=' when omitted)
            maximize: False to minimize
            unknowns: Variable names (x1..xn when omitted)
            integer_unknowns: Names or column indices of integer variables
            integer_bounds: {name: (lower, upper)} extra bounds on integer variables, None for unbounded
            **settings: Any keyword accepted by Problem()

        Coefficients may be numbers or arithmetic strings such as "1/3".
        """
        n = len(objective)
        if unknowns is None:
            unknowns = [f"x{j + 1}" for j in range(n)]
        unknowns = list(unknowns)
        if len(unknowns) != n:
            raise errors.ProblemSetupError(f"{n} objective coefficients but {len(unknowns)} unknowns")
        if len(set(unknowns)) != n:
            raise errors.ProblemSetupError("Unknown names must be distinct")
        if any(name.startswith(STAR) for name in unknowns):
            raise errors.ProblemSetupError(f"Unknown names may not start with '{STAR}'")

        names = []
        for u in integer_unknowns or []:
            if isinstance(u, int):
                if not 0 <= u < n:
                    raise errors.ProblemSetupError(f"Integer variable index {u} out of range")
                u = unknowns[u]
            elif u not in unknowns:
                raise errors.ProblemSetupError(f"Integer variable {u} is not an unknown")
            names.append(u)

        problem = cls(maximize=maximize, integer_unknowns=names, **settings)
        problem.unknowns = unknowns
        problem.num_actual_unknowns = n
        problem.set_system(objective, matrix, rhs, relations)

        for name, (lo, hi) in (integer_bounds or {}).items():
            problem.set_integer_bounds(name, lo, hi)
        return problem

    @classmethod
    def from_expressions(cls, objective: str, constraints: Sequence[str], maximize: bool = True,
                         integer_unknowns: Optional[Sequence[str]] = None, **settings) -> "Problem":
        """Set up a problem from "p = 3x + 2y" and ["x + y <= 4", ...]; read when solving."""
        return cls(objective=objective, constraints=constraints, maximize=maximize,
                   integer_unknowns=integer_unknowns, **settings)

    @classmethod
    def from_text(cls, problem_str: str, **settings) -> "Problem":
        """Set up a problem from a whole statement; read when solving."""
        return cls(problem_str=problem_str, **settings)

    @classmethod
    def from_tableau(cls, tableau: Tableau, unknowns: Optional[Sequence[str]] = None,
                     num_actual_unknowns: Optional[int] = None, maximize: Optional[bool] = None,
                     **settings) -> "Problem":
        """Set up a problem from an initial tableau.

        Starred rows are read from the '*' marks on the row labels. When maximize
        is omitted it is inferred from the objective label ('-Obj' means minimize).
        """
        if unknowns is None:
            unknowns = list(tableau.variable_names)
        unknowns = list(unknowns)
        missing = set(unknowns) - set(tableau.variable_names)
        if missing:
            raise errors.ProblemSetupError(f"Unknowns not in tableau: {sorted(missing)}")
        label = tableau.objective_label
        if maximize is None:
            maximize = not label.startswith("-")

        problem = cls(maximize=maximize, objective_name=label.lstrip("-") or "Obj", **settings)
        problem.unknowns = unknowns
        problem.num_actual_unknowns = len(unknowns) if num_actual_unknowns is None else num_actual_unknowns
        problem.row_is_starred = [is_starred(label) for label in tableau.row_labels[:-1]]
        problem.tableaus.append(tableau)
        calculate_solution(problem)
        return problem

    def set_system(self, objective: Sequence, matrix: Sequence[Sequence], rhs: Sequence,
                   relations: Optional[Sequence[str]] = None) -> None:
        """Store a normalized system; equalities are split, negative right-hand sides flipped."""
        n = len(self.unknowns) if self.unknowns else len(objective)
        if len(objective) != n:
            raise errors.ProblemSetupError(f"Objective has {len(objective)} coefficients, expected {n}")
        if len(matrix) != len(rhs):
            raise errors.ProblemSetupError(f"{len(matrix)} constraint rows but {len(rhs)} right-hand sides")
        if not matrix:
            raise errors.ProblemSetupError(errors.NO_LP_ERR)
        if relations is None:
            relations = ["<="] * len(matrix)
        if len(relations) != len(matrix):
            raise errors.ProblemSetupError(f"{len(matrix)} constraint rows but {len(relations)} relations")

        rows, appended = [], []
        for i, (coeffs, rel, b) in enumerate(zip(matrix, relations, rhs)):
            if len(coeffs) != n:
                raise errors.ProblemSetupError(f"Constraint {i + 1} has {len(coeffs)} coefficients, expected {n}")
            try:
                rel = _RELATIONS[str(rel).strip()]
            except KeyError:
                raise errors.ExpressionError(f"{errors.NO_RELATION_CONSTRAINT_ERR}: {rel}")
            coeffs = [to_number(c) for c in coeffs]
            b = to_number(b)
            if rel == "=":
                rows.append(normalize_row(coeffs, ">=", b))
                appended.append(normalize_row(coeffs, "<=", b))
            else:
                rows.append(normalize_row(coeffs, rel, b))
        rows.extend(appended)

        self.system_matrix = [coeffs for coeffs, _, _ in rows]
        self.constraint_rhs = [b for _, b, _ in rows]
        self.system_row_is_starred = [starred for _, _, starred in rows]
        self.objective_coeffs = [to_number(c) for c in objective]

    def set_integer_bounds(self, name: str, lower=None, upper=None) -> None:
        """Set extra bounds on an integer variable; None leaves that side unbounded."""
        try:
            k = self.integer_unknowns.index(name)
        except ValueError:
            raise errors.ProblemSetupError(f"{name} is not an integer variable")
        self.integer_mins[k] = -math.inf if lower is None else to_number(lower)
        self.integer_maxs[k] = math.inf if upper is None else to_number(upper)

    def clone_for_branch(self) -> "Problem":
        """Fresh child problem with the same system and independently owned bound arrays."""
        if not self.system_matrix:
            raise errors.ProblemSetupError(errors.INTEGER_NEEDS_MATRIX_ERR)
        child = Problem(maximize=self.maximize, objective_name=self.objective_name,
                        integer_unknowns=self.integer_unknowns,
                        max_num_tableaus=self.max_num_tableaus,
                        max_sig_digits=self.max_sig_digits,
                        sig_digits=self.sig_digits,
                        show_artificial_variables=self.show_artificial_variables)
        child.objective = self.objective
        child.constraints = list(self.constraints)
        child.unknowns = self.unknowns[:self.num_actual_unknowns]
        child.num_actual_unknowns = self.num_actual_unknowns
        child.system_matrix = [row[:] for row in self.system_matrix]
        child.constraint_rhs = self.constraint_rhs[:]
        child.system_row_is_starred = self.system_row_is_starred[:]
        child.objective_coeffs = self.objective_coeffs[:]
        child.integer_mins = self.integer_mins[:]
        child.integer_maxs = self.integer_maxs[:]
        return child

    # ---------- Parsing ----------
    def parse(self) -> bool:
        """Make sure the problem has its first tableau.

        Returns:
            True if a first tableau was created by this call
        """
        if self.tableaus and self.unknowns:
            self.advance(Status.PARSED)
            return False

        if self.system_matrix and self.constraint_rhs:
            self.create_first_tableau()
            self.advance(Status.PARSED)
            return True

        if self.objective and self.constraints:
            self._read_expressions()
            self.create_first_tableau()
            self.advance(Status.PARSED)
            return True

        if self.problem_str.strip():
            parts = split_problem(self.problem_str)
            self.maximize = parts["maximize"]
            if parts["objective_name"]:
                self.objective_name = parts["objective_name"]
            self.objective = parts["objective"]
            self.constraints = parts["constraints"]
            if parts["integer_unknowns"]:
                self.integer_unknowns = parts["integer_unknowns"]
                self.integer_mins = [-math.inf] * len(self.integer_unknowns)
                self.integer_maxs = [math.inf] * len(self.integer_unknowns)
            self._read_expressions()
            self.create_first_tableau()
            self.advance(Status.PARSED)
            return True

        raise errors.ProblemSetupError(errors.NO_LP_ERR)

    def _read_expressions(self):
        name, objective = split_objective(self.objective)
        if name:
            self.objective_name = name
        unknowns, coeffs, matrix, rhs, relations = to_matrix(objective, self.constraints)
        missing = [u for u in self.integer_unknowns if u not in unknowns]
        if missing:
            raise errors.ExpressionError(f"Integer variable(s) not in the problem: {', '.join(missing)}")
        self.unknowns = unknowns
        self.num_actual_unknowns = len(unknowns)
        self.set_system(coeffs, matrix, rhs, relations)

    def create_first_tableau(self) -> Tableau:
        """Build the initial tableau, append slack names to unknowns, record the first solution."""
        self.unknowns = self.unknowns[:self.num_actual_unknowns]
        n = self.num_actual_unknowns

        rows = [(coeffs[:], b, starred) for coeffs, b, starred in
                zip(self.system_matrix, self.constraint_rhs, self.system_row_is_starred)]

        # extra rows for the integer bounds added by branch and bound
        for k, name in enumerate(self.integer_unknowns):
            j = self.unknowns.index(name)
            unit = [0.0] * n
            unit[j] = 1.0
            if self.integer_mins[k] > -math.inf:
                rows.append(normalize_row(unit, ">=", self.integer_mins[k]))
            if self.integer_maxs[k] < math.inf:
                rows.append(normalize_row(unit, "<=", self.integer_maxs[k]))

        num_rows = len(rows)
        slack_names = []
        for i in range(1, num_rows + 1):
            name = f"s{i}"
            while name in self.unknowns:
                name += "_"
            slack_names.append(name)
        objective_label = self.objective_name if self.maximize else "-" + self.objective_name
        header = self.unknowns + slack_names + [objective_label]

        body, labels = [], []
        self.row_is_starred = []
        for i, (coeffs, b, starred) in enumerate(rows):
            slack = [0.0] * num_rows
            slack[i] = -1.0 if starred else 1.0
            body.append(coeffs + slack + [0.0, b])
            labels.append(STAR + slack_names[i] if starred else slack_names[i])
            self.row_is_starred.append(starred)

        sign = -1.0 if self.maximize else 1.0
        body.append([sign * c + 0.0 for c in self.objective_coeffs] + [0.0] * num_rows + [1.0, 0.0])
        labels.append(objective_label)

        first = Tableau(header, labels, body)
        self.tableaus.append(first)
        self.unknowns = self.unknowns + slack_names
        calculate_solution(self)
        return first

    # ---------- Status ----------
    @property
    def is_integral(self) -> bool:
        return bool(self.integer_unknowns)

    def advance(self, status: Status) -> None:
        """Move status forward; never backwards, never away from NO_SOLUTION."""
        if self.status == Status.NO_SOLUTION:
            return
        if status == Status.NO_SOLUTION or status > self.status:
            self.status = status

    def fail(self, message: str) -> None:
        """Record a no-optimum outcome (empty region, unbounded objective)."""
        self.message = message
        self.advance(Status.NO_SOLUTION)

    def __repr__(self):
        kind = "MILP" if self.is_integral else "LP"
        direction = "max" if self.maximize else "min"
        return (f"Problem({kind}, {direction} {self.objective_name}, "
                f"{self.num_actual_unknowns} unknowns, status={self.status.name})")
