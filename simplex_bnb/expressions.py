"""
Reading objectives, constraints and coefficients into matrix form.

The simplex engine works on numbers only. This module turns what a caller
types into the system matrix consumed by Problem.from_matrix:

    coefficient strings  "1/3", "2^10", "(1+2)/7"      -> to_number
    linear expressions   "3x + 2y - z/2"              -> linear_coefficients
    constraints          "x + 2y <= 4"                 -> parse_constraint
    whole problems       "maximize p = x + y subject to
                          x + 2y <= 4, 4x + 2y <= 12
                          integer x, y"                -> split_problem

Arithmetic is done with sympy so fractions stay exact until the final
conversion to float. Only English keywords are recognized.
"""

import re
from typing import Dict, List, Optional, Sequence, Tuple

from sympy import Symbol, expand, sympify
from sympy.parsing.sympy_parser import convert_xor, parse_expr, standard_transformations

from . import errors

_TRANSFORMATIONS = standard_transformations + (convert_xor,)

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_ILLEGAL = re.compile(r"[^0-9.,/()+\-*^<>=≤≥A-Za-z_ \t\r\n]")
_RELATION = re.compile(r"(<=|>=|=<|=>|≤|≥|=)")
_NUMBER_THEN_NAME = re.compile(r"(?<![A-Za-z0-9_.])(\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+)\s*(?![eE][+-]?\d)(?=[A-Za-z_(])")
_CLOSE_THEN_OPERAND = re.compile(r"\)\s*(?=[A-Za-z0-9_.(])")

_RELATION_NAMES = {"<=": "<=", "=<": "<=", "≤": "<=", ">=": ">=", "=>": ">=", "≥": ">=", "=": "="}


def check_sanitary(text):
    """Raise ExpressionError if text contains characters that cannot appear in a problem."""
    if _ILLEGAL.search(str(text)):
        raise errors.ExpressionError(errors.ILLEGAL_CHARS_ERR)


def to_number(x) -> float:
    """Convert a coefficient (number or arithmetic string) to float.

    Strings are evaluated exactly with sympy before conversion, so "1/3" is
    the float nearest to one third and "2^3" is 8.0.
    """
    if isinstance(x, bool):
        raise errors.ExpressionError(errors.ILLEGAL_COEFF_ERR + repr(x))
    if isinstance(x, (int, float)):
        return float(x)
    try:
        if isinstance(x, str):
            check_sanitary(x)
            value = sympify(x.replace('^', '**'))
        else:
            value = sympify(x)
        if not value.is_number or not value.is_real:
            raise errors.ExpressionError(errors.ILLEGAL_COEFF_ERR + repr(x))
        return float(value)
    except errors.ExpressionError:
        raise
    except Exception as e:
        raise errors.ExpressionError(f"{errors.BAD_EXPR_ERR}{x}: {e}") from e


def _explicit_products(expression):
    """Insert '*' where multiplication is implied: 2y -> 2*y, 3(x+y) -> 3*(x+y), (x)(y) -> (x)*(y)."""
    expression = _NUMBER_THEN_NAME.sub(r"\1*", expression)
    return _CLOSE_THEN_OPERAND.sub(")*", expression)


def _parse(expression):
    check_sanitary(expression)
    text = _explicit_products(expression.strip())
    if not text:
        return sympify(0), {}
    symbols = {name: Symbol(name) for name in _IDENTIFIER.findall(text)}
    try:
        expr = expand(parse_expr(text, local_dict=dict(symbols), transformations=_TRANSFORMATIONS))
    except Exception as e:
        raise errors.ExpressionError(f"{errors.BAD_EXPR_ERR}{expression}: {e}") from e
    return expr, symbols


def linear_coefficients(expression) -> Tuple[Dict[str, float], float]:
    """Split a linear expression into per-variable coefficients and a constant.

    Args:
        expression: e.g. "3x - y/2 + 4"

    Returns:
        ({"x": 3.0, "y": -0.5}, 4.0)
    """
    expr, symbols = _parse(expression)
    coeffs = {}
    for name, sym in symbols.items():
        coeff = expr.diff(sym)
        if coeff.free_symbols:
            raise errors.ExpressionError(errors.NONLINEAR_ERR + expression)
        if coeff != 0:
            try:
                coeffs[name] = float(coeff)
            except TypeError as e:
                raise errors.ExpressionError(errors.ILLEGAL_COEFF_ERR + name + " in " + expression) from e
    constant = expr.subs({sym: 0 for sym in symbols.values()})
    try:
        constant = float(constant)
    except TypeError as e:
        raise errors.ExpressionError(f"{errors.BAD_EXPR_ERR}{expression}") from e
    return coeffs, constant


def parse_constraint(constraint) -> Tuple[Dict[str, float], str, float]:
    """Read "lhs REL rhs" into (coefficients, relation, right-hand side).

    Variables may appear on both sides; everything is moved to the left and
    constants to the right. Relation is one of '<=', '>=', '='.
    """
    parts = _RELATION.split(str(constraint))
    if len(parts) != 3:
        raise errors.ExpressionError(f"{errors.NO_RELATION_CONSTRAINT_ERR}: {constraint}")
    lhs, rel, rhs = parts
    left, left_const = linear_coefficients(lhs)
    right, right_const = linear_coefficients(rhs)
    coeffs = dict(left)
    for name, value in right.items():
        coeffs[name] = coeffs.get(name, 0.0) - value
    return coeffs, _RELATION_NAMES[rel], right_const - left_const


def split_objective(objective) -> Tuple[Optional[str], str]:
    """Split "name = expression" into its two parts; name is None when absent."""
    objective = str(objective).strip()
    if not objective:
        raise errors.ExpressionError(errors.OBJECTIVE_NOT_SET_ERR)
    if "=" in objective:
        name, expression = objective.split("=", 1)
        name = name.strip()
        if not _IDENTIFIER.fullmatch(name):
            raise errors.ExpressionError(f"{errors.BAD_EXPR_ERR}{objective}")
        return name, expression
    return None, objective


def extract_unknowns(objective, constraints: Sequence[str]) -> List[str]:
    """Sorted names of all variables appearing in the objective and constraints."""
    names = set(linear_coefficients(objective)[0])
    for constraint in constraints:
        names.update(parse_constraint(constraint)[0])
    return sorted(names)


def to_matrix(objective, constraints: Sequence[str], unknowns: Sequence[str] = None):
    """Convert an objective expression and constraint strings to matrix form.

    Returns:
        (unknowns, objective_coeffs, matrix, rhs, relations)
    """
    if not constraints:
        raise errors.ExpressionError(errors.NO_LP_ERR)
    obj_coeffs, _ = linear_coefficients(objective)
    parsed = [parse_constraint(c) for c in constraints]
    if unknowns is None:
        names = set(obj_coeffs)
        for coeffs, _, _ in parsed:
            names.update(coeffs)
        unknowns = sorted(names)
    unknowns = list(unknowns)

    matrix, rhs, relations = [], [], []
    for coeffs, rel, value in parsed:
        unknown_names = set(coeffs) - set(unknowns)
        if unknown_names:
            raise errors.ExpressionError(f"{errors.BAD_EXPR_ERR}: unknown variable(s) {sorted(unknown_names)}")
        matrix.append([coeffs.get(name, 0.0) for name in unknowns])
        rhs.append(value)
        relations.append(rel)
    objective_coeffs = [obj_coeffs.get(name, 0.0) for name in unknowns]
    return unknowns, objective_coeffs, matrix, rhs, relations


def split_problem(problem_str) -> dict:
    """Split a whole problem statement into its parts.

    Accepted shape (line breaks and commas both separate constraints):

        maximize p = 3x + 2y subject to
        x + y <= 4
        x + 3y <= 6
        integer x, y

    Returns:
        dict with keys maximize, objective_name, objective, constraints, integer_unknowns
    """
    text = str(problem_str).strip()
    if not text:
        raise errors.ExpressionError(errors.NO_LP_ERR)
    check_sanitary(text)

    integer_unknowns = []
    match = re.search(r"\bintegers?\b", text, flags=re.IGNORECASE)
    if match:
        tail = text[match.end():]
        integer_unknowns = [n for n in re.split(r"[\s,]+", tail) if n]
        text = text[:match.start()]

    text = re.sub(r"\bsubject\s+to\b", ",", text, count=1, flags=re.IGNORECASE)
    pieces = [p.strip() for p in re.split(r"[,\r\n]+", text) if p.strip()]
    if not pieces:
        raise errors.ExpressionError(errors.NO_LP_ERR)

    head = re.match(r"(max|min)[a-z]*\b\s*(.*)", pieces[0], flags=re.IGNORECASE | re.DOTALL)
    if head is None:
        raise errors.ExpressionError(errors.UNSPECIFIED_MAX_MIN_ERR)
    maximize = head.group(1).lower() == "max"
    name, objective = split_objective(head.group(2))

    constraints = pieces[1:]
    for constraint in constraints:
        if "=" not in constraint and "≤" not in constraint and "≥" not in constraint:
            raise errors.ExpressionError(f"{errors.NO_RELATION_CONSTRAINT_ERR}: {constraint}")

    return {
        "maximize": maximize,
        "objective_name": name,
        "objective": objective,
        "constraints": constraints,
        "integer_unknowns": integer_unknowns,
    }
