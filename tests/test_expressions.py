import pytest

from simplex_bnb import ExpressionError
from simplex_bnb import errors
from simplex_bnb.expressions import (extract_unknowns, linear_coefficients, parse_constraint,
                                     split_objective, split_problem, to_matrix, to_number)


@pytest.mark.parametrize("text, expected", [
    ("1/3", 1 / 3),
    ("2^3", 8.0),
    ("(1+2)/7", 3 / 7),
    ("-0.25", -0.25),
    ("1e3", 1000.0),
    (7, 7.0),
    (2.5, 2.5),
])
def test_to_number(text, expected):
    assert to_number(text) == pytest.approx(expected)


@pytest.mark.parametrize("text", ["x", "1/0", "sqrt(-1)", "2 $ 3", ""])
def test_to_number_rejects(text):
    with pytest.raises(ExpressionError):
        to_number(text)


def test_linear_coefficients():
    coeffs, constant = linear_coefficients("3x - y/2 + 4")
    assert coeffs == {"x": 3.0, "y": -0.5}
    assert constant == 4.0


def test_implicit_multiplication():
    assert linear_coefficients("2y + 3(x + z)")[0] == {"y": 2.0, "x": 3.0, "z": 3.0}
    assert linear_coefficients("1.5x1 + x2")[0] == {"x1": 1.5, "x2": 1.0}
    assert linear_coefficients("2e2x")[0] == {"x": 200.0}


def test_nonlinear_rejected():
    with pytest.raises(ExpressionError) as info:
        linear_coefficients("x*y + 1")
    assert str(info.value).startswith(errors.NONLINEAR_ERR)


def test_parse_constraint_moves_terms():
    coeffs, rel, rhs = parse_constraint("x + 3 <= 2y + 7")
    assert coeffs == {"x": 1.0, "y": -2.0}
    assert rel == "<="
    assert rhs == 4.0
    assert parse_constraint("x ≥ 1")[1] == ">="
    assert parse_constraint("x = 1")[1] == "="


def test_parse_constraint_needs_relation():
    with pytest.raises(ExpressionError):
        parse_constraint("x + y")


def test_split_objective():
    assert split_objective("p = 3x + 2y") == ("p", " 3x + 2y")
    assert split_objective("3x + 2y") == (None, "3x + 2y")
    with pytest.raises(ExpressionError) as info:
        split_objective("  ")
    assert str(info.value) == errors.OBJECTIVE_NOT_SET_ERR


def test_to_matrix():
    unknowns, objective, matrix, rhs, relations = to_matrix("3y + 2x", ["x + y <= 4", "y >= 1"])
    assert unknowns == ["x", "y"]
    assert objective == [2.0, 3.0]
    assert matrix == [[1.0, 1.0], [0.0, 1.0]]
    assert rhs == [4.0, 1.0]
    assert relations == ["<=", ">="]


def test_extract_unknowns():
    assert extract_unknowns("a + c", ["b <= 1"]) == ["a", "b", "c"]


def test_split_problem():
    parts = split_problem("""Maximize p = 3x + 2y subject to
        x + y <= 4, x + 3y <= 6
        integers x, y""")
    assert parts["maximize"] is True
    assert parts["objective_name"] == "p"
    assert parts["objective"].strip() == "3x + 2y"
    assert parts["constraints"] == ["x + y <= 4", "x + 3y <= 6"]
    assert parts["integer_unknowns"] == ["x", "y"]


def test_split_problem_minimize_without_name():
    parts = split_problem("minimize x + y subject to x >= 1")
    assert parts["maximize"] is False
    assert parts["objective_name"] is None
    assert parts["constraints"] == ["x >= 1"]
    assert parts["integer_unknowns"] == []


@pytest.mark.parametrize("text, message", [
    ("p = x subject to x <= 1", errors.UNSPECIFIED_MAX_MIN_ERR),
    ("maximize p = x subject to x", errors.NO_RELATION_CONSTRAINT_ERR + ": x"),
    ("maximize p = x subject to x <= 1 ; y", errors.ILLEGAL_CHARS_ERR),
    ("", errors.NO_LP_ERR),
])
def test_split_problem_errors(text, message):
    with pytest.raises(ExpressionError) as info:
        split_problem(text)
    assert str(info.value) == message
