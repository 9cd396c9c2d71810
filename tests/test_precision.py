import math

import pytest

from simplex_bnb.precision import is_integral, nearest_integer, round_sig_dig, round_values


@pytest.mark.parametrize("x, digits, expected", [
    (123456.789, 3, 123000.0),
    (0.000123456, 2, 0.00012),
    (-2.71828, 3, -2.72),
    (0.30000000000000004, 13, 0.3),
    (9.9999999, 3, 10.0),
    (1.0, 1, 1.0),
])
def test_round_sig_dig_values(x, digits, expected):
    assert round_sig_dig(x, digits) == expected


def test_zero_and_tiny_values_round_to_zero():
    assert round_sig_dig(0, 13) == 0
    assert round_sig_dig(-0.0, 13) == 0
    assert round_sig_dig(1e-24, 13) == 0
    assert round_sig_dig(-5e-24, 3) == 0
    # just above the cutoff is kept
    assert round_sig_dig(2e-23, 13) == 2e-23


def test_idempotent():
    values = [1 / 3, -2 / 3, 1e-20, 123456789.123456789, -9.999999999999, 0.1 + 0.2, 1e15 / 7, math.pi]
    for x in values:
        for digits in (1, 2, 6, 13, 15):
            once = round_sig_dig(x, digits)
            assert round_sig_dig(once, digits) == once


def test_sign_preserved():
    for x in (1 / 7, 12345.678, 3e-10):
        assert round_sig_dig(x, 6) > 0
        assert round_sig_dig(-x, 6) < 0
        assert round_sig_dig(-x, 6) == -round_sig_dig(x, 6)


def test_subtractive_cancellation_becomes_exact_zero():
    a = 0.1 + 0.2
    b = 0.3
    assert a - b != 0
    assert round_sig_dig(a, 15) - round_sig_dig(b, 15) == 0


def test_round_values():
    assert round_values([1 / 3, 0.0, -2.5000000000001], 4) == [0.3333, 0.0, -2.5]


def test_nearest_integer_and_is_integral():
    assert nearest_integer(2.5) == 3
    assert nearest_integer(-2.5) == -2
    assert nearest_integer(2.4999) == 2
    assert is_integral(2.9999999999999996, 13)
    assert is_integral(4.0, 13)
    assert not is_integral(8 / 3, 13)
    assert not is_integral(0.5, 13)
