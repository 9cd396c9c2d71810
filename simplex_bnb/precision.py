"""
Significant-digit rounding used by every comparison in the simplex engine.

Floating point tableau arithmetic accumulates residue (0.30000000000000004,
-1.1102230246251565e-16, ...). Instead of scattering epsilons through the
code, every "is this zero", "which entry is smallest" and "are these two
ratios tied" decision is made on values rounded to a fixed number of
significant decimal digits.
"""

import math
from typing import Iterable, List

# Anything smaller than this in magnitude is treated as exactly zero
TINY = 1e-23


def round_sig_dig(x, num_digits):
    """Round x to num_digits significant decimal digits.

    Args:
        x: Number to round (int or float)
        num_digits: Significant digits to keep, >= 1

    Returns:
        Rounded float. 0.0 for zero, for |x| < 1e-23 and for -0.0.
    """
    if x == 0 or abs(x) < TINY:
        return 0.0
    if math.isinf(x) or math.isnan(x):
        return x

    magnitude = abs(x)
    # 1. Base-10 exponent extraction: scale so num_digits digits sit left of the point
    k = math.floor(math.log10(magnitude)) - num_digits + 1
    scaled = round(magnitude / 10.0 ** k) if k >= 0 else round(magnitude * 10.0 ** -k)
    rounded = scaled * 10.0 ** k if k >= 0 else scaled / 10.0 ** -k

    # 2. Re-round through the decimal string to drop residue from the scaling above
    rounded = float(f"{rounded:.{num_digits}g}")

    return rounded if x > 0 else -rounded


def round_values(values: Iterable[float], num_digits: int) -> List[float]:
    """Round each entry of a row (or any iterable) to num_digits significant digits."""
    return [round_sig_dig(v, num_digits) for v in values]


def nearest_integer(x) -> int:
    """Nearest integer to x, halves rounded up."""
    return math.floor(x + 0.5)


def is_integral(x, num_digits) -> bool:
    """True when x, rounded to num_digits significant digits, equals its nearest integer."""
    return round_sig_dig(x, num_digits) == nearest_integer(x)
