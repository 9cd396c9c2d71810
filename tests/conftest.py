"""Pytest configuration and shared fixtures for simplex_bnb tests.

Random tie-breaking in the ratio test is seeded from the TEST_RNG_SEED
environment variable (default: 0) so failures can be reproduced.
"""

import os

import pytest

from simplex_bnb import FirstIndexTieBreak, SolveContext


@pytest.fixture(scope="function")
def seed() -> int:
    return int(os.environ.get("TEST_RNG_SEED", "0"))


@pytest.fixture(scope="function")
def context(seed) -> SolveContext:
    """Seeded random tie-breaking, tableaus and solutions traced."""
    return SolveContext(print_debug=2, seed=seed)


@pytest.fixture(scope="function")
def first_context() -> SolveContext:
    """Deterministic context: ties always go to the lowest row index."""
    return SolveContext(tie_break=FirstIndexTieBreak())
