"""
Tie-breaking strategies for the ratio test.

When several rows share the minimum ratio the simplex method may cycle if it
always picks the same one. The default strategy picks uniformly at random;
tests can pin the choice with FirstIndexTieBreak / LastIndexTieBreak or a seed.
The optimum found does not depend on which tied row is chosen, only the path.
"""

import random
from typing import Optional, Sequence


class TieBreak:
    """Pick one row index out of several tied candidates."""

    name = "base"

    def choose(self, rows: Sequence[int]) -> int:
        raise NotImplementedError


class RandomTieBreak(TieBreak):
    name = "random"

    def __init__(self, seed: Optional[int] = None, rng: Optional[random.Random] = None):
        self.rng = rng if rng is not None else random.Random(seed)

    def choose(self, rows):
        return self.rng.choice(list(rows))


class FirstIndexTieBreak(TieBreak):
    name = "first"

    def choose(self, rows):
        return min(rows)


class LastIndexTieBreak(TieBreak):
    name = "last"

    def choose(self, rows):
        return max(rows)


_STRATEGIES = {
    RandomTieBreak.name: RandomTieBreak,
    FirstIndexTieBreak.name: FirstIndexTieBreak,
    LastIndexTieBreak.name: LastIndexTieBreak,
}


def make_tie_break(strategy=None, seed=None) -> TieBreak:
    """Resolve a strategy name ('random', 'first', 'last'), an instance, or None (random)."""
    if strategy is None:
        return RandomTieBreak(seed)
    if isinstance(strategy, TieBreak):
        return strategy
    try:
        cls = _STRATEGIES[str(strategy).lower()]
    except KeyError:
        raise ValueError(f"Unknown tie-break strategy: {strategy}. "
                         f"Choose from {sorted(_STRATEGIES)}")
    return cls(seed) if cls is RandomTieBreak else cls()
