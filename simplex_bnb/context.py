"""
Per-solve context: debug level, trace log and tie-break strategy.

One SolveContext is created per call to solve() and handed to every phase and
every branch of the search, so nothing about tracing lives in module globals.

Debug levels (same scale as print_debug everywhere in this package):
    0  silent
    1  every tableau
    2  tableaus, intermediate solutions and branch-and-bound decisions
    3  additionally the pivot choice (ratios, entering/leaving variables)
"""

from typing import List, Optional

from .tiebreak import TieBreak, make_tie_break

DEBUG_NONE = 0
DEBUG_TABLEAUS = 1
DEBUG_SOLUTIONS = 2
DEBUG_PIVOTS = 3


class SolveContext:
    """Settings and trace shared by one solve, including all its branches."""

    def __init__(self, print_debug: int = DEBUG_NONE, echo: bool = False,
                 tie_break: Optional[TieBreak] = None, seed: Optional[int] = None):
        """
        Args:
            print_debug: Trace level 0-3
            echo: Also print trace lines as they are recorded
            tie_break: Strategy instance or name ('random', 'first', 'last'); random by default
            seed: Seed for the random strategy
        """
        self.print_debug = print_debug
        self.echo = echo
        self.tie_break = make_tie_break(tie_break, seed)
        self.trace: List[str] = []
        self.tableau_count = 0

    def log(self, level: int, message: str) -> None:
        """Record message if print_debug >= level."""
        if self.print_debug < level:
            return
        self.trace.append(message)
        if self.echo:
            print(message)

    def trace_text(self) -> str:
        return "\n".join(self.trace)

    def log_tableau(self, problem, highlight=None) -> None:
        """Trace the newest tableau of problem (numbered across the whole solve)."""
        self.tableau_count += 1
        if self.print_debug < DEBUG_TABLEAUS:
            return
        tabl = problem.tableaus[-1]
        self.log(DEBUG_TABLEAUS, f"\nTableau {self.tableau_count}:\n"
                                 f"{tabl.to_text(problem.sig_digits, highlight)}")
