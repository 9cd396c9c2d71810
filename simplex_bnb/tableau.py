"""
Immutable simplex tableau.

Layout (m constraint rows, n variable columns):

                 | x1   x2  ... s1  ... sm  | Obj  | RHS
    -------------+--------------------------+------+-----
    row 0..m-1   | constraint coefficients  |  0   | b_i
    row m        | objective coefficients   |  1   | z

- header: names of the n variable columns followed by the objective label.
- row_labels: the basic variable of each constraint row (prefixed with '*'
  while the row is starred) followed by the objective label.
- Column n is the objective row's own column, column n + 1 the right-hand side.

A Tableau is never modified after construction. pivot() and negate_rows()
return new snapshots, so a problem's history of tableaus stays valid for
tracing and for abandoning a branch.
"""

from typing import List, Optional, Sequence, Tuple

from . import errors
from .precision import round_sig_dig

STAR = "*"


def strip_star(label):
    """Label without its starred marker."""
    return label.replace(STAR, "")


def is_starred(label):
    return label.startswith(STAR)


class Tableau:
    """One snapshot of a simplex iteration."""

    __slots__ = ("_header", "_row_labels", "_rows")

    def __init__(self, header: Sequence[str], row_labels: Sequence[str], rows: Sequence[Sequence[float]]):
        """Build a tableau.

        Args:
            header: n variable names followed by the objective label (n + 1 entries)
            row_labels: m basic-variable labels followed by the objective label (m + 1 entries)
            rows: m + 1 numeric rows of n + 2 entries each (variables, objective column, RHS)
        """
        header = tuple(header)
        row_labels = tuple(row_labels)
        rows = tuple(tuple(float(v) for v in row) for row in rows)

        if len(rows) < 2:
            raise errors.ProblemSetupError("A tableau needs at least one constraint row and an objective row")
        if len(row_labels) != len(rows):
            raise errors.ProblemSetupError(
                f"Tableau has {len(rows)} rows but {len(row_labels)} row labels")
        width = len(header) + 1
        for i, row in enumerate(rows):
            if len(row) != width:
                raise errors.ProblemSetupError(
                    f"Tableau row {i} has {len(row)} entries, expected {width}")

        self._header = header
        self._row_labels = row_labels
        self._rows = rows

    @classmethod
    def from_grid(cls, grid: Sequence[Sequence]) -> "Tableau":
        """Build from a label-bordered grid as returned by as_grid()."""
        header = list(grid[0][1:-1])
        row_labels = [row[0] for row in grid[1:]]
        rows = [row[1:] for row in grid[1:]]
        return cls(header, row_labels, rows)

    # ---------- Accessors ----------
    @property
    def header(self) -> Tuple[str, ...]:
        return self._header

    @property
    def variable_names(self) -> Tuple[str, ...]:
        return self._header[:-1]

    @property
    def objective_label(self) -> str:
        return self._header[-1]

    @property
    def row_labels(self) -> Tuple[str, ...]:
        return self._row_labels

    @property
    def rows(self) -> Tuple[Tuple[float, ...], ...]:
        return self._rows

    @property
    def constraint_rows(self) -> Tuple[Tuple[float, ...], ...]:
        return self._rows[:-1]

    @property
    def objective_row(self) -> Tuple[float, ...]:
        return self._rows[-1]

    @property
    def num_constraints(self) -> int:
        return len(self._rows) - 1

    @property
    def num_variables(self) -> int:
        return len(self._header) - 1

    @property
    def objective_col(self) -> int:
        return self.num_variables

    @property
    def rhs_col(self) -> int:
        return self.num_variables + 1

    def rhs(self, row: int) -> float:
        return self._rows[row][-1]

    def variable_entries(self, row: int) -> Tuple[float, ...]:
        """Entries of a row in the variable columns (no objective column, no RHS)."""
        return self._rows[row][:self.num_variables]

    def basic_variable(self, row: int) -> str:
        """Star-stripped name of the basic variable of a constraint row."""
        return strip_star(self._row_labels[row])

    def __getitem__(self, index):
        row, col = index
        return self._rows[row][col]

    def __eq__(self, other):
        if not isinstance(other, Tableau):
            return NotImplemented
        return (self._header == other._header and self._row_labels == other._row_labels
                and self._rows == other._rows)

    def __hash__(self):
        return hash((self._header, self._row_labels, self._rows))

    def __repr__(self):
        return f"Tableau({self.num_constraints} constraints x {self.num_variables} variables)"

    def as_grid(self) -> List[list]:
        """Label-bordered grid: row 0 and column 0 hold labels, the RHS column has an empty label."""
        grid = [[""] + list(self._header) + [""]]
        for label, row in zip(self._row_labels, self._rows):
            grid.append([label] + list(row))
        return grid

    # ---------- Row operations ----------
    def pivot(self, row: int, col: int, sig_digits: int) -> "Tableau":
        """Pivot on (row, col) and return the new tableau.

        The pivot row is divided by the pivot element. Every other row r becomes
        r - r[col] * pivot_row, with both terms rounded to sig_digits + 2
        significant digits and the difference rounded again before storing.
        The extra two digits absorb the cancellation in a - b * c.

        Args:
            row: Constraint row index (0 .. m-1)
            col: Variable column index (0 .. n-1)
            sig_digits: Working precision

        Returns:
            New Tableau with the entering variable as basic variable of `row`
        """
        if not 0 <= row < self.num_constraints:
            raise errors.ProblemSetupError(f"Pivot row {row} is not a constraint row")
        if not 0 <= col < self.num_variables:
            raise errors.ProblemSetupError(f"Pivot column {col} is not a variable column")

        the_pivot = self._rows[row][col]
        if round_sig_dig(the_pivot, sig_digits) == 0:
            raise errors.DegeneratePivotError(errors.DEGENERATE_PIVOT_ERR.format(row=row, col=col))

        digits = sig_digits + 2
        pivot_row = [v / the_pivot for v in self._rows[row]]

        new_rows = []
        for i, current in enumerate(self._rows):
            if i == row:
                new_rows.append(pivot_row)
                continue
            factor = current[col]
            new_rows.append([
                round_sig_dig(round_sig_dig(a, digits) - round_sig_dig(p * factor, digits), digits)
                for a, p in zip(current, pivot_row)
            ])

        labels = list(self._row_labels)
        labels[row] = strip_star(self._header[col])
        return Tableau(self._header, labels, new_rows)

    def negate_rows(self, rows: Sequence[int]) -> "Tableau":
        """Negate every non-RHS entry of the given rows and remove their stars."""
        rows = set(rows)
        new_rows = []
        labels = list(self._row_labels)
        for i, current in enumerate(self._rows):
            if i in rows:
                new_rows.append([-v for v in current[:-1]] + [current[-1]])
                labels[i] = strip_star(labels[i])
            else:
                new_rows.append(current)
        return Tableau(self._header, labels, new_rows)

    # ---------- Trace rendering ----------
    def to_text(self, sig_digits: int = 6, highlight: Optional[Tuple[int, int]] = None) -> str:
        """Plain-text rendering with entries rounded to sig_digits, for the trace log."""
        def fmt(v):
            v = round_sig_dig(v, sig_digits)
            return f"{v:g}"

        cells = [[fmt(v) for v in row] for row in self._rows]
        if highlight is not None:
            r, c = highlight
            cells[r][c] = f"[{cells[r][c]}]"

        head = list(self._header) + ["RHS"]
        widths = [max(5, len(h) + 1) for h in head]
        for row in cells:
            for j, text in enumerate(row):
                widths[j] = max(widths[j], len(text) + 1)
        label_width = max(5, max(len(label) for label in self._row_labels) + 1)

        lines = [" " * label_width + "| " + "".join(h.center(w) for h, w in zip(head, widths))]
        rule = "-" * label_width + "+-" + "-" * sum(widths)
        lines.append(rule)
        for i, (label, row) in enumerate(zip(self._row_labels, cells)):
            if i == self.num_constraints:
                lines.append(rule)
            lines.append(label.rjust(label_width) + "| " + "".join(t.center(w) for t, w in zip(row, widths)))
        return "\n".join(lines)
