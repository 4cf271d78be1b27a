# gift_matching/matching/eligibility_matrix.py
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..config import ELIGIBLE, INELIGIBLE
from ..models import Participant

CELL_VALUES = (ELIGIBLE, INELIGIBLE)


def index_participants(
    participants: Sequence[Participant],
) -> Tuple[List[str], Dict[str, int]]:
    """
    Fix the ordinal ordering used for matrix rows/columns:
      idx_to_id[i] = id of participants[i]
      id_to_idx[id] = i
    """
    if not participants:
        raise ValueError("Cannot match an exchange with no participants.")

    idx_to_id = [p.id for p in participants]
    id_to_idx: Dict[str, int] = {}
    for i, pid in enumerate(idx_to_id):
        if pid in id_to_idx:
            raise ValueError(f"Duplicate participant id {pid!r} at positions {id_to_idx[pid]} and {i}.")
        id_to_idx[pid] = i

    return idx_to_id, id_to_idx


class EligibilityMatrix:
    """
    Square gifter x recipient grid.

    Rows are gifters, columns are candidate recipients, both indexed by the
    participant's ordinal position. A cell holds ELIGIBLE (1) or
    INELIGIBLE (0), so a row sum is the number of recipients that gifter
    can still be assigned.
    """

    def __init__(self, n: int, fill: int = ELIGIBLE):
        if n <= 0:
            raise ValueError(f"Eligibility matrix needs at least one row, got n={n}.")
        self._check_value(fill)
        self.n = n
        self._cells: List[List[int]] = [[fill] * n for _ in range(n)]

    # ---------- construction ----------

    @classmethod
    def from_participants(cls, participants: Sequence[Participant]) -> "EligibilityMatrix":
        """
        Build the matrix for `participants` (in the given order) with the
        hard constraints applied:
            cell (i, j) = INELIGIBLE  if j == i
                                      or id[j] in participants[i].excluded_ids
        """
        matrix = cls(len(participants))
        ids = [p.id for p in participants]

        for i, gifter in enumerate(participants):
            for j, candidate_id in enumerate(ids):
                if j == i or candidate_id in gifter.excluded_ids:
                    matrix.set(i, j, INELIGIBLE)

        return matrix

    def copy(self) -> "EligibilityMatrix":
        clone = EligibilityMatrix(self.n)
        clone._cells = [list(r) for r in self._cells]
        return clone

    # ---------- cell access ----------

    def _check_row(self, row: int) -> None:
        if not 0 <= row < self.n:
            raise IndexError(f"Row index {row} out of range for {self.n}x{self.n} matrix.")

    def _check_col(self, col: int) -> None:
        if not 0 <= col < self.n:
            raise IndexError(f"Column index {col} out of range for {self.n}x{self.n} matrix.")

    def _check_value(self, value: int) -> None:
        if value not in CELL_VALUES:
            raise ValueError(f"Cell value must be ELIGIBLE ({ELIGIBLE}) or INELIGIBLE ({INELIGIBLE}), got {value!r}.")

    def get(self, row: int, col: int) -> int:
        self._check_row(row)
        self._check_col(col)
        return self._cells[row][col]

    def set(self, row: int, col: int, value: int) -> None:
        self._check_row(row)
        self._check_col(col)
        self._check_value(value)
        self._cells[row][col] = value

    def row(self, row: int) -> List[int]:
        self._check_row(row)
        return list(self._cells[row])

    def to_lists(self) -> List[List[int]]:
        return [list(r) for r in self._cells]

    # ---------- sums & queries ----------

    def row_sum(self, row: int) -> int:
        self._check_row(row)
        return sum(self._cells[row])

    def column_sum(self, col: int) -> int:
        self._check_col(col)
        return sum(r[col] for r in self._cells)

    def total(self) -> int:
        return sum(sum(r) for r in self._cells)

    def row_with_min_sum(self, exclude_rows: Iterable[int] = ()) -> Optional[int]:
        """
        Index of the row with the smallest sum, skipping `exclude_rows`.
        Ties go to the first such row in index order. Returns None when
        every row is excluded.
        """
        excluded = set(exclude_rows)
        min_sum: Optional[int] = None
        row_with_min: Optional[int] = None

        for row in range(self.n):
            if row in excluded:
                continue
            s = sum(self._cells[row])
            if min_sum is None or s < min_sum:
                min_sum = s
                row_with_min = row

        return row_with_min

    def rows_by_max_sum(self, exclude_rows: Iterable[int] = ()) -> List[int]:
        """Rows ordered by descending sum; equal sums keep index order."""
        excluded = set(exclude_rows)
        rows = [r for r in range(self.n) if r not in excluded]
        return sorted(rows, key=lambda r: -sum(self._cells[r]))

    def eligible_columns(self, row: int) -> List[int]:
        self._check_row(row)
        return [j for j, v in enumerate(self._cells[row]) if v == ELIGIBLE]

    def clear_column(self, col: int, skip_rows: Iterable[int] = ()) -> None:
        """Mark column `col` INELIGIBLE for every row not in `skip_rows`."""
        self._check_col(col)
        skipped = set(skip_rows)
        for row in range(self.n):
            if row not in skipped:
                self._cells[row][col] = INELIGIBLE

    def __repr__(self) -> str:
        return f"EligibilityMatrix(n={self.n}, eligible={self.total()})"
