# gift_matching/matching/reshuffle.py
from __future__ import annotations

from typing import Dict, Iterable, Optional, Tuple

from ..config import ELIGIBLE
from .eligibility_matrix import EligibilityMatrix


def find_reshuffle(
    stuck_row: int,
    allowed: EligibilityMatrix,
    row_to_col: Dict[int, int],
    matched_rows: Iterable[int],
) -> Optional[Tuple[int, int, int]]:
    """
    Look for a single swap that frees a recipient for a gifter with no
    candidates left.

    `allowed` is the constraint-only matrix (self + exclusions applied,
    no columns consumed). Matched gifters are tried in descending order of
    how many recipients they were originally allowed, so the most flexible
    gifter gives up their recipient first.

    Returns (gifter_row, freed_col, new_col) meaning:
        stuck_row  -> freed_col   (gifter_row's current recipient)
        gifter_row -> new_col     (a recipient nobody has yet)
    or None if no such swap exists.
    """
    matched = set(matched_rows)
    taken = set(row_to_col.values())
    unmatched = [r for r in range(allowed.n) if r not in matched]

    for gifter_row in allowed.rows_by_max_sum(exclude_rows=unmatched):
        freed_col = row_to_col[gifter_row]

        # the stuck gifter must be allowed to give to the freed recipient
        if allowed.get(stuck_row, freed_col) != ELIGIBLE:
            continue

        for new_col in allowed.eligible_columns(gifter_row):
            if new_col not in taken:
                return gifter_row, freed_col, new_col

    return None
