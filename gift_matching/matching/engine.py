# gift_matching/matching/engine.py
from __future__ import annotations

import random
from typing import Callable, Dict, List, Optional, Sequence, Set, Tuple

from ..config import MAX_MATCH_ATTEMPTS
from ..logger import get_logger
from ..models import Participant
from .eligibility_matrix import EligibilityMatrix, index_participants
from .reshuffle import find_reshuffle

log = get_logger(__name__)

# Chooses one column index out of the eligible candidates
Picker = Callable[[List[int]], int]


def match(
    participants: Sequence[Participant],
    rng: Optional[random.Random] = None,
    pick: Optional[Picker] = None,
    reshuffle: bool = False,
) -> Tuple[Dict[str, str], bool]:
    """
    Greedy gifter -> recipient matching with randomized tie-break.

    Loop:
      1) take the unmatched gifter with the fewest eligible recipients
         (first in input order on ties)
      2) give them a random eligible recipient
      3) make that recipient ineligible for everyone still unmatched

    If a gifter runs out of candidates the attempt stops and returns
    (partial_assignments, False). There is no backtracking, so a failed
    attempt does not prove the exchange infeasible; a fresh call may
    succeed. With reshuffle=True a single swap with an already-matched
    gifter is tried before giving up.

    `pick` receives the ascending list of eligible column indices and
    returns one of them. When omitted, `rng.choice` is used (a fresh
    unseeded Random if `rng` is None too).

    The participant records are not modified.
    """
    idx_to_id, _ = index_participants(participants)
    n = len(idx_to_id)

    if pick is None:
        pick = (rng or random.Random()).choice

    matrix = EligibilityMatrix.from_participants(participants)
    allowed = matrix.copy() if reshuffle else None

    assignments: Dict[str, str] = {}
    row_to_col: Dict[int, int] = {}
    matched_rows: Set[int] = set()
    num_matched = 0

    while num_matched < n:
        row = matrix.row_with_min_sum(exclude_rows=matched_rows)
        if row is None:
            raise RuntimeError(
                f"No unmatched gifter left after {num_matched} of {n} matches; "
                "matched rows and match count disagree."
            )

        candidates = matrix.eligible_columns(row)

        if not candidates:
            swap = None
            if allowed is not None:
                swap = find_reshuffle(row, allowed, row_to_col, matched_rows)

            if swap is None:
                log.debug(
                    "Matching failed: %s has no eligible recipient left (%d/%d matched).",
                    idx_to_id[row], num_matched, n,
                )
                return assignments, False

            other_row, freed_col, new_col = swap
            log.debug(
                "Reshuffle: %s takes %s from %s, who now gives to %s.",
                idx_to_id[row], idx_to_id[freed_col], idx_to_id[other_row], idx_to_id[new_col],
            )
            assignments[idx_to_id[row]] = idx_to_id[freed_col]
            assignments[idx_to_id[other_row]] = idx_to_id[new_col]
            row_to_col[row] = freed_col
            row_to_col[other_row] = new_col
            matched_rows.add(row)
            num_matched += 1
            matrix.clear_column(new_col, skip_rows=matched_rows)
            continue

        recipient_col = pick(candidates)
        if recipient_col not in candidates:
            raise RuntimeError(f"Picker returned column {recipient_col}, not one of {candidates}.")

        assignments[idx_to_id[row]] = idx_to_id[recipient_col]
        row_to_col[row] = recipient_col
        matched_rows.add(row)
        num_matched += 1

        # recipient is taken: nobody still unmatched may pick them
        matrix.clear_column(recipient_col, skip_rows=matched_rows)

    log.debug("Matched all %d participants.", n)
    return assignments, True


def match_with_retries(
    participants: Sequence[Participant],
    max_attempts: int = MAX_MATCH_ATTEMPTS,
    seed: Optional[int] = None,
    reshuffle: bool = False,
) -> Tuple[Dict[str, str], bool, int]:
    """
    Run independent match attempts until one succeeds.

    Returns (assignments, ok, attempts_used). On failure the partial
    assignments of the last attempt are returned.
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be >= 1, got {max_attempts}.")

    rng = random.Random(seed)
    assignments: Dict[str, str] = {}

    for attempt in range(1, max_attempts + 1):
        assignments, ok = match(participants, rng=rng, reshuffle=reshuffle)
        if ok:
            if attempt > 1:
                log.info("Matched on attempt %d of %d.", attempt, max_attempts)
            return assignments, True, attempt

    log.warning(
        "No complete assignment after %d attempts (last attempt matched %d of %d).",
        max_attempts, len(assignments), len(participants),
    )
    return assignments, False, max_attempts
