# gift_matching/matching/solve.py
from __future__ import annotations

from typing import Dict, Optional, Tuple

from ..config import DEFAULT_SOLVER, MAX_MATCH_ATTEMPTS, SOLVER_GREEDY, SOLVERS
from ..logger import get_logger
from ..models import GiftExchange
from .diagnostics import analyze_exchange_feasibility
from .eligibility_matrix import index_participants
from .engine import match_with_retries
from .exact_milp import solve_exact

log = get_logger(__name__)

STATUS_MATCHED = "Matched"
STATUS_INFEASIBLE = "Infeasible"
STATUS_STRUCTURALLY_INFEASIBLE = "Structurally Infeasible"


def solve_exchange(
    exchange: GiftExchange,
    solver: str = DEFAULT_SOLVER,
    max_attempts: int = MAX_MATCH_ATTEMPTS,
    seed: Optional[int] = None,
    reshuffle: bool = False,
) -> Tuple[str, Dict[str, str]]:
    """
    Match an exchange and write the result back onto its participants.

    Returns (status, assignments). On "Matched" every participant gets its
    recipient_id and a reset email state; on any other status the
    participant records are left untouched and the assignments are
    whatever the last attempt committed.
    """
    if solver not in SOLVERS:
        raise ValueError(f"Unknown solver {solver!r}; expected one of {SOLVERS}.")

    participants = exchange.participants
    # empty exchanges and duplicate ids are caller bugs, not infeasibility
    index_participants(participants)

    diag = analyze_exchange_feasibility(participants)
    if not diag["ok"]:
        for msg in diag["messages"]:
            log.warning("%s: %s", exchange.name, msg)
        return STATUS_STRUCTURALLY_INFEASIBLE, {}

    if solver == SOLVER_GREEDY:
        assignments, ok, attempts = match_with_retries(
            participants,
            max_attempts=max_attempts,
            seed=seed,
            reshuffle=reshuffle,
        )
        log.info("%s: greedy matching %s after %d attempt(s).",
                 exchange.name, "succeeded" if ok else "failed", attempts)
    else:
        assignments, ok = solve_exact(participants)
        log.info("%s: exact matching %s.", exchange.name, "succeeded" if ok else "proved infeasible")

    if not ok:
        return STATUS_INFEASIBLE, assignments

    for p in participants:
        p.recipient_id = assignments[p.id]
        p.reset_email_state()

    return STATUS_MATCHED, assignments
