# gift_matching/matching/exact_milp.py
from __future__ import annotations

from typing import Dict, Sequence, Tuple

import pulp

from ..config import ELIGIBLE
from ..logger import get_logger
from ..models import Participant
from .eligibility_matrix import EligibilityMatrix, index_participants

log = get_logger(__name__)


def build_assignment_model(
    matrix: EligibilityMatrix,
) -> Tuple[pulp.LpProblem, Dict[Tuple[int, int], pulp.LpVariable]]:
    """
    Binary model for a full gifter -> recipient assignment.

    Variables:
        x[i, j] = 1 if gifter i gives to recipient j
        (only created where cell (i, j) is ELIGIBLE, so self-gifting and
        excluded pairs cannot be chosen at all)

    Rules encoded:
      1) Each gifter gives exactly one gift:
           ∀i: sum_j x[i,j] = 1
      2) Each recipient receives exactly one gift:
           ∀j: sum_i x[i,j] = 1

    Pure feasibility model, so the objective is 0.
    """
    n = matrix.n
    prob = pulp.LpProblem("Gift_Exchange_Assignment", pulp.LpMinimize)

    x: Dict[Tuple[int, int], pulp.LpVariable] = {}
    for i in range(n):
        for j in range(n):
            if matrix.get(i, j) == ELIGIBLE:
                x[(i, j)] = pulp.LpVariable(f"x_{i}_{j}", lowBound=0, upBound=1, cat="Binary")

    prob += 0, "DummyObjective"

    for i in range(n):
        prob += (
            pulp.lpSum(x[(i, j)] for j in range(n) if (i, j) in x) == 1,
            f"OneRecipientPerGifter_{i}",
        )

    for j in range(n):
        prob += (
            pulp.lpSum(x[(i, j)] for i in range(n) if (i, j) in x) == 1,
            f"OneGifterPerRecipient_{j}",
        )

    return prob, x


def solve_exact(participants: Sequence[Participant]) -> Tuple[Dict[str, str], bool]:
    """
    Exact counterpart of engine.match: returns (assignments, True) when any
    valid assignment exists and ({}, False) when none does.
    """
    idx_to_id, _ = index_participants(participants)
    matrix = EligibilityMatrix.from_participants(participants)

    # a gifter or recipient with no allowed pair makes the model trivially infeasible
    if any(matrix.row_sum(i) == 0 or matrix.column_sum(i) == 0 for i in range(matrix.n)):
        log.info("Exact solve skipped: some participant has no allowed pair.")
        return {}, False

    prob, x = build_assignment_model(matrix)

    solver = pulp.PULP_CBC_CMD(msg=False)
    prob.solve(solver)

    status = pulp.LpStatus[prob.status]
    log.debug("Exact solver status: %s", status)

    if status not in ("Optimal", "Feasible"):
        return {}, False

    assignments: Dict[str, str] = {}
    for (i, j), var in x.items():
        val = var.varValue
        if val is not None and val > 0.5:
            assignments[idx_to_id[i]] = idx_to_id[j]

    return assignments, True
