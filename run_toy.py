# run_toy.py

import os
import random

import pandas as pd

from gift_matching.config import DEFAULT_SEED, EXCLUSIONS_CSV_PATH
from gift_matching.data_generation.exclusion_loader import load_participants
from gift_matching.data_generation.toy_exchange import make_toy_exchange
from gift_matching.matching.diagnostics import (
    analyze_exchange_feasibility,
    assignment_frame,
    eligibility_frame,
    validate_assignment,
)
from gift_matching.matching.eligibility_matrix import EligibilityMatrix
from gift_matching.matching.engine import match
from gift_matching.matching.solve import STATUS_MATCHED, solve_exchange
from gift_matching.models import GiftExchange


def compare_greedy_success_rate(participants, attempts: int = 200, seed: int = DEFAULT_SEED) -> float:
    """
    Fraction of single greedy attempts (no retries) that produce a full
    assignment. Useful to see how tight the exclusions are.
    """
    rng = random.Random(seed)
    successes = 0
    for _ in range(attempts):
        _, ok = match(participants, rng=rng)
        if ok:
            successes += 1
    return successes / attempts


def main():
    # ---- Exchange: CSV if present, otherwise a seeded toy exchange ----
    if os.path.exists(EXCLUSIONS_CSV_PATH):
        print(f"Found CSV at {EXCLUSIONS_CSV_PATH}. Loading participants...")
        exchange = GiftExchange(
            id="csv",
            name=os.path.basename(EXCLUSIONS_CSV_PATH),
            participants=load_participants(EXCLUSIONS_CSV_PATH),
        )
    else:
        exchange = make_toy_exchange(num_participants=8, exclusion_probability=0.25)

    participants = exchange.participants
    ids = exchange.participant_ids()

    print(f"=== {exchange.name}: {len(participants)} participants ===")
    for p in participants:
        excluded = ", ".join(sorted(p.excluded_ids)) or "-"
        print(f"{p.id} ({p.name}) excludes: {excluded}")
    print()

    # ============================
    #  ELIGIBILITY MATRIX (PANDAS)
    # ============================
    matrix = EligibilityMatrix.from_participants(participants)
    df_eligible = eligibility_frame(matrix, ids)
    df_eligible["allowed"] = df_eligible.sum(axis=1)

    print("=== ELIGIBILITY MATRIX (1 = may give to) ===")
    print(df_eligible)
    print()

    # ---- Structural check ----
    diag = analyze_exchange_feasibility(participants)
    if diag["messages"]:
        print("=== DIAGNOSTICS ===")
        for msg in diag["messages"]:
            print("-", msg)
    print("Suggestion:", diag["suggestion"])
    print()

    if not diag["ok"]:
        print("Result: exchange is structurally infeasible; not matching.")
        return

    rate = compare_greedy_success_rate(participants)
    print(f"Single greedy attempt success rate: {rate:.0%}")
    print()

    # ---- Greedy with retries, then exact as fallback ----
    status, assignments = solve_exchange(exchange, seed=DEFAULT_SEED)
    print("Greedy status:", status)

    if status != STATUS_MATCHED:
        status, assignments = solve_exchange(exchange, solver="exact")
        print("Exact status:", status)

    print()
    df_assign = assignment_frame(participants, assignments)
    print("=== ASSIGNMENTS ===")
    with pd.option_context("display.width", 120):
        print(df_assign.to_string(index=False))
    print()

    # ---- Verification ----
    print("=== VERIFICATION ===")
    if status == STATUS_MATCHED:
        violations = validate_assignment(participants, assignments)
        print("PASS" if not violations else "FAIL")
        for v in violations:
            print("-", v)
    else:
        print("No valid assignment exists for these exclusions.")


if __name__ == "__main__":
    main()
