# gift_matching/matching/diagnostics.py
from __future__ import annotations

from collections import Counter
from typing import Any, Dict, List, Mapping, Sequence

import pandas as pd

from ..models import Participant
from .eligibility_matrix import EligibilityMatrix


def analyze_exchange_feasibility(participants: Sequence[Participant]) -> Dict[str, Any]:
    """
    Check whether the exchange can *possibly* be matched before running
    the matching loop. These are necessary conditions only: passing them
    does not guarantee a full assignment exists.

    Returns a dict with:
      - 'ok': bool
      - 'messages': list[str] (human-readable diagnostics)
      - 'suggestion': str (summary)

      - 'num_participants': int
      - 'allowed_counts': Dict[str, int]     (recipients each gifter may give to)
      - 'receivable_counts': Dict[str, int]  (gifters each recipient may receive from)
      - 'no_recipient': List[str]            (gifters with nobody allowed)
      - 'no_gifter': List[str]               (recipients nobody may give to)
      - 'unknown_exclusions': Dict[str, List[str]]  (excluded ids not in the exchange)
      - 'min_allowed_per_gifter': int
    """
    messages: List[str] = []
    ids = [p.id for p in participants]
    num_participants = len(ids)

    # ---------- 1. Participant count / id uniqueness ----------
    if num_participants < 2:
        messages.append(
            f"Only {num_participants} participant(s): nobody may give to themselves, "
            "so at least 2 participants are needed."
        )

    duplicates = sorted(pid for pid, c in Counter(ids).items() if c > 1)
    if duplicates:
        messages.append(f"Duplicate participant ids: {', '.join(duplicates)}.")

    known = set(ids)
    unknown_exclusions: Dict[str, List[str]] = {
        p.id: sorted(p.excluded_ids - known) for p in participants if p.excluded_ids - known
    }

    if num_participants == 0 or duplicates:
        return _result(
            messages, num_participants, {}, {}, [], [], unknown_exclusions,
            suggestion="Add participants with unique ids before matching.",
        )

    # ---------- 2. Row / column sums of the constraint-only matrix ----------
    matrix = EligibilityMatrix.from_participants(participants)
    allowed_counts = {ids[i]: matrix.row_sum(i) for i in range(num_participants)}
    receivable_counts = {ids[j]: matrix.column_sum(j) for j in range(num_participants)}

    no_recipient = [pid for pid, c in allowed_counts.items() if c == 0]
    no_gifter = [pid for pid, c in receivable_counts.items() if c == 0]

    if num_participants >= 2:
        for pid in no_recipient:
            messages.append(f"{pid} excludes everyone else and cannot give to anybody.")
        for pid in no_gifter:
            messages.append(f"{pid} is excluded by every other participant and cannot receive a gift.")

    if unknown_exclusions:
        # informational only: unknown ids have no column, so they never constrain
        for pid, missing in unknown_exclusions.items():
            messages.append(f"{pid} excludes ids not in this exchange: {', '.join(missing)}.")

    ok = num_participants >= 2 and not no_recipient and not no_gifter

    if ok:
        suggestion = (
            "No obvious structural issues detected. "
            "A greedy attempt may still fail; retry or use the exact solver."
        )
    else:
        suggestion = "Exchange structurally infeasible. "
        if num_participants < 2:
            suggestion += "Add more participants. "
        if no_recipient or no_gifter:
            suggestion += "Loosen exclusions for the participants listed above."

    return _result(
        messages, num_participants, allowed_counts, receivable_counts,
        no_recipient, no_gifter, unknown_exclusions, suggestion=suggestion, ok=ok,
    )


def _result(
    messages: List[str],
    num_participants: int,
    allowed_counts: Dict[str, int],
    receivable_counts: Dict[str, int],
    no_recipient: List[str],
    no_gifter: List[str],
    unknown_exclusions: Dict[str, List[str]],
    suggestion: str,
    ok: bool = False,
) -> Dict[str, Any]:
    return {
        "ok": ok,
        "messages": messages,
        "suggestion": suggestion,
        "num_participants": num_participants,
        "allowed_counts": allowed_counts,
        "receivable_counts": receivable_counts,
        "no_recipient": no_recipient,
        "no_gifter": no_gifter,
        "unknown_exclusions": unknown_exclusions,
        "min_allowed_per_gifter": min(allowed_counts.values()) if allowed_counts else 0,
    }


def validate_assignment(
    participants: Sequence[Participant],
    assignments: Mapping[str, str],
) -> List[str]:
    """
    List every rule a (complete) assignment breaks; empty list means valid:
      - every participant gives exactly once
      - nobody gives to themselves or to an excluded id
      - every recipient is a participant and receives exactly once
    """
    violations: List[str] = []
    by_id = {p.id: p for p in participants}

    for p in participants:
        if p.id not in assignments:
            violations.append(f"{p.id} has no recipient.")

    for gifter_id, recipient_id in assignments.items():
        gifter = by_id.get(gifter_id)
        if gifter is None:
            violations.append(f"Unknown gifter {gifter_id}.")
            continue
        if recipient_id not in by_id:
            violations.append(f"{gifter_id} gives to unknown recipient {recipient_id}.")
        if recipient_id == gifter_id:
            violations.append(f"{gifter_id} gives to themselves.")
        elif recipient_id in gifter.excluded_ids:
            violations.append(f"{gifter_id} gives to excluded recipient {recipient_id}.")

    for recipient_id, c in Counter(assignments.values()).items():
        if c > 1:
            violations.append(f"{recipient_id} receives {c} gifts.")

    return violations


def eligibility_frame(matrix: EligibilityMatrix, ids: Sequence[str]) -> pd.DataFrame:
    """Matrix state as a gifter x recipient DataFrame (1 = eligible)."""
    if len(ids) != matrix.n:
        raise ValueError(f"Got {len(ids)} labels for a {matrix.n}x{matrix.n} matrix.")
    df = pd.DataFrame(matrix.to_lists(), index=list(ids), columns=list(ids))
    df.index.name = "gifter"
    df.columns.name = "recipient"
    return df


def assignment_frame(
    participants: Sequence[Participant],
    assignments: Mapping[str, str],
) -> pd.DataFrame:
    """One row per participant: gifter, recipient (None if unmatched), matched flag."""
    names = {p.id: p.name for p in participants}
    rows = []
    for p in participants:
        recipient_id = assignments.get(p.id)
        rows.append({
            "gifter": p.id,
            "gifter_name": p.name,
            "recipient": recipient_id,
            "recipient_name": names.get(recipient_id) if recipient_id else None,
            "matched": recipient_id is not None,
        })
    return pd.DataFrame(rows, columns=["gifter", "gifter_name", "recipient", "recipient_name", "matched"])
