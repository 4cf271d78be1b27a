# gift_matching/data_generation/exclusion_loader.py
import csv
from typing import List

from ..models import Participant


def load_participants(path) -> List[Participant]:
    """
    Reads a CSV of shape:
        id,name,excluded
        alice@example.com,Alice,bob@example.com;carol@example.com
        bob@example.com,Bob,
        ...

    `excluded` is a ';'-separated list of ids; it may be empty.
    Row order is kept, since it fixes the matching order on ties.
    """
    participants = []
    with open(path, "r", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            pid = (row.get("id") or "").strip()
            if not pid:
                continue
            excluded = {x.strip() for x in (row.get("excluded") or "").split(";") if x.strip()}
            participants.append(
                Participant(id=pid, name=(row.get("name") or "").strip(), excluded_ids=excluded)
            )

    return participants


def save_participants(path, participants: List[Participant]) -> None:
    with open(path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["id", "name", "excluded"])
        for p in participants:
            writer.writerow([p.id, p.name, ";".join(sorted(p.excluded_ids))])
