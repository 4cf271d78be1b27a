# gift_matching/models.py
from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Set


@dataclass
class Participant:
    id: str
    name: str = ""
    excluded_ids: Set[str] = field(default_factory=set)  # ids this gifter must not give to
    recipient_id: Optional[str] = None   # written back after a successful match
    email_sent: bool = False

    def __post_init__(self):
        if not self.name:
            self.name = self.id
        self.excluded_ids = set(self.excluded_ids)

    def add_exclusion(self, participant_id: str) -> bool:
        """Returns False if the id was already excluded."""
        if participant_id in self.excluded_ids:
            return False
        self.excluded_ids.add(participant_id)
        return True

    def remove_exclusion(self, participant_id: str) -> bool:
        """Returns False if the id was not excluded."""
        if participant_id not in self.excluded_ids:
            return False
        self.excluded_ids.discard(participant_id)
        return True

    def can_give_to(self, participant_id: str) -> bool:
        return participant_id != self.id and participant_id not in self.excluded_ids

    def reset_email_state(self) -> None:
        self.email_sent = False


@dataclass
class GiftExchange:
    id: str
    name: str
    participants: List[Participant] = field(default_factory=list)

    def participant_ids(self) -> List[str]:
        return [p.id for p in self.participants]

    def by_id(self) -> Dict[str, Participant]:
        return {p.id: p for p in self.participants}


def make_exclusions_mutual(participants: List[Participant]) -> List[Participant]:
    """
    Return copies of `participants` where every exclusion is mirrored:
    if A excludes B, B also excludes A. Exclusions naming ids outside the
    list are kept as-is. The inputs are not mutated.
    """
    known = {p.id for p in participants}
    mirrored: Dict[str, Set[str]] = {p.id: set(p.excluded_ids) for p in participants}

    for p in participants:
        for other in p.excluded_ids:
            if other in known:
                mirrored[other].add(p.id)

    return [replace(p, excluded_ids=mirrored[p.id]) for p in participants]
