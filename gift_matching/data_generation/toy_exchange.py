# gift_matching/data_generation/toy_exchange.py
from __future__ import annotations

import random
from typing import List, Optional

from ..models import GiftExchange, Participant
from ..config import (
    DEFAULT_SEED,
    NUM_PARTICIPANTS_DEFAULT,
    EXCLUSION_PROBABILITY_DEFAULT,
    NUM_COUPLES_DEFAULT,
)

TOY_NAMES = [
    "Alice", "Bob", "Carol", "Dave", "Erin", "Frank", "Grace", "Heidi",
    "Ivan", "Judy", "Mallory", "Niaj", "Olivia", "Peggy", "Rupert", "Sybil",
]


def create_participants(num_participants: int = NUM_PARTICIPANTS_DEFAULT) -> List[Participant]:
    """P01, P02, ... with toy names (cycled if there are more participants than names)."""
    participants: List[Participant] = []
    for idx in range(1, num_participants + 1):
        name = TOY_NAMES[(idx - 1) % len(TOY_NAMES)]
        if idx > len(TOY_NAMES):
            name = f"{name} {idx}"
        participants.append(Participant(id=f"P{idx:02d}", name=name))
    return participants


def add_couples(
    participants: List[Participant],
    num_couples: int,
    rng: random.Random,
) -> List[tuple[str, str]]:
    """
    Pair up random participants into couples who exclude each other
    (the usual "partners don't draw each other" rule). Mutates in place.
    """
    if num_couples * 2 > len(participants):
        raise ValueError(
            f"Cannot form {num_couples} couples from {len(participants)} participants."
        )

    chosen = rng.sample(participants, k=num_couples * 2)
    couples = []
    for a, b in zip(chosen[0::2], chosen[1::2]):
        a.add_exclusion(b.id)
        b.add_exclusion(a.id)
        couples.append((a.id, b.id))
    return couples


def add_random_exclusions(
    participants: List[Participant],
    probability: float,
    rng: random.Random,
) -> int:
    """One-directional random exclusions; returns how many were added."""
    if not 0.0 <= probability <= 1.0:
        raise ValueError(f"Exclusion probability must be in [0, 1], got {probability}.")

    added = 0
    for gifter in participants:
        for other in participants:
            if other.id == gifter.id:
                continue
            if rng.random() < probability and gifter.add_exclusion(other.id):
                added += 1
    return added


def make_toy_exchange(
    num_participants: int = NUM_PARTICIPANTS_DEFAULT,
    exclusion_probability: float = EXCLUSION_PROBABILITY_DEFAULT,
    num_couples: int = NUM_COUPLES_DEFAULT,
    seed: Optional[int] = DEFAULT_SEED,
    name: str = "Toy Exchange",
) -> GiftExchange:
    """
    Return a GiftExchange with couples excluding each other plus random
    one-way exclusions. Nothing guarantees the result is matchable.
    """
    rng = random.Random(seed)
    participants = create_participants(num_participants)

    if num_couples:
        add_couples(participants, num_couples, rng)
    if exclusion_probability > 0:
        add_random_exclusions(participants, exclusion_probability, rng)

    return GiftExchange(id=f"toy-{seed}", name=name, participants=participants)
