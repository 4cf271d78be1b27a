# tests/test_engine.py
import unittest
import random
import sys
import os

# Add parent directory to path to import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from gift_matching.matching.eligibility_matrix import EligibilityMatrix
from gift_matching.matching.engine import match, match_with_retries
from gift_matching.matching.reshuffle import find_reshuffle
from gift_matching.matching.diagnostics import validate_assignment
from gift_matching.data_generation.toy_exchange import make_toy_exchange
from gift_matching.models import Participant


def people(*ids, **exclusions):
    return [Participant(id=pid, excluded_ids=set(exclusions.get(pid, ""))) for pid in ids]


def first_candidate(candidates):
    return candidates[0]


class TestMatchBoundaries(unittest.TestCase):

    def test_single_participant_is_infeasible(self):
        assignments, ok = match(people("A"), rng=random.Random(1))
        self.assertFalse(ok)
        self.assertEqual(assignments, {})

    def test_two_participants_swap(self):
        for seed in range(5):
            assignments, ok = match(people("A", "B"), rng=random.Random(seed))
            self.assertTrue(ok)
            self.assertEqual(assignments, {"A": "B", "B": "A"})

    def test_empty_input_rejected(self):
        with self.assertRaises(ValueError):
            match([])

    def test_duplicate_ids_rejected(self):
        with self.assertRaises(ValueError):
            match(people("A", "B", "A"))

    def test_picker_must_return_a_candidate(self):
        with self.assertRaises(RuntimeError):
            match(people("A", "B", "C"), pick=lambda candidates: 99)


class TestMatchScenarios(unittest.TestCase):

    def test_four_without_exclusions(self):
        participants = people("A", "B", "C", "D")
        for seed in range(20):
            assignments, ok = match(participants, rng=random.Random(seed))
            self.assertTrue(ok)
            self.assertEqual(set(assignments), {"A", "B", "C", "D"})
            self.assertEqual(sorted(assignments.values()), ["A", "B", "C", "D"])
            for gifter, recipient in assignments.items():
                self.assertNotEqual(gifter, recipient)

    def test_gifter_excluding_everyone_fails_immediately(self):
        participants = people("A", "B", "C", A="BC")
        assignments, ok = match(participants, rng=random.Random(0))
        self.assertFalse(ok)
        self.assertEqual(assignments, {})

    def test_failure_keeps_partial_assignment(self):
        # B and C may only give to A: B is processed first, C is left stuck
        participants = people("A", "B", "C", B="C", C="B")
        assignments, ok = match(participants, pick=first_candidate)
        self.assertFalse(ok)
        self.assertEqual(assignments, {"B": "A"})

    def test_hall_violation_is_infeasible(self):
        participants = people("A", "B", "C", "D", A="BC", B="AC", C="AB")
        assignments, ok = match(participants, rng=random.Random(3))
        self.assertFalse(ok)
        self.assertEqual(assignments, {"A": "D"})

    def test_forced_cycle(self):
        participants = people("A", "B", "C", A="C", B="A", C="B")
        assignments, ok = match(participants, rng=random.Random(7))
        self.assertTrue(ok)
        self.assertEqual(assignments, {"A": "B", "B": "C", "C": "A"})

    def test_most_constrained_gifter_goes_first(self):
        participants = people("A", "B", "C", "D", C="AB")
        order = []

        def recording_pick(candidates):
            order.append(tuple(candidates))
            return candidates[0]

        assignments, ok = match(participants, pick=recording_pick)
        self.assertTrue(ok)
        # C only has D, so C is matched first
        self.assertEqual(order[0], (3,))
        self.assertEqual(list(assignments)[0], "C")

    def test_same_seed_same_result(self):
        exchange = make_toy_exchange(num_participants=10, exclusion_probability=0.2, seed=5)
        first = match(exchange.participants, rng=random.Random(123))
        second = match(exchange.participants, rng=random.Random(123))
        self.assertEqual(first, second)

    def test_input_records_not_mutated(self):
        participants = people("A", "B", "C", A="B")
        match(participants, rng=random.Random(0))
        self.assertEqual(participants[0].excluded_ids, {"B"})
        self.assertTrue(all(p.recipient_id is None for p in participants))

    def test_successful_results_respect_exclusions(self):
        for seed in range(10):
            exchange = make_toy_exchange(num_participants=12, exclusion_probability=0.3, seed=seed)
            assignments, ok = match(exchange.participants, rng=random.Random(seed))
            if ok:
                self.assertEqual(validate_assignment(exchange.participants, assignments), [])


class TestRetriesAndReshuffle(unittest.TestCase):

    def test_failed_attempts_log_below_info(self):
        with self.assertLogs("gift_matching", level="DEBUG") as cm:
            match(people("A", "B", "C", A="BC"), rng=random.Random(0))
        self.assertTrue(cm.records)
        self.assertTrue(all(r.levelname == "DEBUG" for r in cm.records))

    def test_retries_report_attempts(self):
        assignments, ok, attempts = match_with_retries(people("A", "B", "C"), seed=1)
        self.assertTrue(ok)
        self.assertEqual(attempts, 1)
        self.assertEqual(len(assignments), 3)

    def test_retries_give_up_on_infeasible(self):
        assignments, ok, attempts = match_with_retries(people("A"), max_attempts=4, seed=1)
        self.assertFalse(ok)
        self.assertEqual(attempts, 4)
        self.assertEqual(assignments, {})

    def test_retries_need_positive_budget(self):
        with self.assertRaises(ValueError):
            match_with_retries(people("A", "B"), max_attempts=0)

    def test_find_reshuffle_swaps_with_flexible_gifter(self):
        participants = people("A", "B", "C", "D", D="A")
        allowed = EligibilityMatrix.from_participants(participants)
        # A -> B and B -> C are committed; D may only give to B or C
        swap = find_reshuffle(3, allowed, row_to_col={0: 1, 1: 2}, matched_rows={0, 1})
        # D takes B from A, A gives to D instead
        self.assertEqual(swap, (0, 1, 3))

    def test_find_reshuffle_none_when_no_swap(self):
        participants = people("A", "B", "C", B="C", C="B")
        allowed = EligibilityMatrix.from_participants(participants)
        # B -> A is committed; C is stuck and may only give to A, which B holds,
        # and B has no other recipient
        self.assertIsNone(find_reshuffle(2, allowed, row_to_col={1: 0}, matched_rows={1}))

    def test_reshuffle_rescues_greedy_dead_end(self):
        participants = people("A", "B", "C", "D", A="B", C="D")

        # first-candidate greedy leaves D with only its own column
        assignments, ok = match(participants, pick=first_candidate)
        self.assertFalse(ok)
        self.assertEqual(assignments, {"A": "C", "B": "A", "C": "B"})

        # B is the most flexible matched gifter: D takes A from B, B gives to D
        assignments, ok = match(participants, pick=first_candidate, reshuffle=True)
        self.assertTrue(ok)
        self.assertEqual(assignments, {"A": "C", "B": "D", "C": "B", "D": "A"})
        self.assertEqual(validate_assignment(participants, assignments), [])

    def test_reshuffle_results_stay_valid(self):
        for seed in range(10):
            exchange = make_toy_exchange(num_participants=10, exclusion_probability=0.4, seed=seed)
            assignments, ok = match(exchange.participants, rng=random.Random(seed), reshuffle=True)
            if ok:
                self.assertEqual(validate_assignment(exchange.participants, assignments), [])

    def test_reshuffle_does_not_hide_infeasibility(self):
        participants = people("A", "B", "C", "D", A="BC", B="AC", C="AB")
        _, ok = match(participants, rng=random.Random(0), reshuffle=True)
        self.assertFalse(ok)


if __name__ == '__main__':
    unittest.main()
