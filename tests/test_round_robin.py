"""
Unit tests for round-robin scheduling.
"""
import pytest
import sys
import os
from collections import Counter
from itertools import combinations

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from draw.errors import InvalidInput
from draw.models import Group
from draw.round_robin import (
    schedule_round_robin,
    round_robin_byes,
    allocate_boards,
    generate_group_stage
)


def _ids(count):
    return [f"p{i}" for i in range(1, count + 1)]


class TestRoundRobinProperties:
    """Structural guarantees for any group size."""

    @pytest.mark.parametrize("count", range(2, 14))
    def test_fixture_count(self, count):
        fixtures = schedule_round_robin(_ids(count), [1])
        assert len(fixtures) == count * (count - 1) // 2

    @pytest.mark.parametrize("count", range(2, 14))
    def test_every_pair_exactly_once(self, count):
        fixtures = schedule_round_robin(_ids(count), [1, 2])
        pairs = Counter(f.pair for f in fixtures)
        expected = {frozenset(p) for p in combinations(_ids(count), 2)}
        assert set(pairs) == expected
        assert all(n == 1 for n in pairs.values())

    @pytest.mark.parametrize("count", range(2, 14))
    def test_no_entrant_twice_in_a_round(self, count):
        fixtures = schedule_round_robin(_ids(count), [1, 2, 3])
        by_round = {}
        for fixture in fixtures:
            seen = by_round.setdefault(fixture.round, set())
            assert fixture.entrant_a not in seen
            assert fixture.entrant_b not in seen
            seen.update((fixture.entrant_a, fixture.entrant_b))

    @pytest.mark.parametrize("count", [3, 5, 7, 9, 11])
    def test_odd_group_one_bye_each(self, count):
        byes = round_robin_byes(_ids(count))
        assert sorted(byes) == sorted(_ids(count))
        # One bye per round, every round
        assert sorted(byes.values()) == list(range(1, count + 1))

    @pytest.mark.parametrize("count", [3, 5, 7])
    def test_bye_round_matches_schedule(self, count):
        fixtures = schedule_round_robin(_ids(count), [1])
        byes = round_robin_byes(_ids(count))
        for entrant, bye_round in byes.items():
            playing = {e for f in fixtures if f.round == bye_round for e in (f.entrant_a, f.entrant_b)}
            assert entrant not in playing
            rounds_played = {f.round for f in fixtures if entrant in (f.entrant_a, f.entrant_b)}
            assert len(rounds_played) == count - 1

    def test_even_group_has_no_byes(self):
        assert round_robin_byes(_ids(6)) == {}

    def test_deterministic(self):
        assert schedule_round_robin(_ids(7), [3, 4]) == schedule_round_robin(_ids(7), [3, 4])


class TestRoundRobinScenarios:
    """Concrete schedules."""

    def test_six_entrants_two_boards(self):
        """6 entrants, 2 boards: 5 rounds of 3 fixtures, boards alternate."""
        fixtures = schedule_round_robin(_ids(6), [1, 2])
        assert len(fixtures) == 15
        rounds = Counter(f.round for f in fixtures)
        assert sorted(rounds) == [1, 2, 3, 4, 5]
        assert all(n == 3 for n in rounds.values())
        assert [f.board for f in fixtures] == [1, 2] * 7 + [1]

    def test_circle_method_first_rounds(self):
        fixtures = schedule_round_robin(_ids(6), [1])
        round1 = [(f.entrant_a, f.entrant_b) for f in fixtures if f.round == 1]
        round2 = [(f.entrant_a, f.entrant_b) for f in fixtures if f.round == 2]
        assert round1 == [("p1", "p6"), ("p2", "p5"), ("p3", "p4")]
        assert round2 == [("p1", "p5"), ("p6", "p4"), ("p2", "p3")]

    def test_five_entrants_use_six_slot_schedule(self):
        """5 entrants: 5 rounds, 10 real fixtures, 2 per round."""
        fixtures = schedule_round_robin(_ids(5), [1, 2])
        assert len(fixtures) == 10
        rounds = Counter(f.round for f in fixtures)
        assert sorted(rounds) == [1, 2, 3, 4, 5]
        assert all(n == 2 for n in rounds.values())
        assert len(round_robin_byes(_ids(5))) == 5

    def test_boards_rotate_across_rounds(self):
        """Board index keeps running from one round into the next."""
        fixtures = schedule_round_robin(_ids(4), [7, 8, 9])
        assert [f.board for f in fixtures] == [7, 8, 9, 7, 8, 9]

    def test_caller_board_order_is_kept(self):
        fixtures = schedule_round_robin(_ids(4), [5, 4])
        assert [f.board for f in fixtures][:2] == [5, 4]

    def test_group_id_carried(self):
        fixtures = schedule_round_robin(_ids(3), [1], group_id="C")
        assert all(f.group_id == "C" for f in fixtures)

    def test_single_entrant_no_fixtures(self):
        assert schedule_round_robin(["p1"], [1]) == []

    def test_empty_group_no_fixtures(self):
        assert schedule_round_robin([], [1]) == []

    def test_no_boards_rejected(self):
        with pytest.raises(InvalidInput):
            schedule_round_robin(_ids(4), [])

    def test_duplicate_entrants_rejected(self):
        with pytest.raises(InvalidInput):
            schedule_round_robin(["a", "b", "a"], [1])


class TestBoardAllocation:
    """Tests for splitting boards between groups."""

    def test_even_split(self):
        assert allocate_boards([1, 2, 3, 4, 5, 6], 3) == [[1, 2], [3, 4], [5, 6]]

    def test_uneven_split(self):
        assert allocate_boards([1, 2, 3, 4, 5], 2) == [[1, 2, 3], [4, 5]]

    def test_fewer_boards_than_groups(self):
        assert allocate_boards([1, 2], 4) == [[1], [2], [1], [2]]

    def test_no_boards_rejected(self):
        with pytest.raises(InvalidInput):
            allocate_boards([], 2)


class TestGroupStage:
    """Tests for scheduling every group at once."""

    def test_each_group_uses_its_boards(self):
        groups = [Group("A", _ids(4)), Group("B", ["q1", "q2", "q3"])]
        schedule = generate_group_stage(groups, [[1, 2], [4, 5]])
        assert len(schedule["A"]) == 6
        assert len(schedule["B"]) == 3
        assert {f.board for f in schedule["A"]} == {1, 2}
        assert {f.board for f in schedule["B"]} == {4, 5}
        assert all(f.group_id == "B" for f in schedule["B"])

    def test_boards_by_group_id(self):
        groups = [Group("A", _ids(2)), Group("B", ["q1", "q2"])]
        schedule = generate_group_stage(groups, {"B": [9]})
        assert schedule["A"][0].board == 1
        assert schedule["B"][0].board == 9

    def test_missing_boards_default_to_board_one(self):
        schedule = generate_group_stage([Group("A", _ids(3))])
        assert {f.board for f in schedule["A"]} == {1}
