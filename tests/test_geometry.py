"""Tests for grid geometry helpers."""
import pytest

from jaguar import geometry
from jaguar.geometry import (
    calculate_center_with_hazard,
    direction_of_travel,
    get_coord_after_move,
    get_distance,
    lookahead_determinator,
    snake_has_eaten,
)
from jaguar.models import HazardWalls


class TestDistance:
    """Tests for get_distance and get_coord_after_move."""

    def test_plain_manhattan(self, make_snake, make_state):
        gs = make_state([make_snake("me", [(5, 5)])])

        assert get_distance((0, 5), (10, 5), gs) == 10

    def test_wrapped_takes_short_way(self, make_snake, make_state):
        """Opposite edges are adjacent on a wrapped board."""
        gs = make_state([make_snake("me", [(5, 5)])], ruleset="wrapped")

        assert get_distance((0, 5), (10, 5), gs) == 1
        assert get_coord_after_move((0, 5), "left", gs) == (10, 5)

    def test_unwrapped_leaves_board(self):
        assert get_coord_after_move((0, 5), "left") == (-1, 5)


class TestDirectionOfTravel:
    """Tests for direction_of_travel."""

    def test_directions(self, make_snake):
        assert direction_of_travel(make_snake("s", [(5, 6), (5, 5)])) == "up"
        assert direction_of_travel(make_snake("s", [(4, 5), (5, 5)])) == "left"

    def test_stacked_has_none(self, make_snake):
        """A snake that has not moved yet has no direction."""
        assert direction_of_travel(make_snake("s", [(5, 5), (5, 5)])) is None

    def test_wrapped_neck(self, make_snake):
        """Neck on the far edge after wrapping."""
        assert direction_of_travel(make_snake("s", [(0, 5), (10, 5)])) == "right"


class TestCenter:
    """Tests for calculate_center_with_hazard."""

    def test_board_center(self, make_snake, make_state):
        gs = make_state([make_snake("me", [(5, 5)])])

        assert calculate_center_with_hazard(gs, HazardWalls()) == (5.0, 5.0)

    def test_hazard_shifts_center(self, make_snake, make_state):
        """Hazard columns on the left push the center right."""
        gs = make_state([make_snake("me", [(5, 5)])])

        assert calculate_center_with_hazard(gs, HazardWalls(left=1)) == (6.0, 5.0)

    def test_collapsed_axis_falls_back(self, make_snake, make_state):
        gs = make_state([make_snake("me", [(5, 5)])])

        assert calculate_center_with_hazard(gs, HazardWalls(left=6, right=4)) == (5.0, 5.0)


class TestHasEaten:
    """Tests for snake_has_eaten."""

    def test_full_health_means_eaten(self, make_snake):
        assert snake_has_eaten(make_snake("s", [(1, 1), (1, 2)], health=100))
        assert not snake_has_eaten(make_snake("s", [(1, 1), (1, 2)], health=99))

    def test_constrictor_always_grows(self, make_snake, make_state):
        snake = make_snake("s", [(1, 1), (1, 2)], health=50)

        assert snake_has_eaten(snake, make_state([snake], ruleset="constrictor"))


class TestLookahead:
    """Tests for lookahead_determinator."""

    def test_early_turns_do_not_search(self, make_snake, make_state):
        gs = make_state([make_snake("a", [(1, 1)]), make_snake("b", [(9, 9)])], turn=1)

        assert lookahead_determinator(gs) == 0

    @pytest.mark.parametrize("count,expected", [(1, 4), (2, 3), (3, 2), (4, 1), (6, 1)])
    def test_depth_by_snake_count(self, make_snake, make_state, count, expected):
        snakes = [make_snake(f"s{i}", [(i, 0)]) for i in range(count)]

        assert lookahead_determinator(make_state(snakes)) == expected

    def test_short_timeout(self, make_snake, make_state):
        gs = make_state([make_snake("a", [(1, 1)]), make_snake("b", [(9, 9)])], timeout=250)

        assert lookahead_determinator(gs) == 2

    def test_override(self, make_snake, make_state, monkeypatch):
        """The environment override wins over the heuristic."""
        monkeypatch.setattr(geometry, "SEARCH_DEPTH_OVERRIDE", "1")
        gs = make_state([make_snake("a", [(1, 1)])], turn=0)

        assert lookahead_determinator(gs) == 1
