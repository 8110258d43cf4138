"""Shared builders for board snapshots."""
from typing import Iterable, List, Optional

import pytest

from jaguar.models import Board, Coord, Game, GameState, Ruleset, Snake


def build_snake(snake_id: str, body: List[Coord], health: int = 90) -> Snake:
    return Snake(id=snake_id, name=snake_id, health=health, body=list(body))


def build_state(snakes: List[Snake], you: Optional[Snake] = None, width: int = 11, height: int = 11,
                food: Iterable[Coord] = (), hazards: Iterable[Coord] = (), ruleset: str = "standard",
                hazard_damage: int = 0, turn: int = 10, timeout: int = 500) -> GameState:
    game = Game(id="game-1", ruleset=Ruleset(name=ruleset, hazard_damage_per_turn=hazard_damage),
                timeout=timeout)
    board = Board(width=width, height=height, food=set(food), hazards=set(hazards), snakes=list(snakes))
    return GameState(game=game, turn=turn, board=board, you=you or snakes[0])


@pytest.fixture
def make_snake():
    return build_snake


@pytest.fixture
def make_state():
    return build_state


@pytest.fixture
def move_payload():
    """A /move request body in the Battlesnake API format."""
    return {
        "game": {
            "id": "game-42",
            "ruleset": {"name": "standard", "version": "v1.2.3", "settings": {"hazardDamagePerTurn": 14}},
            "timeout": 500,
            "source": "custom",
        },
        "turn": 12,
        "board": {
            "width": 11,
            "height": 11,
            "food": [{"x": 5, "y": 5}],
            "hazards": [],
            "snakes": [
                {"id": "me", "name": "me", "health": 80,
                 "body": [{"x": 1, "y": 1}, {"x": 1, "y": 2}, {"x": 1, "y": 3}]},
                {"id": "them", "name": "them", "health": 70,
                 "body": [{"x": 8, "y": 8}, {"x": 8, "y": 7}, {"x": 8, "y": 6}]},
            ],
        },
        "you": {"id": "me", "name": "me", "health": 80,
                "body": [{"x": 1, "y": 1}, {"x": 1, "y": 2}, {"x": 1, "y": 3}]},
    }
