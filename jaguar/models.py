"""Game state data models and request payload parsing."""
from __future__ import annotations
from typing import Dict, List, Tuple, Optional, Set
from dataclasses import dataclass, field

from .config import MAX_HEALTH

Coord = Tuple[int, int]


# ---------------------------------
# Data models
# ---------------------------------
@dataclass
class Snake:
    id: str
    name: str
    health: int
    body: List[Coord]  # head first
    latency: str = ""
    shout: str = ""
    squad: str = ""

    @property
    def head(self) -> Coord:
        return self.body[0]

    @property
    def length(self) -> int:
        return len(self.body)

    @property
    def tail(self) -> Coord:
        return self.body[-1]

    def copy(self) -> "Snake":
        return Snake(id=self.id, name=self.name, health=self.health, body=list(self.body),
                     latency=self.latency, shout=self.shout, squad=self.squad)

    def __str__(self) -> str:
        return f"{self.name} head {self.head} length {self.length} health {self.health}"


@dataclass
class Ruleset:
    name: str = "standard"
    version: str = ""
    hazard_damage_per_turn: int = 0
    minimum_food: int = 1
    food_spawn_chance: int = 15
    shrink_every_n_turns: int = 0


@dataclass
class Game:
    id: str
    ruleset: Ruleset = field(default_factory=Ruleset)
    timeout: int = 500
    source: str = ""


@dataclass
class Board:
    width: int
    height: int
    food: Set[Coord] = field(default_factory=set)
    hazards: Set[Coord] = field(default_factory=set)
    snakes: List[Snake] = field(default_factory=list)


@dataclass
class GameState:
    game: Game
    turn: int
    board: Board
    you: Snake

    @property
    def is_wrapped(self) -> bool:
        return self.game.ruleset.name == "wrapped"

    @property
    def is_solo(self) -> bool:
        return self.game.ruleset.name == "solo"

    @property
    def is_constrictor(self) -> bool:
        return self.game.ruleset.name == "constrictor"

    @property
    def hazard_damage(self) -> int:
        return self.game.ruleset.hazard_damage_per_turn

    def find_snake(self, snake_id: str) -> Optional[Snake]:
        for snake in self.board.snakes:
            if snake.id == snake_id:
                return snake
        return None

    def other_snakes(self, snake_id: str) -> List[Snake]:
        return [s for s in self.board.snakes if s.id != snake_id]

    def clone(self) -> "GameState":
        """Copy everything a simulated ply may mutate. `you` keeps pointing into the new board."""
        snakes = [s.copy() for s in self.board.snakes]
        you = next((s for s in snakes if s.id == self.you.id), None)
        if you is None:
            you = self.you.copy()
        board = Board(width=self.board.width, height=self.board.height, food=set(self.board.food),
                      hazards=set(self.board.hazards), snakes=snakes)
        return GameState(game=self.game, turn=self.turn, board=board, you=you)


# ---------------------------------
# Parsing (supports Battlesnake API variations)
# ---------------------------------

def parse_coord(raw: Dict) -> Coord:
    return (raw["x"], raw["y"])


def parse_snake(raw: Dict) -> Snake:
    body = raw.get("body")
    if isinstance(body, dict) and "data" in body:
        body = body["data"]
    return Snake(
        id=raw["id"],
        name=raw.get("name", raw["id"]),
        health=raw.get("health", MAX_HEALTH),
        body=[parse_coord(p) for p in body],
        latency=str(raw.get("latency", "")),
        shout=raw.get("shout") or "",
        squad=raw.get("squad") or "",
    )


def parse_ruleset(raw: Dict) -> Ruleset:
    settings = raw.get("settings") or {}
    royale = settings.get("royale") or {}
    return Ruleset(
        name=raw.get("name", "standard"),
        version=raw.get("version", ""),
        hazard_damage_per_turn=settings.get("hazardDamagePerTurn", 0) or 0,
        minimum_food=settings.get("minimumFood", 1),
        food_spawn_chance=settings.get("foodSpawnChance", 15),
        shrink_every_n_turns=royale.get("shrinkEveryNTurns", 0) or 0,
    )


def parse_game_state(payload: Dict) -> GameState:
    g = payload.get("game") or {}
    game = Game(
        id=g.get("id", ""),
        ruleset=parse_ruleset(g.get("ruleset") or {}),
        timeout=g.get("timeout", 500),
        source=g.get("source", ""),
    )

    b = payload["board"]
    snakes = [parse_snake(s) for s in b.get("snakes", [])]
    board = Board(
        width=b["width"],
        height=b["height"],
        food=set(parse_coord(f) for f in b.get("food", [])),
        hazards=set(parse_coord(h) for h in b.get("hazards", [])),
        snakes=snakes,
    )

    you_raw = payload["you"]
    you = next((s for s in snakes if s.id == you_raw["id"]), None)
    if you is None:
        you = parse_snake(you_raw)
    return GameState(game=game, turn=payload.get("turn", 0), board=board, you=you)


# ---------------------------------
# Hazard walls
# ---------------------------------
@dataclass
class HazardWalls:
    """Innermost fully-hazardous column/row on each side of the board, if any."""
    left: Optional[int] = None
    right: Optional[int] = None
    up: Optional[int] = None
    down: Optional[int] = None

    @classmethod
    def from_game_state(cls, game_state: GameState) -> "HazardWalls":
        walls = cls()
        hazards = game_state.board.hazards
        if not hazards or game_state.is_wrapped:
            return walls
        w, h = game_state.board.width, game_state.board.height
        columns: Dict[int, int] = {}
        rows: Dict[int, int] = {}
        for x, y in hazards:
            columns[x] = columns.get(x, 0) + 1
            rows[y] = rows.get(y, 0) + 1

        x = 0
        while x < w and columns.get(x, 0) >= h:
            walls.left = x
            x += 1
        x = w - 1
        while x >= 0 and columns.get(x, 0) >= h:
            walls.right = x
            x -= 1
        y = 0
        while y < h and rows.get(y, 0) >= w:
            walls.down = y
            y += 1
        y = h - 1
        while y >= 0 and rows.get(y, 0) >= w:
            walls.up = y
            y -= 1
        return walls
