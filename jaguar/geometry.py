"""Grid geometry helpers shared by every stage of the evaluation."""
from __future__ import annotations
from typing import Dict, List, Tuple, Optional

from .config import MAX_HEALTH, SEARCH_DEPTH_OVERRIDE
from .models import Coord, GameState, HazardWalls, Snake

Direction = str

DIRS: Dict[Direction, Coord] = {
    "up": (0, 1),
    "down": (0, -1),
    "left": (-1, 0),
    "right": (1, 0),
}

DIRECTIONS: List[Direction] = list(DIRS)

INV = {v: k for k, v in DIRS.items()}


def add(a: Coord, b: Coord) -> Coord:
    return (a[0] + b[0], a[1] + b[1])


def scale(d: Coord, k: int) -> Coord:
    return (d[0] * k, d[1] * k)


def manhattan(a: Coord, b: Coord) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def wrap_coord(c: Coord, width: int, height: int) -> Coord:
    return (c[0] % width, c[1] % height)


def get_coord_after_move(coord: Coord, direction: Direction,
                         game_state: Optional[GameState] = None) -> Coord:
    """Step one cell. Wraps around the board edges for the wrapped ruleset."""
    nxt = add(coord, DIRS[direction])
    if game_state is not None and game_state.is_wrapped:
        return wrap_coord(nxt, game_state.board.width, game_state.board.height)
    return nxt


def get_distance(a: Coord, b: Coord, game_state: Optional[GameState] = None) -> int:
    """Manhattan distance, taking the short way around in wrapped games."""
    dx = abs(a[0] - b[0])
    dy = abs(a[1] - b[1])
    if game_state is not None and game_state.is_wrapped:
        dx = min(dx, game_state.board.width - dx)
        dy = min(dy, game_state.board.height - dy)
    return dx + dy


def direction_of_travel(snake: Snake) -> Optional[Direction]:
    """Direction the snake moved last turn, None while its neck sits under its head."""
    if snake.length < 2 or snake.body[1] == snake.head:
        return None
    dx = snake.head[0] - snake.body[1][0]
    dy = snake.head[1] - snake.body[1][1]
    # wrapped boards can put the neck on the far side
    if abs(dx) > 1:
        dx = -1 if dx > 0 else 1
    if abs(dy) > 1:
        dy = -1 if dy > 0 else 1
    return INV.get((dx, dy))


def is_corner(c: Coord, width: int, height: int) -> bool:
    return c[0] in (0, width - 1) and c[1] in (0, height - 1)


def corner_distance(c: Coord, width: int, height: int) -> int:
    corners = [(0, 0), (0, height - 1), (width - 1, 0), (width - 1, height - 1)]
    return min(manhattan(c, k) for k in corners)


def calculate_center_with_hazard(game_state: GameState,
                                 hazard_walls: Optional[HazardWalls]) -> Tuple[float, float]:
    """Center of the hazard-free region, falling back to the board center on open sides."""
    w, h = game_state.board.width, game_state.board.height
    low_x, high_x, low_y, high_y = 0, w - 1, 0, h - 1
    if hazard_walls is not None:
        if hazard_walls.left is not None:
            low_x = hazard_walls.left + 1
        if hazard_walls.right is not None:
            high_x = hazard_walls.right - 1
        if hazard_walls.down is not None:
            low_y = hazard_walls.down + 1
        if hazard_walls.up is not None:
            high_y = hazard_walls.up - 1
    # the whole axis is hazard, fall back to the board center
    if low_x > high_x:
        low_x, high_x = 0, w - 1
    if low_y > high_y:
        low_y, high_y = 0, h - 1
    return (low_x + high_x) / 2, (low_y + high_y) / 2


def snake_has_eaten(snake: Snake, game_state: Optional[GameState] = None) -> bool:
    """True if the snake ate this turn, meaning its tail will not move next turn."""
    if game_state is not None and game_state.is_constrictor:
        return True
    return snake.health == MAX_HEALTH and snake.length > 1


def lookahead_determinator(game_state: GameState) -> int:
    """How many plies the search driver should look ahead for this turn."""
    if SEARCH_DEPTH_OVERRIDE:
        return max(0, int(SEARCH_DEPTH_OVERRIDE))
    if game_state.turn < 2:
        return 0
    snake_count = len(game_state.board.snakes)
    if snake_count <= 1:
        lookahead = 4
    elif snake_count == 2:
        lookahead = 3
    elif snake_count == 3:
        lookahead = 2
    else:
        lookahead = 1
    if game_state.game.timeout < 500:
        lookahead -= 1
    return max(0, lookahead)
