"""
Move legality and one-ply simulation.

Legality filters only ever switch directions off. `get_default_move` is the
one place that relaxes them, so a direction is always available.
"""
from __future__ import annotations
from typing import Dict, List, Optional
from dataclasses import dataclass
import logging

from .board import Board2d
from .config import MAX_HEALTH
from .geometry import DIRECTIONS, Direction, get_coord_after_move, snake_has_eaten
from .models import GameState, Snake

logger = logging.getLogger(__name__)


@dataclass
class Moves:
    up: bool = True
    down: bool = True
    left: bool = True
    right: bool = True

    def valid_moves(self) -> List[Direction]:
        return [d for d in DIRECTIONS if getattr(self, d)]

    def invalid_moves(self) -> List[Direction]:
        return [d for d in DIRECTIONS if not getattr(self, d)]

    def is_valid(self, move: Direction) -> bool:
        return getattr(self, move)

    def enable_move(self, move: Direction) -> None:
        setattr(self, move, True)

    def disable_move(self, move: Direction) -> None:
        setattr(self, move, False)

    def __str__(self) -> str:
        return f"Up: {self.up}; Down: {self.down}; Left: {self.left}; Right: {self.right}"


# ---------------------------------
# Legality filters
# ---------------------------------

def check_for_walls(game_state: GameState, me: Snake, board2d: Board2d, moves: Moves) -> None:
    for d in moves.valid_moves():
        if board2d.get_cell(get_coord_after_move(me.head, d, game_state)) is None:
            moves.disable_move(d)


def check_for_neck(game_state: GameState, me: Snake, moves: Moves) -> None:
    if me.length < 2 or me.body[1] == me.head:
        return
    for d in moves.valid_moves():
        if get_coord_after_move(me.head, d, game_state) == me.body[1]:
            moves.disable_move(d)


def check_for_snakes(game_state: GameState, me: Snake, board2d: Board2d, moves: Moves) -> None:
    """Bodies block; tails block only if their snake just ate and will not recede."""
    for d in moves.valid_moves():
        cell = board2d.get_cell(get_coord_after_move(me.head, d, game_state))
        if cell is None or cell.snake_cell is None:
            continue
        sc = cell.snake_cell
        if sc.is_tail and not sc.is_head and not snake_has_eaten(sc.snake, game_state):
            continue
        moves.disable_move(d)


def check_for_health(game_state: GameState, me: Snake, board2d: Board2d, moves: Moves) -> None:
    if game_state.is_constrictor:
        return
    for d in moves.valid_moves():
        cell = board2d.get_cell(get_coord_after_move(me.head, d, game_state))
        if cell is None or cell.food:
            continue
        cost = 1
        if cell.hazard:
            cost += game_state.hazard_damage
        if me.health - cost <= 0:
            moves.disable_move(d)


def check_for_snakes_health_and_walls(game_state: GameState, me: Snake, board2d: Board2d,
                                      moves: Moves) -> None:
    check_for_walls(game_state, me, board2d, moves)
    check_for_snakes(game_state, me, board2d, moves)
    check_for_health(game_state, me, board2d, moves)
    check_for_neck(game_state, me, moves)


def get_available_moves(game_state: GameState, me: Snake, board2d: Board2d) -> Moves:
    moves = Moves()
    check_for_snakes_health_and_walls(game_state, me, board2d, moves)
    return moves


def get_default_move(game_state: GameState, me: Snake, board2d: Board2d) -> Direction:
    """Best-effort direction when nothing is legal. Never fails."""
    moves = Moves()
    check_for_walls(game_state, me, board2d, moves)
    check_for_neck(game_state, me, moves)
    valid = moves.valid_moves()
    if valid:
        # a tail might still move out of the way, a body will not
        for d in valid:
            cell = board2d.get_cell(get_coord_after_move(me.head, d, game_state))
            if cell.snake_cell is None or cell.snake_cell.is_tail:
                return d
        return valid[0]

    moves = Moves()
    check_for_walls(game_state, me, board2d, moves)
    valid = moves.valid_moves()
    if valid:
        return valid[0]

    logger.error("No in-bounds move for %s on %dx%d board", me.name, board2d.width, board2d.height)
    return DIRECTIONS[0]


# ---------------------------------
# Simulation
# ---------------------------------

def move_snake(game_state: GameState, snake: Snake, board2d: Board2d, direction: Direction) -> Direction:
    """Move one snake in place. Returns the direction actually applied.

    `board2d` must describe the snapshot before this ply; only its food,
    hazard and bounds information is read.
    """
    new_head = get_coord_after_move(snake.head, direction, game_state)
    cell = board2d.get_cell(new_head)
    if cell is None:
        logger.warning("%s cannot move %s from %s, choosing again", snake.name, direction, snake.head)
        valid = get_available_moves(game_state, snake, board2d).valid_moves()
        direction = valid[0] if valid else get_default_move(game_state, snake, board2d)
        new_head = get_coord_after_move(snake.head, direction, game_state)
        cell = board2d.get_cell(new_head)
        if cell is None:
            # only reachable on boards without any in-bounds neighbor
            return direction

    snake.body.insert(0, new_head)
    snake.body.pop()

    if cell.food or game_state.is_constrictor:
        snake.health = MAX_HEALTH
        snake.body.append(snake.body[-1])
    else:
        snake.health -= 1
        if cell.hazard:
            snake.health -= game_state.hazard_damage
    return direction


def update_game_state_after_move(game_state: GameState) -> None:
    """Resolve eating, starvation and collisions once every snake has moved."""
    board = game_state.board
    if not game_state.is_constrictor:
        for snake in board.snakes:
            board.food.discard(snake.head)

    alive = [s for s in board.snakes if s.health > 0]

    dead = set()
    for snake in alive:
        for other in alive:
            if snake.head in other.body[1:]:
                dead.add(snake.id)
                break
            if other is not snake and snake.head == other.head and snake.length <= other.length:
                dead.add(snake.id)
                break

    board.snakes = [s for s in alive if s.id not in dead]
    game_state.turn += 1


def advance(game_state: GameState, moves: Dict[str, Direction]) -> GameState:
    """Apply one simultaneous ply and return the resulting snapshot.

    Snakes missing from `moves` take their first legal direction.
    """
    new_state = game_state.clone()
    board2d = Board2d(game_state)
    for snake in new_state.board.snakes:
        direction: Optional[Direction] = moves.get(snake.id)
        if direction is None:
            valid = get_available_moves(new_state, snake, board2d).valid_moves()
            direction = valid[0] if valid else get_default_move(new_state, snake, board2d)
        move_snake(new_state, snake, board2d, direction)
    update_game_state_after_move(new_state)
    return new_state
