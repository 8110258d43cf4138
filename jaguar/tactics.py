"""
Positional tactics: can `actor` force `target` into a losing position?

All predicates look at the target's direction of travel (head minus neck), so
a snake whose neck is still under its head (turn 0) is never trapped.
"""
from __future__ import annotations
from typing import List, Optional, Tuple

from .board import Board2d
from .geometry import DIRS, Direction, add, direction_of_travel, scale, snake_has_eaten
from .models import Coord, GameState, HazardWalls, Snake
from .moves import get_available_moves

# (axis, lane value on that axis, inward step)
Edge = Tuple[int, int, Coord]


def _board_edges(game_state: GameState) -> List[Edge]:
    w, h = game_state.board.width, game_state.board.height
    return [(0, 0, (1, 0)), (0, w - 1, (-1, 0)), (1, 0, (0, 1)), (1, h - 1, (0, -1))]


def _hazard_edges(game_state: GameState, hazard_walls: HazardWalls) -> List[Edge]:
    edges: List[Edge] = []
    if hazard_walls.left is not None:
        edges.append((0, hazard_walls.left + 1, (1, 0)))
    if hazard_walls.right is not None:
        edges.append((0, hazard_walls.right - 1, (-1, 0)))
    if hazard_walls.down is not None:
        edges.append((1, hazard_walls.down + 1, (0, 1)))
    if hazard_walls.up is not None:
        edges.append((1, hazard_walls.up - 1, (0, -1)))
    return edges


def _blocks_lane(game_state: GameState, board2d: Board2d, c: Coord, actor: Snake) -> bool:
    """A foreign body that will still be there next turn."""
    cell = board2d.get_cell(c)
    if cell is None:
        return True
    sc = cell.snake_cell
    if sc is None or sc.snake.id == actor.id:
        return False
    return not (sc.is_tail and not snake_has_eaten(sc.snake, game_state))


def _food_adjusted_length(board2d: Board2d, target: Snake, cells: List[Coord]) -> int:
    for c in cells:
        cell = board2d.get_cell(c)
        if cell is not None and cell.food:
            return target.length + 1
    return target.length


def _edge_cutoff(game_state: GameState, actor: Snake, target: Snake, board2d: Board2d,
                 edges: List[Edge]) -> bool:
    if game_state.is_wrapped or actor.id == target.id:
        return False
    travel = direction_of_travel(target)
    if travel is None:
        return False
    fwd = DIRS[travel]
    for axis, lane, inward in edges:
        # target must run along the edge, not toward or away from it
        if target.head[axis] != lane or fwd[axis] != 0:
            continue
        escape = add(target.head, inward)
        for k in (0, 1, -1):
            if actor.head != add(escape, scale(fwd, k)):
                continue
            if k != 0 and _blocks_lane(game_state, board2d, escape, actor):
                return False
            if k == -1:
                ahead = add(target.head, fwd)
                return actor.length > _food_adjusted_length(board2d, target, [ahead, escape])
            return True
    return False


def is_cutoff(game_state: GameState, actor: Snake, target: Snake, board2d: Board2d) -> bool:
    """Target runs along a board edge and actor holds (or can take) the lane beside it."""
    return _edge_cutoff(game_state, actor, target, board2d, _board_edges(game_state))


def is_hazard_cutoff(game_state: GameState, actor: Snake, target: Snake, board2d: Board2d,
                     hazard_walls: Optional[HazardWalls]) -> bool:
    """Same as is_cutoff, with the edge of the hazard region standing in for the wall."""
    if hazard_walls is None or game_state.hazard_damage <= 0:
        return False
    return _edge_cutoff(game_state, actor, target, board2d, _hazard_edges(game_state, hazard_walls))


def _flanks(game_state: GameState, snake: Snake, target: Snake, side: Coord, travel: Direction,
            board2d: Board2d, target_move_count: int) -> bool:
    fwd = DIRS[travel]
    beside = add(target.head, side)
    for k in (0, 1, -1):
        if snake.head != add(beside, scale(fwd, k)):
            continue
        if not get_available_moves(game_state, snake, board2d).is_valid(travel):
            return False
        if k == 0:
            return True
        if k == -1:
            return snake.length > target.length
        return target_move_count == 1
    return False


def is_sandwich(game_state: GameState, actor: Snake, target: Snake, board2d: Board2d) -> bool:
    """Actor and some third snake run on either side of the target."""
    if game_state.is_wrapped or actor.id == target.id or len(game_state.board.snakes) < 3:
        return False
    travel = direction_of_travel(target)
    if travel is None:
        return False
    fwd = DIRS[travel]
    target_move_count = len(get_available_moves(game_state, target, board2d).valid_moves())
    for side in ((fwd[1], fwd[0]), (-fwd[1], -fwd[0])):
        if not _flanks(game_state, actor, target, side, travel, board2d, target_move_count):
            continue
        other_side = (-side[0], -side[1])
        for partner in game_state.board.snakes:
            if partner.id in (actor.id, target.id):
                continue
            if _flanks(game_state, partner, target, other_side, travel, board2d, target_move_count):
                return True
    return False


def is_faceoff(game_state: GameState, actor: Snake, target: Snake, board2d: Board2d) -> bool:
    """Heads two apart on one axis, actor longer, and target cannot back away."""
    if actor.id == target.id or actor.length <= target.length:
        return False
    ax, ay = actor.head
    tx, ty = target.head
    if ax == tx and abs(ay - ty) == 2:
        away = "up" if ty > ay else "down"
    elif ay == ty and abs(ax - tx) == 2:
        away = "right" if tx > ax else "left"
    else:
        return False
    return not get_available_moves(game_state, target, board2d).is_valid(away)
