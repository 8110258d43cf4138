"""
Territory partition: multi-source BFS from every head at once.

Each cell goes to the snake(s) reaching it first. Cells reached by several
snakes at the same depth are shared evenly between them.
"""
from __future__ import annotations
from typing import Dict, List
from dataclasses import dataclass, field
import math

from .board import Board2d
from .config import HAZARD_CELL_VALUES, HAZARD_CELL_VALUE_MIN
from .models import Coord, GameState


@dataclass
class VoronoiResult:
    reachable_cells: float = 0.0
    food: Dict[int, List[Coord]] = field(default_factory=dict)  # BFS depth -> food found there


def hazard_cell_value(hazard_damage: int) -> float:
    for limit, value in HAZARD_CELL_VALUES:
        if hazard_damage <= limit:
            return value
    return HAZARD_CELL_VALUE_MIN


def _turns_until_free(game_state: GameState) -> Dict[Coord, int]:
    """Body cells -> BFS depth from which they no longer block."""
    free_at: Dict[Coord, int] = {}
    never = game_state.board.width * game_state.board.height + 1
    for snake in game_state.board.snakes:
        for idx in range(1, snake.length):
            c = snake.body[idx]
            turns = never if game_state.is_constrictor else snake.length - idx
            free_at[c] = max(free_at.get(c, 0), turns)
    return free_at


def calculate_voronoi(game_state: GameState, board2d: Board2d) -> Dict[str, VoronoiResult]:
    """Partition the board and tag every reached cell of `board2d` with its claim depths."""
    snakes = game_state.board.snakes
    results = {s.id: VoronoiResult() for s in snakes}
    free_at = _turns_until_free(game_state)

    depth_of: Dict[Coord, int] = {}
    owners: Dict[Coord, List[str]] = {}
    frontier: Dict[str, List[Coord]] = {}
    for snake in snakes:
        cell = board2d.get_cell(snake.head)
        if cell is None:
            continue
        depth_of[snake.head] = 0
        owners[snake.head] = [snake.id]
        cell.voronoi[snake.id] = 0
        frontier[snake.id] = [snake.head]

    depth = 0
    while any(frontier.values()):
        depth += 1
        reached: Dict[Coord, List[str]] = {}
        for snake in snakes:
            for c in frontier.get(snake.id, []):
                for cell in board2d.neighbors(c):
                    n = cell.coord
                    if n in depth_of or free_at.get(n, 0) > depth:
                        continue
                    ids = reached.setdefault(n, [])
                    if snake.id not in ids:
                        ids.append(snake.id)

        frontier = {s.id: [] for s in snakes}
        for n, ids in reached.items():
            depth_of[n] = depth
            owners[n] = ids
            cell = board2d.get_cell(n)
            for sid in ids:
                cell.voronoi[sid] = depth
                frontier[sid].append(n)

    hazard_value = hazard_cell_value(game_state.hazard_damage)
    shares = {s.id: 0.0 for s in snakes}
    for c, ids in owners.items():
        cell = board2d.get_cell(c)
        value = hazard_value if cell.hazard and not cell.food else 1.0
        if len(ids) == 1:
            results[ids[0]].reachable_cells += value
        else:
            for sid in ids:
                shares[sid] += value / len(ids)
        if cell.food:
            for sid in ids:
                results[sid].food.setdefault(depth_of[c], []).append(c)

    for sid, share in shares.items():
        results[sid].reachable_cells += math.ceil(round(share, 6))
    return results
