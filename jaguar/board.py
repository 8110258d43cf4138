"""
Spatial index over one board snapshot.

Cells are created on first access and belong to a single Board2d. Build a new
Board2d whenever the snapshot changes; cells are never shared between them.
"""
from __future__ import annotations
from typing import Dict, List, Optional
from dataclasses import dataclass, field

from .geometry import DIRECTIONS, get_coord_after_move
from .models import Coord, GameState, Snake


@dataclass
class SnakeCell:
    snake: Snake
    is_head: bool
    is_tail: bool


@dataclass
class BoardCell:
    coord: Coord
    food: bool = False
    hazard: bool = False
    snake_cell: Optional[SnakeCell] = None
    voronoi: Dict[str, int] = field(default_factory=dict)  # snake id -> BFS depth

    def has_snake(self, snake: Optional[Snake] = None) -> bool:
        """True if occupied; with `snake` given, only if occupied by that snake."""
        if self.snake_cell is None:
            return False
        return snake is None or self.snake_cell.snake.id == snake.id

    def has_snake_head(self) -> bool:
        return self.snake_cell is not None and self.snake_cell.is_head

    def __str__(self) -> str:
        occupant = self.snake_cell.snake.name if self.snake_cell else None
        return f"cell {self.coord} snake={occupant} food={self.food} hazard={self.hazard}"


class Board2d:
    def __init__(self, game_state: GameState):
        self.game_state = game_state
        self.width = game_state.board.width
        self.height = game_state.board.height
        self._cells: List[Optional[BoardCell]] = [None] * (self.width * self.height)

        for snake in game_state.board.snakes:
            self._stamp_snake(snake)
        for c in game_state.board.food:
            cell = self.get_cell(c)
            if cell is not None:
                cell.food = True
        for c in game_state.board.hazards:
            cell = self.get_cell(c)
            if cell is not None:
                cell.hazard = True

    def _stamp_snake(self, snake: Snake) -> None:
        last = snake.length - 1
        for idx, part in enumerate(snake.body):
            cell = self.get_cell(part)
            if cell is None:
                continue
            is_head = idx == 0
            prev = cell.snake_cell
            if prev is not None and prev.snake is snake:
                # stacked segments of one snake keep the head flag
                is_head = is_head or prev.is_head
            cell.snake_cell = SnakeCell(snake, is_head, idx == last)

    def in_bounds(self, c: Coord) -> bool:
        return 0 <= c[0] < self.width and 0 <= c[1] < self.height

    def get_cell(self, c: Coord) -> Optional[BoardCell]:
        """Cell at `c`, or None when `c` is not on the board."""
        if not self.in_bounds(c):
            return None
        idx = c[1] * self.width + c[0]
        cell = self._cells[idx]
        if cell is None:
            cell = BoardCell(coord=c)
            self._cells[idx] = cell
        return cell

    def has_snake(self, c: Coord, snake: Optional[Snake] = None) -> bool:
        cell = self.get_cell(c)
        return cell is not None and cell.has_snake(snake)

    def neighbors(self, c: Coord, exclude: Optional[Coord] = None) -> List[BoardCell]:
        """On-board cells next to `c`, wrapping for wrapped games."""
        res = []
        for d in DIRECTIONS:
            n = get_coord_after_move(c, d, self.game_state)
            if n == exclude:
                continue
            cell = self.get_cell(n)
            if cell is not None:
                res.append(cell)
        return res

    def __str__(self) -> str:
        rows = []
        for y in reversed(range(self.height)):
            row = ""
            for x in range(self.width):
                cell = self.get_cell((x, y))
                if cell.snake_cell is not None:
                    row += "H" if cell.snake_cell.is_head else "s"
                elif cell.food:
                    row += "f"
                elif cell.hazard:
                    row += "x"
                else:
                    row += "."
            rows.append(row)
        return "\n".join(rows)
