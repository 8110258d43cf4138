"""
Lookahead search driver.

Self-centred search: at each of my nodes the other snakes' replies are
predicted once (a zero-lookahead decision of their own), every legal move of
mine is simulated together with those replies, and the best child is kept.
A node is worth its best child plus its own evaluation, weighted up the closer
it is to the root.
"""
from __future__ import annotations
from typing import Dict, List, Optional
from dataclasses import dataclass
import logging
import time

from .board import Board2d
from .config import LOOKAHEAD_WEIGHT, OTHER_SNAKE_LOOKAHEAD, TIME_MARGIN_MS
from .evaluate import determine_eval_no_snakes, evaluate
from .gamedata import GameDataStore, SnakeScore, get_food_count_tier, get_hazard_count_tier
from .geometry import Direction, calculate_center_with_hazard, get_coord_after_move
from .kiss import KissStatesForEvaluate, analyze_kisses, kiss_states_for_direction
from .models import GameState, HazardWalls, Snake
from .moves import get_available_moves, get_default_move, move_snake, update_game_state_after_move

logger = logging.getLogger(__name__)


@dataclass
class MoveWithEval:
    direction: Optional[Direction]
    score: Optional[float]


def check_time(start_time: float, game_state: GameState) -> bool:
    """True while there is still time left to think this turn."""
    elapsed_ms = (time.monotonic() - start_time) * 1000
    return elapsed_ms < game_state.game.timeout - TIME_MARGIN_MS


def skipped_levels_weight(lookahead: int) -> float:
    # lookahead 4 -> 1.0 + 1.1 + 1.2 + 1.3 + 1.4
    return sum(1 + LOOKAHEAD_WEIGHT * i for i in range(lookahead + 1))


class MoveSearch:
    def __init__(self, root: GameState, start_time: float, hazard_walls: HazardWalls,
                 start_lookahead: int, store: Optional[GameDataStore] = None):
        self.root = root
        self.start_time = start_time
        self.hazard_walls = hazard_walls
        self.start_lookahead = start_lookahead
        self.store = store
        self.center = calculate_center_with_hazard(root, hazard_walls)
        self.nodes = 0

    def order_moves(self, game_state: GameState, snake: Snake, moves: List[Direction]) -> List[Direction]:
        """Moves towards the center first."""
        def dist(d: Direction) -> float:
            x, y = get_coord_after_move(snake.head, d, game_state)
            return abs(x - self.center[0]) + abs(y - self.center[1])
        return sorted(moves, key=dist)

    def _first_move(self, game_state: GameState, snake: Snake) -> Direction:
        board2d = Board2d(game_state)
        valid = get_available_moves(game_state, snake, board2d).valid_moves()
        return valid[0] if valid else get_default_move(game_state, snake, board2d)

    def _reconsider(self, parent: GameState, new_state: GameState, snake: Snake, predicted: MoveWithEval,
                    me_before: Snake) -> Direction:
        """Let a predicted reply that runs into my new head choose again."""
        me_after = new_state.find_snake(me_before.id)
        direction = predicted.direction or self._first_move(parent, snake)
        if me_after is None or me_before.length < snake.length:
            return direction
        if get_coord_after_move(snake.head, direction, new_state) != me_after.head:
            return direction

        alternatives = get_available_moves(new_state, snake, Board2d(new_state)).valid_moves()
        if not alternatives:
            return direction
        new_move = self.decide(new_state, snake, 0)
        if new_move.direction is None or new_move.score is None:
            return direction
        if predicted.score is None or len(new_state.board.snakes) > 2 or me_before.length > snake.length:
            return new_move.direction
        if new_move.score > determine_eval_no_snakes(new_state, snake, self.hazard_walls):
            return new_move.direction
        return direction

    def _record(self, game_state: GameState, me: Snake, lookahead: int, score: float) -> None:
        if self.store is None or me.id != self.root.you.id:
            return
        self.store.record_score(self.root, SnakeScore(
            score,
            me.length,
            get_food_count_tier(len(game_state.board.food)),
            get_hazard_count_tier(len(game_state.board.hazards)),
            len(game_state.board.snakes),
            lookahead,
        ))

    def decide(self, game_state: GameState, myself: Snake, lookahead: int,
               kisses: Optional[KissStatesForEvaluate] = None,
               prior_health: Optional[int] = None) -> MoveWithEval:
        self.nodes += 1
        me = game_state.find_snake(myself.id)
        eval_this_state = evaluate(game_state, myself, kisses, prior_health, self.hazard_walls)

        board2d = Board2d(game_state)
        valid: List[Direction] = []
        if me is not None:
            moves = get_available_moves(game_state, me, board2d)
            valid = moves.valid_moves()

        finish = (
            not check_time(self.start_time, game_state)
            or me is None
            or not valid
            or (len(valid) == 1 and lookahead == self.start_lookahead)
            or (not game_state.is_solo and len(game_state.board.snakes) == 1)
        )
        if finish:
            direction = None
            if me is not None:
                direction = valid[0] if valid else get_default_move(game_state, me, board2d)
            return MoveWithEval(direction, eval_this_state * skipped_levels_weight(lookahead))

        move_neighbors, kiss_states = analyze_kisses(game_state, me, board2d, moves)
        is_root_snake = me.id == game_state.you.id
        predictions: Dict[str, MoveWithEval] = {}
        if is_root_snake:
            for snake in game_state.other_snakes(me.id):
                predictions[snake.id] = self.decide(game_state, snake, OTHER_SNAKE_LOOKAHEAD)

        best = MoveWithEval(None, None)
        for move in self.order_moves(game_state, me, valid):
            new_state = game_state.clone()
            new_self = new_state.find_snake(me.id)
            kiss_args = kiss_states_for_direction(move, kiss_states, move_neighbors)
            move_snake(new_state, new_self, board2d, move)

            for snake in new_state.other_snakes(me.id):
                if is_root_snake:
                    direction = self._reconsider(game_state, new_state, snake, predictions[snake.id], me)
                else:
                    direction = self._first_move(game_state, snake)
                move_snake(new_state, snake, board2d, direction)
            update_game_state_after_move(new_state)

            if not new_state.board.snakes:
                score = (determine_eval_no_snakes(game_state, me, self.hazard_walls)
                         * skipped_levels_weight(max(0, lookahead - 1)))
            elif lookahead > 0:
                score = self.decide(new_state, me, lookahead - 1, kiss_args, me.health).score
            else:
                score = evaluate(new_state, me, kiss_args, me.health, self.hazard_walls)

            if best.score is None or (score is not None and score > best.score):
                best = MoveWithEval(move, score)

        if best.score is not None:
            self._record(game_state, me, lookahead, best.score)
            best.score += eval_this_state * (1 + LOOKAHEAD_WEIGHT * lookahead)
        else:
            best.score = eval_this_state
        return best


def decide_move(game_state: GameState, myself: Snake, start_time: float, hazard_walls: HazardWalls,
                start_lookahead: int, store: Optional[GameDataStore] = None) -> MoveWithEval:
    """Choose a direction for `myself`, searching `start_lookahead` plies deep."""
    board2d = Board2d(game_state)
    logger.debug("turn %d board:\n%s", game_state.turn, board2d)
    valid = get_available_moves(game_state, myself, board2d).valid_moves()
    if len(valid) == 1:
        return MoveWithEval(valid[0], None)
    if not valid:
        return MoveWithEval(get_default_move(game_state, myself, board2d), None)

    search = MoveSearch(game_state, start_time, hazard_walls, start_lookahead, store)
    chosen = search.decide(game_state, myself, start_lookahead)
    elapsed_ms = (time.monotonic() - start_time) * 1000
    logger.debug("turn %d: %s chose %s (score %s) after %d nodes in %.1fms", game_state.turn,
                 myself.name, chosen.direction, chosen.score, search.nodes, elapsed_ms)
    return chosen
