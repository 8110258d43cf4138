"""
Board evaluation: one number saying how good a snapshot is for one snake.

`evaluate` builds the derived signals once (spatial index, legal moves, kiss
grades, territory) and then sums independent scoring terms onto a base score.
Each term is a plain function of the EvalContext returning its delta.
"""
from __future__ import annotations
from typing import Callable, Dict, List, Optional, Tuple
from dataclasses import dataclass
import logging

from .board import Board2d
from .config import (
    CORNER_DISTANCE,
    CURRENT_KISS_WEIGHTS,
    ENEMY_NEAR_DISTANCE,
    ENEMY_STARVATION_THRESHOLD,
    EVAL_WEIGHTS,
    FOOD_SEARCH_DEPTH,
    HEALTH_TIER_WEIGHTS,
    KING_SNAKE_MARGIN,
    KISS_OF_DEATH_WEIGHTS,
    KISS_OF_MURDER_WEIGHTS,
    MAX_HEALTH,
    MOVE_COUNT_WEIGHTS,
    NO_HAZARD_TIER_STEP,
    TACTIC_POSITION_WEIGHTS,
    TACTIC_WEIGHTS,
    TAIL_CHASE_DUEL_TURN,
    TAIL_CHASE_RANGE,
    TAIL_CHASE_THRESHOLD,
)
from .geometry import calculate_center_with_hazard, corner_distance, get_distance, is_corner
from .kiss import KissOfMurderState, KissStates, KissStatesForEvaluate, MoveNeighbors, analyze_kisses
from .models import Board, Coord, GameState, HazardWalls, Snake
from .moves import Moves, get_available_moves
from .tactics import is_cutoff, is_faceoff, is_hazard_cutoff, is_sandwich
from .voronoi import VoronoiResult, calculate_voronoi

logger = logging.getLogger(__name__)


@dataclass
class EvalContext:
    game_state: GameState
    board2d: Board2d
    myself: Snake
    others: List[Snake]
    moves: Moves
    move_neighbors: MoveNeighbors
    kiss_states: KissStates
    prior_kisses: KissStatesForEvaluate
    prior_health: Optional[int]
    hazard_walls: HazardWalls
    center: Tuple[float, float]
    voronoi: Dict[str, VoronoiResult]

    @property
    def center_distance(self) -> float:
        x, y = self.myself.head
        return abs(x - self.center[0]) + abs(y - self.center[1])


# ---------------------------------
# Scoring terms
# ---------------------------------

def solo_term(ctx: EvalContext) -> float:
    if ctx.others or ctx.game_state.is_solo:
        return 0
    return EVAL_WEIGHTS["solo"]


def other_snakes_term(ctx: EvalContext) -> float:
    if ctx.game_state.is_solo:
        return 0
    total = 0
    for i in range(len(ctx.others)):
        total += max(EVAL_WEIGHTS["other_snakes_floor"],
                     EVAL_WEIGHTS["other_snakes"] + i * EVAL_WEIGHTS["other_snakes_step"])
    return total


def wall_term(ctx: EvalContext) -> float:
    if ctx.game_state.is_wrapped:
        return 0
    x, y = ctx.myself.head
    walls = 0
    if x in (0, ctx.board2d.width - 1):
        walls += 1
    if y in (0, ctx.board2d.height - 1):
        walls += 1
    return walls * EVAL_WEIGHTS["wall"]


def hazard_term(ctx: EvalContext) -> float:
    if ctx.game_state.hazard_damage <= 0:
        return 0
    x, y = ctx.myself.head
    total = 0.0
    if ctx.board2d.get_cell(ctx.myself.head).hazard:
        total += EVAL_WEIGHTS["in_hazard"]
    walls = ctx.hazard_walls
    near = [
        walls.left is not None and x == walls.left + 1,
        walls.right is not None and x == walls.right - 1,
        walls.down is not None and y == walls.down + 1,
        walls.up is not None and y == walls.up - 1,
    ]
    total += sum(near) * EVAL_WEIGHTS["hazard_wall"]
    return total


def center_term(ctx: EvalContext) -> float:
    if ctx.game_state.is_wrapped:
        return 0
    return ctx.center_distance * EVAL_WEIGHTS["center"]


def enemy_starvation_term(ctx: EvalContext) -> float:
    if ctx.game_state.is_solo or len(ctx.others) != 1:
        return 0
    opponent = ctx.others[0]
    if opponent.health >= ENEMY_STARVATION_THRESHOLD:
        return 0
    return (ENEMY_STARVATION_THRESHOLD - opponent.health) * EVAL_WEIGHTS["enemy_starvation"]


def current_kiss_term(ctx: EvalContext) -> float:
    # Faceoff and avoidance murders are scored one ply later, as the child's prior kisses.
    if not ctx.moves.valid_moves():
        return 0
    total = 0.0
    states = ctx.kiss_states
    if states.can_avoid_possible_death(ctx.moves):
        pass
    elif states.can_avoid_certain_death(ctx.moves):
        total += CURRENT_KISS_WEIGHTS["death_maybe"]
    else:
        total += CURRENT_KISS_WEIGHTS["death_certainty"]

    if states.can_commit_certain_murder(ctx.moves):
        total += CURRENT_KISS_WEIGHTS["murder_certainty"]
    elif states.can_commit_possible_murder(ctx.moves):
        total += CURRENT_KISS_WEIGHTS["murder_maybe"]
    return total


def prior_kiss_of_death_term(ctx: EvalContext) -> float:
    return KISS_OF_DEATH_WEIGHTS[ctx.prior_kisses.death_state.value]


def prior_kiss_of_murder_term(ctx: EvalContext) -> float:
    state = ctx.prior_kisses.murder_state
    bonus = KISS_OF_MURDER_WEIGHTS[state.value]
    if state != KissOfMurderState.AVOIDANCE or ctx.prior_kisses.prey is None:
        return bonus

    prey = ctx.game_state.find_snake(ctx.prior_kisses.prey.id)
    if prey is None:
        return bonus
    gs, me, b2d = ctx.game_state, ctx.myself, ctx.board2d
    # fixed order, each check can only raise the bonus
    checks = [
        ("cutoff", lambda: is_cutoff(gs, me, prey, b2d)),
        ("hazard_cutoff", lambda: is_hazard_cutoff(gs, me, prey, b2d, ctx.hazard_walls)),
        ("sandwich", lambda: is_sandwich(gs, me, prey, b2d)),
        ("faceoff", lambda: is_faceoff(gs, me, prey, b2d)),
    ]
    for name, check in checks:
        if check():
            bonus = max(bonus, TACTIC_WEIGHTS[name])
    return bonus


def tactics_term(ctx: EvalContext) -> float:
    gs, me, b2d, walls = ctx.game_state, ctx.myself, ctx.board2d, ctx.hazard_walls
    total = 0.0
    sandwiched = False
    for opponent in ctx.others:
        if is_cutoff(gs, me, opponent, b2d) or is_hazard_cutoff(gs, me, opponent, b2d, walls):
            total += TACTIC_POSITION_WEIGHTS["cutting_off"]
        if is_cutoff(gs, opponent, me, b2d) or is_hazard_cutoff(gs, opponent, me, b2d, walls):
            total += TACTIC_POSITION_WEIGHTS["cut_off"]
        if not sandwiched and is_sandwich(gs, opponent, me, b2d):
            sandwiched = True
            total += TACTIC_POSITION_WEIGHTS["sandwiched"]
    return total


def move_count_term(ctx: EvalContext) -> float:
    return MOVE_COUNT_WEIGHTS[len(ctx.moves.valid_moves())]


def length_term(ctx: EvalContext) -> float:
    return ctx.myself.length * EVAL_WEIGHTS["length"]


def health_term(ctx: EvalContext) -> float:
    gs, me = ctx.game_state, ctx.myself
    if gs.is_constrictor:
        return HEALTH_TIER_WEIGHTS[0][1]
    if me.health == MAX_HEALTH:
        bonus = EVAL_WEIGHTS["has_eaten"]
        if ctx.prior_health is not None:
            bonus += (MAX_HEALTH - ctx.prior_health) * EVAL_WEIGHTS["has_eaten_hunger"]
        return bonus

    step = gs.hazard_damage + 1 if gs.hazard_damage > 0 else NO_HAZARD_TIER_STEP
    turns = (me.health - 1) // step
    for threshold, value in HEALTH_TIER_WEIGHTS:
        if turns > threshold:
            return value
    # without hazard one more move is always survivable above 1 health
    if gs.hazard_damage <= 0 and me.health > 1:
        return HEALTH_TIER_WEIGHTS[-1][1]
    return EVAL_WEIGHTS["starving"]


def food_term(ctx: EvalContext) -> float:
    gs = ctx.game_state
    if gs.is_constrictor:
        return 0
    total = 0.0
    for depth, foods in ctx.voronoi[ctx.myself.id].food.items():
        # depth 0 is food under the head, eating is scored by health_term
        if depth == 0 or depth > FOOD_SEARCH_DEPTH:
            continue
        for c in foods:
            value = EVAL_WEIGHTS["food"] / depth
            if not gs.is_wrapped and is_corner(c, gs.board.width, gs.board.height):
                value *= EVAL_WEIGHTS["food_corner_discount"]
            if gs.hazard_damage > 0 and ctx.board2d.get_cell(c).hazard:
                value *= EVAL_WEIGHTS["food_hazard_discount"]
            total += value
    return total


def king_snake_term(ctx: EvalContext) -> float:
    if not ctx.others or ctx.game_state.is_wrapped:
        return 0
    if all(ctx.myself.length >= s.length + KING_SNAKE_MARGIN for s in ctx.others):
        return ctx.center_distance * EVAL_WEIGHTS["king_center"]
    return 0


def corner_enemy_term(ctx: EvalContext) -> float:
    gs, head = ctx.game_state, ctx.myself.head
    if gs.is_wrapped or corner_distance(head, gs.board.width, gs.board.height) > CORNER_DISTANCE:
        return 0
    if any(get_distance(head, s.head, gs) <= ENEMY_NEAR_DISTANCE for s in ctx.others):
        return EVAL_WEIGHTS["corner_enemy"]
    return 0


def tail_chase_term(ctx: EvalContext) -> float:
    gs, me = ctx.game_state, ctx.myself
    if me.length < 2:
        return 0
    safe_fraction = ctx.voronoi[me.id].reachable_cells / (gs.board.width * gs.board.height)
    long_duel = (len(ctx.others) == 1 and not gs.is_solo and gs.hazard_damage <= 0
                 and gs.turn >= TAIL_CHASE_DUEL_TURN)
    if safe_fraction >= TAIL_CHASE_THRESHOLD and not long_duel:
        return 0
    dist = get_distance(me.head, me.tail, gs)
    return max(0, TAIL_CHASE_RANGE - dist) * EVAL_WEIGHTS["tail_chase"]


def voronoi_term(ctx: EvalContext) -> float:
    return ctx.voronoi[ctx.myself.id].reachable_cells * EVAL_WEIGHTS["voronoi"]


TERMS: List[Callable[[EvalContext], float]] = [
    solo_term,
    other_snakes_term,
    wall_term,
    hazard_term,
    center_term,
    enemy_starvation_term,
    current_kiss_term,
    prior_kiss_of_death_term,
    prior_kiss_of_murder_term,
    tactics_term,
    move_count_term,
    length_term,
    health_term,
    food_term,
    king_snake_term,
    corner_enemy_term,
    tail_chase_term,
    voronoi_term,
]


# ---------------------------------
# Evaluation
# ---------------------------------

def build_context(game_state: GameState, myself: Snake,
                  prior_kisses: Optional[KissStatesForEvaluate] = None,
                  prior_health: Optional[int] = None,
                  hazard_walls: Optional[HazardWalls] = None) -> EvalContext:
    if hazard_walls is None:
        hazard_walls = HazardWalls.from_game_state(game_state)
    board2d = Board2d(game_state)
    moves = get_available_moves(game_state, myself, board2d)
    move_neighbors, kiss_states = analyze_kisses(game_state, myself, board2d, moves)
    return EvalContext(
        game_state=game_state,
        board2d=board2d,
        myself=myself,
        others=game_state.other_snakes(myself.id),
        moves=moves,
        move_neighbors=move_neighbors,
        kiss_states=kiss_states,
        prior_kisses=prior_kisses or KissStatesForEvaluate(),
        prior_health=prior_health,
        hazard_walls=hazard_walls,
        center=calculate_center_with_hazard(game_state, hazard_walls),
        voronoi=calculate_voronoi(game_state, board2d),
    )


def evaluate(game_state: GameState, me: Snake,
             prior_kisses: Optional[KissStatesForEvaluate] = None,
             prior_health: Optional[int] = None,
             hazard_walls: Optional[HazardWalls] = None) -> float:
    """Score `game_state` from the point of view of `me`. Higher is better.

    Returns EVAL_WEIGHTS["no_me"] when `me` is no longer on the board.
    """
    myself = game_state.find_snake(me.id)
    if myself is None:
        return EVAL_WEIGHTS["no_me"]

    ctx = build_context(game_state, myself, prior_kisses, prior_health, hazard_walls)
    evaluation = EVAL_WEIGHTS["base"]
    for term in TERMS:
        delta = term(ctx)
        if delta and logger.isEnabledFor(logging.DEBUG):
            logger.debug("%s turn %d: %s %+.2f", myself.name, game_state.turn, term.__name__, delta)
        evaluation += delta
    logger.debug("%s turn %d: final evaluation %.2f", myself.name, game_state.turn, evaluation)
    return evaluation


def neutral_placement(game_state: GameState, center: Tuple[float, float]) -> Tuple[Coord, Coord]:
    """Two cells mirrored about `center`, out of hazard and not touching.

    Falls back to the closest such pair to the center when the mirrored pair
    does not fit, and to the mirrored pair on boards too small for any.
    """
    w, h = game_state.board.width, game_state.board.height
    center_x, center_y = center
    my_x = max(0, int(center_x) - 2)
    opp_x = max(0, min(w - 1, int(round(2 * center_x)) - my_x))
    y = int(center_y)
    preferred = ((my_x, y), (opp_x, y))

    hazards = game_state.board.hazards

    def fits(a: Coord, b: Coord) -> bool:
        return a not in hazards and b not in hazards and get_distance(a, b, game_state) >= 2

    if fits(*preferred):
        return preferred
    cells = sorted(((x, yy) for x in range(w) for yy in range(h)),
                   key=lambda c: abs(c[0] - center_x) + abs(c[1] - center_y))
    for a in cells:
        for b in cells:
            if fits(a, b):
                return a, b
    return preferred


def determine_eval_no_snakes(game_state: GameState, me: Snake,
                             hazard_walls: Optional[HazardWalls] = None) -> float:
    """Value of a tie: the snakes placed neutrally, apart and out of hazard, slightly discounted."""
    if hazard_walls is None:
        hazard_walls = HazardWalls.from_game_state(game_state)
    w, h = game_state.board.width, game_state.board.height

    myself = me.copy()
    others = game_state.other_snakes(me.id)
    opponent = others[0].copy() if others else Snake(id=f"{me.id}-mirror", name="mirror",
                                                     health=me.health, body=list(me.body))

    mine, theirs = neutral_placement(game_state, calculate_center_with_hazard(game_state, hazard_walls))
    myself.body = [mine] * myself.length
    opponent.body = [theirs] * opponent.length

    board = Board(width=w, height=h, food=set(), hazards=set(game_state.board.hazards),
                  snakes=[myself, opponent])
    neutral = GameState(game=game_state.game, turn=game_state.turn, board=board, you=myself)
    return evaluate(neutral, myself, hazard_walls=hazard_walls) - EVAL_WEIGHTS["tie_discount"]
