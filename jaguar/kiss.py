"""
Kiss classification: grading the head-to-head threats and opportunities of
each candidate direction.

A direction is "hunted" when some opposing head of at least my length sits
next to the cell I would move into, and "hunting" when every opposing head
there is shorter than me.
"""
from __future__ import annotations
from enum import Enum
from typing import Dict, Iterator, List, Optional, Set, Tuple
from dataclasses import dataclass, field

from .board import Board2d, BoardCell
from .geometry import DIRECTIONS, Direction, get_coord_after_move
from .models import Coord, GameState, Snake
from .moves import Moves, get_available_moves
from .tactics import is_faceoff


class KissOfDeathState(Enum):
    NO = "no"
    CERTAINTY = "certainty"
    CERTAINTY_MUTUAL = "certainty_mutual"
    MAYBE = "maybe"
    MAYBE_MUTUAL = "maybe_mutual"
    AVOIDANCE_3_TO_1 = "avoidance_3_to_1"
    AVOIDANCE_3_TO_2 = "avoidance_3_to_2"
    AVOIDANCE_2_TO_1 = "avoidance_2_to_1"


class KissOfMurderState(Enum):
    NO = "no"
    CERTAINTY = "certainty"
    MAYBE = "maybe"
    FACEOFF = "faceoff"
    AVOIDANCE = "avoidance"


DEATH_CERTAIN = {KissOfDeathState.CERTAINTY, KissOfDeathState.CERTAINTY_MUTUAL}
DEATH_MAYBE = {KissOfDeathState.MAYBE, KissOfDeathState.MAYBE_MUTUAL}

MURDER_RANK = {
    KissOfMurderState.NO: 0,
    KissOfMurderState.AVOIDANCE: 1,
    KissOfMurderState.FACEOFF: 2,
    KissOfMurderState.MAYBE: 3,
    KissOfMurderState.CERTAINTY: 4,
}


class MoveNeighbors:
    """Cells around each destination of `me`, minus the cell it came from."""

    def __init__(self, me: Snake, neighbors: Optional[Dict[Direction, List[BoardCell]]] = None):
        self.me = me
        self.neighbors: Dict[Direction, List[BoardCell]] = {d: [] for d in DIRECTIONS}
        if neighbors:
            self.neighbors.update(neighbors)
        # snake id -> the directions of MINE it can reach, not where it came from
        self.hunting_snakes: Dict[str, Moves] = {}

    def heads_at(self, direction: Direction) -> Iterator[Snake]:
        for cell in self.neighbors[direction]:
            sc = cell.snake_cell
            if sc is not None and sc.is_head and sc.snake.id != self.me.id:
                yield sc.snake

    def hunted_at(self, direction: Direction) -> bool:
        """True if a snake at least my length could move into this destination."""
        bigger = False
        for snake in self.heads_at(direction):
            if snake.length >= self.me.length:
                bigger = True
                reach = self.hunting_snakes.setdefault(snake.id, Moves(False, False, False, False))
                reach.enable_move(direction)
        return bigger

    def hunting_at(self, direction: Direction) -> bool:
        """True if snake heads border this destination and all of them are shorter than me."""
        heads = list(self.heads_at(direction))
        if not heads:
            return False
        return all(s.length < self.me.length for s in heads)

    def hunting_chance_directions(self) -> Moves:
        """Directions left enabled are ones no hunter is forced into."""
        available = Moves()
        for reach in self.hunting_snakes.values():
            valid = reach.valid_moves()
            if len(valid) == 1:
                available.disable_move(valid[0])
        return available

    def get_predator(self, direction: Direction) -> Optional[Snake]:
        predators = [s for s in self.heads_at(direction) if s.length >= self.me.length]
        return max(predators, key=lambda s: s.length, default=None)

    def get_prey(self, direction: Direction) -> Optional[Snake]:
        if not self.hunting_at(direction):
            return None
        return max(self.heads_at(direction), key=lambda s: s.length, default=None)

    def is_mutual(self, direction: Direction) -> bool:
        """The worst threat here is exactly my length, so we would both die."""
        predator = self.get_predator(direction)
        return predator is not None and predator.length == self.me.length


@dataclass
class KissStates:
    death: Dict[Direction, KissOfDeathState] = field(default_factory=dict)
    murder: Dict[Direction, KissOfMurderState] = field(default_factory=dict)

    def death_state(self, direction: Direction) -> KissOfDeathState:
        return self.death.get(direction, KissOfDeathState.NO)

    def murder_state(self, direction: Direction) -> KissOfMurderState:
        return self.murder.get(direction, KissOfMurderState.NO)

    def can_avoid_possible_death(self, moves: Moves) -> bool:
        return any(self.death_state(d) not in DEATH_CERTAIN | DEATH_MAYBE for d in moves.valid_moves())

    def can_avoid_certain_death(self, moves: Moves) -> bool:
        return any(self.death_state(d) not in DEATH_CERTAIN for d in moves.valid_moves())

    def can_commit_certain_murder(self, moves: Moves) -> bool:
        return any(self.murder_state(d) == KissOfMurderState.CERTAINTY for d in moves.valid_moves())

    def can_commit_possible_murder(self, moves: Moves) -> bool:
        return any(self.murder_state(d) == KissOfMurderState.MAYBE for d in moves.valid_moves())


@dataclass
class KissStatesForEvaluate:
    """Kiss grades of the move that produced the snapshot being evaluated."""
    death_state: KissOfDeathState = KissOfDeathState.NO
    murder_state: KissOfMurderState = KissOfMurderState.NO
    predator: Optional[Snake] = None
    prey: Optional[Snake] = None


def find_move_neighbors(game_state: GameState, me: Snake, board2d: Board2d, moves: Moves) -> MoveNeighbors:
    neighbors = {}
    for d in moves.valid_moves():
        dest = get_coord_after_move(me.head, d, game_state)
        neighbors[d] = board2d.neighbors(dest, exclude=me.head)
    return MoveNeighbors(me, neighbors)


def find_kiss_death_moves(move_neighbors: MoveNeighbors) -> List[Direction]:
    return [d for d in DIRECTIONS if move_neighbors.hunted_at(d)]


def find_kiss_murder_moves(move_neighbors: MoveNeighbors) -> List[Direction]:
    return [d for d in DIRECTIONS if move_neighbors.hunting_at(d)]


def _death_state(move_neighbors: MoveNeighbors, direction: Direction, certain: bool) -> KissOfDeathState:
    mutual = move_neighbors.is_mutual(direction)
    if certain:
        return KissOfDeathState.CERTAINTY_MUTUAL if mutual else KissOfDeathState.CERTAINTY
    return KissOfDeathState.MAYBE_MUTUAL if mutual else KissOfDeathState.MAYBE


def _murder_state(game_state: GameState, me: Snake, prey: Snake, dest: Coord,
                  my_destinations: Set[Coord], board2d: Board2d) -> KissOfMurderState:
    prey_moves = get_available_moves(game_state, prey, board2d).valid_moves()
    prey_destinations = [get_coord_after_move(prey.head, m, game_state) for m in prey_moves]
    if dest in prey_destinations:
        if len(prey_destinations) == 1:
            return KissOfMurderState.CERTAINTY
        if len(prey_destinations) == 2 and all(c in my_destinations for c in prey_destinations):
            return KissOfMurderState.MAYBE
    if is_faceoff(game_state, me, prey, board2d):
        return KissOfMurderState.FACEOFF
    return KissOfMurderState.AVOIDANCE


def kiss_decider(game_state: GameState, me: Snake, move_neighbors: MoveNeighbors,
                 kiss_of_death_moves: List[Direction], kiss_of_murder_moves: List[Direction],
                 moves: Moves, board2d: Board2d) -> KissStates:
    """Grade every legal direction of `me` for death risk and murder chance."""
    valid = moves.valid_moves()
    states = KissStates(
        death={d: KissOfDeathState.NO for d in valid},
        murder={d: KissOfMurderState.NO for d in valid},
    )

    hunted = [d for d in kiss_of_death_moves if d in valid]
    if hunted:
        safe = [d for d in valid if d not in hunted]
        if len(hunted) == 1:
            states.death[hunted[0]] = _death_state(move_neighbors, hunted[0], certain=True)
            escape = KissOfDeathState.AVOIDANCE_3_TO_2 if len(valid) >= 3 else KissOfDeathState.AVOIDANCE_2_TO_1
            for d in safe:
                states.death[d] = escape
        else:
            certain = set(move_neighbors.hunting_chance_directions().invalid_moves())
            for d in hunted:
                states.death[d] = _death_state(move_neighbors, d, certain=d in certain)
            for d in safe:
                states.death[d] = KissOfDeathState.AVOIDANCE_3_TO_1

    my_destinations = {get_coord_after_move(me.head, d, game_state) for d in valid}
    for d in kiss_of_murder_moves:
        if d not in states.murder:
            continue
        dest = get_coord_after_move(me.head, d, game_state)
        best = KissOfMurderState.NO
        for prey in move_neighbors.heads_at(d):
            grade = _murder_state(game_state, me, prey, dest, my_destinations, board2d)
            if MURDER_RANK[grade] > MURDER_RANK[best]:
                best = grade
        states.murder[d] = best
    return states


def determine_kiss_state_for_direction(direction: Direction,
                                       kiss_states: KissStates) -> Tuple[KissOfDeathState, KissOfMurderState]:
    return kiss_states.death_state(direction), kiss_states.murder_state(direction)


def kiss_states_for_direction(direction: Direction, kiss_states: KissStates,
                              move_neighbors: MoveNeighbors) -> KissStatesForEvaluate:
    death, murder = determine_kiss_state_for_direction(direction, kiss_states)
    return KissStatesForEvaluate(death, murder, move_neighbors.get_predator(direction),
                                 move_neighbors.get_prey(direction))


def analyze_kisses(game_state: GameState, me: Snake, board2d: Board2d,
                   moves: Moves) -> Tuple[MoveNeighbors, KissStates]:
    move_neighbors = find_move_neighbors(game_state, me, board2d, moves)
    death_moves = find_kiss_death_moves(move_neighbors)
    murder_moves = find_kiss_murder_moves(move_neighbors)
    states = kiss_decider(game_state, me, move_neighbors, death_moves, murder_moves, moves, board2d)
    return move_neighbors, states
