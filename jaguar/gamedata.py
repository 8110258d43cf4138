"""
Per-game metadata owned by the move driver, plus score hash keys.

The store is created on /start, updated on every /move and dropped on /end.
Games run on separate server threads, so every access goes through a lock.
"""
from __future__ import annotations
from enum import Enum
from typing import Dict, List, Optional
from dataclasses import dataclass, field
import statistics
import threading

from .config import VERSION
from .models import GameState, HazardWalls


class FoodCountTier(Enum):
    ZERO = 0
    LESS4 = 1
    LESS7 = 2
    LOTS = 3


class HazardCountTier(Enum):
    ZERO = 0
    LESS31 = 1
    LESS61 = 2
    LESS91 = 3
    LOTS = 4


def get_food_count_tier(food_count: int) -> FoodCountTier:
    if food_count == 0:
        return FoodCountTier.ZERO
    if food_count < 4:
        return FoodCountTier.LESS4
    if food_count < 7:
        return FoodCountTier.LESS7
    return FoodCountTier.LOTS


def get_hazard_count_tier(hazard_count: int) -> HazardCountTier:
    if hazard_count == 0:
        return HazardCountTier.ZERO
    if hazard_count < 31:
        return HazardCountTier.LESS31
    if hazard_count < 61:
        return HazardCountTier.LESS61
    if hazard_count < 91:
        return HazardCountTier.LESS91
    return HazardCountTier.LOTS


@dataclass
class SnakeScore:
    score: float
    snake_length: int
    food_count_tier: FoodCountTier
    hazard_count_tier: HazardCountTier
    snake_count: int
    depth: int
    version: str = VERSION

    def hash_key(self) -> str:
        return get_snake_score_hash_key(self.snake_length, self.food_count_tier, self.hazard_count_tier,
                                        self.snake_count, self.depth)


def get_snake_score_hash_key(snake_length: int, food_count_tier: FoodCountTier,
                             hazard_count_tier: HazardCountTier, snake_count: int, depth: int) -> str:
    return f"{snake_length}_{food_count_tier.value}_{hazard_count_tier.value}_{snake_count}_{depth}"


def get_snake_score_from_hash_key(hash_key: str, score: float = 0) -> Optional[SnakeScore]:
    """Inverse of get_snake_score_hash_key. None for anything malformed."""
    fields = hash_key.split("_")
    if len(fields) != 5 or not all(f.isdecimal() for f in fields):
        return None
    length, food, hazard, count, depth = (int(f) for f in fields)
    try:
        food_tier = FoodCountTier(food)
        hazard_tier = HazardCountTier(hazard)
    except ValueError:
        return None
    return SnakeScore(score, length, food_tier, hazard_tier, count, depth)


def calculate_timing_data(times_taken: List[float]) -> Dict[str, float]:
    if not times_taken:
        return {"average": 0.0, "max": 0.0, "stdev": 0.0, "count": 0}
    return {
        "average": statistics.fmean(times_taken),
        "max": max(times_taken),
        "stdev": statistics.pstdev(times_taken),
        "count": len(times_taken),
    }


def create_game_data_id(game_state: GameState) -> str:
    return f"{game_state.game.id}-{game_state.you.id}"


@dataclass
class GameData:
    hazard_walls: HazardWalls = field(default_factory=HazardWalls)
    lookahead: int = 0
    times_taken: List[float] = field(default_factory=list)
    evaluations_for_lookaheads: List[SnakeScore] = field(default_factory=list)


class GameDataStore:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._data: Dict[str, GameData] = {}

    def create(self, game_state: GameState) -> GameData:
        data = GameData(hazard_walls=HazardWalls.from_game_state(game_state))
        with self._lock:
            self._data[create_game_data_id(game_state)] = data
        return data

    def get(self, game_state: GameState) -> Optional[GameData]:
        with self._lock:
            return self._data.get(create_game_data_id(game_state))

    def update(self, game_state: GameState, hazard_walls: HazardWalls, lookahead: int) -> Optional[GameData]:
        """Refresh cached geometry. Does nothing for games /start never announced."""
        with self._lock:
            data = self._data.get(create_game_data_id(game_state))
            if data is not None:
                data.hazard_walls = hazard_walls
                data.lookahead = lookahead
            return data

    def record_time(self, game_state: GameState, ms: float) -> None:
        with self._lock:
            data = self._data.get(create_game_data_id(game_state))
            if data is not None:
                data.times_taken.append(ms)

    def record_score(self, game_state: GameState, snake_score: SnakeScore) -> None:
        with self._lock:
            data = self._data.get(create_game_data_id(game_state))
            if data is not None:
                data.evaluations_for_lookaheads.append(snake_score)

    def delete(self, game_state: GameState) -> Optional[GameData]:
        with self._lock:
            return self._data.pop(create_game_data_id(game_state), None)

    def __contains__(self, game_state: GameState) -> bool:
        with self._lock:
            return create_game_data_id(game_state) in self._data

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
