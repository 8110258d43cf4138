"""
Process settings and evaluation constants.

Tune: change the dictionaries below. Every scoring term in `jaguar.evaluate`
reads its weight from here so terms can be adjusted independently.
"""
from __future__ import annotations
import os

# ---------------------------------
# Process settings
# ---------------------------------
PORT = int(os.environ.get("PORT", "8000"))
LOG_LEVEL = os.environ.get("JAGUAR_LOG_LEVEL", "INFO").upper()
SEARCH_DEPTH_OVERRIDE = os.environ.get("JAGUAR_SEARCH_DEPTH")  # None -> use lookahead heuristic
TIME_MARGIN_MS = int(os.environ.get("JAGUAR_TIME_MARGIN_MS", "100"))

VERSION = "1.1.0"

SNAKE_INFO = {
    "apiversion": "1",
    "author": "waryferryman",
    "color": "#ff9900",
    "head": "tiger-king",
    "tail": "mystic-moon",
    "version": VERSION,
}

# ---------------------------------
# Game constants
# ---------------------------------
MAX_HEALTH = 100
LOOKAHEAD_WEIGHT = 0.1  # node weight is 1 + LOOKAHEAD_WEIGHT * remaining lookahead
OTHER_SNAKE_LOOKAHEAD = 0

# ---------------------------------
# Evaluation weights
# ---------------------------------
EVAL_WEIGHTS = {
    "base": 500,
    "no_me": -10_000,       # sentinel when the evaluated snake is dead
    "tie_discount": 50,     # subtracted from synthesized no-snakes evaluations
    "solo": 1000,           # last snake standing in a non-solo game
    "other_snakes": -100,   # penalty for the first opponent
    "other_snakes_step": 25,  # each extra opponent costs this much less
    "other_snakes_floor": -25,
    "wall": -25,            # per touching wall, corners count twice
    "hazard_wall": -10,     # per hazard wall our head is next to
    "in_hazard": -30,
    "center": -2,           # per cell of Manhattan distance from the center
    "enemy_starvation": 3,  # per health point the duel opponent is below the threshold
    "length": 5,            # per body segment
    "has_eaten": 80,
    "has_eaten_hunger": 0.5,  # extra per health point missing before the meal
    "starving": -100,       # cannot survive a single hazard turn
    "food": 40,             # divided by the BFS depth of the food
    "food_corner_discount": 0.5,
    "food_hazard_discount": 0.25,
    "king_center": -3,      # per cell from center while unambiguously the largest
    "corner_enemy": -40,
    "tail_chase": 5,        # per cell closer than TAIL_CHASE_RANGE
    "voronoi": 1,           # per reachable cell
}

KISS_OF_DEATH_WEIGHTS = {
    "no": 0,
    "certainty": -400,
    "certainty_mutual": -300,
    "maybe": -200,
    "maybe_mutual": -150,
    "avoidance_3_to_1": -20,
    "avoidance_3_to_2": -5,
    "avoidance_2_to_1": -10,
}

KISS_OF_MURDER_WEIGHTS = {
    "no": 0,
    "certainty": 200,
    "maybe": 100,
    "faceoff": 35,
    "avoidance": 10,
}

# Immediate kiss situations in the evaluated state, before anybody has moved
CURRENT_KISS_WEIGHTS = {
    "death_maybe": -60,
    "death_certainty": -150,
    "murder_maybe": 30,
    "murder_certainty": 60,
}

# Avoided murders are raised to these values when the prey lands in a trap.
# Checked in this order; each can only raise the bonus.
TACTIC_WEIGHTS = {
    "cutoff": 50,
    "hazard_cutoff": 40,
    "sandwich": 45,
    "faceoff": 35,
}

# Direct rewards/penalties for positions found by the tactics detector
TACTIC_POSITION_WEIGHTS = {
    "cutting_off": 30,
    "cut_off": -60,
    "sandwiched": -80,
}

MOVE_COUNT_WEIGHTS = {0: -300, 1: 20, 2: 30, 3: 50, 4: 100}

# remaining survivable hazard turns -> bonus, checked top down with ">"
HEALTH_TIER_WEIGHTS = [(6, 42), (5, 36), (4, 30), (3, 24), (2, 18), (1, 12), (0, 6)]
NO_HAZARD_TIER_STEP = 10  # health points per "turn" in games without hazard damage

# hazard damage upper bound -> value of a hazard cell in the territory count
HAZARD_CELL_VALUES = [(0, 1.0), (4, 0.75), (9, 0.5), (14, 0.25)]
HAZARD_CELL_VALUE_MIN = 0.1

ENEMY_STARVATION_THRESHOLD = 30
FOOD_SEARCH_DEPTH = 8
KING_SNAKE_MARGIN = 2
CORNER_DISTANCE = 2
ENEMY_NEAR_DISTANCE = 3
TAIL_CHASE_THRESHOLD = 0.15  # fraction of the board we can reach
TAIL_CHASE_RANGE = 6
TAIL_CHASE_DUEL_TURN = 150
