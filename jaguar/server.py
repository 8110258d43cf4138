"""
Battlesnake HTTP surface.

Run locally:
  pip install -e .
  PORT=8000 python -m jaguar.server
"""
from __future__ import annotations
import logging
import time

from flask import Flask, request, jsonify

from .board import Board2d
from .config import LOG_LEVEL, PORT, SNAKE_INFO
from .gamedata import GameDataStore, calculate_timing_data
from .geometry import lookahead_determinator
from .models import GameState, HazardWalls, parse_game_state
from .moves import get_default_move
from .search import decide_move

logger = logging.getLogger(__name__)

# ---------------------------------
# Flask server
# ---------------------------------
app = Flask(__name__)
store = GameDataStore()


def _read_game_state() -> GameState:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValueError("request body is not a JSON object")
    return parse_game_state(data)


def _bad_request(err: Exception):
    logger.warning("rejecting %s: %s", request.path, err)
    return jsonify({"error": str(err)}), 400


@app.get("/")
def index():
    return jsonify(SNAKE_INFO)


@app.post("/start")
def start():
    try:
        game_state = _read_game_state()
    except (KeyError, TypeError, ValueError, AttributeError) as err:
        return _bad_request(err)
    store.create(game_state)
    logger.info("game %s started on %dx%d (%s)", game_state.game.id, game_state.board.width,
                game_state.board.height, game_state.game.ruleset.name)
    return ("", 200)


@app.post("/move")
def move():
    start_time = time.monotonic()
    try:
        game_state = _read_game_state()
    except (KeyError, TypeError, ValueError, AttributeError) as err:
        return _bad_request(err)

    hazard_walls = HazardWalls.from_game_state(game_state)
    lookahead = lookahead_determinator(game_state)
    if game_state in store:
        store.update(game_state, hazard_walls, lookahead)
    else:
        logger.debug("game %s was never started here, not tracking it", game_state.game.id)

    try:
        chosen = decide_move(game_state, game_state.you, start_time, hazard_walls, lookahead, store)
        move_dir = chosen.direction
    except Exception:
        logger.exception("search failed on turn %d, falling back to a safe move", game_state.turn)
        move_dir = None
    if move_dir is None:
        move_dir = get_default_move(game_state, game_state.you, Board2d(game_state))

    elapsed_ms = (time.monotonic() - start_time) * 1000
    store.record_time(game_state, elapsed_ms)
    logger.info("turn %d: %s (lookahead %d, %.1fms)", game_state.turn, move_dir, lookahead, elapsed_ms)
    return jsonify({"move": move_dir, "shout": f"lookahead {lookahead}"})


@app.post("/end")
def end():
    try:
        game_state = _read_game_state()
    except (KeyError, TypeError, ValueError, AttributeError) as err:
        return _bad_request(err)
    data = store.delete(game_state)
    if data is not None:
        logger.info("game %s over: timing %s", game_state.game.id, calculate_timing_data(data.times_taken))
    return ("", 200)


if __name__ == "__main__":
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    app.run(host="0.0.0.0", port=PORT, debug=False)
