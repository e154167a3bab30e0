import logging
import threading
from typing import Dict, Optional

from flask import Flask, jsonify, request
from flask_cors import CORS

from game_session import GameSession
from settings import load_settings

SETTINGS = load_settings()

app = Flask(__name__)
CORS(app, resources={r"/*": {"origins": SETTINGS.allowed_origins}})
_session: Optional[GameSession] = None
_lock = threading.Lock()


def get_session() -> GameSession:
    global _session
    if _session is None:
        _session = GameSession(spawn_mode=SETTINGS.spawn_mode, seed=SETTINGS.seed)
        _session.start_new_game()
    return _session


def _payload() -> Dict:
    return request.get_json(force=True, silent=True) or {}


def _error(message: str, status: int = 400):
    return jsonify({"error": message}), status


@app.get("/state")
def state():
    with _lock:
        return jsonify(get_session().to_dict())


@app.post("/new")
def new_game():
    mode = _payload().get("mode")
    with _lock:
        session = get_session()
        try:
            session.start_new_game(mode)
        except ValueError as exc:
            return _error(str(exc))
        return jsonify(session.to_dict())


@app.post("/move")
def move():
    direction = _payload().get("direction")
    if direction is None:
        return _error("Payload must include 'direction' key")

    with _lock:
        session = get_session()
        try:
            changed = session.play(direction)
        except ValueError as exc:
            return _error(str(exc))
        response = session.to_dict()
    response["changed"] = changed
    return jsonify(response)


@app.post("/undo")
def undo():
    with _lock:
        session = get_session()
        undone = session.undo()
        response = session.to_dict()
    response["undone"] = undone
    return jsonify(response)


@app.post("/mode")
def spawn_mode():
    mode = _payload().get("mode")
    if mode is None:
        return _error("Payload must include 'mode' key")

    with _lock:
        session = get_session()
        try:
            session.set_spawn_mode(mode)
        except ValueError as exc:
            return _error(str(exc))
        return jsonify(session.to_dict())


@app.post("/save")
def save():
    with _lock:
        saved = get_session().save_to_file(SETTINGS.save_path)
    if not saved:
        app.logger.error("Error saving game to %s", SETTINGS.save_path)
        return jsonify({"saved": False, "error": "Error saving game!"}), 500
    return jsonify({"saved": True, "path": SETTINGS.save_path})


@app.post("/load")
def load():
    with _lock:
        session = get_session()
        loaded = session.load_from_file(SETTINGS.save_path)
        response = session.to_dict()
    if not loaded:
        app.logger.error("Error loading game from %s", SETTINGS.save_path)
        return jsonify({"loaded": False, "error": "Error loading game!"}), 500
    response["loaded"] = True
    return jsonify(response)


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG if SETTINGS.debug else logging.INFO)
    # Use 0.0.0.0 so a front end can reach it from another process on the same machine.
    app.run(host="0.0.0.0", port=SETTINGS.port, debug=SETTINGS.debug)
