"""FastAPI REST interface over a single game session."""

import threading

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel
from typing import Optional

from othello.config import CONFIG
from othello.core.board import Player, index_to_coordinate, iter_indices
from othello.core.rules import score
from othello.errors import OthelloError
from othello.session import GameSession

app = FastAPI(title=CONFIG.ui.engine_name, version="1.0.0")

# Shared session; FastAPI runs sync endpoints in a threadpool.
session = GameSession(human=Player(CONFIG.ui.human_color.lower()))
_session_lock = threading.Lock()


class MoveRequest(BaseModel):
    move: str  # coordinate e.g. "D3"


class SearchRequest(BaseModel):
    depth: Optional[int] = None


def _board_payload():
    state = session.current()
    black, white = score(state)
    outcome = session.terminal_summary()
    result = None
    if outcome is not None:
        result = "draw" if outcome.winner is None else outcome.winner.value
    return {
        "black": black,
        "white": white,
        "turn": state.current_player.value,
        "last_move": state.last_move,
        "pass_count": state.pass_count,
        "legal_moves": [index_to_coordinate(i) for i in iter_indices(session.legal_moves())],
        "is_game_over": outcome is not None,
        "result": result,
    }


def _bad_request(err: OthelloError):
    return HTTPException(status_code=400, detail=err.message)


@app.get("/board")
def get_board():
    with _session_lock:
        return _board_payload()


@app.post("/move")
def make_move(req: MoveRequest):
    with _session_lock:
        try:
            session.play(req.move)
        except OthelloError as e:
            raise _bad_request(e)
        return _board_payload()


@app.post("/pass")
def make_pass():
    with _session_lock:
        try:
            session.request_pass()
        except OthelloError as e:
            raise _bad_request(e)
        return _board_payload()


@app.post("/undo")
def undo_move():
    with _session_lock:
        try:
            session.require_undo()
        except OthelloError as e:
            raise _bad_request(e)
        return _board_payload()


@app.post("/search")
def search_move(req: SearchRequest = SearchRequest()):
    with _session_lock:
        if session.terminal_summary() is not None:
            raise HTTPException(status_code=400, detail="Game is already over")
        state = session.current()
        move, value = session.engine.find_best_move(state, req.depth)
    return {
        "best_move": index_to_coordinate(move) if move is not None else "PASS",
        "score": value,
        "turn": state.current_player.value,
    }


@app.post("/ai-move")
def ai_move():
    with _session_lock:
        if session.terminal_summary() is not None:
            raise HTTPException(status_code=400, detail="Game is already over")
        if not session.is_ai_turn():
            raise HTTPException(status_code=400, detail="Not the AI's turn")
        move = session.play_ai_turn()
        payload = _board_payload()
    payload["ai_move"] = index_to_coordinate(move) if move is not None else "PASS"
    return payload


@app.post("/reset")
def reset_board():
    with _session_lock:
        session.reset()
        return _board_payload()
