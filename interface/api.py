"""FastAPI REST interface for the frontier search."""

import logging
import threading
from typing import Optional

import chess
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from frontier.config import CONFIG, configure_logging
from frontier.core.board import Position
from frontier.core.search import FrontierSearch

configure_logging()
_log = logging.getLogger(__name__)

app = FastAPI(title=CONFIG.ui.engine_name, version="1.0.0")

# Only the game position is shared; each request runs its own search.
position = Position()
_position_lock = threading.Lock()


class FenRequest(BaseModel):
    fen: str


class MoveRequest(BaseModel):
    move: str  # UCI format e.g. "e2e4"


class SearchRequest(BaseModel):
    nodes: Optional[int] = Field(default=None, ge=0)


@app.get("/board")
def get_board():
    with _position_lock:
        board = position.board
        return {
            "fen": board.fen(),
            "turn": "white" if board.turn == chess.WHITE else "black",
            "legal_moves": [m.uci() for m in board.legal_moves],
            "is_game_over": board.is_game_over(),
            "result": board.result() if board.is_game_over() else None,
        }


@app.post("/position")
def set_position(req: FenRequest):
    with _position_lock:
        try:
            position.set_fen(req.fen)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=f"Invalid FEN: {e}")
        return {"fen": position.fen()}


@app.post("/move")
def make_move(req: MoveRequest):
    with _position_lock:
        if not position.make_move(req.move):
            raise HTTPException(status_code=400, detail=f"Illegal or invalid move: {req.move}")
        return {"fen": position.fen(), "move": req.move}


@app.post("/search")
def search_move(req: SearchRequest = SearchRequest()):
    with _position_lock:
        if position.is_game_over():
            raise HTTPException(status_code=400, detail="Game is already over")
        search_position = position.copy()

    nodes = CONFIG.search.nodes if req.nodes is None else req.nodes
    result = FrontierSearch().search(search_position, nodes)
    _log.info("Search of %s: %s", search_position.fen(), result.best_move)
    return {
        "best_move": result.best_move.uci() if result.best_move else None,
        "value": result.value,
        "pv": [m.uci() for m in result.pv],
        "pv_depth": result.pv_depth,
        "max_depth": result.max_depth,
        "elapsed": result.elapsed,
        "fen": search_position.fen(),
    }


@app.post("/reset")
def reset_board():
    with _position_lock:
        position.reset()
        return {"fen": position.fen()}
