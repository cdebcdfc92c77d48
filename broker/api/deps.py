from __future__ import annotations

from fastapi.requests import HTTPConnection

from broker.engine import Engine
from broker.tictactoe import GameStore


def get_engine(conn: HTTPConnection) -> Engine:
    return conn.app.state.engine


def get_games(conn: HTTPConnection) -> GameStore:
    return conn.app.state.games
