from broker.tictactoe.errors import (
    CellOccupied,
    GameError,
    GameNotFound,
    InvalidMoveFormat,
    InvalidPosition,
    WrongTurn,
)
from broker.tictactoe.models import Game
from broker.tictactoe.status import GameStatus
from broker.tictactoe.store import GameStore, GameUpdate

__all__ = [
    "CellOccupied",
    "Game",
    "GameError",
    "GameNotFound",
    "GameStatus",
    "GameStore",
    "GameUpdate",
    "InvalidMoveFormat",
    "InvalidPosition",
    "WrongTurn",
]
