from __future__ import annotations


class GameError(ValueError):
    """A move or lookup the game cannot honour."""


class GameNotFound(GameError):
    def __init__(self, game_id: str) -> None:
        super().__init__(f"game not found: {game_id}")
        self.game_id = game_id


class InvalidMoveFormat(GameError):
    def __init__(self, move: str) -> None:
        super().__init__(f"invalid move format: {move}")


class WrongTurn(GameError):
    def __init__(self, mark: str) -> None:
        super().__init__(f"not {mark}'s turn")
        self.mark = mark


class InvalidPosition(GameError):
    def __init__(self, position: str) -> None:
        super().__init__(f"invalid position: {position}")


class CellOccupied(GameError):
    def __init__(self, index: int) -> None:
        super().__init__(f"cell already taken: {index + 1}")
        self.index = index
