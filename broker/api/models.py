from __future__ import annotations

from pydantic import BaseModel, Field

from broker.tictactoe import Game


class ConnectionsResponse(BaseModel):
    connections: list[str] = Field(default_factory=list)


class GameSnapshot(BaseModel):
    game_id: str
    board: list[str]
    current_player: str
    winner: str
    status: int
    # Same flat string the websocket topics carry.
    state: str

    @classmethod
    def from_game(cls, game: Game) -> "GameSnapshot":
        return cls(
            game_id=game.game_id,
            board=list(game.board),
            current_player=game.current_player,
            winner=game.winner,
            status=int(game.status),
            state=game.format_state(),
        )
