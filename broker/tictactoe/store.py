from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from broker.protocol import encode
from broker.tictactoe.errors import GameNotFound
from broker.tictactoe.models import Game

logger = logging.getLogger(__name__)

UPDATE_TOPIC = "update"


@dataclass(frozen=True, slots=True)
class GameUpdate:
    """Outcome of a state transition.

    - `state`: formatted board state, returned to the caller.
    - `event`: `[update][gameID,state]` frame for every peer, or None when
      the call changed nothing.
    """

    game_id: str
    state: str
    event: str | None


def update_event(game: Game) -> str:
    return encode(UPDATE_TOPIC, f"{game.game_id},{game.format_state()}")


class GameStore:
    """Id -> game mapping shared by every connection.

    Games are created on first `start` and never removed. One lock covers the
    map and every validate-then-mutate step, so two moves on the same game
    cannot interleave.
    """

    def __init__(self) -> None:
        self._games: dict[str, Game] = {}
        self._lock = asyncio.Lock()

    async def start(self, game_id: str) -> GameUpdate:
        async with self._lock:
            game = self._games.get(game_id)
            if game is None:
                game = Game(game_id=game_id)
                self._games[game_id] = game
                logger.info("Created game %s", game_id)
            state = game.reset()
            return GameUpdate(game_id=game_id, state=state, event=update_event(game))

    async def move(self, game_id: str, move: str) -> GameUpdate:
        async with self._lock:
            game = self._games.get(game_id)
            if game is None:
                raise GameNotFound(game_id)
            if not game.make_move(move):
                logger.debug("Ignoring move %s on game %s in status %s", move, game_id, game.status.name)
                return GameUpdate(game_id=game_id, state=game.format_state(), event=None)
            return GameUpdate(game_id=game_id, state=game.format_state(), event=update_event(game))

    async def get(self, game_id: str) -> Game | None:
        async with self._lock:
            game = self._games.get(game_id)
            if game is None:
                return None
            return Game(
                game_id=game.game_id,
                board=list(game.board),
                current_player=game.current_player,
                winner=game.winner,
                status=game.status,
            )

    async def game_ids(self) -> list[str]:
        async with self._lock:
            return list(self._games)
