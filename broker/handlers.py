from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from broker.market import MarketDataError, PolygonClient
from broker.registry import Handler, HandlerRegistry
from broker.tictactoe import GameStore, GameUpdate, InvalidMoveFormat

if TYPE_CHECKING:
    from broker.engine import Engine

logger = logging.getLogger(__name__)


async def _publish(engine: Engine, update: GameUpdate) -> str:
    """Broadcast the update event (if any) and hand back the caller's response."""

    if update.event is not None:
        await engine.broadcast(update.event)
    return update.state


def make_start_handler(games: GameStore) -> Handler:
    async def start(engine: Engine, game_id: str) -> str:
        logger.debug("start game %s", game_id)
        return await _publish(engine, await games.start(game_id))

    return start


def make_move_handler(games: GameStore) -> Handler:
    async def move(engine: Engine, payload: str) -> str:
        # payload: "<gameID>,<mark><position>"; fields past the second are ignored.
        game_id, sep, rest = payload.partition(",")
        if not sep:
            raise InvalidMoveFormat(payload)
        token = rest.split(",", 1)[0]
        logger.debug("move %s on game %s", token, game_id)
        return await _publish(engine, await games.move(game_id, token))

    return move


async def connections_handler(engine: Engine, connections: str) -> str:
    return connections


async def broker_handler(engine: Engine, payload: str) -> str:
    return f"hi from broker handler. you gave me: {payload}"


def _require_market(market: PolygonClient | None) -> PolygonClient:
    if market is None:
        raise MarketDataError("polygon client not initialized")
    return market


def make_stock_price_handler(market: PolygonClient | None) -> Handler:
    async def stock_price(engine: Engine, symbol: str) -> str:
        res = await _require_market(market).daily_close(symbol)
        return f"{res.close:f}"

    return stock_price


def make_watchlist_handler(market: PolygonClient | None) -> Handler:
    async def watchlist(engine: Engine, symbol: str) -> str:
        res = await _require_market(market).daily_close(symbol)
        return f"{symbol} @ {res.close:f}"

    return watchlist


def build_handlers(*, games: GameStore, market: PolygonClient | None = None) -> HandlerRegistry:
    return HandlerRegistry(
        {
            "stock_price": make_stock_price_handler(market),
            "watchlist": make_watchlist_handler(market),
            "connections": connections_handler,
            "start": make_start_handler(games),
            "move": make_move_handler(games),
            "broker": broker_handler,
        }
    )
