from __future__ import annotations

import asyncio

import pytest

from broker.cron import CronJob, CronRunner, report_connections, watchlist_reporter
from broker.engine import Engine
from broker.handlers import build_handlers
from broker.registry import HandlerRegistry
from broker.tictactoe import GameStore


@pytest.mark.asyncio
async def test_report_connections_broadcasts_listing(make_conn) -> None:  # type: ignore[no-untyped-def]
    engine = Engine(handlers=build_handlers(games=GameStore()))
    a, b = make_conn(), make_conn()
    await engine.connections.register(a)
    await engine.connections.register(b)

    await report_connections(engine)

    assert a.sent == ["[connections][Client-1, Client-2]"]
    assert b.sent == ["[connections][Client-1, Client-2]"]


@pytest.mark.asyncio
async def test_report_connections_with_nobody_connected() -> None:
    seen: list[str] = []

    async def _connections(engine: Engine, payload: str) -> str:
        seen.append(payload)
        return payload

    engine = Engine(handlers=HandlerRegistry({"connections": _connections}))
    await report_connections(engine)
    assert seen == ["<no conn>"]


@pytest.mark.asyncio
async def test_watchlist_reporter_skips_failures(make_conn) -> None:  # type: ignore[no-untyped-def]
    async def _watchlist(engine: Engine, symbol: str) -> str:
        if symbol == "BAD":
            raise RuntimeError("upstream down")
        return f"{symbol} @ 1.000000"

    engine = Engine(handlers=HandlerRegistry({"watchlist": _watchlist}))
    peer = make_conn()
    await engine.connections.register(peer)

    await watchlist_reporter(["BAD", "AAPL"])(engine)

    assert peer.sent == ["[watchlist][AAPL @ 1.000000]"]


@pytest.mark.asyncio
async def test_cron_runner_ticks_until_stopped() -> None:
    ticks: list[int] = []
    fired = asyncio.Event()

    async def _tick(engine: Engine) -> None:
        ticks.append(1)
        if len(ticks) == 1:
            raise RuntimeError("first tick fails")
        fired.set()

    engine = Engine(handlers=HandlerRegistry({}))
    runner = CronRunner([CronJob(name="t", interval_s=0.01, tick=_tick)])
    runner.start(engine)
    await asyncio.wait_for(fired.wait(), timeout=2)
    await runner.stop()

    assert len(ticks) >= 2
