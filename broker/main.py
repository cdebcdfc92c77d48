from __future__ import annotations

import logging

from fastapi import FastAPI

from broker.api.routes import router
from broker.config import BrokerSettings, settings_from_env
from broker.cron import CronJob, CronRunner, report_connections, watchlist_reporter
from broker.engine import Engine
from broker.handlers import build_handlers
from broker.market import PolygonClient
from broker.tictactoe import GameStore

VERSION = "0.1.0"

logger = logging.getLogger(__name__)


def _cron_jobs(settings: BrokerSettings) -> list[CronJob]:
    jobs: list[CronJob] = []
    if settings.connections_interval_s > 0:
        jobs.append(CronJob(name="Connections", interval_s=settings.connections_interval_s, tick=report_connections))
    if settings.watchlist and settings.watchlist_interval_s > 0:
        jobs.append(
            CronJob(
                name="Watchlist",
                interval_s=settings.watchlist_interval_s,
                tick=watchlist_reporter(settings.watchlist),
            )
        )
    return jobs


def create_app(settings: BrokerSettings | None = None) -> FastAPI:
    settings = settings or settings_from_env()
    logging.basicConfig(level=settings.log_level)

    games = GameStore()
    market = (
        PolygonClient(settings.polygon_api_key, base_url=settings.polygon_base_url)
        if settings.polygon_api_key
        else None
    )
    if market is None:
        logger.warning("POLYGON_API_KEY not set; stock_price and watchlist topics will fail")

    engine = Engine(handlers=build_handlers(games=games, market=market))
    cron = CronRunner(_cron_jobs(settings))

    app = FastAPI(title="ws-broker", version=VERSION)
    app.state.settings = settings
    app.state.games = games
    app.state.engine = engine
    app.include_router(router)

    @app.on_event("startup")
    async def _startup() -> None:
        cron.start(engine)

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        await cron.stop()
        if market is not None:
            await market.aclose()

    @app.get("/info")
    async def info() -> dict[str, object]:
        return {"name": "ws-broker", "version": VERSION, "env": settings.env, "topics": engine.handlers.topics}

    return app


app = create_app()
