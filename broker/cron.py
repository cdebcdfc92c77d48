from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass

from broker.engine import Engine
from broker.errors import DispatchError
from broker.protocol import encode

logger = logging.getLogger(__name__)

NO_CONNECTIONS = "<no conn>"


@dataclass(frozen=True, slots=True)
class CronJob:
    name: str
    interval_s: float
    tick: Callable[[Engine], Awaitable[None]]


async def report_connections(engine: Engine) -> None:
    """Broadcast the current connection list as a `[connections][...]` frame."""

    names = await engine.connections.snapshot()
    conn_str = ", ".join(names) or NO_CONNECTIONS
    response = await engine.process_message(encode("connections", conn_str))
    logger.debug("Broadcasting: %s", response)
    await engine.broadcast(response)


def watchlist_reporter(symbols: Sequence[str]) -> Callable[[Engine], Awaitable[None]]:
    async def report_watchlist(engine: Engine) -> None:
        for symbol in symbols:
            try:
                response = await engine.process_message(encode("watchlist", symbol))
            except DispatchError as e:
                logger.warning("Watchlist %s failed: %s", symbol, e)
                continue
            await engine.broadcast(response)

    return report_watchlist


async def run_periodically(job: CronJob, engine: Engine) -> None:
    while True:
        await asyncio.sleep(job.interval_s)
        try:
            await job.tick(engine)
        except Exception:
            logger.exception("Cron job %s failed", job.name)


class CronRunner:
    """Runs each job on its own task for the lifetime of the app."""

    def __init__(self, jobs: Sequence[CronJob]) -> None:
        self.jobs = list(jobs)
        self._tasks: list[asyncio.Task[None]] = []

    def start(self, engine: Engine) -> None:
        for job in self.jobs:
            logger.info("starting function: %s (every %ss)", job.name, job.interval_s)
            self._tasks.append(asyncio.create_task(run_periodically(job, engine), name=f"cron:{job.name}"))

    async def stop(self) -> None:
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks.clear()
