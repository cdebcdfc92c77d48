from __future__ import annotations

import os
from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

# Must be in place before `broker.main` builds its module-level app.
os.environ.setdefault("BROKER_CONNECTIONS_INTERVAL_S", "0")
os.environ.pop("POLYGON_API_KEY", None)


class FakeConnection:
    """In-memory stand-in for a websocket; optionally fails every write."""

    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[str] = []
        self.closed = False

    async def send_text(self, data: str) -> None:
        if self.fail:
            raise RuntimeError("broken pipe")
        self.sent.append(data)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture()
def make_conn() -> type[FakeConnection]:
    return FakeConnection


@pytest.fixture()
def client() -> Generator[TestClient, None, None]:
    """Fresh app per test, with periodic jobs disabled."""

    from broker.config import BrokerSettings
    from broker.main import create_app

    app = create_app(BrokerSettings(connections_interval_s=0))
    with TestClient(app) as c:
        yield c
