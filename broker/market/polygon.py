from __future__ import annotations

import logging
from datetime import date, timedelta

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.polygon.io"


class MarketDataError(RuntimeError):
    """Upstream market data could not be fetched."""


class SymbolNotFound(MarketDataError):
    def __init__(self, symbol: str) -> None:
        super().__init__(f"symbol not found: {symbol}")
        self.symbol = symbol


class DailyOpenClose(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    symbol: str
    status: str | None = None
    day: str | None = Field(default=None, alias="from")
    open: float
    high: float | None = None
    low: float | None = None
    close: float
    volume: float | None = None


class PolygonClient:
    """Minimal async client for Polygon's daily open/close aggregate.

    Only what the `stock_price` and `watchlist` topics need. Pass `client` to
    inject a preconfigured `httpx.AsyncClient` (tests use a MockTransport).
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        client: httpx.AsyncClient | None = None,
        timeout_s: float = 10.0,
    ) -> None:
        if not api_key:
            raise ValueError("api_key is required")
        self._api_key = api_key
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout_s)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def daily_close(self, symbol: str, *, on: date | None = None) -> DailyOpenClose:
        # Latest session the free tier has published.
        day = on or (date.today() - timedelta(days=2))
        path = f"/v1/open-close/{symbol}/{day.isoformat()}"

        try:
            resp = await self._client.get(path, params={"adjusted": "true", "apiKey": self._api_key})
        except httpx.HTTPError as e:
            raise MarketDataError(f"polygon request failed: {e}") from e

        if resp.status_code == httpx.codes.NOT_FOUND:
            logger.info("Symbol not found: %s", symbol)
            raise SymbolNotFound(symbol)
        if resp.is_error:
            logger.warning("Unknown status code [%s] from Polygon", resp.status_code)
            raise MarketDataError(f"polygon returned status {resp.status_code}")

        try:
            return DailyOpenClose.model_validate(resp.json())
        except (ValueError, ValidationError) as e:
            raise MarketDataError(f"unexpected polygon payload: {e}") from e
