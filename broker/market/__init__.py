from broker.market.polygon import DailyOpenClose, MarketDataError, PolygonClient, SymbolNotFound

__all__ = ["DailyOpenClose", "MarketDataError", "PolygonClient", "SymbolNotFound"]
