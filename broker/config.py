from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

SUPPORTED_ENVS = ("dev", "prod")


@dataclass(frozen=True, slots=True)
class BrokerSettings:
    env: str = "dev"
    polygon_api_key: str | None = None
    polygon_base_url: str = "https://api.polygon.io"
    # 0 disables the job.
    connections_interval_s: float = 2.0
    watchlist: tuple[str, ...] = field(default_factory=tuple)
    watchlist_interval_s: float = 60.0
    log_level: str = "INFO"


def load_env_file(path: Path) -> bool:
    """Load KEY=VALUE pairs from `path` without clobbering the real environment."""

    if not path.exists():
        raise FileNotFoundError(f"env file not found: {path}")
    return load_dotenv(dotenv_path=path, override=False)


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise RuntimeError(f"{name} must be a number, got {raw!r}") from e


def settings_from_env() -> BrokerSettings:
    env_file = os.environ.get("BROKER_ENV_FILE")
    if env_file:
        load_env_file(Path(env_file))

    env = os.environ.get("BROKER_ENV", "dev")
    if env not in SUPPORTED_ENVS:
        raise RuntimeError(f"not supported BROKER_ENV: [{env}]")

    watchlist = tuple(s.strip().upper() for s in os.environ.get("BROKER_WATCHLIST", "").split(",") if s.strip())

    return BrokerSettings(
        env=env,
        polygon_api_key=os.environ.get("POLYGON_API_KEY") or None,
        polygon_base_url=os.environ.get("POLYGON_BASE_URL", "https://api.polygon.io"),
        connections_interval_s=_float_env("BROKER_CONNECTIONS_INTERVAL_S", 2.0),
        watchlist=watchlist,
        watchlist_interval_s=_float_env("BROKER_WATCHLIST_INTERVAL_S", 60.0),
        log_level=os.environ.get("BROKER_LOG_LEVEL", "INFO").upper(),
    )
