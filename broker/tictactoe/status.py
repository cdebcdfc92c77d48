from __future__ import annotations

from enum import IntEnum


class GameStatus(IntEnum):
    not_started = 0
    in_progress = 1
    done = 2
