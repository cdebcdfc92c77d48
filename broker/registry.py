from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, TypeAlias

from broker.errors import TopicNotFound

if TYPE_CHECKING:
    from broker.engine import Engine


# A handler turns a payload into a result string, or raises.
Handler: TypeAlias = Callable[["Engine", str], Awaitable[str]]


class HandlerRegistry(Mapping[str, Handler]):
    """Closed topic -> handler table.

    Built once before the first connection is accepted. The backing dict is
    copied and exposed read-only, so concurrent lookups need no lock.
    """

    __slots__ = ("_table",)

    def __init__(self, handlers: Mapping[str, Handler]) -> None:
        self._table: Mapping[str, Handler] = MappingProxyType(dict(handlers))

    def lookup(self, topic: str) -> Handler:
        try:
            return self._table[topic]
        except KeyError:
            raise TopicNotFound(topic) from None

    @property
    def topics(self) -> list[str]:
        return sorted(self._table)

    def __getitem__(self, topic: str) -> Handler:
        return self._table[topic]

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)
