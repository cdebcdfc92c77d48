from __future__ import annotations


class BrokerError(Exception):
    """Base class for everything the dispatch loop knows how to report."""


class TransportError(BrokerError):
    """The underlying connection failed; fatal to the session."""


class FormatError(ValueError, BrokerError):
    """A frame did not contain at least two bracketed fields."""


class DispatchError(BrokerError):
    def __init__(self, message: str, *, topic: str) -> None:
        super().__init__(message)
        self.topic = topic


class TopicNotFound(DispatchError):
    def __init__(self, topic: str) -> None:
        super().__init__(f"topic not accepted: {topic}", topic=topic)


class HandlerError(DispatchError):
    """Wraps whatever a handler raised, tagged with the originating topic."""

    def __init__(self, topic: str, cause: BaseException) -> None:
        super().__init__(f"error handling {topic}: {cause}", topic=topic)
        self.cause = cause
