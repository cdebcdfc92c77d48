from __future__ import annotations

import re
from dataclasses import dataclass

from broker.errors import FormatError


# One bracket group, no nesting. `[]` is not a group.
_FIELD_RE = re.compile(r"\[[^\]]+\]")


@dataclass(frozen=True, slots=True)
class Message:
    """A decoded `[topic][payload]` frame."""

    topic: str
    payload: str

    def encode(self) -> str:
        return encode(self.topic, self.payload)


def split_fields(raw: str) -> list[str]:
    """Return the contents of every bracket group in `raw`, in order."""

    return [m.group(0).strip("[]") for m in _FIELD_RE.finditer(raw)]


def decode(raw: str) -> Message:
    """Decode the first two bracket groups of `raw`.

    Trailing groups are ignored. Field contents are passed through verbatim:
    no trimming, no unescaping, commas included.
    """

    fields = split_fields(raw)
    if len(fields) < 2 or not fields[0] or not fields[1]:
        raise FormatError(f"unexpected message format: {raw}")
    return Message(topic=fields[0], payload=fields[1])


def encode(topic: str, payload: str) -> str:
    return f"[{topic}][{payload}]"
