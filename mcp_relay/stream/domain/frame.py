"""Frame value object — one decoded unit of a server-sent event stream."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Frame:
    """Immutable event record flushed by the frame parser."""

    event: str
    data: str
    id: str = ""
