"""ProgressSink — optional receiver of human-readable status updates."""

from collections.abc import Awaitable, Callable

type ProgressSink = Callable[[str], Awaitable[None]]
