"""FrameParser — incremental decoder for text/event-stream bodies.

Pure framing layer: knows nothing about the messages carried in ``data``.
Output is independent of how the input is split into chunks.
"""

from collections.abc import AsyncIterable, AsyncIterator

from mcp_relay.stream.domain.frame import Frame

DEFAULT_EVENT = "message"


class FrameParser:
    """Accumulates ``field: value`` lines and flushes a Frame on each blank line."""

    def __init__(self) -> None:
        self._buffer = ""
        self._pending_cr = False
        self._event = ""
        self._data = ""
        self._id = ""

    def feed(self, chunk: str) -> list[Frame]:
        """Consume one chunk and return the frames completed by it."""
        if not chunk:
            return []

        # A chunk ending in CR may be followed by the LF of the same CRLF pair.
        if self._pending_cr and chunk.startswith("\n"):
            chunk = chunk[1:]
        self._pending_cr = chunk.endswith("\r")

        text = (self._buffer + chunk).replace("\r\n", "\n").replace("\r", "\n")
        *lines, self._buffer = text.split("\n")

        frames: list[Frame] = []
        for line in lines:
            frame = self._process_line(line)
            if frame is not None:
                frames.append(frame)
        return frames

    def finish(self) -> list[Frame]:
        """Flush whatever partial record remains once the input has ended."""
        frames: list[Frame] = []
        if self._buffer:
            line, self._buffer = self._buffer, ""
            frame = self._process_line(line)
            if frame is not None:
                frames.append(frame)

        frame = self._flush()
        if frame is not None:
            frames.append(frame)
        return frames

    def _process_line(self, line: str) -> Frame | None:
        if line == "":
            return self._flush()
        if line.startswith(":"):
            return None

        field, colon, value = line.partition(":")
        if not colon:
            return None
        if value.startswith(" "):
            value = value[1:]

        if field == "event":
            self._event = value
        elif field == "data":
            self._data += value + "\n"
        elif field == "id":
            self._id = value
        return None

    def _flush(self) -> Frame | None:
        if not self._data:
            self._event = ""
            self._id = ""
            return None

        frame = Frame(
            event=self._event or DEFAULT_EVENT,
            data=self._data.removesuffix("\n"),
            id=self._id,
        )
        self._event = ""
        self._data = ""
        self._id = ""
        return frame


async def parse_frames(chunks: AsyncIterable[str]) -> AsyncIterator[Frame]:
    """Lazily decode an async stream of text chunks into frames."""
    parser = FrameParser()
    async for chunk in chunks:
        for frame in parser.feed(chunk):
            yield frame
    for frame in parser.finish():
        yield frame


def encode_frame(frame: Frame) -> str:
    """Serialise a frame to wire format; FrameParser reads it back unchanged."""
    lines: list[str] = []
    if frame.event and frame.event != DEFAULT_EVENT:
        lines.append(f"event: {frame.event}")
    if frame.id:
        lines.append(f"id: {frame.id}")
    lines.extend(f"data: {line}" for line in frame.data.split("\n"))
    return "\n".join(lines) + "\n\n"
