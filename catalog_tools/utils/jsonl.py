"""JSON-lines reading and writing.

The reader is a producer over a byte stream: it pulls chunks as they
arrive, splits on ``\\n`` with a carry-over buffer for partial lines, and
yields one parsed object per non-blank line.  Lines are split as bytes and
decoded whole, so a multi-byte UTF-8 character split across two chunks is
handled and invalid UTF-8 is reported with its line number.

The sink is the single writer of the data stream.  Each object becomes one
line, flushed immediately.
"""

from __future__ import annotations

import asyncio
import json
import sys
from typing import IO, Any, AsyncIterator, Awaitable, Callable

from catalog_tools.utils.errors import MalformedInputError

_CHUNK_SIZE = 64 * 1024

ChunkReader = Callable[[], Awaitable[bytes]]


def stdin_chunk_reader(stream: IO[bytes] | None = None, chunk_size: int = _CHUNK_SIZE) -> ChunkReader:
    """Build a :data:`ChunkReader` over a binary stream (stdin by default).

    Blocking reads run in a worker thread so the event loop keeps serving
    in-flight batches while waiting for input.  Returns ``b""`` at EOF.
    """
    if stream is None:
        stream = sys.stdin.buffer

    read = getattr(stream, "read1", stream.read)

    async def _read() -> bytes:
        return await asyncio.to_thread(read, chunk_size)

    return _read


def _decode(raw: bytes, line_number: int) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedInputError(line_number, f"invalid UTF-8 at byte {exc.start}") from exc


def parse_line(line: str, line_number: int) -> dict[str, Any]:
    """Parse one JSON-lines record, raising :class:`MalformedInputError`."""
    try:
        value = json.loads(line)
    except json.JSONDecodeError as exc:
        raise MalformedInputError(line_number, f"invalid JSON ({exc.msg})") from exc
    if not isinstance(value, dict):
        raise MalformedInputError(line_number, "expected a JSON object")
    return value


async def iter_json_lines(read_chunk: ChunkReader) -> AsyncIterator[dict[str, Any]]:
    """Yield one object per non-blank line read through ``read_chunk``.

    A final line without a trailing newline is still parsed.
    """
    buffer = b""
    line_number = 0

    while True:
        chunk = await read_chunk()
        if not chunk:
            break
        buffer += chunk

        newline = buffer.find(b"\n")
        while newline != -1:
            raw = buffer[:newline]
            buffer = buffer[newline + 1:]
            line_number += 1
            line = _decode(raw, line_number).strip()
            if line:
                yield parse_line(line, line_number)
            newline = buffer.find(b"\n")

    tail = _decode(buffer, line_number + 1).strip()
    if tail:
        yield parse_line(tail, line_number + 1)


def dumps_line(obj: Any) -> str:
    """Serialize ``obj`` as a single JSON line (no trailing newline)."""
    return json.dumps(obj, ensure_ascii=False, separators=(",", ":"))


class JsonLineSink:
    """Writes JSON objects to a text stream, one per line.

    Parameters
    ----------
    stream:
        Destination text stream.  Defaults to ``sys.stdout``.
    """

    def __init__(self, stream: IO[str] | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout
        self._lines_written = 0

    @property
    def lines_written(self) -> int:
        return self._lines_written

    def write(self, obj: Any) -> None:
        self.write_many([obj])

    def write_many(self, objs: list[Any]) -> None:
        """Write several objects as contiguous lines in a single call."""
        if not objs:
            return
        payload = "".join(dumps_line(o) + "\n" for o in objs)
        self._stream.write(payload)
        self._stream.flush()
        self._lines_written += len(objs)
