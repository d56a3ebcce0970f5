"""Line-framed incremental text protocol.

Each record is a newline-terminated line of the form ``<tag>:<payload>``.
Tag ``0`` carries a text delta whose payload is a JSON string literal.
Every other tag is tolerated and skipped so newer servers can add record
types without breaking older clients.

Example stream::

    0:"Hel"
    0:"lo"
    d:{"finishReason":"stop"}
"""

import json
import logging
import re
from collections.abc import AsyncIterable, AsyncIterator, Iterable, Iterator
from typing import Any

logger = logging.getLogger(__name__)

TEXT_TAG = "0"
FINISH_TAG = "d"

RECORD_SEPARATOR = "\n"
_TAG_PATTERN = re.compile(r"^[0-9A-Za-z]{1,8}$")


class FrameDecoder:
    """Incremental decoder from raw text chunks to text deltas.

    Chunk boundaries need not line up with record boundaries: a partial
    trailing record is buffered until its newline arrives. One decoder
    instance handles exactly one stream.
    """

    def __init__(self) -> None:
        self._buffer = ""

    @property
    def pending(self) -> str:
        """Buffered text of the unterminated trailing record."""
        return self._buffer

    def decode(self, chunk: str) -> Iterator[str]:
        """Feed one chunk and get the deltas of every record it completes.

        Args:
            chunk: Next piece of the decoded response body. May be empty.

        Returns:
            Lazy iterator over text deltas in arrival order. The chunk is
            buffered immediately, whether or not the iterator is consumed.
        """
        self._buffer += chunk
        if RECORD_SEPARATOR not in self._buffer:
            return iter(())

        *lines, self._buffer = self._buffer.split(RECORD_SEPARATOR)
        return (delta for delta in map(_parse_record, lines) if delta is not None)

    def finish(self) -> None:
        """Drop an unterminated trailing record at end of stream."""
        if self._buffer:
            logger.debug(f"Discarding unterminated trailing record ({len(self._buffer)} chars)")
        self._buffer = ""


def _parse_record(line: str) -> str | None:
    """Return the delta carried by one complete record, or None to skip it."""
    line = line.removesuffix("\r")
    if not line:
        return None

    tag, sep, payload = line.partition(":")
    if not sep or not _TAG_PATTERN.match(tag):
        logger.debug(f"Skipping malformed record: {line[:40]!r}")
        return None

    if tag != TEXT_TAG:
        return None

    return _unquote(payload)


def _unquote(payload: str) -> str | None:
    # Exactly one quoted string literal; anything else is a malformed delta.
    if len(payload) < 2 or not (payload.startswith('"') and payload.endswith('"')):
        logger.debug(f"Skipping text record with unquoted payload: {payload[:40]!r}")
        return None
    try:
        value = json.loads(payload)
    except json.JSONDecodeError:
        logger.debug(f"Skipping text record with invalid escapes: {payload[:40]!r}")
        return None
    return value if isinstance(value, str) else None


def decode_frames(chunks: Iterable[str]) -> Iterator[str]:
    """Decode a whole stream of chunks into its text deltas."""
    decoder = FrameDecoder()
    for chunk in chunks:
        yield from decoder.decode(chunk)
    decoder.finish()


async def adecode_frames(chunks: AsyncIterable[str]) -> AsyncIterator[str]:
    """Async counterpart of :func:`decode_frames`."""
    decoder = FrameDecoder()
    async for chunk in chunks:
        for delta in decoder.decode(chunk):
            yield delta
    decoder.finish()


def encode_frame(tag: str, payload: Any) -> str:
    """Render one record with a JSON-encoded payload.

    Args:
        tag: Record tag (short ASCII identifier).
        payload: JSON-serializable payload.

    Returns:
        The newline-terminated record.
    """
    if not _TAG_PATTERN.match(tag):
        raise ValueError(f"Invalid frame tag: {tag!r}")
    return f"{tag}:{json.dumps(payload, separators=(',', ':'))}{RECORD_SEPARATOR}"


def text_frame(delta: str) -> str:
    return encode_frame(TEXT_TAG, delta)


def finish_frame(reason: str = "stop") -> str:
    return encode_frame(FINISH_TAG, {"finishReason": reason})
