"""Incremental parser for ``text/event-stream`` style completion streams.

OpenAI-compatible HTTP routers deliver streaming completions as newline
framed ``data: <json>`` lines. This module turns the raw byte chunks read
from the transport into decoded JSON payloads:

- bytes are decoded with an incremental UTF-8 decoder, so a multi-byte
  sequence split across reads is carried into the next read;
- only the trailing partial line is retained between reads;
- blank lines and ``:`` comment lines are skipped;
- ``data: [DONE]`` ends the sequence even if more bytes follow;
- a ``data:`` line that is not valid JSON is logged and skipped.

The output is the same however the input is split into chunks.
"""
from __future__ import annotations

import codecs
import json
import logging
from typing import Any, Iterable, Iterator, Optional

from ..cancellation import CancellationToken
from ..logging import LogContext, get_logger, log_event

DATA_PREFIX = "data:"
DONE_SENTINEL = "[DONE]"


def _payload_of(line: str) -> Optional[str]:
    """Return the data payload of ``line`` or ``None`` for non-data lines."""
    if not line.startswith(DATA_PREFIX):
        return None
    payload = line[len(DATA_PREFIX):]
    # The SSE grammar allows exactly one optional space after the colon.
    return payload[1:] if payload.startswith(" ") else payload


class FrameParser:
    """Stateful line framer; feed it text and collect decoded payloads.

    Separated from :func:`iter_sse_payloads` so the framing can be driven
    directly when the caller already owns a read loop.
    """

    def __init__(self, *, logger: Optional[logging.Logger] = None, ctx: Optional[LogContext] = None) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""
        self._done = False
        self._logger = logger or get_logger("relay.frames")
        self._ctx = ctx

    @property
    def done(self) -> bool:
        """True once the ``[DONE]`` sentinel has been seen."""
        return self._done

    def feed(self, data: bytes) -> list[Any]:
        """Consume ``data`` and return payloads completed by it."""
        if self._done:
            return []
        self._buffer += self._decoder.decode(data)
        *lines, self._buffer = self._buffer.split("\n")
        return self._process(lines)

    def finish(self) -> list[Any]:
        """Flush the decoder and parse a final unterminated line, if any."""
        if self._done:
            return []
        tail = self._buffer + self._decoder.decode(b"", final=True)
        self._buffer = ""
        return self._process([tail])

    def _process(self, lines: list[str]) -> list[Any]:
        out: list[Any] = []
        for raw in lines:
            line = raw.rstrip("\r")
            if not line.strip() or line.startswith(":"):
                continue
            payload = _payload_of(line)
            if payload is None:
                continue
            if payload.strip() == DONE_SENTINEL:
                self._done = True
                break
            try:
                out.append(json.loads(payload))
            except ValueError as exc:
                log_event(
                    self._logger,
                    "frame.decode_error",
                    self._ctx,
                    level=logging.WARNING,
                    error=str(exc),
                    line_length=len(line),
                )
        return out


def iter_sse_payloads(
    chunks: Iterable[bytes],
    *,
    token: Optional[CancellationToken] = None,
    logger: Optional[logging.Logger] = None,
    ctx: Optional[LogContext] = None,
) -> Iterator[Any]:
    """Yield JSON payloads decoded from an iterable of byte chunks.

    Parameters:
        chunks: Raw bytes as read from the transport (any split).
        token: Optional cancellation token. Reading stops as soon as it is
            cancelled; already-buffered payloads are not yielded.
        logger: Logger for skipped malformed frames.
        ctx: Log context attached to frame events.

    The sequence ends at the ``[DONE]`` sentinel, at the end of ``chunks``,
    or on cancellation, whichever comes first.
    """
    parser = FrameParser(logger=logger, ctx=ctx)
    for data in chunks:
        if token is not None and token.cancelled:
            return
        for payload in parser.feed(data):
            if token is not None and token.cancelled:
                return
            yield payload
        if parser.done:
            return
    if token is not None and token.cancelled:
        return
    yield from parser.finish()


__all__ = ["FrameParser", "iter_sse_payloads", "DATA_PREFIX", "DONE_SENTINEL"]
