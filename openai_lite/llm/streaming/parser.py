"""
SSE decoder for chat completion streams.

Server-sent-event frames do not line up with network chunk boundaries, so
bytes are accumulated in a carry-over buffer and re-scanned for complete
lines after every append. Only ``data: ``-prefixed lines are frames; the
literal ``[DONE]`` payload ends the stream.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, AsyncIterable, Iterator

import httpx
import structlog
from pydantic import ValidationError

from ..exceptions import (
    ConfigurationError,
    FrameDecodeError,
    FrameTooLongError,
    TransportError,
)
from ..models import CompletionChunk
from .models import RawSSEChunk, SSEEventType

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"
DEFAULT_MAX_FRAME_BYTES = 1024 * 1024

logger = structlog.get_logger(__name__)


class SSEDecoder:
    """
    Incremental decoder turning arbitrarily chunked bytes into frames.

    The decoder is a plain state machine: ``feed`` appends bytes and returns
    an iterator over the frames that became complete. A COMPLETION or ERROR
    frame is always the last frame the decoder ever produces; after it the
    buffer is discarded and further input is ignored.
    """

    def __init__(self, max_frame_bytes: int | None = DEFAULT_MAX_FRAME_BYTES):
        if max_frame_bytes is not None and max_frame_bytes < 1:
            raise ConfigurationError(
                f"max_frame_bytes must be a positive integer or None, got {max_frame_bytes}"
            )
        self.max_frame_bytes = max_frame_bytes
        self.finished = False
        self._buffer = bytearray()
        self.stats = self._empty_stats()

    @staticmethod
    def _empty_stats() -> dict[str, int]:
        return {
            "total_frames": 0,
            "skipped_lines": 0,
            "lossy_lines": 0,
            "error_frames": 0,
        }

    @property
    def buffered(self) -> int:
        """Number of bytes held that do not yet form a complete line."""
        return len(self._buffer)

    def feed(self, data: bytes) -> Iterator[RawSSEChunk]:
        """Append ``data`` and iterate over the frames completed by it."""
        if not self.finished:
            self._buffer.extend(data)
        return self._drain()

    def finish(self) -> int:
        """Mark the source exhausted. Returns the number of bytes dropped."""
        dropped = 0 if self.finished else len(self._buffer)
        if dropped:
            logger.debug("Discarding unterminated trailing bytes", dropped_bytes=dropped)
        self._terminate()
        return dropped

    def _drain(self) -> Iterator[RawSSEChunk]:
        while not self.finished:
            pos = self._buffer.find(b"\n")
            if pos == -1:
                break

            # Line length is bounded whether or not its newline has arrived.
            if self.max_frame_bytes is not None and pos > self.max_frame_bytes:
                yield self._frame_too_long()
                return

            raw_line = bytes(self._buffer[:pos])
            del self._buffer[: pos + 1]

            frame = self._parse_line(raw_line)
            if frame is None:
                continue

            if frame.event_type is not SSEEventType.CHUNK:
                self._terminate()
            yield frame

        if (
            not self.finished
            and self.max_frame_bytes is not None
            and len(self._buffer) > self.max_frame_bytes
        ):
            yield self._frame_too_long()

    def _frame_too_long(self) -> RawSSEChunk:
        self.stats["error_frames"] += 1
        self._terminate()
        return RawSSEChunk(
            event_type=SSEEventType.ERROR,
            data=None,
            raw_data="",
            error=FrameTooLongError(
                f"Stream line exceeds {self.max_frame_bytes} bytes",
                max_frame_bytes=self.max_frame_bytes,
            ),
        )

    def _parse_line(self, raw_line: bytes) -> RawSSEChunk | None:
        try:
            line = raw_line.decode("utf-8")
        except UnicodeDecodeError:
            self.stats["lossy_lines"] += 1
            logger.warning(
                "Replacing invalid UTF-8 in stream line", line_bytes=len(raw_line)
            )
            line = raw_line.decode("utf-8", errors="replace")

        line = line.removesuffix("\r")

        if not line.startswith(DATA_PREFIX):
            self.stats["skipped_lines"] += 1
            if line:
                logger.debug("Skipping non-data stream line", line=line[:80])
            return None

        payload = line[len(DATA_PREFIX):]

        if payload == DONE_SENTINEL:
            return RawSSEChunk(
                event_type=SSEEventType.COMPLETION,
                data=None,
                raw_data=payload,
            )

        try:
            chunk = CompletionChunk.model_validate_json(payload)
        except ValidationError as e:
            self.stats["error_frames"] += 1
            error = FrameDecodeError(
                f"Invalid JSON in stream frame: {e}", payload=payload
            )
            error.__cause__ = e
            return RawSSEChunk(
                event_type=SSEEventType.ERROR,
                data=None,
                raw_data=payload,
                error=error,
            )

        self.stats["total_frames"] += 1
        return RawSSEChunk(
            event_type=SSEEventType.CHUNK,
            data=chunk,
            raw_data=payload,
        )

    def _terminate(self) -> None:
        self.finished = True
        self._buffer.clear()

    def get_stats(self) -> dict[str, int]:
        """Get decoding statistics for monitoring."""
        return self.stats.copy()

    def reset_stats(self) -> None:
        """Reset statistics counters."""
        self.stats = self._empty_stats()


async def iter_chunks(
    byte_stream: AsyncIterable[bytes],
    decoder: SSEDecoder | None = None,
) -> AsyncGenerator[CompletionChunk]:
    """
    Decode a live byte stream into parsed completion chunks.

    Ends quietly on ``[DONE]`` or when the source is exhausted. A malformed
    frame or an oversized line is raised as the terminal item; transport
    failures from the source are raised as ``TransportError``.
    """
    decoder = decoder if decoder is not None else SSEDecoder()

    try:
        async for data in byte_stream:
            for frame in decoder.feed(data):
                if frame.event_type is SSEEventType.COMPLETION:
                    logger.debug("Stream completed", sentinel=DONE_SENTINEL)
                    return
                if frame.event_type is SSEEventType.ERROR:
                    raise frame.error
                yield frame.data
    except httpx.HTTPError as e:
        decoder.finish()
        raise TransportError(f"Stream error: {e}") from e

    decoder.finish()


async def iter_text(
    byte_stream: AsyncIterable[bytes],
    decoder: SSEDecoder | None = None,
) -> AsyncGenerator[str]:
    """Decode a live byte stream into non-empty text fragments."""
    async for chunk in iter_chunks(byte_stream, decoder):
        if content := chunk.content:
            yield content
