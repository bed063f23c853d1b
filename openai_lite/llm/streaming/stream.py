"""
Caller-facing handle over a streamed chat completion.
"""

from __future__ import annotations

import time
from collections.abc import AsyncGenerator

from ..models import CompletionChunk
from .models import AccumulatorState, StreamingStats


class CompletionStream:
    """
    Lazy, single-pass sequence of text fragments.

    Nothing is sent until the first fragment is pulled. Fragments are yielded
    in arrival order and also accumulated, so ``content`` always equals the
    concatenation of what has been emitted so far. Terminal failures are
    raised from ``__anext__`` after all earlier fragments were delivered.
    """

    def __init__(
        self,
        chunks: AsyncGenerator[CompletionChunk],
        model: str | None = None,
    ):
        self._chunks = chunks
        self.model = model
        self.state = AccumulatorState()

    @property
    def content(self) -> str:
        return self.state.content

    @property
    def finish_reason(self) -> str | None:
        return self.state.finish_reason

    @property
    def chunk_count(self) -> int:
        return self.state.chunk_count

    def __aiter__(self) -> CompletionStream:
        return self

    async def __anext__(self) -> str:
        while True:
            chunk = await anext(self._chunks)
            self.state.update_timing(time.time())

            if finish_reason := chunk.finish_reason:
                self.state.finish_reason = finish_reason

            if content := chunk.content:
                self.state.content_buffer.append(content)
                self.state.fragment_count += 1
                return content

    async def collect(self) -> str:
        """Drain the remaining fragments and return the full text."""
        async for _ in self:
            pass
        return self.content

    async def aclose(self) -> None:
        """Stop consuming and release the underlying connection."""
        await self._chunks.aclose()

    async def __aenter__(self) -> CompletionStream:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    def stats(self) -> StreamingStats:
        """Statistics for the fragments consumed so far."""
        return StreamingStats(
            total_chunks=self.state.chunk_count,
            content_chunks=self.state.fragment_count,
            total_duration=self.state.streaming_duration,
            characters=len(self.content),
            finish_reason=self.state.finish_reason,
        )
