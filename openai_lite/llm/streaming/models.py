"""
Streaming-specific dataclasses for the SSE decoder.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum

from ..exceptions import StreamingError
from ..models import CompletionChunk


class SSEEventType(Enum):
    """Server-Sent Event types."""
    CHUNK = "chunk"
    COMPLETION = "completion"
    ERROR = "error"


@dataclass(frozen=True)
class RawSSEChunk:
    """One decoded ``data:`` frame."""
    event_type: SSEEventType
    data: CompletionChunk | None
    raw_data: str
    error: StreamingError | None = None
    timestamp: float = field(default_factory=time.time)


@dataclass
class AccumulatorState:
    """Mutable state for fragment accumulation with timing."""
    content_buffer: list[str] = field(default_factory=list)
    finish_reason: str | None = None
    chunk_count: int = 0
    fragment_count: int = 0
    first_chunk_time: float | None = None
    last_chunk_time: float | None = None

    def update_timing(self, timestamp: float) -> None:
        """Update timing information for latency tracking."""
        if self.first_chunk_time is None:
            self.first_chunk_time = timestamp
        self.last_chunk_time = timestamp
        self.chunk_count += 1

    @property
    def content(self) -> str:
        return "".join(self.content_buffer)

    @property
    def streaming_duration(self) -> float:
        """Calculate total streaming duration."""
        if self.first_chunk_time is None or self.last_chunk_time is None:
            return 0.0
        return self.last_chunk_time - self.first_chunk_time


@dataclass(frozen=True)
class StreamingStats:
    """Statistics for a finished or in-flight stream."""
    total_chunks: int
    content_chunks: int
    total_duration: float
    characters: int
    finish_reason: str | None
