"""
Streaming support for chat completions.

This package contains:
- SSE line reassembly and frame decoding
- Chunk parsing into typed deltas
- The caller-facing CompletionStream handle
"""

from __future__ import annotations

from .models import RawSSEChunk, SSEEventType, StreamingStats
from .parser import (
    DATA_PREFIX,
    DEFAULT_MAX_FRAME_BYTES,
    DONE_SENTINEL,
    SSEDecoder,
    iter_chunks,
    iter_text,
)
from .stream import CompletionStream

__all__ = [
    "DATA_PREFIX",
    "DEFAULT_MAX_FRAME_BYTES",
    "DONE_SENTINEL",
    "CompletionStream",
    "RawSSEChunk",
    "SSEDecoder",
    "SSEEventType",
    "StreamingStats",
    "iter_chunks",
    "iter_text",
]
