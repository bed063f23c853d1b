"""
LLM wire models, errors and streaming for OpenAI-compatible APIs.

This package provides:
- Type-safe pydantic request/response models
- A closed error taxonomy with category discriminants
- An incremental SSE decoder for streamed completions
"""

from __future__ import annotations

from .exceptions import (
    ConfigurationError,
    EmptyChoicesError,
    FrameDecodeError,
    FrameTooLongError,
    LLMError,
    ResponseParseError,
    StreamingError,
    TransportError,
)
from .models import (
    Choice,
    ChunkChoice,
    CompletionChunk,
    CompletionRequest,
    CompletionResponse,
    Delta,
    EmbeddingData,
    EmbeddingRequest,
    EmbeddingResponse,
    EmbeddingUsage,
    Message,
    MessageRole,
    TokenUsage,
)
from .streaming import CompletionStream, SSEDecoder, iter_chunks, iter_text

__all__ = [
    # Core models
    "Choice",
    "ChunkChoice",
    "CompletionChunk",
    "CompletionRequest",
    "CompletionResponse",
    # Streaming
    "CompletionStream",
    # Exceptions
    "ConfigurationError",
    "Delta",
    "EmbeddingData",
    "EmbeddingRequest",
    "EmbeddingResponse",
    "EmbeddingUsage",
    "EmptyChoicesError",
    "FrameDecodeError",
    "FrameTooLongError",
    "LLMError",
    "Message",
    "MessageRole",
    "ResponseParseError",
    "SSEDecoder",
    "StreamingError",
    "TokenUsage",
    "TransportError",
    "iter_chunks",
    "iter_text",
]
