"""Async client for OpenAI-compatible completion and embedding APIs."""

from __future__ import annotations

from .config import Configuration
from .llm import (
    CompletionStream,
    ConfigurationError,
    EmbeddingResponse,
    EmptyChoicesError,
    FrameDecodeError,
    FrameTooLongError,
    LLMError,
    Message,
    MessageRole,
    ResponseParseError,
    StreamingError,
    TransportError,
)
from .llm.client import OpenAIClient
from .logging_utils import setup_logging

__all__ = [
    "CompletionStream",
    "Configuration",
    "ConfigurationError",
    "EmbeddingResponse",
    "EmptyChoicesError",
    "FrameDecodeError",
    "FrameTooLongError",
    "LLMError",
    "Message",
    "MessageRole",
    "OpenAIClient",
    "ResponseParseError",
    "StreamingError",
    "TransportError",
    "setup_logging",
]
