"""
Error handling for LLM operations.

Every failure surfaced by the client is an ``LLMError`` subclass carrying a
``category`` discriminant, so callers can branch on the kind of failure
without inspecting message strings:

- ``TransportError``: connection, DNS, timeout or HTTP status failures
- ``ResponseParseError``: body does not match the expected JSON schema
- ``EmptyChoicesError``: well-formed completion with zero choices
- ``FrameDecodeError`` / ``FrameTooLongError``: terminal streaming failures
- ``ConfigurationError``: missing API key or invalid settings
"""

from __future__ import annotations

from typing import Any


class LLMError(Exception):
    """Base LLM error with rich context."""

    category = "unknown"

    def __init__(
        self,
        message: str,
        model: str | None = None,
        status_code: int | None = None,
        response_data: dict[str, Any] | str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.model = model
        self.status_code = status_code
        self.response_data = response_data if response_data is not None else {}


class TransportError(LLMError):
    """Connection, timeout or HTTP-layer failure."""

    category = "transport"


class ResponseParseError(LLMError):
    """Response body does not deserialize into the expected schema."""

    category = "parse"


class EmptyChoicesError(LLMError):
    """Completion response contained no choices."""

    category = "empty_result"


class StreamingError(LLMError):
    """Streaming-specific errors."""

    category = "streaming"

    def __init__(self, message: str, model: str | None = None, **kwargs: Any):
        super().__init__(message, model, **kwargs)


class FrameDecodeError(StreamingError):
    """A ``data:`` frame carried a payload that is not a valid chunk."""

    category = "frame_decode"

    def __init__(self, message: str, payload: str = "", **kwargs: Any):
        super().__init__(message, **kwargs)
        self.payload = payload


class FrameTooLongError(StreamingError):
    """An unterminated line outgrew the configured frame limit."""

    category = "frame_too_long"

    def __init__(self, message: str, max_frame_bytes: int, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.max_frame_bytes = max_frame_bytes


class ConfigurationError(LLMError, ValueError):
    """Missing credentials or invalid configuration values."""

    category = "configuration"
