"""
Core LLM wire models with pydantic validation.

This module provides the request and response shapes exchanged with an
OpenAI-compatible endpoint:
- Message structures
- Chat completion request/response models
- Streaming chunk models
- Embedding request/response models
- Token usage tracking
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MessageRole(Enum):
    """OpenAI-compatible message roles."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class Message(BaseModel):
    """A single conversation turn. Roles are open-ended strings."""
    model_config = ConfigDict(frozen=True)

    role: str
    content: str

    @field_validator("role", mode="before")
    @classmethod
    def _coerce_role(cls, value: Any) -> Any:
        if isinstance(value, MessageRole):
            return value.value
        return value


class CompletionRequest(BaseModel):
    """Chat completion request body."""
    model: str
    messages: list[Message]
    stream: bool = False
    max_tokens: int
    temperature: float

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class TokenUsage(BaseModel):
    """Token usage statistics."""
    prompt_tokens: int = 0
    completion_tokens: int | None = None
    total_tokens: int = 0


class Choice(BaseModel):
    """One candidate completion in a non-streaming response."""
    message: Message
    finish_reason: str | None = None
    index: int | None = None


class CompletionResponse(BaseModel):
    """Complete non-streaming chat completion response."""
    choices: list[Choice]
    model: str | None = None
    usage: TokenUsage | None = None


class Delta(BaseModel):
    """Incremental piece of a streamed completion."""
    content: str | None = None
    role: str | None = None


class ChunkChoice(BaseModel):
    delta: Delta
    finish_reason: str | None = None


class CompletionChunk(BaseModel):
    """One JSON object received in a ``data:`` frame."""
    choices: list[ChunkChoice]

    @property
    def content(self) -> str | None:
        """Text fragment of the first choice, or None when absent or empty."""
        if not self.choices:
            return None
        return self.choices[0].delta.content or None

    @property
    def finish_reason(self) -> str | None:
        if not self.choices:
            return None
        return self.choices[0].finish_reason


class EmbeddingRequest(BaseModel):
    """Embedding request body."""
    input: list[str]
    model: str
    encoding_format: str = "float"

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class EmbeddingData(BaseModel):
    embedding: list[float]
    index: int


class EmbeddingUsage(BaseModel):
    prompt_tokens: int
    total_tokens: int


class EmbeddingResponse(BaseModel):
    """Embedding vectors tagged with the index of their originating input."""
    data: list[EmbeddingData] = Field(default_factory=list)
    model: str
    usage: EmbeddingUsage

    def vectors(self) -> list[list[float]]:
        """Vectors ordered by their ``index`` tag rather than arrival position."""
        return [item.embedding for item in sorted(self.data, key=lambda d: d.index)]
