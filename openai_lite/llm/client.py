"""
HTTP client for OpenAI-compatible chat completion and embedding endpoints.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Sequence
from contextlib import aclosing
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ..config import DEFAULT_BASE_URL, Configuration
from ..logging_utils import log_operation, operation_context
from .exceptions import (
    ConfigurationError,
    EmptyChoicesError,
    ResponseParseError,
    TransportError,
)
from .models import (
    CompletionChunk,
    CompletionRequest,
    CompletionResponse,
    EmbeddingRequest,
    EmbeddingResponse,
    Message,
)
from .streaming.parser import DEFAULT_MAX_FRAME_BYTES, SSEDecoder, iter_chunks
from .streaming.stream import CompletionStream

DEFAULT_TIMEOUT = httpx.Timeout(60.0, connect=10.0)
EMBEDDING_ENCODING_FORMAT = "float"

ResponseT = TypeVar("ResponseT", bound=BaseModel)
RequestT = TypeVar("RequestT", bound=BaseModel)
MessageInput = Message | dict[str, Any]


class OpenAIClient:
    """
    Client for chat completions, streamed completions and embeddings.

    The API key and base URL are fixed at construction and shared read-only
    by every call; each call issues its own request over a pooled
    ``httpx.AsyncClient``. Failures are raised once, never retried.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        *,
        timeout: httpx.Timeout | float = DEFAULT_TIMEOUT,
        max_frame_bytes: int | None = DEFAULT_MAX_FRAME_BYTES,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not api_key:
            raise ConfigurationError("An API key is required")
        if max_frame_bytes is not None and max_frame_bytes < 1:
            raise ConfigurationError("max_frame_bytes must be a positive integer or None")

        self.api_key: str = api_key
        self.base_url: str = self._normalize_base_url(base_url or DEFAULT_BASE_URL)
        self.max_frame_bytes = max_frame_bytes
        self.client: httpx.AsyncClient = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_configuration(
        cls,
        configuration: Configuration,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> OpenAIClient:
        """Build a client from YAML settings and the environment API key."""
        llm_config = configuration.get_llm_config()
        http_config = configuration.get_http_client_config()
        streaming_config = configuration.get_streaming_config()

        timeout = httpx.Timeout(
            connect=http_config["connect_timeout"],
            read=http_config["read_timeout"],
            write=http_config["write_timeout"],
            pool=http_config["pool_timeout"],
        )
        return cls(
            configuration.llm_api_key,
            llm_config["base_url"],
            timeout=timeout,
            max_frame_bytes=streaming_config.get(
                "max_frame_bytes", DEFAULT_MAX_FRAME_BYTES
            ),
            transport=transport,
        )

    @staticmethod
    def _normalize_base_url(base_url: str) -> str:
        if not base_url.endswith("/"):
            base_url += "/"
        return base_url

    @log_operation("chat.complete")
    async def complete(
        self,
        model: str,
        messages: Sequence[MessageInput],
        max_tokens: int,
        temperature: float,
    ) -> str:
        """Return the text of the first choice of a non-streaming completion."""
        completion = await self._request_completion(
            model, messages, max_tokens, temperature
        )
        if not completion.choices:
            raise EmptyChoicesError("No completion choices returned", model=model)
        return completion.choices[0].message.content

    @log_operation("chat.create_completion")
    async def create_completion(
        self,
        model: str,
        messages: Sequence[MessageInput],
        max_tokens: int,
        temperature: float,
    ) -> CompletionResponse:
        """Return the full non-streaming completion body, choices unchecked."""
        return await self._request_completion(model, messages, max_tokens, temperature)

    def stream_complete(
        self,
        model: str,
        messages: Sequence[MessageInput],
        max_tokens: int,
        temperature: float,
    ) -> CompletionStream:
        """
        Start a streamed completion.

        Returns immediately; the request is sent when the first fragment is
        pulled from the returned stream.
        Invalid messages raise ``ConfigurationError`` here, before any I/O.
        """
        request = self._build_request(
            CompletionRequest,
            model=model,
            messages=list(messages),
            stream=True,
            max_tokens=max_tokens,
            temperature=temperature,
        )
        return CompletionStream(self._stream_chunks(request), model=model)

    @log_operation("embeddings.create")
    async def embed(self, inputs: Sequence[str], model: str) -> EmbeddingResponse:
        """Embed each input string; the response keeps input cardinality."""
        request = self._build_request(
            EmbeddingRequest,
            input=list(inputs),
            model=model,
            encoding_format=EMBEDDING_ENCODING_FORMAT,
        )
        content = await self._post_json("embeddings", request.to_payload(), model)
        return self._parse_response(EmbeddingResponse, content, model)

    async def _request_completion(
        self,
        model: str,
        messages: Sequence[MessageInput],
        max_tokens: int,
        temperature: float,
    ) -> CompletionResponse:
        request = self._build_request(
            CompletionRequest,
            model=model,
            messages=list(messages),
            stream=False,
            max_tokens=max_tokens,
            temperature=temperature,
        )
        content = await self._post_json("chat/completions", request.to_payload(), model)
        return self._parse_response(CompletionResponse, content, model)

    @staticmethod
    def _build_request(request_type: type[RequestT], **fields: Any) -> RequestT:
        try:
            return request_type(**fields)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid {request_type.__name__}: {e}", model=fields.get("model")
            ) from e

    async def _post_json(self, path: str, payload: dict[str, Any], model: str) -> bytes:
        try:
            response = await self.client.post(path, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportError(
                f"API error {e.response.status_code} from {path}",
                model=model,
                status_code=e.response.status_code,
                response_data=e.response.text,
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"HTTP error: {e!s}", model=model) from e
        return response.content

    @staticmethod
    def _parse_response(
        response_type: type[ResponseT], content: bytes, model: str
    ) -> ResponseT:
        try:
            return response_type.model_validate_json(content)
        except ValidationError as e:
            raise ResponseParseError(
                f"Unexpected response format: {e}",
                model=model,
                response_data=content.decode("utf-8", errors="replace"),
            ) from e

    async def _stream_chunks(
        self, request: CompletionRequest
    ) -> AsyncGenerator[CompletionChunk]:
        async with operation_context("chat.stream", context={"model": request.model}):
            try:
                async with self.client.stream(
                    "POST", "chat/completions", json=request.to_payload()
                ) as response:
                    if response.is_error:
                        error_text = await response.aread()
                        raise TransportError(
                            f"Streaming API error {response.status_code}",
                            model=request.model,
                            status_code=response.status_code,
                            response_data=error_text.decode("utf-8", errors="replace"),
                        )

                    decoder = SSEDecoder(self.max_frame_bytes)
                    async with aclosing(
                        iter_chunks(response.aiter_bytes(), decoder)
                    ) as chunks:
                        async for chunk in chunks:
                            yield chunk
            except httpx.HTTPError as e:
                raise TransportError(f"HTTP error: {e!s}", model=request.model) from e

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> OpenAIClient:
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()
