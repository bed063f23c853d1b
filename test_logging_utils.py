#!/usr/bin/env python3
"""
Test script for logging utilities.

This validates that operations are logged and that errors always propagate.
"""

import logging

import httpx
import pytest
from pydantic import ValidationError

from openai_lite.llm.exceptions import (
    EmptyChoicesError,
    FrameDecodeError,
    FrameTooLongError,
    TransportError,
)
from openai_lite.llm.models import CompletionChunk
from openai_lite.logging_utils import (
    classify_error,
    log_operation,
    operation_context,
    setup_logging,
)


class TestClassifyError:
    """Test error classification."""

    def test_client_errors_use_their_category(self):
        assert classify_error(TransportError("down")) == "transport"
        assert classify_error(EmptyChoicesError("none")) == "empty_result"
        assert classify_error(FrameDecodeError("bad", payload="{")) == "frame_decode"
        assert classify_error(FrameTooLongError("big", max_frame_bytes=1)) == "frame_too_long"

    def test_classify_httpx_error(self):
        assert classify_error(httpx.ReadTimeout("slow")) == "transport"

    def test_classify_validation_error(self):
        with pytest.raises(ValidationError) as exc_info:
            CompletionChunk.model_validate_json("{}")
        assert classify_error(exc_info.value) == "parse"

    def test_classify_timeout_error(self):
        assert classify_error(TimeoutError("Connection timed out")) == "timeout"

    def test_classify_connection_error(self):
        assert classify_error(ConnectionError("Network unreachable")) == "connection"
        assert classify_error(OSError("Network unreachable")) == "connection"

    def test_classify_unknown_error(self):
        assert classify_error(RuntimeError("Unknown error")) == "unknown"


class TestDecorators:
    """Test logging decorators and context managers."""

    @pytest.mark.asyncio
    async def test_log_operation_success(self):
        @log_operation("test_operation", log_result=True)
        async def successful_function():
            return "success"

        assert await successful_function() == "success"

    @pytest.mark.asyncio
    async def test_log_operation_reraises(self):
        @log_operation("test_operation")
        async def failing_function():
            raise TransportError("Test error")

        with pytest.raises(TransportError, match="Test error"):
            await failing_function()

    @pytest.mark.asyncio
    async def test_log_operation_preserves_name(self):
        @log_operation("test_operation")
        async def named_function():
            return None

        assert named_function.__name__ == "named_function"

    @pytest.mark.asyncio
    async def test_operation_context_success(self):
        async with operation_context("test_operation", context={"model": "m"}) as op_logger:
            assert op_logger is not None

    @pytest.mark.asyncio
    async def test_operation_context_reraises(self):
        with pytest.raises(ValueError, match="boom"):
            async with operation_context("test_operation"):
                raise ValueError("boom")


def test_setup_logging_sets_level():
    setup_logging("debug")
    assert logging.getLogger("openai_lite").level == logging.DEBUG
    setup_logging(logging.WARNING)
    assert logging.getLogger("openai_lite").level == logging.WARNING


def test_setup_logging_rejects_unknown_level():
    with pytest.raises(ValueError, match="Unknown log level"):
        setup_logging("chatty")
