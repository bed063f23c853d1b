"""
Command-line entry point: send one prompt and print the reply.

    python -m openai_lite "Write a haiku about rivers" --stream
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Sequence
from typing import TextIO

import httpx
import structlog

from .config import Configuration
from .llm.client import OpenAIClient
from .llm.exceptions import ConfigurationError, LLMError
from .llm.models import Message, MessageRole
from .logging_utils import setup_logging

logger = structlog.get_logger(__name__)

DEFAULT_MAX_TOKENS = 1024
DEFAULT_TEMPERATURE = 1.0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="openai_lite", description=__doc__)
    parser.add_argument("prompt", help="User message to send")
    parser.add_argument("--system", help="Optional system message")
    parser.add_argument("--model", help="Model identifier (defaults to config)")
    parser.add_argument("--max-tokens", type=int, help="Output token budget")
    parser.add_argument("--temperature", type=float, help="Sampling temperature")
    parser.add_argument("--stream", action="store_true", help="Print fragments as they arrive")
    parser.add_argument("--config", help="Path to an alternative config.yaml")
    return parser


async def run(
    args: argparse.Namespace,
    configuration: Configuration,
    out: TextIO = sys.stdout,
    transport: httpx.AsyncBaseTransport | None = None,
) -> None:
    """Send the prompt described by ``args`` and write the reply to ``out``."""
    llm_config = configuration.get_llm_config()
    model = args.model or llm_config.get("model")
    if not model:
        raise ConfigurationError("No model given on the command line or in llm.model")
    max_tokens = args.max_tokens
    if max_tokens is None:
        max_tokens = llm_config.get("max_tokens", DEFAULT_MAX_TOKENS)
    temperature = args.temperature
    if temperature is None:
        temperature = llm_config.get("temperature", DEFAULT_TEMPERATURE)

    messages = []
    if args.system:
        messages.append(Message(role=MessageRole.SYSTEM, content=args.system))
    messages.append(Message(role=MessageRole.USER, content=args.prompt))

    async with OpenAIClient.from_configuration(configuration, transport) as client:
        if args.stream:
            async with client.stream_complete(
                model, messages, max_tokens, temperature
            ) as stream:
                async for fragment in stream:
                    out.write(fragment)
                    out.flush()
            out.write("\n")
            logger.debug(
                "Stream finished",
                finish_reason=stream.finish_reason,
                chunks=stream.chunk_count,
            )
        else:
            out.write(await client.complete(model, messages, max_tokens, temperature))
            out.write("\n")


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        configuration = Configuration(args.config)
        setup_logging(configuration.get_logging_config().get("level", "INFO"))
        asyncio.run(run(args, configuration))
    except LLMError as e:
        print(f"error ({e.category}): {e.message}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
