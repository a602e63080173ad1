"""Entry point for brave-opus: stream Claude answers, optionally grounded on Brave web results."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from contextlib import AsyncExitStack, aclosing
from typing import Sequence, TextIO

import httpx

from brave_opus.config import get_config
from brave_opus.config.loader import Config
from brave_opus.core.errors import BraveOpusError
from brave_opus.core.logging_config import setup_logging
from brave_opus.models import anthropic_api
from brave_opus.models.anthropic_api import AnthropicClient
from brave_opus.models.messages import Message, MessageBody, Role
from brave_opus.models.streaming import write_deltas
from brave_opus.rag.pipeline import RagPipeline
from brave_opus.search import client as brave_api
from brave_opus.search.client import BraveClient
from brave_opus.search.value_parsers import int_range

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="brave-opus",
        description="Run Anthropic Claude's LLM with RAG taken from Brave's API",
    )
    parser.add_argument("-a", "--anthropic-api-key", help="Anthropic API key [env: ANTHROPIC_API_KEY]")
    parser.add_argument(
        "-b",
        "--brave-api-key",
        help="Brave API key [env: BRAVE_API_KEY, BRAVE_SUBSCRIPTION_TOKEN]",
    )
    parser.add_argument("--log-level", choices=("error", "warning", "info", "debug"))
    parser.add_argument("--config", help="Path to a YAML config file")
    sub = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("stream", "Stream the answer text to stdout"),
        ("events", "Print every decoded stream event as a JSON line"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("prompt")
        cmd.add_argument("--model", help="Default: anthropic.model from config")
        cmd.add_argument("--max-tokens", type=int_range(1, 1_000_000))
        cmd.add_argument("--system", help="System prompt")

    run = sub.add_parser("run", help="Run Anthropic Claude 3 using Brave's API as RAG")
    run.add_argument("prompt", help="Prompt to execute")
    run.add_argument("--count", type=int_range(1, 20), help="Results per search query")
    return parser


def anthropic_client(
    args: argparse.Namespace, config: Config, http_client: httpx.AsyncClient
) -> AnthropicClient:
    auth = anthropic_api.Auth(
        api_key=args.anthropic_api_key or config.anthropic.api_key,
        version=config.anthropic.api_version,
    )
    return AnthropicClient(
        auth,
        config.anthropic.api_url,
        http_client=http_client,
        reconnect=config.stream.policy(),
    )


def brave_client(
    args: argparse.Namespace, config: Config, http_client: httpx.AsyncClient
) -> BraveClient:
    token = (
        args.brave_api_key
        or os.getenv("BRAVE_API_KEY", "")
        or config.brave.subscription_token
    )
    return BraveClient(brave_api.Auth(token), config.brave.api_url, http_client=http_client)


def message_body(args: argparse.Namespace, config: Config) -> MessageBody:
    body = MessageBody.with_stream(
        args.model or config.anthropic.model,
        [Message(role=Role.USER, content=args.prompt)],
        args.max_tokens or config.anthropic.max_tokens,
    )
    if args.system:
        body = body.model_copy(update={"system": args.system})
    return body


async def print_events(client: AnthropicClient, body: MessageBody, out: TextIO) -> None:
    async with aclosing(client.message_stream(body)) as events:
        async for event in events:
            out.write(event.model_dump_json(exclude_none=True) + "\n")
            out.flush()


async def run_command(
    args: argparse.Namespace,
    config: Config,
    out: TextIO,
    http_client: httpx.AsyncClient | None = None,
) -> None:
    async with AsyncExitStack() as stack:
        if http_client is None:
            http_client = await stack.enter_async_context(
                httpx.AsyncClient(timeout=httpx.Timeout(config.anthropic.timeout))
            )
        anthropic = anthropic_client(args, config, http_client)
        if args.command == "stream":
            await write_deltas(anthropic.message_delta_stream(message_body(args, config)), out)
            out.write("\n")
        elif args.command == "events":
            await print_events(anthropic, message_body(args, config), out)
        else:
            pipeline = RagPipeline(
                anthropic,
                brave_client(args, config, http_client),
                http_client,
                query_model=config.anthropic.model,
                answer_model=config.anthropic.answer_model,
                max_tokens=config.anthropic.max_tokens,
                settings=config.rag,
                out=out,
            )
            await pipeline.run(args.prompt, args.count)


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = get_config(args.config)
    setup_logging(args.log_level or config.logging.level, use_json=config.logging.use_json)
    logger.debug("Running command %s", args.command)
    try:
        asyncio.run(run_command(args, config, sys.stdout))
    except BraveOpusError as e:
        logger.error("%s", e)
        return 1
    except KeyboardInterrupt:
        logger.error("Ctrl-C received, stopping the program")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
