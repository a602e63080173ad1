"""bravecli: query the Brave Search API from the shell and print JSON.

Usage:
  bravecli search "rust async runtime" --count 5 --freshness pw
  bravecli summarizer "what is server-sent events"
  bravecli suggest "pyth" --rich

Token lookup (first hit wins):
  search / summarizer: --subscription-token, BRAVE_WEB_SEARCH_DATA_FOR_AI_API_KEY,
                       BRAVE_SUBSCRIPTION_TOKEN
  suggest:             --subscription-token, BRAVE_SUGGEST_API_KEY, BRAVE_SUBSCRIPTION_TOKEN
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Sequence

import httpx
from pydantic import BaseModel

from brave_opus.config import get_config
from brave_opus.config.loader import BraveSettings, Config
from brave_opus.core.errors import BraveOpusError, ConfigurationError
from brave_opus.core.logging_config import setup_logging
from brave_opus.search.client import Auth, BraveClient
from brave_opus.search.params import SuggestSearchParams, WebSearchParams
from brave_opus.search.value_parsers import (
    freshness_value_parser,
    int_range,
    q_value_parser,
    result_filter_value_parser,
)

logger = logging.getLogger(__name__)

LOG_LEVELS = ("error", "warning", "info", "debug")


def _add_web_options(parser: argparse.ArgumentParser, with_summary: bool) -> None:
    parser.add_argument("q", type=q_value_parser, help="Search query (max 400 chars / 50 words)")
    parser.add_argument("--country", help="2-letter country code, e.g. US")
    parser.add_argument("--lang", dest="search_lang", help="Search language, e.g. en")
    parser.add_argument("--ui-lang", help="UI language, e.g. en-US")
    parser.add_argument("--count", type=int_range(1, 20), help="Number of results (1-20)")
    parser.add_argument("--offset", type=int_range(0, 9), help="Page offset (0-9)")
    parser.add_argument("--safesearch", choices=("off", "moderate", "strict"))
    parser.add_argument(
        "--freshness", type=freshness_value_parser, help="pd, pw, pm or YYYY-MM-DDtoYYYY-MM-DD"
    )
    parser.add_argument("--text-decorations", action=argparse.BooleanOptionalAction)
    parser.add_argument("--spellcheck", action=argparse.BooleanOptionalAction)
    parser.add_argument(
        "--result-filter",
        type=result_filter_value_parser,
        help="Comma-separated result types, e.g. web,news",
    )
    parser.add_argument("--goggles-id")
    parser.add_argument("--units", choices=("metric", "imperial"))
    parser.add_argument("--extra-snippets", action=argparse.BooleanOptionalAction)
    if with_summary:
        parser.add_argument("--summary", action=argparse.BooleanOptionalAction)
    parser.add_argument("--version", help="Api-Version header, e.g. 2023-01-01")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bravecli", description="Brave Search API client.")
    parser.add_argument("--subscription-token", help="Brave Search API subscription token")
    parser.add_argument("--log-level", choices=LOG_LEVELS, help="Default: from config")
    parser.add_argument("-v", "--verbose", action="store_true", help="Same as --log-level debug")
    parser.add_argument("--config", help="Path to a YAML config file")
    sub = parser.add_subparsers(dest="command", required=True)

    _add_web_options(sub.add_parser("search", help="Web search"), with_summary=True)
    _add_web_options(sub.add_parser("summarizer", help="Web search + AI summary"), with_summary=False)

    suggest = sub.add_parser("suggest", help="Query suggestions")
    suggest.add_argument("q", type=q_value_parser)
    suggest.add_argument("--version", help="Api-Version header")
    suggest.add_argument("--country")
    suggest.add_argument("--lang")
    suggest.add_argument("--count", type=int_range(1, 20), help="Number of suggestions (1-20)")
    suggest.add_argument("--rich", action=argparse.BooleanOptionalAction)
    return parser


def get_token(explicit: str | None, *candidates: str) -> str:
    """First non-empty value among the flag and the configured keys."""
    for value in (explicit, *candidates):
        if value and value.strip():
            return value.strip()
    raise ConfigurationError("No subscription token found")


def token_for(command: str, explicit: str | None, brave: BraveSettings) -> str:
    if command == "suggest":
        return get_token(explicit, brave.suggest_api_key, brave.subscription_token)
    return get_token(explicit, brave.web_search_data_for_ai_api_key, brave.subscription_token)


def web_search_params(args: argparse.Namespace) -> WebSearchParams:
    return WebSearchParams(
        q=args.q,
        country=args.country,
        search_lang=args.search_lang,
        ui_lang=args.ui_lang,
        count=args.count,
        offset=args.offset,
        safesearch=args.safesearch,
        freshness=args.freshness,
        text_decorations=args.text_decorations,
        spellcheck=args.spellcheck,
        result_filter=args.result_filter,
        goggles_id=args.goggles_id,
        units=args.units,
        extra_snippets=args.extra_snippets,
        summary=getattr(args, "summary", None),
    )


def suggest_params(args: argparse.Namespace) -> SuggestSearchParams:
    return SuggestSearchParams(
        q=args.q, country=args.country, lang=args.lang, count=args.count, rich=args.rich
    )


async def run_command(
    args: argparse.Namespace,
    config: Config,
    http_client: httpx.AsyncClient | None = None,
) -> BaseModel:
    token = token_for(args.command, args.subscription_token, config.brave)
    async with BraveClient(
        Auth(token),
        config.brave.api_url,
        http_client=http_client,
        timeout=config.brave.timeout,
    ) as client:
        if args.command == "suggest":
            return await client.suggest(suggest_params(args), args.version)
        params = web_search_params(args)
        if args.command == "summarizer":
            return await client.summarize(params, args.version)
        return await client.search(params, args.version)


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = get_config(args.config)
    level = "debug" if args.verbose else (args.log_level or config.logging.level)
    setup_logging(level, use_json=config.logging.use_json)
    try:
        response = asyncio.run(run_command(args, config))
    except BraveOpusError as e:
        logger.error("%s", e)
        return 1
    except KeyboardInterrupt:
        logger.error("Interrupted")
        return 1
    sys.stdout.write(response.model_dump_json(indent=2, exclude_none=True) + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
