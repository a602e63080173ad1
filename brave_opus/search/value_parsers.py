"""argparse ``type=`` callables validating Brave query options."""

from __future__ import annotations

import argparse
import re
from typing import Callable

MAX_QUERY_CHARS = 400
MAX_QUERY_WORDS = 50
RESULT_FILTERS = ("discussions", "faq", "infobox", "news", "query", "summarizer", "videos", "web")
_FRESHNESS_RANGE = re.compile(r"^\d{4}-\d{2}-\d{2}to\d{4}-\d{2}-\d{2}$")


def q_value_parser(q: str) -> str:
    if len(q) > MAX_QUERY_CHARS:
        raise argparse.ArgumentTypeError(
            f"Query term is too long. Maximum {MAX_QUERY_CHARS} characters allowed"
        )
    if len(q.split()) > MAX_QUERY_WORDS:
        raise argparse.ArgumentTypeError(
            f"Query term is too long. Maximum {MAX_QUERY_WORDS} words allowed"
        )
    return q


def result_filter_value_parser(result_filter: str) -> str:
    for value in result_filter.split(","):
        if value not in RESULT_FILTERS:
            raise argparse.ArgumentTypeError(
                "Invalid result filter value. It should be a comma-separated list of these "
                f"values: {', '.join(RESULT_FILTERS)}"
            )
    return result_filter


def freshness_value_parser(freshness: str) -> str:
    if freshness in ("pd", "pw", "pm") or _FRESHNESS_RANGE.match(freshness):
        return freshness
    raise argparse.ArgumentTypeError(
        "Invalid freshness value. Must be 'pd', 'pw', 'pm' or 'YYYY-MM-DDtoYYYY-MM-DD'"
    )


def int_range(low: int, high: int) -> Callable[[str], int]:
    """Parser for an integer in ``[low, high]`` (inclusive)."""

    def parse(value: str) -> int:
        try:
            number = int(value)
        except ValueError:
            raise argparse.ArgumentTypeError(f"{value!r} is not an integer") from None
        if not low <= number <= high:
            raise argparse.ArgumentTypeError(f"{number} is not in {low}..={high}")
        return number

    parse.__name__ = f"int[{low}..={high}]"
    return parse
