"""Render fetched HTML pages to compact, lightly decorated text for LLM extraction.

Links, emphasis and images keep only their text. Strong, strikeout and code
are marked with ``**``, ``~~`` and backticks. Headers, quotes and list items
get markdown-like prefixes. Paragraphs are wrapped to ``width`` columns.
"""

from __future__ import annotations

import re
import textwrap

from bs4 import BeautifulSoup
from bs4.element import Comment, Declaration, Doctype, NavigableString, ProcessingInstruction, Tag

DEFAULT_WIDTH = 200

_DROPPED = frozenset({"script", "style", "noscript", "template", "head", "svg", "iframe", "object"})
_BLOCKS = frozenset(
    {
        "address", "article", "aside", "body", "caption", "center", "dd", "details", "dialog",
        "div", "dl", "dt", "fieldset", "figcaption", "figure", "footer", "form", "header",
        "hgroup", "html", "li", "main", "nav", "p", "section", "summary", "table", "tbody",
        "td", "tfoot", "th", "thead", "tr",
    }
)
_STRUCTURAL = frozenset({"blockquote", "hr", "ol", "pre", "ul"})
_HEADERS = {f"h{n}": n for n in range(1, 7)}
_STRONG = frozenset({"b", "strong"})
_STRIKE = frozenset({"del", "s", "strike"})
_CODE = frozenset({"code", "kbd", "samp", "tt"})
_SKIPPED_STRINGS = (Comment, Declaration, Doctype, ProcessingInstruction)
_SPACES = re.compile(r"\s+")


def _is_block(tag: Tag) -> bool:
    return tag.name in _BLOCKS or tag.name in _STRUCTURAL or tag.name in _HEADERS


def _mark(text: str, marker: str) -> str:
    # markers hug the text; surrounding whitespace stays outside
    core = text.strip()
    lead = text[: len(text) - len(text.lstrip())]
    trail = text[len(text.rstrip()):]
    return f"{lead}{marker}{core}{marker}{trail}"


def _inline(node: object) -> str:
    if isinstance(node, NavigableString):
        if isinstance(node, _SKIPPED_STRINGS):
            return ""
        return _SPACES.sub(" ", str(node))
    if not isinstance(node, Tag) or node.name in _DROPPED or node.name == "img":
        return ""
    if node.name == "br":
        return "\n"
    inner = "".join(_inline(child) for child in node.children)
    if not inner.strip():
        return inner
    if node.name in _STRONG:
        return _mark(inner, "**")
    if node.name in _STRIKE:
        return _mark(inner, "~~")
    if node.name in _CODE:
        return _mark(inner, "`")
    return inner


def _fill(text: str, width: int) -> str:
    lines: list[str] = []
    for raw in text.split("\n"):
        line = _SPACES.sub(" ", raw).strip()
        if line:
            lines.extend(
                textwrap.wrap(line, width=width, break_long_words=False, break_on_hyphens=False)
            )
    return "\n".join(lines)


def _prefix_lines(text: str, first: str, rest: str | None = None) -> str:
    lines = text.split("\n")
    rest = first if rest is None else rest
    return "\n".join([first + lines[0]] + [rest + line for line in lines[1:]])


def _list_start(tag: Tag) -> int:
    try:
        return int(tag.get("start", 1))
    except (TypeError, ValueError):
        return 1


def _list_block(tag: Tag, width: int) -> list[str]:
    number = _list_start(tag)
    items: list[str] = []
    for item in tag.find_all("li", recursive=False):
        prefix = f"{number}. " if tag.name == "ol" else "- "
        number += 1
        body = "\n".join(_blocks(item, max(width - len(prefix), 1)))
        if body:
            items.append(_prefix_lines(body, prefix, " " * len(prefix)))
    return ["\n".join(items)] if items else []


def _block(tag: Tag, width: int) -> list[str]:
    if tag.name in _HEADERS:
        text = _SPACES.sub(" ", _inline(tag)).strip()
        return [f"{'#' * _HEADERS[tag.name]} {text}"] if text else []
    if tag.name == "pre":
        text = tag.get_text().strip("\n")
        return [text] if text.strip() else []
    if tag.name == "blockquote":
        return [_prefix_lines(b, "> ") for b in _blocks(tag, max(width - 2, 1))]
    if tag.name in ("ul", "ol"):
        return _list_block(tag, width)
    if tag.name == "hr":
        return []
    return _blocks(tag, width)


def _blocks(node: Tag, width: int) -> list[str]:
    """Rendered blocks for the children of ``node``; inline runs become paragraphs."""
    out: list[str] = []
    pending: list[str] = []

    def flush() -> None:
        text = _fill("".join(pending), width)
        pending.clear()
        if text:
            out.append(text)

    for child in node.children:
        if isinstance(child, Tag) and child.name not in _DROPPED and _is_block(child):
            flush()
            out.extend(_block(child, width))
        else:
            pending.append(_inline(child))
    flush()
    return out


def html_to_text(html: str | bytes, width: int = DEFAULT_WIDTH) -> str:
    soup = BeautifulSoup(html, "html.parser")
    return "\n\n".join(_blocks(soup, width))
