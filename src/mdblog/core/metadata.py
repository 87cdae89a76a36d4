"""Derived post metadata: front-matter fallbacks, reading time, dates, and ordering"""

import math
from datetime import date, datetime, timezone
from typing import Any, NamedTuple

from bs4 import BeautifulSoup
from dateutil import parser as date_parser

from mdblog.core.models import Post


DEFAULT_TITLE = "Untitled"
DEFAULT_AUTHOR = "Unknown Author"
DEFAULT_IMAGE = "https://images.unsplash.com/photo-1518186285589-2f7649de83e0?w=800&h=600&fit=crop&crop=center"
DEFAULT_CATEGORY = "General"

# Fills fields a partial date leaves out, e.g. "2024" -> 2024-01-01.
_DATE_DEFAULT = datetime(2000, 1, 1)


class PostDate(NamedTuple):
    """Authored date: display value, sort key, and whether one was given at all."""
    display:   str | None
    published: datetime | None
    present:   bool


def count_words(markup: str) -> int:
    text = BeautifulSoup(markup, "html.parser").get_text(" ")
    return len(text.split())


def format_read_time(minutes: int) -> str:
    return "1 min read" if minutes == 1 else f"{minutes} min read"


def reading_time(markup: str, words_per_minute: int = 225) -> str:
    """ceil(words / wpm), never less than one minute."""
    minutes = max(1, math.ceil(count_words(markup) / words_per_minute))
    return format_read_time(minutes)


def normalize_tags(value: Any) -> list[str]:
    """Tags as a list of strings; a comma-separated string is split."""
    if isinstance(value, str):
        return [t.strip() for t in value.split(",") if t.strip()]
    if isinstance(value, (list, tuple)):
        return [str(t).strip() for t in value if t is not None and str(t).strip()]
    return []


def resolve_category(category: Any, tags: list[str], fallback: str = DEFAULT_CATEGORY) -> str:
    if category:
        return str(category)
    return tags[0] if tags else fallback


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def parse_post_date(value: Any) -> PostDate:
    """Interpret a front-matter date.

    YAML may already have produced a date or datetime; strings go through
    dateutil. Anything unparseable keeps present=True with no sort key.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return PostDate(None, None, False)
    if isinstance(value, datetime):
        return PostDate(value.isoformat(), _aware(value), True)
    if isinstance(value, date):
        return PostDate(value.isoformat(), datetime(value.year, value.month, value.day, tzinfo=timezone.utc), True)
    if not isinstance(value, str):
        return PostDate(None, None, True)
    try:
        parsed = date_parser.parse(value, default=_DATE_DEFAULT)
    except (ValueError, OverflowError):
        return PostDate(None, None, True)
    return PostDate(value.strip(), _aware(parsed), True)


def order_posts(posts: list[Post]) -> list[Post]:
    """Newest first; undated posts follow in their original order."""
    dated = [p for p in posts if p.published is not None]
    undated = [p for p in posts if p.published is None]
    return sorted(dated, key=lambda p: p.published, reverse=True) + undated
