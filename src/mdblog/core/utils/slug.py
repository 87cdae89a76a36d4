"""Slug helpers for post file names and heading anchors"""

import re


HEADING_FALLBACK = "section"


def slugify(text: str) -> str:
    """Lowercase, drop punctuation, and join words with single hyphens."""
    text = text.strip().lower()
    text = re.sub(r'[^\w\s-]', '', text)
    text = re.sub(r'[\s_]+', '-', text)
    return re.sub(r'-+', '-', text).strip('-')


def heading_slug(text: str) -> str:
    """Slug used as a heading id; never empty so every heading stays linkable."""
    return slugify(text) or HEADING_FALLBACK
