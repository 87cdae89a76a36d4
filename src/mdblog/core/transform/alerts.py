"""Alert blocks: `> [!TIP]` quoted blocks rewritten into titled callouts"""

import re

from markdown_it import MarkdownIt
from markdown_it.rules_core import StateCore
from markdown_it.token import Token


ALERT_TYPES = ("NOTE", "TIP", "IMPORTANT", "WARNING", "CAUTION", "QUOTE")
ALERT_RE = re.compile(r'^\[!(' + '|'.join(ALERT_TYPES) + r')\]\s*', re.IGNORECASE)


def _closing_index(tokens: list[Token], start: int) -> int:
    """Index of the blockquote_close matching the blockquote_open at start."""
    level = tokens[start].level
    for j in range(start + 1, len(tokens)):
        if tokens[j].type == "blockquote_close" and tokens[j].level == level:
            return j
    raise ValueError(f"Unbalanced blockquote at token {start}")


def _strip_marker(tokens: list[Token], start: int) -> str | None:
    """Remove a recognized marker from the quote's first text run; return the alert type.

    The quote must open with a paragraph whose first inline child is text.
    An emptied text child is dropped along with the line break after it, and an
    emptied paragraph is removed entirely.
    """
    if start + 2 >= len(tokens):
        return None
    para, inline = tokens[start + 1], tokens[start + 2]
    if para.type != "paragraph_open" or inline.type != "inline" or not inline.children:
        return None
    first = inline.children[0]
    m = ALERT_RE.match(first.content) if first.type == "text" else None
    if not m:
        return None

    first.content = first.content[m.end():]
    inline.content = ALERT_RE.sub("", inline.content, count=1)
    children = inline.children
    if not first.content:
        children.pop(0)
        if children and children[0].type in ("softbreak", "hardbreak"):
            children.pop(0)
    if not children:
        del tokens[start + 1:start + 4]   # paragraph_open, inline, paragraph_close
    return m.group(1).lower()


def _title_tokens(alert_type: str, level: int) -> list[Token]:
    title_open = Token("alert_title_open", "div", 1, level=level + 1, block=True)
    title_open.attrSet("class", "github-alert-title")
    title_open.attrSet("data-alert-icon", alert_type)
    label = alert_type.capitalize()
    inline = Token(
        "inline", "", 0, level=level + 2, content=label,
        children=[Token("text", "", 0, content=label)],
    )
    title_close = Token("alert_title_close", "div", -1, level=level + 1, block=True)
    return [title_open, inline, title_close]


def alert_rule(state: StateCore) -> None:
    """Core rule turning marked blockquotes into alert containers."""
    tokens = state.tokens
    i = 0
    while i < len(tokens):
        if tokens[i].type != "blockquote_open":
            i += 1
            continue
        alert_type = _strip_marker(tokens, i)
        if alert_type is None:
            i += 1
            continue

        end = _closing_index(tokens, i)
        opener, closer = tokens[i], tokens[end]
        level = opener.level

        opener.type, opener.tag, opener.markup = "alert_open", "div", ""
        opener.attrs = {}
        opener.attrSet("class", f"github-alert github-alert-{alert_type}")
        opener.attrSet("data-alert-type", alert_type)
        closer.type, closer.tag, closer.markup = "alert_close", "div", ""

        content_open = Token("alert_content_open", "div", 1, level=level + 1, block=True)
        content_open.attrSet("class", "github-alert-content")
        content_close = Token("alert_content_close", "div", -1, level=level + 1, block=True)

        tokens[end:end] = [content_close]
        tokens[i + 1:i + 1] = _title_tokens(alert_type, level) + [content_open]
        i += 1


def alerts_plugin(md: MarkdownIt) -> None:
    md.core.ruler.push("blog_alerts", alert_rule)
