"""Shared fixtures for runtime tests: a built article mounted in a page shell"""

import pytest

from mdblog.core.sanitize import sanitize_article
from mdblog.core.transform.stages import make_parser, render_markup
from mdblog.runtime.page import Page
from mdblog.runtime.platform import MemoryClipboard


ARTICLE_MD = """\
## Overview

> [!NOTE]
> Read this first.

> [!QUOTE]
> Quoted.

### Details

```python
answer = 42
```

```mermaid
graph TD; A-->B
```

> [!WARNING]
> Careful.

## Wrap-up
"""


def build_article(text: str) -> str:
    md = make_parser()
    env = {}
    return sanitize_article(render_markup(md, md.parse(text, env), env))


def page_shell(content: str, toc: str = "") -> str:
    return (
        '<html><body>'
        f'<aside>{toc}</aside>'
        f'<article class="blog-content">{content}</article>'
        '</body></html>'
    )


@pytest.fixture(name="article")
def article_fixture() -> str:
    return build_article(ARTICLE_MD)


@pytest.fixture(name="clipboard")
def clipboard_fixture() -> MemoryClipboard:
    return MemoryClipboard()


@pytest.fixture(name="page")
def page_fixture(article, clipboard) -> Page:
    return Page(page_shell(article), clipboard=clipboard)


@pytest.fixture(name="make_page")
def make_page_fixture(clipboard):
    """Page over arbitrary markdown (or prebuilt markup) with an optional toc panel."""
    def _make(text: str = None, *, markup: str = None, toc: str = "", **kwargs) -> Page:
        content = markup if markup is not None else build_article(text)
        kwargs.setdefault("clipboard", clipboard)
        return Page(page_shell(content, toc), **kwargs)
    return _make
