"""Shared fixtures for core unit tests"""

import pytest
from bs4 import BeautifulSoup

from mdblog.core.sanitize import sanitize_article
from mdblog.core.transform.stages import make_parser, render_markup


SAMPLE_MD = """\
# Release notes

> [!TIP]
> Run the build before publishing.

## Install

```python
print("hello")
```

| Name | Value |
| ---- | ----- |
| a    | 1     |

<img src="/public/images/cover.png" alt="Cover" style="float: right; width: 40%">
"""


@pytest.fixture(name="md")
def md_fixture():
    return make_parser()


@pytest.fixture(name="build_html")
def build_html_fixture(md):
    """Markdown -> staged markup (unsanitized) through the full stage list."""
    def _build(text: str) -> str:
        env = {}
        return render_markup(md, md.parse(text, env), env)
    return _build


@pytest.fixture(name="soup_of")
def soup_of_fixture(build_html):
    def _soup(text: str, sanitized: bool = False) -> BeautifulSoup:
        html = build_html(text)
        return BeautifulSoup(sanitize_article(html) if sanitized else html, "html.parser")
    return _soup


@pytest.fixture(name="sample_md")
def sample_md_fixture() -> str:
    return SAMPLE_MD
