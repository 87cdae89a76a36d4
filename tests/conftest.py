"""Root test configuration: environment isolation and post-writing helpers"""

import logging
import os
from pathlib import Path
from textwrap import dedent

import pytest


@pytest.fixture(autouse=True)
def isolate_env(monkeypatch):
    """Drop MDBLOG_* variables from the developer's shell so defaults apply."""
    for name in list(os.environ):
        if name.startswith("MDBLOG_"):
            monkeypatch.delenv(name)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """CLI invocations reconfigure the root logger; put it back after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture(name="blog_dir")
def blog_dir_fixture(tmp_path) -> Path:
    path = tmp_path / "content" / "blog"
    path.mkdir(parents=True)
    return path


@pytest.fixture(name="write_post")
def write_post_fixture(blog_dir):
    """Write a post file; frontmatter keys become YAML lines."""
    def _write(name: str, body: str = "Body text.\n", **frontmatter) -> Path:
        header = "".join(f"{k}: {v}\n" for k, v in frontmatter.items())
        text = f"---\n{header}---\n{dedent(body)}" if frontmatter else dedent(body)
        path = blog_dir / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write
