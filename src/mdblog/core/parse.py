"""Post discovery, frontmatter extraction, and markdown-it tokenization"""

import re
from pathlib import Path
from typing import Any

import yaml
from markdown_it import MarkdownIt

from mdblog.core.models import ParsedDoc
from mdblog.core.utils.slug import slugify


FRONTMATTER_RE = re.compile(r'^---\s*\n(.*?)\n---\s*(?:\n|$)', re.DOTALL)
MD_EXTENSION = '.md'


class FrontmatterLoader(yaml.SafeLoader):
    """SafeLoader whose timestamps fall back to the raw scalar when not a real date."""

    def construct_lenient_timestamp(self, node):
        try:
            return self.construct_yaml_timestamp(node)
        except ValueError:
            return self.construct_scalar(node)


FrontmatterLoader.add_constructor("tag:yaml.org,2002:timestamp", FrontmatterLoader.construct_lenient_timestamp)


def _strip_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Return (frontmatter_dict, body) with YAML header removed."""
    m = FRONTMATTER_RE.match(text)
    if m:
        try:
            fm = yaml.load(m.group(1), Loader=FrontmatterLoader) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML frontmatter: {e}") from e
        if not isinstance(fm, dict):
            raise ValueError(f"Invalid YAML frontmatter: expected a mapping, got {type(fm).__name__}")
        return fm, text[m.end():]
    return {}, text


def discover_files(source_dir: Path) -> list[Path]:
    """Return the sorted top-level .md files of a source directory.

    Raises OSError when the directory cannot be listed.
    """
    return sorted(p for p in source_dir.iterdir() if p.suffix == MD_EXTENSION and p.is_file())


def parse_file(path: Path, md: MarkdownIt) -> ParsedDoc:
    """Parse one post; the slug is derived from the file name."""
    raw = path.read_text(encoding='utf-8')
    frontmatter, body = _strip_frontmatter(raw)
    env: dict[str, Any] = {}
    tokens = md.parse(body, env)
    return ParsedDoc(
        path=path,
        slug=slugify(path.stem),
        raw_markdown=raw,
        markdown=body,
        frontmatter=frontmatter,
        tokens=tokens,
        env=env,
    )
