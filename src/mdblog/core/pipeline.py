"""Batch build: source posts -> transform stages -> sanitizer -> artifacts"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from markdown_it import MarkdownIt

from mdblog.config import Settings
from mdblog.core.export import write_artifacts
from mdblog.core.metadata import (
    DEFAULT_AUTHOR,
    DEFAULT_IMAGE,
    DEFAULT_TITLE,
    normalize_tags,
    order_posts,
    parse_post_date,
    reading_time,
    resolve_category,
)
from mdblog.core.models import ParsedDoc, Post
from mdblog.core.parse import discover_files, parse_file
from mdblog.core.sanitize import sanitize_article
from mdblog.core.transform.stages import make_parser, render_markup


logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    posts:  list[Post] = field(default_factory=list)    # ordered newest first
    slugs:  list[str] = field(default_factory=list)     # encounter order
    failed: list[Path] = field(default_factory=list)


def _text(value, fallback: str) -> str:
    return str(value) if value else fallback


def build_post(doc: ParsedDoc, md: MarkdownIt, settings: Settings) -> Post:
    """Render one parsed post into sanitized content plus derived metadata."""
    content = sanitize_article(render_markup(md, doc.tokens, doc.env, settings.diagram_language))
    fm = doc.frontmatter

    when = parse_post_date(fm.get("date"))
    if not when.present:
        logger.warning("%s: missing date; listed after dated posts", doc.path.name)
    elif when.published is None:
        logger.warning("%s: invalid date %r could not be parsed; listed after dated posts",
                       doc.path.name, fm.get("date"))

    title = _text(fm.get("title"), DEFAULT_TITLE)
    tags = normalize_tags(fm.get("tags"))
    return Post(
        slug=doc.slug,
        title=title,
        date=when.display,
        author=_text(fm.get("author"), DEFAULT_AUTHOR),
        excerpt=_text(fm.get("excerpt"), ""),
        image=_text(fm.get("image"), DEFAULT_IMAGE),
        image_alt=_text(fm.get("imageAlt"), title),
        tags=tags,
        read_time=_text(fm.get("readTime"), "") or reading_time(content, settings.words_per_minute),
        category=resolve_category(fm.get("category"), tags, settings.default_category),
        content=content,
        published=when.published,
    )


def build_blog_data(settings: Settings) -> BuildResult:
    """Build every post under source_dir; a failing post is logged and left out.

    A missing or unreadable source directory yields an empty result.
    """
    source = Path(settings.source_dir)
    if not source.is_dir():
        logger.warning("Blog content directory %s not found; building empty blog data", source)
        return BuildResult()
    try:
        files = discover_files(source)
    except OSError as e:
        logger.error("Cannot read blog content directory %s: %s; building empty blog data", source, e)
        return BuildResult()
    logger.info("Found %d blog post(s) in %s", len(files), source)

    md = make_parser(settings.parser_config, settings.image_mode, settings.asset_prefix)
    result = BuildResult()
    posts: list[Post] = []
    for path in files:
        try:
            doc = parse_file(path, md)
            if doc.slug in result.slugs:
                raise ValueError(f"Duplicate slug '{doc.slug}'")
            post = build_post(doc, md, settings)
        except Exception:
            logger.exception("Error processing %s", path.name)
            result.failed.append(path)
            continue
        posts.append(post)
        result.slugs.append(post.slug)
        logger.info("Processed: %s", post.slug)

    result.posts = order_posts(posts)
    return result


def run_build(settings: Settings) -> BuildResult:
    """Build the batch and write the index plus one content blob per post."""
    result = build_blog_data(settings)
    write_artifacts(result.posts, result.slugs, Path(settings.index_path), Path(settings.content_dir))
    logger.info("Built %d blog post(s); %d failed", len(result.posts), len(result.failed))
    return result
