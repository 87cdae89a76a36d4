"""Artifact writer: aggregate metadata index plus one content blob per post"""

import logging
from datetime import datetime, timezone
from pathlib import Path

from mdblog.core.models import BlogIndex, ContentBlob, Post


logger = logging.getLogger(__name__)


def build_index(posts: list[Post], slugs: list[str], built_at: datetime = None) -> BlogIndex:
    """Index of post summaries; bodies are left to the content blobs."""
    return BlogIndex(
        posts=[p.summary() for p in posts],
        slugs=list(slugs),
        last_built=built_at or datetime.now(timezone.utc),
    )


def blob_path(content_dir: Path, slug: str) -> Path:
    return content_dir / f"{slug}.json"


def write_blobs(posts: list[Post], content_dir: Path) -> list[Path]:
    """Write one {content} blob per post and remove blobs of posts no longer built."""
    content_dir.mkdir(parents=True, exist_ok=True)
    written = []
    for post in posts:
        path = blob_path(content_dir, post.slug)
        path.write_text(ContentBlob(content=post.content).model_dump_json(indent=2), encoding='utf-8')
        written.append(path)

    keep = {p.slug for p in posts}
    for stale in content_dir.glob('*.json'):
        if stale.stem not in keep:
            stale.unlink()
            logger.info("Removed stale content blob %s", stale.name)
    return written


def write_artifacts(
    posts: list[Post],
    slugs: list[str],
    index_path: Path,
    content_dir: Path,
    built_at: datetime = None,
    ) -> tuple[Path, list[Path]]:
    """Write content blobs first, then the index that points at them.

    Returns (index_path, blob_paths).
    """
    blobs = write_blobs(posts, content_dir)
    index_path.parent.mkdir(parents=True, exist_ok=True)
    index = build_index(posts, slugs, built_at)
    index_path.write_text(index.model_dump_json(by_alias=True, indent=2), encoding='utf-8')
    logger.info("Blog data written to %s", index_path)
    return index_path, blobs
