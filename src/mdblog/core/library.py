"""Read access to built artifacts: listings from the index, bodies from the blobs"""

import logging
from pathlib import Path

from pydantic import ValidationError

from mdblog.config import Settings
from mdblog.core.export import blob_path
from mdblog.core.models import BlogIndex, ContentBlob, Post, PostSummary
from mdblog.core.toc import extract_toc


logger = logging.getLogger(__name__)


class PostLibrary:
    """Listing calls only load the index; get_post loads a single blob."""

    def __init__(self, index_path: Path, content_dir: Path):
        self.index_path = Path(index_path)
        self.content_dir = Path(content_dir)
        self._index: BlogIndex | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "PostLibrary":
        return cls(Path(settings.index_path), Path(settings.content_dir))

    @property
    def index(self) -> BlogIndex | None:
        """The parsed index, or None when it is missing or malformed."""
        if self._index is None and self.index_path.exists():
            try:
                self._index = BlogIndex.model_validate_json(self.index_path.read_text(encoding='utf-8'))
            except ValidationError as e:
                logger.error("Invalid blog index %s: %s", self.index_path, e)
        return self._index

    def all_posts(self) -> list[PostSummary]:
        return list(self.index.posts) if self.index else []

    def slugs(self) -> list[str]:
        return list(self.index.slugs) if self.index else []

    def get_summary(self, slug: str) -> PostSummary | None:
        return next((p for p in self.all_posts() if p.slug == slug), None)

    def get_post(self, slug: str) -> Post | None:
        """Summary plus body and table of contents; None when either is missing."""
        summary = self.get_summary(slug)
        path = blob_path(self.content_dir, slug)
        if summary is None or not path.exists():
            return None
        blob = ContentBlob.model_validate_json(path.read_text(encoding='utf-8'))
        return Post(**summary.model_dump(), content=blob.content, toc=extract_toc(blob.content))

    def featured(self) -> PostSummary | None:
        """Most recent post."""
        posts = self.all_posts()
        return posts[0] if posts else None

    def related(self, slug: str, category: str = None, limit: int = 3) -> list[PostSummary]:
        """Posts sharing the category (or having it as a tag), topped up with recent posts."""
        others = [p for p in self.all_posts() if p.slug != slug]
        picked = [p for p in others if p.category == category or category in p.tags] if category else others
        picked = picked[:limit]
        if len(picked) < limit:
            chosen = {p.slug for p in picked}
            picked += [p for p in others if p.slug not in chosen][:limit - len(picked)]
        return picked
