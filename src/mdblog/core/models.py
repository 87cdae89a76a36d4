"""Data models for parsed posts and the published artifacts"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Artifact model serialized with camelCase keys (imageAlt, readTime, lastBuilt)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TocItem(BaseModel):
    id: str
    text: str
    level: int


class PostSummary(CamelModel):
    """One entry of the metadata index; never carries the post body."""
    slug:      str
    title:     str
    date:      Optional[str] = None   # authored date as written, None when missing or unparseable
    author:    str
    excerpt:   str = ""
    image:     str
    image_alt: str
    tags:      list[str] = []
    read_time: str
    category:  str


class Post(PostSummary):
    """A fully built post: summary fields plus sanitized content."""
    content:   str
    toc:       list[TocItem] = Field(default=[], exclude=True)
    published: Optional[datetime] = Field(default=None, exclude=True)   # sort key

    def summary(self) -> PostSummary:
        return PostSummary.model_validate(self.model_dump(include=set(PostSummary.model_fields)))


class BlogIndex(CamelModel):
    """Public contract of the metadata index file."""
    posts:      list[PostSummary] = []
    slugs:      list[str] = []
    last_built: datetime


class ContentBlob(BaseModel):
    """Public contract of a per-post content blob."""
    content: str


@dataclass
class ParsedDoc:
    """Internal parse result carrying markdown-it tokens; not persisted."""
    path:         Path
    slug:         str
    raw_markdown: str          # full file content (includes frontmatter)
    markdown:     str          # body only (frontmatter stripped)
    frontmatter:  dict[str, Any]
    tokens:       list         # markdown-it Token objects, core rules already applied
    env:          dict[str, Any] = field(default_factory=dict)
