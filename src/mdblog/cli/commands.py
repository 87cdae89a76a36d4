"""CLI command implementations"""

from pathlib import Path
from typing import Annotated, Optional

import typer

from mdblog.config import Settings, load_config
from mdblog.core.export import blob_path
from mdblog.core.library import PostLibrary
from mdblog.core.pipeline import run_build


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def build_cmd(
    source: Annotated[Optional[str], typer.Option("--source-dir", help="Directory of .md posts")] = None,
    index: Annotated[Optional[str], typer.Option("--index-path", help="Metadata index output file")] = None,
    content: Annotated[Optional[str], typer.Option("--content-dir", help="Content blob output directory")] = None,
    mode: Annotated[Optional[str], typer.Option("--image-mode", help="publish or preview")] = None,
    ):
    """Build the metadata index and one content blob per post."""
    settings = _settings(overrides={
        "source_dir": source, "index_path": index,
        "content_dir": content, "image_mode": mode,
    })
    try:
        result = run_build(settings)
    except OSError as e:
        _fail("Writing blog data failed", e)

    content_dir = Path(settings.content_dir)
    for post in result.posts:
        typer.echo(f"  {post.slug} -> {blob_path(content_dir, post.slug)}")
    for path in result.failed:
        typer.echo(f"  skipped: {path.name}", err=True)
    typer.echo(f"Built {len(result.posts)} post(s) into {settings.index_path}")


def list_cmd(
    index: Annotated[Optional[str], typer.Option("--index-path", help="Metadata index file")] = None,
    ):
    """List posts recorded in the metadata index, newest first."""
    settings = _settings(overrides={"index_path": index})
    posts = PostLibrary.from_settings(settings).all_posts()
    if not posts:
        typer.echo("No posts found in blog index.")
        raise typer.Exit(1)
    for post in posts:
        typer.echo(f"{post.slug}\t{post.date or '-'}\t{post.title}")
