"""Stage assembly: markdown-it plugins for token stages, BeautifulSoup passes for markup stages

Order is fixed: alerts, image paths, floating images (token stream), then
highlight, code-block wrap, table wrap (rendered markup). Sanitizing happens
after the last stage.
"""

from typing import Any

from bs4 import BeautifulSoup
from markdown_it import MarkdownIt
from mdit_py_plugins.anchors import anchors_plugin

from mdblog.core.transform.alerts import alerts_plugin
from mdblog.core.transform.code_blocks import wrap_code_blocks
from mdblog.core.transform.context import StageContext
from mdblog.core.transform.highlight import highlight_code
from mdblog.core.transform.images import floating_images_plugin, image_paths_plugin
from mdblog.core.transform.tables import wrap_tables
from mdblog.core.utils.slug import heading_slug


MARKUP_STAGES = (highlight_code, wrap_code_blocks, wrap_tables)


def make_parser(
    preset: str = "gfm-like",
    image_mode: str = "publish",
    asset_prefix: str = "/public",
    ) -> MarkdownIt:
    """Build a MarkdownIt instance with heading ids and the token stages registered."""
    md = MarkdownIt(preset, options_update={"linkify": False})
    md.use(anchors_plugin, min_level=1, max_level=6, slug_func=heading_slug)
    md.use(alerts_plugin)
    md.use(image_paths_plugin, mode=image_mode, prefix=asset_prefix)
    md.use(floating_images_plugin)
    return md


def apply_markup_stages(html: str, diagram_language: str = "mermaid") -> str:
    """Run the markup stages over rendered HTML with a fresh visited set."""
    soup = BeautifulSoup(html, "html.parser")
    ctx = StageContext(diagram_language=diagram_language)
    for stage in MARKUP_STAGES:
        stage(soup, ctx)
    return str(soup)


def render_markup(md: MarkdownIt, tokens: list, env: dict[str, Any] | None = None,
                  diagram_language: str = "mermaid") -> str:
    """Render already-parsed tokens and apply the markup stages (unsanitized)."""
    html = md.renderer.render(tokens, md.options, env or {})
    return apply_markup_stages(html, diagram_language)
