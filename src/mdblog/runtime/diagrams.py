"""Diagram rendering: fenced diagram sources replaced by sanitized SVG

The engine is pluggable. KrokiEngine renders mermaid through a Kroki server
over HTTP and passes the theme configuration as an init directive.
"""

import itertools
import json
import logging
from typing import Any, Protocol

import httpx
from bs4 import Tag

from mdblog.core.sanitize import sanitize_diagram
from mdblog.runtime.enhancers import Enhancer
from mdblog.runtime.events import ThemeChanged
from mdblog.runtime.page import Page


logger = logging.getLogger(__name__)


class DiagramRenderError(Exception):
    """The engine could not turn a diagram source into markup."""


class DiagramEngine(Protocol):
    def initialize(self, config: dict[str, Any]) -> None: ...

    async def render(self, diagram_id: str, source: str) -> str:
        """Return SVG markup for source; raise on invalid input."""


def mermaid_config(theme: str) -> dict[str, Any]:
    return {
        "startOnLoad": False,
        "theme": theme,
        "flowchart": {"useMaxWidth": True, "htmlLabels": True, "curve": "basis"},
        "sequence": {"useMaxWidth": True, "wrap": True},
        "gantt": {"useMaxWidth": True},
        "journey": {"useMaxWidth": True},
        "pie": {"useMaxWidth": True},
        "gitGraph": {"useMaxWidth": True},
    }


class KrokiEngine:
    """Renders mermaid to SVG with POST {endpoint}/mermaid/svg."""

    def __init__(self, endpoint: str = "https://kroki.io", client: httpx.AsyncClient = None, timeout: float = 10.0):
        self.endpoint = endpoint.rstrip("/")
        self.client = client
        self.timeout = timeout
        self.config: dict[str, Any] = {}

    def initialize(self, config: dict[str, Any]) -> None:
        self.config = dict(config)

    def directive(self) -> str:
        init = {k: v for k, v in self.config.items() if k != "startOnLoad"}
        return f"%%{{init: {json.dumps(init)}}}%%" if init else ""

    async def _post(self, client: httpx.AsyncClient, body: str) -> httpx.Response:
        response = await client.post(
            f"{self.endpoint}/mermaid/svg",
            content=body.encode("utf-8"),
            headers={"Content-Type": "text/plain"},
        )
        response.raise_for_status()
        return response

    async def render(self, diagram_id: str, source: str) -> str:
        directive = self.directive()
        body = f"{directive}\n{source}" if directive else source
        try:
            if self.client is not None:
                response = await self._post(self.client, body)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await self._post(client, body)
        except httpx.HTTPStatusError as e:
            detail = e.response.text.strip() or e.response.reason_phrase
            raise DiagramRenderError(f"{diagram_id}: {e.response.status_code} {detail}") from e
        except httpx.HTTPError as e:
            raise DiagramRenderError(f"{diagram_id}: {e}") from e
        return response.text


class DiagramRenderer(Enhancer):
    """Replaces diagram blocks (or their code-block wrappers) with rendered diagrams.

    The source is kept on the diagram wrapper so a theme change can re-render
    it in place. A failed first render leaves a sanitized error block; a failed
    re-render keeps the previous diagram.
    """

    name = "diagrams"
    WRAPPER_CLASS = "mermaid-diagram-wrapper"
    DIAGRAM_CLASS = "mermaid-diagram"
    ERROR_CLASS = "mermaid-error"
    SOURCE_ATTR = "data-mermaid-source"

    def __init__(self, page: Page, engine: DiagramEngine, settle_delay: float = 0.1, language: str = "mermaid"):
        super().__init__(page, settle_delay)
        self.engine = engine
        self.language = language
        self.theme: str | None = None
        self.cancelled = False
        self._ids = itertools.count()

    def current_theme(self) -> str:
        return "dark" if self.page.dark else "default"

    def mount(self, content_key: str = "") -> None:
        self.cancelled = False
        self.theme = self.current_theme()
        super().mount(content_key)
        self._unsubscribe.append(self.page.events.subscribe(ThemeChanged, self._on_theme_changed))

    def unmount(self) -> None:
        self.cancelled = True
        super().unmount()

    def _on_theme_changed(self, event: ThemeChanged) -> None:
        theme = self.current_theme()
        if theme == self.theme:
            return
        self.theme = theme
        self.schedule()

    async def scan(self) -> int:
        self.theme = self.current_theme()
        self.engine.initialize(mermaid_config(self.theme))
        await self.rerender_existing()
        return await self.render_blocks()

    def _blocks(self) -> list[Tag]:
        """Diagram source blocks, each <pre> reported once even when its <code> also matches."""
        lang_class = f"language-{self.language}"
        blocks, seen = [], set()
        for node in self.page.content.find_all(["pre", "code"], class_=lang_class):
            block = node
            if node.name == "code":
                parent = node.find_parent("pre")
                if parent is not None and lang_class in (parent.get("class") or []):
                    block = parent
            if id(block) not in seen:
                seen.add(id(block))
                blocks.append(block)
        return blocks

    def _svg_nodes(self, svg: str) -> list:
        nodes = self.page.fragment(sanitize_diagram(svg))
        return [n for n in nodes if isinstance(n, Tag) and n.name == "svg"]

    def _diagram_wrapper(self, diagram_id: str, source: str, svg: str) -> Tag:
        wrapper = self.page.new_tag("div", {"class": [self.WRAPPER_CLASS], self.SOURCE_ATTR: source})
        container = self.page.new_tag("div", {"class": [self.DIAGRAM_CLASS], "id": diagram_id})
        for node in self._svg_nodes(svg):
            container.append(node)
        wrapper.append(container)
        return wrapper

    def _error_block(self, error: Exception) -> Tag:
        block = self.page.new_tag("div", {"class": [self.ERROR_CLASS], "role": "alert"})
        heading = self.page.new_tag("strong")
        heading.string = self.page.labels("diagram.error")
        block.append(heading)
        block.append(self.page.new_tag("br"))
        block.append(str(error) or type(error).__name__)
        # text nodes are escaped on output; the pass keeps the block inside the diagram policy
        nodes = self.page.fragment(sanitize_diagram(str(block)))
        return next(n for n in nodes if isinstance(n, Tag))

    async def rerender_existing(self) -> int:
        count = 0
        for wrapper in self.page.content.select(f"div.{self.WRAPPER_CLASS}"):
            source = wrapper.get(self.SOURCE_ATTR)
            container = wrapper.find(class_=self.DIAGRAM_CLASS)
            if not source or container is None:
                continue
            try:
                svg = await self.engine.render(f"mermaid-diagram-theme-{next(self._ids)}", source)
            except Exception as e:
                logger.error("Failed to re-render diagram: %s", e)
                continue
            if self.cancelled:
                return count
            container.clear()
            for node in self._svg_nodes(svg):
                container.append(node)
            count += 1
        return count

    async def render_blocks(self) -> int:
        count = 0
        for block in self._blocks():
            if self.overlays.has(block):
                continue
            self.overlays.add(block)   # claimed before the await so a concurrent scan skips it
            source = block.get_text()
            if not source.strip():
                continue
            diagram_id = f"mermaid-diagram-{next(self._ids)}"
            try:
                svg = await self.engine.render(diagram_id, source)
            except Exception as e:
                logger.error("Failed to render diagram %s: %s", diagram_id, e)
                replacement = self._error_block(e)
            else:
                replacement = self._diagram_wrapper(diagram_id, source, svg)
            if self.cancelled:
                return count
            target = block.find_parent("div", class_="code-block-wrapper") or block
            if not self.page.contains(target):
                continue
            target.replace_with(replacement)
            count += 1
        return count
