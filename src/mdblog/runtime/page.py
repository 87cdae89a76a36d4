"""A displayed page: parsed document, signal bus, and platform collaborators"""

from collections.abc import Callable

from bs4 import BeautifulSoup, Tag

from mdblog.runtime.events import ContentChanged, ContentMutated, EventBus, ThemeChanged
from mdblog.runtime.platform import (
    Clipboard,
    History,
    MemoryClipboard,
    MemoryHistory,
    MemoryPanel,
    MemoryViewport,
    NavigationPanel,
    Viewport,
)


CONTENT_SELECTOR = ".blog-content"
DARK_CLASS = "dark"

DEFAULT_LABELS = {
    "code.copy": "Copy",
    "code.copied": "Copied!",
    "code.copy_label": "Copy code to clipboard",
    "diagram.error": "Diagram Error:",
    "image.preview": "Image preview",
    "image.close": "Close image preview",
    "progress.label": "Reading progress",
    "toc.title": "Table of contents",
}


def default_labels(key: str) -> str:
    return DEFAULT_LABELS.get(key, key)


class Page:
    """Runtime view of one displayed page.

    The document root's `dark` class is the theme signal; set_theme flips it
    and announces ThemeChanged. swap_content replaces the content region and
    announces ContentMutated then ContentChanged.
    """

    def __init__(
        self,
        markup: str,
        *,
        content_selector: str = CONTENT_SELECTOR,
        events: EventBus = None,
        clipboard: Clipboard = None,
        history: History = None,
        viewport: Viewport = None,
        panel: NavigationPanel = None,
        labels: Callable[[str], str] = None,
        ):
        self.document = BeautifulSoup(markup, "html.parser")
        self.content_selector = content_selector
        self.events = events or EventBus()
        self.clipboard = clipboard or MemoryClipboard()
        self.history = history or MemoryHistory()
        self.viewport = viewport or MemoryViewport()
        self.panel = panel or MemoryPanel()
        self.labels = labels or default_labels

    @property
    def root(self) -> Tag:
        return self.document.find("html") or self.document

    @property
    def content(self) -> Tag:
        """The content region, or the whole document when the page has none."""
        return self.document.select_one(self.content_selector) or self.document

    @property
    def dark(self) -> bool:
        return DARK_CLASS in (self.root.get("class") or [])

    def set_theme(self, dark: bool) -> None:
        if dark == self.dark:
            return
        classes = [c for c in (self.root.get("class") or []) if c != DARK_CLASS]
        if dark:
            classes.append(DARK_CLASS)
        self.root["class"] = classes
        self.events.publish(ThemeChanged(dark=dark))

    def swap_content(self, markup: str, key: str) -> None:
        region = self.content
        region.clear()
        for node in list(BeautifulSoup(markup, "html.parser").contents):
            region.append(node)
        self.events.publish(ContentMutated())
        self.events.publish(ContentChanged(key=key))

    def new_tag(self, name: str, attrs: dict = None) -> Tag:
        return self.document.new_tag(name, attrs=attrs or {})

    def fragment(self, markup: str) -> list:
        """Parse markup into detached nodes ready to insert into this page."""
        return list(BeautifulSoup(markup, "html.parser").contents)

    def find_by_id(self, element_id: str) -> Tag | None:
        return self.document.find(id=element_id)

    def contains(self, node: Tag) -> bool:
        """True while node is still attached to this page's document."""
        return any(parent is self.document for parent in node.parents)
