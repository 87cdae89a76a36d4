"""Platform collaborators the page talks to, with in-memory implementations

Browsers supply clipboard, history, and layout geometry; the protocols here are
the seams, and the Memory* classes back headless use and tests.
"""

from dataclasses import dataclass, field
from typing import Protocol

from bs4 import Tag


class Clipboard(Protocol):
    async def write_text(self, text: str) -> None:
        """Asynchronous clipboard API; raises when unavailable or denied."""

    def exec_copy(self, text: str) -> bool:
        """Legacy selection-based copy; returns False when the copy did not happen."""


class History(Protocol):
    def replace_fragment(self, fragment: str) -> None:
        """Update the location fragment without navigating."""


class Viewport(Protocol):
    height: float

    def top_of(self, node: Tag) -> float | None:
        """Vertical offset of node relative to the viewport, None when not laid out."""

    def bottom_of(self, node: Tag) -> float | None:
        """Offset of node's bottom edge relative to the viewport, None when not laid out."""

    def scroll_into_view(self, node: Tag, smooth: bool = True) -> None: ...


class NavigationPanel(Protocol):
    scroll_top: float
    client_height: float
    scroll_height: float

    def entry_bounds(self, entry_id: str) -> tuple[float, float] | None:
        """(top, height) of an entry inside the panel's scrollable content."""

    def scroll_to(self, top: float, smooth: bool = True) -> None: ...


@dataclass
class MemoryClipboard:
    text: str | None = None
    api_available: bool = True
    legacy_available: bool = True

    async def write_text(self, text: str) -> None:
        if not self.api_available:
            raise PermissionError("Clipboard API unavailable")
        self.text = text

    def exec_copy(self, text: str) -> bool:
        if not self.legacy_available:
            return False
        self.text = text
        return True


@dataclass
class MemoryHistory:
    fragments: list[str] = field(default_factory=list)

    def replace_fragment(self, fragment: str) -> None:
        self.fragments.append(fragment)

    @property
    def fragment(self) -> str | None:
        return self.fragments[-1] if self.fragments else None


@dataclass
class MemoryViewport:
    """Element offsets keyed by element id."""
    offsets: dict[str, float] = field(default_factory=dict)
    bottoms: dict[str, float] = field(default_factory=dict)
    height: float = 800.0
    scrolled_to: list[str] = field(default_factory=list)

    def top_of(self, node: Tag) -> float | None:
        return self.offsets.get(node.get("id"))

    def bottom_of(self, node: Tag) -> float | None:
        return self.bottoms.get(node.get("id"))

    def scroll_into_view(self, node: Tag, smooth: bool = True) -> None:
        self.scrolled_to.append(node.get("id"))


@dataclass
class MemoryPanel:
    entries: dict[str, tuple[float, float]] = field(default_factory=dict)
    scroll_top: float = 0.0
    client_height: float = 300.0
    scroll_height: float = 1000.0
    scrolls: list[tuple[float, bool]] = field(default_factory=list)

    def entry_bounds(self, entry_id: str) -> tuple[float, float] | None:
        return self.entries.get(entry_id)

    def scroll_to(self, top: float, smooth: bool = True) -> None:
        self.scroll_top = top
        self.scrolls.append((top, smooth))
