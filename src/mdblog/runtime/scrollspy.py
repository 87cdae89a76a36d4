"""Scroll spy: keeps the table-of-contents panel in step with the reading position"""

import logging
from collections.abc import Sequence

from bs4 import Tag

from mdblog.core.models import TocItem
from mdblog.runtime.events import ContentMutated, HeadingVisibilityChanged, Resized, Scrolled
from mdblog.runtime.frames import FRAME_INTERVAL, FrameThrottle
from mdblog.runtime.page import Page


logger = logging.getLogger(__name__)

LINE_STEP = 40.0
ACTIVE_CLASS = "active"


def pick_active_heading(positions: Sequence[tuple[str, float]], line: float) -> str | None:
    """Choose the active heading id from (id, viewport top) pairs.

    Sorted by top: when every heading has scrolled above the viewport the last
    one is active; when none has scrolled past the top yet, or none sits at or
    above the compensation line, the first one is; otherwise the last heading
    at or above the line.
    """
    if not positions:
        return None
    ordered = sorted(positions, key=lambda p: p[1])
    if all(top < 0 for _, top in ordered):
        return ordered[-1][0]
    reached = [heading_id for heading_id, top in ordered if top <= line]
    if not reached or ordered[0][1] >= 0:
        return ordered[0][0]
    return reached[-1]


class ScrollSpy:
    """One per page. Recomputes at most once per frame on scroll, resize,
    heading visibility, and content mutation signals."""

    def __init__(self, page: Page, items: Sequence[TocItem], offset: float = 140.0,
                 frame_interval: float = FRAME_INTERVAL):
        self.page = page
        self.offset = offset
        self.frame_interval = frame_interval
        self.active_id: str | None = None
        self.observed: dict[str, Tag] = {}
        self._items = items
        self._frames = FrameThrottle(self._on_frame, frame_interval)
        self._unsubscribe = []

    @property
    def items(self) -> Sequence[TocItem]:
        return self._items

    def mount(self) -> None:
        events = self.page.events
        for event_type in (Scrolled, Resized, HeadingVisibilityChanged):
            self._unsubscribe.append(events.subscribe(event_type, self._on_signal))
        self._unsubscribe.append(events.subscribe(ContentMutated, self._on_mutation))
        self.resolve()
        self.recompute()

    def unmount(self) -> None:
        for unsubscribe in self._unsubscribe:
            unsubscribe()
        self._unsubscribe.clear()
        self._frames.cancel()

    def set_items(self, items: Sequence[TocItem]) -> None:
        """Swap the heading list; same list object means no change."""
        if items is self._items:
            return
        self._items = items
        self.resolve()
        self.request_update()

    def resolve(self) -> None:
        """Map entry ids to heading nodes present now; missing ones are retried on mutation."""
        self.observed = {}
        for item in self._items:
            node = self.page.find_by_id(item.id)
            if node is not None:
                self.observed[item.id] = node
        logger.debug("Scroll spy observing %d of %d heading(s)", len(self.observed), len(self._items))

    def _on_signal(self, event) -> None:
        self.request_update()

    def _on_mutation(self, event: ContentMutated) -> None:
        self.resolve()
        self.request_update()

    def request_update(self) -> None:
        """Schedule one recompute for the next frame; bursts coalesce into it."""
        self._frames.request()

    def _on_frame(self) -> None:
        self.recompute()

    def recompute(self) -> str | None:
        positions = []
        for heading_id, node in self.observed.items():
            if not self.page.contains(node):
                continue
            top = self.page.viewport.top_of(node)
            if top is not None:
                positions.append((heading_id, top))
        active = pick_active_heading(positions, self.offset)
        if active != self.active_id:
            self.active_id = active
            self._mark_active()
            self._reveal_active()
        return active

    def _entries(self) -> list[Tag]:
        nav = self.page.document.select_one("nav.toc")
        return nav.select("button[data-id]") if nav is not None else []

    def _mark_active(self) -> None:
        for entry in self._entries():
            classes = [c for c in (entry.get("class") or []) if c != ACTIVE_CLASS]
            if entry.get("data-id") == self.active_id:
                entry["class"] = classes + [ACTIVE_CLASS]
                entry["aria-current"] = "location"
            else:
                if classes:
                    entry["class"] = classes
                elif entry.has_attr("class"):
                    del entry["class"]
                if entry.has_attr("aria-current"):
                    del entry["aria-current"]

    def _reveal_active(self) -> None:
        """Center the active entry in the panel when it lies outside the visible region."""
        if self.active_id is None:
            return
        panel = self.page.panel
        bounds = panel.entry_bounds(self.active_id)
        if bounds is None:
            return
        top, height = bounds
        visible_top = panel.scroll_top
        visible_bottom = visible_top + panel.client_height
        if top >= visible_top and top + height <= visible_bottom:
            return
        panel.scroll_to(max(0.0, top - (panel.client_height - height) / 2), smooth=True)

    def handle_key(self, key: str) -> bool:
        """Scroll the panel for navigation keys; returns False for keys it ignores."""
        panel = self.page.panel
        max_top = max(0.0, panel.scroll_height - panel.client_height)
        steps = {
            "ArrowDown": panel.scroll_top + LINE_STEP,
            "ArrowUp": panel.scroll_top - LINE_STEP,
            "PageDown": panel.scroll_top + panel.client_height,
            "PageUp": panel.scroll_top - panel.client_height,
            "Home": 0.0,
            "End": max_top,
        }
        if key not in steps:
            return False
        panel.scroll_to(min(max(steps[key], 0.0), max_top), smooth=False)
        return True

    def select(self, heading_id: str) -> bool:
        """Jump to a heading: update the fragment, then smooth-scroll it into view."""
        node = self.page.find_by_id(heading_id)
        if node is None:
            return False
        self.page.history.replace_fragment(heading_id)
        self.page.viewport.scroll_into_view(node, smooth=True)
        return True
