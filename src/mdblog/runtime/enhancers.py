"""Enhancers that augment already-rendered article markup: alert icons, copy buttons, image zoom

Every enhancer follows one lifecycle. mount() schedules a scan after a short
settle delay. A ContentChanged with a new key tears down the previous overlays
and schedules a fresh scan. unmount() cancels pending work and defers teardown
to the next loop turn.
"""

import asyncio
import logging

from bs4 import Tag

from mdblog.runtime.events import ContentChanged
from mdblog.runtime.overlay import OverlayManager
from mdblog.runtime.page import Page
from mdblog.runtime.views import ICON_TYPES, AlertIconView, CopyButtonView, ImageZoomView


logger = logging.getLogger(__name__)


class Enhancer:
    name = "enhancer"

    def __init__(self, page: Page, settle_delay: float = 0.05):
        self.page = page
        self.settle_delay = settle_delay
        self.overlays = OverlayManager(self.name)
        self.content_key: str | None = None
        self._tasks: set[asyncio.Task] = set()
        self._unsubscribe = []

    @property
    def mounted(self) -> bool:
        return bool(self._unsubscribe)

    def mount(self, content_key: str = "") -> None:
        """Start enhancing; must be called from within a running event loop."""
        if self.mounted:
            raise RuntimeError(f"{self.name} is already mounted")
        self.content_key = content_key
        self._unsubscribe.append(self.page.events.subscribe(ContentChanged, self._on_content_changed))
        self.schedule()

    def unmount(self) -> None:
        for unsubscribe in self._unsubscribe:
            unsubscribe()
        self._unsubscribe.clear()
        self.reset()

    def schedule(self) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(self._settle_then_scan())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def settled(self) -> None:
        """Wait for every scheduled scan, including ones scheduled while waiting."""
        while self._tasks:
            await asyncio.wait(set(self._tasks))

    async def _settle_then_scan(self) -> None:
        await asyncio.sleep(self.settle_delay)
        count = await self.scan()
        logger.debug("%s: enhanced %d node(s) for '%s'", self.name, count, self.content_key)

    async def scan(self) -> int:
        return self.inject()

    def inject(self) -> int:
        """Augment unprocessed targets in the content region; returns how many."""
        raise NotImplementedError

    def reset(self) -> None:
        """Drop pending scans and tear down everything injected so far."""
        self._cancel_pending()
        self.overlays.clear()

    def _cancel_pending(self) -> None:
        for task in self._tasks:
            task.cancel()

    def _on_content_changed(self, event: ContentChanged) -> None:
        if event.key == self.content_key:
            return
        self.content_key = event.key
        self.reset()
        self.schedule()


class AlertIconInjector(Enhancer):
    """Puts an icon container first in every alert title with a supported icon type."""

    name = "alert-icons"
    CONTAINER_CLASS = "alert-icon-container"

    def inject(self) -> int:
        count = 0
        for title in self.page.content.select("div.github-alert-title[data-alert-icon]"):
            icon_type = (title.get("data-alert-icon") or "").strip().lower()
            if icon_type not in ICON_TYPES:
                continue
            if self.overlays.has(title) or title.find(class_=self.CONTAINER_CLASS, recursive=False):
                continue
            container = self.page.new_tag("span", {"class": [self.CONTAINER_CLASS], "aria-hidden": "true"})
            title.insert(0, container)
            view = AlertIconView(icon_type)
            view.mount(container)
            self.overlays.add(title, container, view)
            count += 1
        return count


class CopyButtonInjector(Enhancer):
    """Adds a copy control inside a scroll wrapper around each built code block."""

    name = "copy-buttons"
    SCROLL_CLASS = "code-scroll-wrapper"
    CONTAINER_CLASS = "copy-button-container"

    def __init__(self, page: Page, settle_delay: float = 0.05, reset_after: float = 2.0):
        super().__init__(page, settle_delay)
        self.reset_after = reset_after

    def _code_block(self, wrapper: Tag) -> Tag | None:
        for pre in wrapper.find_all("pre"):
            classes = pre.get("class") or []
            if any(c.startswith("language-") for c in classes) and pre.find("code") is not None:
                return pre
        return None

    def view_for(self, wrapper: Tag) -> CopyButtonView | None:
        for record in self.overlays.records():
            if record.target is wrapper:
                return record.view
        return None

    def inject(self) -> int:
        count = 0
        for wrapper in self.page.content.select("div.code-block-wrapper"):
            pre = self._code_block(wrapper)
            if pre is None or pre.get("data-diagram"):
                continue
            if self.overlays.has(wrapper) or wrapper.find(class_=self.CONTAINER_CLASS):
                continue

            scroll = wrapper.find(class_=self.SCROLL_CLASS)
            if scroll is None:
                scroll = self.page.new_tag("div", {"class": [self.SCROLL_CLASS]})
                pre.wrap(scroll)

            container = self.page.new_tag("div", {"class": [self.CONTAINER_CLASS]})
            scroll.append(container)
            view = CopyButtonView(pre.find("code").get_text(), self.page.clipboard,
                                  self.page.labels, self.reset_after)
            view.mount(container)
            self.overlays.add(wrapper, container, view)
            count += 1
        return count


class ImageZoomInjector(Enhancer):
    """Makes article images zoomable: one modal view per image, at most one open."""

    name = "image-zoom"
    CONTAINER_CLASS = "image-zoom-container"
    LOCK_CLASS = "image-zoom-open"

    def view_for(self, image: Tag) -> ImageZoomView | None:
        for record in self.overlays.records():
            if record.target is image:
                return record.view
        return None

    @property
    def active(self) -> ImageZoomView | None:
        for record in self.overlays.records():
            if record.view.is_open:
                return record.view
        return None

    def inject(self) -> int:
        count = 0
        for image in self.page.content.find_all("img"):
            if not image.get("src") or image.find_parent(class_=self.CONTAINER_CLASS) is not None:
                continue
            if self.overlays.has(image) or image.get("data-enhanced") == "true":
                continue
            container = self.page.new_tag("span", {"class": [self.CONTAINER_CLASS]})
            image.insert_after(container)
            view = ImageZoomView(image, self.page.labels)
            view.mount(container)
            self.overlays.add(image, container, view)
            count += 1
        return count

    def open(self, image: Tag) -> bool:
        """Show the modal for image; returns False when image was not enhanced here."""
        view = self.view_for(image)
        if view is None:
            return False
        current = self.active
        if current is not None and current is not view:
            current.close()
        view.open()
        self._lock(True)
        return True

    def close(self) -> bool:
        view = self.active
        if view is None:
            return False
        view.close()
        self._lock(False)
        return True

    def handle_key(self, key: str) -> bool:
        """Escape closes an open modal and Tab stays inside it; other keys pass through."""
        if self.active is None:
            return False
        if key == "Escape":
            return self.close()
        return key == "Tab"

    def reset(self) -> None:
        self._lock(False)
        super().reset()

    def _lock(self, locked: bool) -> None:
        root = self.page.root
        classes = [c for c in (root.get("class") or []) if c != self.LOCK_CLASS]
        if locked:
            classes.append(self.LOCK_CLASS)
        if classes:
            root["class"] = classes
        elif root.has_attr("class"):
            del root["class"]
