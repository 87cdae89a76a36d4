"""Reading progress: how far the reader has come through the article"""

import logging

from mdblog.runtime.events import ContentMutated, Resized, Scrolled
from mdblog.runtime.frames import FRAME_INTERVAL, FrameThrottle
from mdblog.runtime.page import Page


logger = logging.getLogger(__name__)

BAR_CLASS = "reading-progress"


def reading_progress(top: float | None, bottom: float | None, end_top: float | None,
                     height: float) -> tuple[float, bool]:
    """Return (fraction read, visible) from viewport-relative geometry.

    Reading starts when the article's top enters the viewport from below. It is
    complete when the end marker reaches the viewport's bottom edge or, without
    one, when the article's bottom reaches the viewport's top.
    """
    if top is None:
        return 0.0, False
    travelled = height - top
    if travelled < 0:
        return 0.0, False
    if end_top is not None:
        distance = end_top - top
    elif bottom is not None:
        distance = bottom - top + height
    else:
        return 0.0, False
    if travelled >= distance:
        return 1.0, True
    return min(max(travelled / distance, 0.0), 1.0), True


class ReadingProgress:
    """One per page. Paints a progress bar and recomputes at most once per frame
    on scroll, resize, and content mutation signals."""

    def __init__(self, page: Page, end_selector: str = None, frame_interval: float = FRAME_INTERVAL):
        self.page = page
        self.end_selector = end_selector
        self.progress = 0.0
        self.visible = False
        self.bar = None
        self._frames = FrameThrottle(self.recompute, frame_interval)
        self._unsubscribe = []

    @property
    def percent(self) -> int:
        return round(self.progress * 100)

    def mount(self) -> None:
        if self.bar is not None:
            raise RuntimeError("ReadingProgress is already mounted")
        self.bar = self.page.new_tag("div", {
            "class": [BAR_CLASS],
            "role": "progressbar",
            "aria-label": self.page.labels("progress.label"),
            "aria-valuemin": "0",
            "aria-valuemax": "100",
        })
        (self.page.document.body or self.page.root).insert(0, self.bar)
        for event_type in (Scrolled, Resized, ContentMutated):
            self._unsubscribe.append(self.page.events.subscribe(event_type, self._on_signal))
        logger.debug("Reading progress mounted; end marker %r", self.end_selector)
        self.recompute()

    def unmount(self) -> None:
        for unsubscribe in self._unsubscribe:
            unsubscribe()
        self._unsubscribe.clear()
        self._frames.cancel()
        if self.bar is not None:
            self.bar.extract()
            self.bar = None

    def _on_signal(self, event) -> None:
        self.request_update()

    def request_update(self) -> None:
        self._frames.request()

    def recompute(self) -> float:
        viewport = self.page.viewport
        content = self.page.content
        end = self.page.document.select_one(self.end_selector) if self.end_selector else None
        self.progress, self.visible = reading_progress(
            viewport.top_of(content),
            viewport.bottom_of(content),
            viewport.top_of(end) if end is not None else None,
            viewport.height,
        )
        self._paint()
        return self.progress

    def _paint(self) -> None:
        if self.bar is None:
            return
        scale = self.progress if self.visible else 0.0
        self.bar["aria-valuenow"] = str(self.percent)
        self.bar["data-visible"] = "true" if self.visible else "false"
        self.bar["style"] = f"transform: scaleX({scale:.3f})"
