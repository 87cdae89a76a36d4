"""Unit tests for runtime/progress.py"""

import asyncio

import pytest

from mdblog.runtime.events import ContentMutated, Scrolled
from mdblog.runtime.platform import MemoryViewport
from mdblog.runtime.progress import ReadingProgress, reading_progress


@pytest.mark.parametrize("top,bottom,end_top,expected", [
    (None, None, None, (0.0, False)),
    (900, 2900, None, (0.0, False)),
    (800, 2800, None, (0.0, True)),
    (-600, 1400, None, (0.5, True)),
    (-2500, -500, None, (1.0, True)),
    (-200, 1800, 1800, (0.5, True)),
    (-200, 1800, 300, (1.0, True)),
    (100, 100, 100, (1.0, True)),
    (100, None, None, (0.0, False)),
])
def test_reading_progress(top, bottom, end_top, expected):
    """Progress runs from the article entering the viewport to its end leaving it."""
    assert reading_progress(top, bottom, end_top, 800) == expected


@pytest.fixture(name="viewport")
def viewport_fixture():
    return MemoryViewport(offsets={"article": 900}, bottoms={"article": 2900}, height=800)


@pytest.fixture(name="progress_page")
def progress_page_fixture(make_page, article, viewport):
    page = make_page(markup=article + '<footer id="author-bio">Bio</footer>', viewport=viewport)
    page.content["id"] = "article"
    return page


@pytest.fixture(name="tracker")
def tracker_fixture(progress_page):
    tracker = ReadingProgress(progress_page, frame_interval=0)
    yield tracker
    tracker.unmount()


def _bar(page):
    return page.document.select_one("div.reading-progress")


def test_mount_paints_hidden_bar(tracker, progress_page):
    """Before the article is in view the bar is present, empty, and hidden."""
    tracker.mount()
    bar = _bar(progress_page)
    assert bar["role"] == "progressbar"
    assert bar["aria-label"] == "Reading progress"
    assert bar["aria-valuenow"] == "0"
    assert bar["data-visible"] == "false"
    assert bar["style"] == "transform: scaleX(0.000)"
    assert bar.parent.name == "body"


@pytest.mark.asyncio
async def test_scroll_updates_on_next_frame(tracker, progress_page, viewport):
    tracker.mount()
    viewport.offsets["article"] = -600
    viewport.bottoms["article"] = 1400
    progress_page.events.publish(Scrolled())
    assert tracker.progress == 0.0
    await asyncio.sleep(0.01)

    assert tracker.progress == 0.5
    assert tracker.visible
    bar = _bar(progress_page)
    assert bar["aria-valuenow"] == "50"
    assert bar["data-visible"] == "true"
    assert bar["style"] == "transform: scaleX(0.500)"


@pytest.mark.asyncio
async def test_burst_of_signals_coalesces(tracker, progress_page, monkeypatch):
    tracker.mount()
    calls = []
    monkeypatch.setattr(tracker, "_paint", lambda: calls.append(1))
    for _ in range(5):
        progress_page.events.publish(Scrolled())
    progress_page.events.publish(ContentMutated())
    await asyncio.sleep(0.01)
    assert len(calls) == 1


def test_end_marker_completes_reading(progress_page, viewport):
    """With an end marker, reading completes when the marker reaches the viewport bottom."""
    viewport.offsets.update({"article": -200, "author-bio": 800})
    tracker = ReadingProgress(progress_page, end_selector="#author-bio")
    tracker.mount()
    assert tracker.percent == 100
    viewport.offsets["author-bio"] = 1800
    assert tracker.recompute() == 0.5
    tracker.unmount()


def test_signal_without_loop_recomputes_now(tracker, progress_page, viewport):
    tracker.mount()
    viewport.offsets["article"] = -2500
    viewport.bottoms["article"] = -500
    progress_page.events.publish(Scrolled())
    assert tracker.percent == 100


def test_unmount_removes_bar_and_listeners(tracker, progress_page):
    tracker.mount()
    tracker.unmount()
    assert _bar(progress_page) is None
    assert progress_page.events.listener_count(Scrolled) == 0


def test_double_mount_rejected(tracker):
    tracker.mount()
    with pytest.raises(RuntimeError, match="already mounted"):
        tracker.mount()
