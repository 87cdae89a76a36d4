"""Unit tests for ImageZoomInjector and ImageZoomView"""

import asyncio

import pytest

from mdblog.runtime.enhancers import ImageZoomInjector


GALLERY = (
    '<p><img src="/images/chart.png" alt="Chart"></p>'
    '<p>Between the pictures.</p>'
    '<p><img src="/images/map.png"></p>'
)


@pytest.fixture(name="zoom_page")
def zoom_page_fixture(make_page):
    return make_page(markup=GALLERY)


@pytest.fixture(name="injector")
def injector_fixture(zoom_page):
    return ImageZoomInjector(zoom_page, settle_delay=0)


def _images(page):
    return [img for img in page.content.find_all("img") if "image-zoom-image" not in (img.get("class") or [])]


def test_inject_marks_images(injector, zoom_page):
    """Each image is marked enhanced and gets an empty zoom container beside it."""
    assert injector.inject() == 2
    for img in _images(zoom_page):
        assert img["data-enhanced"] == "true"
        assert "zoomable" in img["class"]
        container = img.find_next_sibling()
        assert container["class"] == ["image-zoom-container"]
        assert container.contents == []


def test_built_article_images_are_enhanced(make_page):
    page = make_page("Intro.\n\n![Diagram](/public/images/flow.png)\n")
    assert ImageZoomInjector(page).inject() == 1
    assert page.content.find("img")["data-enhanced"] == "true"


def test_already_enhanced_images_skipped(injector, zoom_page):
    """A fresh injector leaves images an earlier pass enhanced alone."""
    injector.inject()
    assert injector.inject() == 0
    assert ImageZoomInjector(zoom_page).inject() == 0
    assert len(zoom_page.content.select(".image-zoom-container")) == 2


def test_image_without_src_skipped(make_page):
    page = make_page(markup='<p><img alt="nothing"></p>')
    assert ImageZoomInjector(page).inject() == 0


def test_open_shows_modal_and_locks_page(injector, zoom_page):
    injector.inject()
    chart = _images(zoom_page)[0]
    assert injector.open(chart) is True

    dialog = zoom_page.content.select_one("div.image-zoom-modal")
    assert dialog["role"] == "dialog"
    assert dialog["aria-modal"] == "true"
    assert dialog["aria-label"] == "Chart"
    assert dialog.find("img", class_="image-zoom-image")["src"] == "/images/chart.png"
    assert dialog.find("button", class_="image-zoom-close")["aria-label"] == "Close image preview"
    assert "image-zoom-open" in zoom_page.root["class"]
    assert injector.active is injector.view_for(chart)


def test_untitled_image_uses_preview_label(injector, zoom_page):
    injector.inject()
    injector.open(_images(zoom_page)[1])
    assert zoom_page.content.select_one("div.image-zoom-modal")["aria-label"] == "Image preview"


def test_opening_another_image_closes_the_first(injector, zoom_page):
    injector.inject()
    chart, map_ = _images(zoom_page)
    injector.open(chart)
    injector.open(map_)
    dialogs = zoom_page.content.select("div.image-zoom-modal")
    assert len(dialogs) == 1
    assert dialogs[0].find("img")["src"] == "/images/map.png"


def test_open_unknown_image_is_noop(injector, zoom_page):
    injector.inject()
    stranger = zoom_page.new_tag("img", {"src": "/x.png"})
    assert injector.open(stranger) is False
    assert injector.active is None


def test_escape_closes_and_tab_is_trapped(injector, zoom_page):
    injector.inject()
    assert injector.handle_key("Escape") is False
    injector.open(_images(zoom_page)[0])
    assert injector.handle_key("Tab") is True
    assert injector.handle_key("Enter") is False
    assert injector.handle_key("Escape") is True
    assert zoom_page.content.select("div.image-zoom-modal") == []
    assert "class" not in zoom_page.root.attrs


def test_rescan_ignores_modal_image(injector, zoom_page):
    injector.inject()
    injector.open(_images(zoom_page)[0])
    assert injector.inject() == 0


@pytest.mark.asyncio
async def test_unmount_removes_marks_next_turn(injector, zoom_page):
    """Teardown closes the modal, unlocks the page, and strips every mark it added."""
    injector.mount("gallery")
    await injector.settled()
    injector.open(_images(zoom_page)[0])
    injector.unmount()
    assert "class" not in zoom_page.root.attrs
    await asyncio.sleep(0)
    assert zoom_page.content.select(".image-zoom-container") == []
    for img in zoom_page.content.find_all("img"):
        assert not img.has_attr("data-enhanced")
        assert not img.has_attr("class")


@pytest.mark.asyncio
async def test_content_swap_reinjects(injector, zoom_page):
    injector.mount("first")
    await injector.settled()
    zoom_page.swap_content('<p><img src="/images/other.png" alt="Other"></p>', key="second")
    await injector.settled()
    img = zoom_page.content.find("img")
    assert img["data-enhanced"] == "true"
    assert injector.view_for(img) is not None
    assert len(injector.overlays) == 1
    injector.unmount()
