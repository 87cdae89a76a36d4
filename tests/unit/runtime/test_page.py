"""Unit tests for runtime/page.py"""

from mdblog.runtime.events import ContentChanged, ContentMutated, ThemeChanged
from mdblog.runtime.page import Page, default_labels


SHELL = '<html><body><article class="blog-content"><p id="a">A</p></article></body></html>'


def test_content_region_selected():
    page = Page(SHELL)
    assert page.content.name == "article"


def test_content_falls_back_to_document():
    page = Page("<p>loose</p>")
    assert page.content is page.document


def test_set_theme_publishes_on_change_only():
    page = Page(SHELL)
    seen = []
    page.events.subscribe(ThemeChanged, seen.append)
    page.set_theme(True)
    page.set_theme(True)
    page.set_theme(False)
    assert seen == [ThemeChanged(dark=True), ThemeChanged(dark=False)]
    assert page.dark is False


def test_swap_content_announces_mutation_then_change():
    page = Page(SHELL)
    seen = []
    page.events.subscribe(ContentMutated, lambda e: seen.append("mutated"))
    page.events.subscribe(ContentChanged, lambda e: seen.append(e.key))
    page.swap_content("<p id='b'>B</p>", key="next")
    assert seen == ["mutated", "next"]
    assert page.find_by_id("a") is None
    assert page.find_by_id("b").get_text() == "B"


def test_contains_tracks_detachment():
    page = Page(SHELL)
    node = page.find_by_id("a")
    assert page.contains(node)
    node.extract()
    assert not page.contains(node)


def test_default_labels_fall_back_to_key():
    assert default_labels("code.copy") == "Copy"
    assert default_labels("unknown.key") == "unknown.key"
