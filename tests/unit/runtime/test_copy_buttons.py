"""Unit tests for CopyButtonInjector and CopyButtonView"""

import asyncio

import pytest

from mdblog.runtime.enhancers import CopyButtonInjector


@pytest.fixture(name="injector")
def injector_fixture(page):
    return CopyButtonInjector(page, settle_delay=0, reset_after=0.01)


def _python_wrapper(page):
    return next(w for w in page.content.select("div.code-block-wrapper")
                if w.find("pre")["data-language"] == "python")


def test_inject_adds_button_inside_scroll_wrapper(injector, page):
    """The code block moves into a scroll wrapper that also holds the copy control."""
    assert injector.inject() == 1
    wrapper = _python_wrapper(page)
    scroll = wrapper.find("div", class_="code-scroll-wrapper")
    assert scroll.find("pre") is not None
    button = scroll.select_one("div.copy-button-container > button.copy-button")
    assert button.get_text() == "Copy"
    assert button["data-state"] == "idle"
    assert button["aria-label"] == "Copy code to clipboard"
    assert wrapper.find("div", class_="code-block-label").get_text() == "PYTHON"


def test_diagram_blocks_get_no_button(injector, page):
    injector.inject()
    diagram = page.content.select_one("pre[data-diagram]").find_parent("div", class_="code-block-wrapper")
    assert diagram.find(class_="copy-button-container") is None


def test_inject_is_idempotent(injector, page):
    injector.inject()
    assert injector.inject() == 0
    assert CopyButtonInjector(page).inject() == 0
    assert len(page.content.select(".copy-button-container")) == 1
    assert len(page.content.select(".code-scroll-wrapper")) == 1


@pytest.mark.asyncio
async def test_copy_writes_code_and_resets(injector, page, clipboard):
    """Copying shows the copied label, then returns to idle."""
    injector.inject()
    view = injector.view_for(_python_wrapper(page))
    assert await view.copy() is True
    assert clipboard.text == "answer = 42\n"
    button = view.container.find("button")
    assert button["data-state"] == "copied"
    assert button.get_text() == "Copied!"

    await asyncio.sleep(0.05)
    button = view.container.find("button")
    assert button["data-state"] == "idle"
    assert button.get_text() == "Copy"


@pytest.mark.asyncio
async def test_copy_falls_back_to_legacy(injector, page, clipboard):
    clipboard.api_available = False
    injector.inject()
    view = injector.view_for(_python_wrapper(page))
    assert await view.copy() is True
    assert clipboard.text == "answer = 42\n"


@pytest.mark.asyncio
async def test_copy_failure_never_raises(injector, page, clipboard):
    """With no clipboard path the control stays idle."""
    clipboard.api_available = False
    clipboard.legacy_available = False
    injector.inject()
    view = injector.view_for(_python_wrapper(page))
    assert await view.copy() is False
    assert view.container.find("button")["data-state"] == "idle"
    assert clipboard.text is None


@pytest.mark.asyncio
async def test_unmount_cancels_pending_reset(injector, page):
    injector.mount("overview")
    await injector.settled()
    view = injector.view_for(_python_wrapper(page))
    await view.copy()
    injector.unmount()
    await asyncio.sleep(0)
    assert page.content.select(".copy-button-container") == []
    assert not view.mounted
    await asyncio.sleep(0.05)
    assert not view.mounted


@pytest.mark.asyncio
async def test_content_swap_reinjects(injector, page):
    injector.mount("first")
    await injector.settled()
    page.swap_content(
        '<div class="code-block-wrapper"><div class="code-block-label">BASH</div>'
        '<pre class="language-bash" data-language="bash"><code class="language-bash">ls\n</code></pre></div>',
        key="second",
    )
    await injector.settled()
    wrapper = page.content.select_one("div.code-block-wrapper")
    assert injector.view_for(wrapper).text == "ls\n"
    injector.unmount()
