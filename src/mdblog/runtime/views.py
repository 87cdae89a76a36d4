"""Sub-views mounted into injected containers: alert icons, copy buttons, and image zoom"""

import asyncio
import logging
from collections.abc import Callable

from bs4 import BeautifulSoup, Tag

from mdblog.runtime.platform import Clipboard


logger = logging.getLogger(__name__)


class View:
    """Renders markup into one container node between mount and unmount."""

    def __init__(self):
        self.container: Tag | None = None

    @property
    def mounted(self) -> bool:
        return self.container is not None

    def render(self) -> str:
        raise NotImplementedError

    def mount(self, container: Tag) -> None:
        if self.container is not None:
            raise RuntimeError(f"{type(self).__name__} is already mounted")
        self.container = container
        self.paint()

    def paint(self) -> None:
        self.container.clear()
        for node in list(BeautifulSoup(self.render(), "html.parser").contents):
            self.container.append(node)

    def unmount(self) -> None:
        if self.container is None:
            raise RuntimeError(f"{type(self).__name__} is not mounted")
        self.container.clear()
        self.container = None


ICON_PATHS = {
    "note": "M0 8a8 8 0 1 1 16 0A8 8 0 0 1 0 8Zm8-6.5a6.5 6.5 0 1 0 0 13 6.5 6.5 0 0 0 0-13ZM6.5 7.75A.75.75 0 0 1 7.25 7h1a.75.75 0 0 1 .75.75v2.75h.25a.75.75 0 0 1 0 1.5h-2a.75.75 0 0 1 0-1.5h.25v-2h-.25a.75.75 0 0 1-.75-.75ZM8 6a1 1 0 1 1 0-2 1 1 0 0 1 0 2Z",
    "tip": "M8 1.5c-2.363 0-4 1.69-4 3.75 0 .984.424 1.625.984 2.304l.214.253c.223.264.47.556.673.848.284.411.537.896.621 1.49a.75.75 0 0 1-1.484.211c-.04-.282-.163-.547-.37-.847a8.456 8.456 0 0 0-.542-.68c-.084-.1-.173-.205-.268-.32C3.201 7.75 2.5 6.766 2.5 5.25 2.5 2.31 4.863 0 8 0s5.5 2.31 5.5 5.25c0 1.516-.701 2.5-1.328 3.259-.095.115-.184.22-.268.319-.207.245-.383.453-.541.681-.208.3-.33.565-.37.847a.751.751 0 0 1-1.485-.212c.084-.593.337-1.078.621-1.489.203-.292.45-.584.673-.848.075-.088.147-.173.213-.253.561-.679.985-1.32.985-2.304 0-2.06-1.637-3.75-4-3.75ZM5.75 12h4.5a.75.75 0 0 1 0 1.5h-4.5a.75.75 0 0 1 0-1.5ZM6 15.25a.75.75 0 0 1 .75-.75h2.5a.75.75 0 0 1 0 1.5h-2.5a.75.75 0 0 1-.75-.75Z",
    "important": "M0 1.75C0 .784.784 0 1.75 0h12.5C15.216 0 16 .784 16 1.75v9.5A1.75 1.75 0 0 1 14.25 13H8.06l-2.573 2.573A1.458 1.458 0 0 1 3 14.543V13H1.75A1.75 1.75 0 0 1 0 11.25Zm1.75-.25a.25.25 0 0 0-.25.25v9.5c0 .138.112.25.25.25h2a.75.75 0 0 1 .75.75v2.19l2.72-2.72a.749.749 0 0 1 .53-.22h6.5a.25.25 0 0 0 .25-.25v-9.5a.25.25 0 0 0-.25-.25Zm7 2.25v2.5a.75.75 0 0 1-1.5 0v-2.5a.75.75 0 0 1 1.5 0ZM9 9a1 1 0 1 1-2 0 1 1 0 0 1 2 0Z",
    "warning": "M6.457 1.047c.659-1.234 2.427-1.234 3.086 0l6.082 11.378A1.75 1.75 0 0 1 14.082 15H1.918a1.75 1.75 0 0 1-1.543-2.575Zm1.763.707a.25.25 0 0 0-.44 0L1.698 13.132a.25.25 0 0 0 .22.368h12.164a.25.25 0 0 0 .22-.368Zm.53 3.996v2.5a.75.75 0 0 1-1.5 0v-2.5a.75.75 0 0 1 1.5 0ZM9 11a1 1 0 1 1-2 0 1 1 0 0 1 2 0Z",
    "caution": "M4.47.22A.749.749 0 0 1 5 0h6c.199 0 .389.079.53.22l4.25 4.25c.141.14.22.331.22.53v6a.749.749 0 0 1-.22.53l-4.25 4.25A.749.749 0 0 1 11 16H5a.749.749 0 0 1-.53-.22L.22 11.53A.749.749 0 0 1 0 11V5c0-.199.079-.389.22-.53Zm.84 1.28L1.5 5.31v5.38l3.81 3.81h5.38l3.81-3.81V5.31L10.69 1.5ZM8 4a.75.75 0 0 1 .75.75v3.5a.75.75 0 0 1-1.5 0v-3.5A.75.75 0 0 1 8 4Zm0 8a1 1 0 1 1 0-2 1 1 0 0 1 0 2Z",
}

ICON_TYPES = frozenset(ICON_PATHS)


class AlertIconView(View):
    def __init__(self, icon_type: str):
        super().__init__()
        if icon_type not in ICON_PATHS:
            raise ValueError(f"Unsupported alert icon '{icon_type}'")
        self.icon_type = icon_type

    def render(self) -> str:
        return (
            f'<svg class="alert-icon alert-icon-{self.icon_type}" viewBox="0 0 16 16" '
            f'width="20" height="20" fill="currentColor" aria-hidden="true">'
            f'<path d="{ICON_PATHS[self.icon_type]}"></path></svg>'
        )


class CopyButtonView(View):
    """Copy-to-clipboard control; shows the copied label for reset_after seconds."""

    def __init__(self, text: str, clipboard: Clipboard, labels: Callable[[str], str], reset_after: float = 2.0):
        super().__init__()
        self.text = text
        self.clipboard = clipboard
        self.labels = labels
        self.reset_after = reset_after
        self.copied = False
        self._reset: asyncio.TimerHandle | None = None

    def render(self) -> str:
        state = "copied" if self.copied else "idle"
        label = self.labels("code.copied" if self.copied else "code.copy")
        soup = BeautifulSoup("", "html.parser")
        button = soup.new_tag("button", attrs={
            "type": "button",
            "class": ["copy-button"],
            "data-state": state,
            "aria-label": self.labels("code.copy_label"),
        })
        button.string = label
        return str(button)

    async def copy(self) -> bool:
        """Copy via the clipboard API, falling back to legacy copy; never raises."""
        try:
            await self.clipboard.write_text(self.text)
        except Exception as e:
            logger.debug("Clipboard API copy failed (%s); trying legacy copy", e)
            try:
                copied = self.clipboard.exec_copy(self.text)
            except Exception as legacy_error:
                logger.debug("Legacy copy failed: %s", legacy_error)
                copied = False
            if not copied:
                return False
        self._show_copied()
        return True

    def _show_copied(self) -> None:
        self.copied = True
        if self.mounted:
            self.paint()
        if self._reset is not None:
            self._reset.cancel()
        self._reset = asyncio.get_running_loop().call_later(self.reset_after, self._clear_copied)

    def _clear_copied(self) -> None:
        self._reset = None
        self.copied = False
        if self.mounted:
            self.paint()

    def unmount(self) -> None:
        if self._reset is not None:
            self._reset.cancel()
            self._reset = None
        super().unmount()


ENHANCED_ATTR = "data-enhanced"
ZOOMABLE_CLASS = "zoomable"


class ImageZoomView(View):
    """Click-to-zoom for one article image.

    Mounting marks the image as enhanced and zoomable; unmounting removes both
    marks. While open, the container holds a modal dialog with the full image
    and a close button.
    """

    def __init__(self, image: Tag, labels: Callable[[str], str]):
        super().__init__()
        self.image = image
        self.labels = labels
        self.is_open = False

    def render(self) -> str:
        if not self.is_open:
            return ""
        alt = self.image.get("alt") or ""
        soup = BeautifulSoup("", "html.parser")
        dialog = soup.new_tag("div", attrs={
            "class": ["image-zoom-modal"],
            "role": "dialog",
            "aria-modal": "true",
            "aria-label": alt or self.labels("image.preview"),
        })
        close = soup.new_tag("button", attrs={
            "type": "button",
            "class": ["image-zoom-close"],
            "aria-label": self.labels("image.close"),
        })
        close.string = "×"
        dialog.append(close)
        dialog.append(soup.new_tag("img", attrs={
            "src": self.image.get("src") or "",
            "alt": alt,
            "class": ["image-zoom-image"],
        }))
        return str(dialog)

    def mount(self, container: Tag) -> None:
        super().mount(container)
        self.image[ENHANCED_ATTR] = "true"
        classes = self.image.get("class") or []
        if ZOOMABLE_CLASS not in classes:
            self.image["class"] = classes + [ZOOMABLE_CLASS]

    def open(self) -> None:
        if not self.mounted:
            raise RuntimeError("ImageZoomView is not mounted")
        self.is_open = True
        self.paint()

    def close(self) -> None:
        self.is_open = False
        if self.mounted:
            self.paint()

    def unmount(self) -> None:
        self.is_open = False
        if self.image.has_attr(ENHANCED_ATTR):
            del self.image[ENHANCED_ATTR]
        classes = [c for c in (self.image.get("class") or []) if c != ZOOMABLE_CLASS]
        if classes:
            self.image["class"] = classes
        elif self.image.has_attr("class"):
            del self.image["class"]
        super().unmount()
