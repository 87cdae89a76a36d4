"""Typed publish/subscribe bus for page signals"""

import logging
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar


logger = logging.getLogger(__name__)

E = TypeVar("E")


@dataclass(frozen=True)
class ContentChanged:
    """A new document was swapped into the content region."""
    key: str


@dataclass(frozen=True)
class ThemeChanged:
    dark: bool


@dataclass(frozen=True)
class Scrolled:
    pass


@dataclass(frozen=True)
class Resized:
    pass


@dataclass(frozen=True)
class HeadingVisibilityChanged:
    ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class ContentMutated:
    """Nodes were inserted into or removed from the content region."""


class EventBus:
    """Event class -> subscribers, dispatched synchronously in subscription order.

    A subscriber that raises is logged and skipped; the remaining subscribers
    still receive the event.
    """

    def __init__(self):
        self._listeners: dict[type, dict[Callable[[Any], None], None]] = defaultdict(dict)

    def subscribe(self, event_type: type[E], listener: Callable[[E], None]) -> Callable[[], None]:
        """Register listener; returns a handle that unsubscribes it."""
        self._listeners[event_type][listener] = None

        def unsubscribe() -> None:
            self._listeners[event_type].pop(listener, None)

        return unsubscribe

    def publish(self, event: object) -> int:
        """Deliver event to its type's subscribers; returns how many ran without error."""
        delivered = 0
        for listener in list(self._listeners.get(type(event), ())):
            try:
                listener(event)
            except Exception:
                logger.exception("Listener %r failed on %s", listener, type(event).__name__)
                continue
            delivered += 1
        return delivered

    def listener_count(self, event_type: type) -> int:
        return len(self._listeners.get(event_type, ()))
