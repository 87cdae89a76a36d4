"""Lifecycle table of injected overlays, keyed by target node identity"""

import asyncio
import logging
from dataclasses import dataclass

from bs4 import Tag

from mdblog.runtime.views import View


logger = logging.getLogger(__name__)


@dataclass
class InjectionRecord:
    target:    Tag
    container: Tag | None      # node inserted into the page, if any
    view:      View | None     # sub-view mounted in container, if any
    processed: bool = True


class OverlayManager:
    """Tracks what an enhancer injected so it is injected once and torn down once."""

    def __init__(self, name: str):
        self.name = name
        self._records: dict[int, InjectionRecord] = {}

    def __len__(self) -> int:
        return len(self._records)

    def has(self, target: Tag) -> bool:
        record = self._records.get(id(target))
        return record is not None and record.target is target and record.processed

    def add(self, target: Tag, container: Tag = None, view: View = None) -> InjectionRecord:
        record = InjectionRecord(target=target, container=container, view=view)
        self._records[id(target)] = record
        return record

    def records(self) -> list[InjectionRecord]:
        return list(self._records.values())

    def clear(self) -> None:
        """Forget every record now; unmount views and remove containers on the next loop turn."""
        records = self.records()
        self._records.clear()
        if not records:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._teardown(records)
        else:
            loop.call_soon(self._teardown, records)

    def _teardown(self, records: list[InjectionRecord]) -> None:
        for record in records:
            if record.view is not None:
                try:
                    record.view.unmount()
                except Exception as e:
                    logger.warning("%s: unmounting the view on <%s> failed: %s", self.name, getattr(record.target, "name", "?"), e)
            if record.container is not None and not getattr(record.container, "_decomposed", False):
                try:
                    record.container.extract()   # no-op for a node already detached
                except Exception as e:
                    logger.warning("%s: removing an overlay container failed: %s", self.name, e)
