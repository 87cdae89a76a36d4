"""Per-frame throttle shared by the scroll-driven trackers"""

import asyncio
from collections.abc import Callable


FRAME_INTERVAL = 1 / 60


class FrameThrottle:
    """Runs callback at most once per frame.

    Requests made while a frame is pending coalesce into it. Outside a running
    event loop there is no frame to wait for, so the callback runs at once.
    """

    def __init__(self, callback: Callable[[], object], interval: float = FRAME_INTERVAL):
        self.callback = callback
        self.interval = interval
        self._pending: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def request(self) -> None:
        if self._pending is not None:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self.callback()
            return
        self._pending = loop.call_later(self.interval, self._fire)

    def cancel(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _fire(self) -> None:
        self._pending = None
        self.callback()
