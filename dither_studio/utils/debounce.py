"""Timer-based coalescing of rapid requests."""

from __future__ import annotations

import asyncio
from typing import Callable


class Debouncer:
    """Call ``callback`` once after the requests stop coming.

    Every ``schedule`` cancels the pending call and arms a new one, so a
    burst of changes results in a single call ``delay`` seconds after the
    last of them. Must be used from a running event loop.
    """

    def __init__(self, callback: Callable[[], object]) -> None:
        self._callback = callback
        self._handle: asyncio.TimerHandle | None = None

    def schedule(self, delay: float) -> None:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(delay, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def _fire(self) -> None:
        self._handle = None
        self._callback()
