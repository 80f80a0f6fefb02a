"""
Timed visibility window.

Shows something for a fixed number of seconds after the latest trigger.
Each trigger cancels the pending hide before scheduling a new one, so at
most one hide is ever pending.
"""

import asyncio
from typing import Callable, Optional

from app.chat_service.utils.logger import get_logger

logger = get_logger(__name__)


class RevealWindow:
    def __init__(
        self,
        seconds: float,
        on_change: Optional[Callable[[bool], None]] = None,
    ) -> None:
        self.seconds = seconds
        self.visible = False
        self._on_change = on_change
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def show(self) -> None:
        """Make visible and restart the hide countdown."""
        self._cancel_handle()

        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.seconds, self._hide)
        self._set_visible(True)

    def cancel(self) -> None:
        """Drop any pending hide. Safe to call repeatedly."""
        self._cancel_handle()

    def _cancel_handle(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _hide(self) -> None:
        self._handle = None
        self._set_visible(False)

    def _set_visible(self, visible: bool) -> None:
        if self.visible == visible:
            return

        self.visible = visible
        logger.debug("Reveal window visibility changed", extra={"visible": visible})

        if self._on_change:
            self._on_change(visible)
