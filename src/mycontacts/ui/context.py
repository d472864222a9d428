"""
UI context - the single execution context that owns all UI state.

Anything that completes off that context (the access request, picker
callbacks) hands its continuation back through `UiContext.post` before
touching menus, tables or alerts.
"""

import asyncio
import threading
from typing import Any, Callable, Optional

from loguru import logger


class UiContext:
    """Posts callbacks onto the event loop that drives the UI."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        """
        Bind to an event loop.

        Args:
            loop: The UI-owning loop (a qasync QEventLoop under Qt). Defaults
                to the running loop, so construct this on the UI thread.
        """
        self._loop = loop or asyncio.get_running_loop()
        self._thread_id = threading.get_ident()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop

    def is_current(self) -> bool:
        """True when called from the UI-owning thread."""
        return threading.get_ident() == self._thread_id

    def post(self, callback: Callable[..., Any], *args: Any) -> None:
        """Schedule `callback(*args)` on the UI context. Safe from any thread."""
        self._loop.call_soon_threadsafe(self._run, callback, args)

    def run_or_post(self, callback: Callable[..., Any], *args: Any) -> None:
        """Run inline when already on the UI context, otherwise post."""
        if self.is_current():
            self._run(callback, args)
        else:
            self.post(callback, *args)

    def _run(self, callback: Callable[..., Any], args: tuple) -> None:
        try:
            callback(*args)
        except Exception as e:
            logger.exception(f"UI callback {getattr(callback, '__name__', callback)!r} failed: {e}")
