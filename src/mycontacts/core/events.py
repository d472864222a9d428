"""
Event bus for MyContacts.

The gate, the menu and the flows announce what happened on the UI context:
authorization resolved, menu loaded, a flow presented or dismissed, an alert
shown. The window listens for `menu.loaded` to redraw the table, and the
bounded history doubles as an audit trail for tests and debugging.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from loguru import logger


@dataclass
class Event:
    name: str
    data: Dict[str, Any]
    source: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)


EventHandler = Callable[[Event], None]


class EventBus:
    """
    Synchronous publish/subscribe.

    Every publisher runs on the UI context, so handlers are called inline in
    subscription order. A failing handler is logged and the rest still run.
    """

    def __init__(self, max_history: int = 200):
        self._handlers: Dict[str, List[EventHandler]] = defaultdict(list)
        self._history: List[Event] = []
        self._max_history = max_history

    def subscribe(self, event_name: str, handler: EventHandler) -> None:
        self._handlers[event_name].append(handler)
        logger.debug(f"Handler subscribed to '{event_name}'")

    def unsubscribe(self, event_name: str, handler: EventHandler) -> None:
        if handler in self._handlers.get(event_name, []):
            self._handlers[event_name].remove(handler)

    def emit(self, event_name: str, data: Dict[str, Any], source: Optional[str] = None) -> Event:
        """Record `event_name` and hand it to its subscribers."""
        event = Event(name=event_name, data=data, source=source)

        self._history.append(event)
        del self._history[: -self._max_history]

        for handler in list(self._handlers.get(event_name, [])):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Event handler error for '{event_name}': {e}")

        return event

    def get_history(self, event_name: Optional[str] = None, limit: int = 100) -> List[Event]:
        """Recent events, oldest first, optionally filtered by name."""
        events = self._history
        if event_name:
            events = [e for e in events if e.name == event_name]
        return events[-limit:]

    def clear_history(self) -> None:
        self._history.clear()
