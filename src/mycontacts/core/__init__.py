"""Core application components."""

from mycontacts.core.app import MyContactsApp
from mycontacts.core.events import Event, EventBus

__all__ = ["MyContactsApp", "EventBus", "Event"]
