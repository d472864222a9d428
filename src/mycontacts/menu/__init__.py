"""Menu module - static menu configuration and the table controller."""

from mycontacts.menu.controller import MenuController, RowAppearance
from mycontacts.menu.models import MenuEntry
from mycontacts.menu.source import MenuSource

__all__ = ["MenuController", "MenuEntry", "MenuSource", "RowAppearance"]
