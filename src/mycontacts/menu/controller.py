"""
Menu Controller - the table of demo actions.

One section per menu entry, one row per section. The first two rows look like
buttons; the others show a subtitle with the entry's description.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple

from loguru import logger

from mycontacts.flows.actions import ActionType, action_for_section
from mycontacts.menu.models import MenuEntry
from mycontacts.menu.source import MenuSource

if TYPE_CHECKING:
    from mycontacts.core.events import EventBus
    from mycontacts.flows.dispatcher import ActionDispatcher


DEFAULT_ROW_HEIGHT = 44.0
EDIT_UNKNOWN_CONTACT_ROW_HEIGHT = 81.0

DEFAULT_CELL_IDENTIFIER = "DefaultCell"
SUBTITLE_CELL_IDENTIFIER = "SubtitleCell"

# Sections below this index render as buttons.
BUTTON_SECTION_LIMIT = 2


@dataclass(frozen=True)
class RowAppearance:
    """How a menu row should be drawn."""

    reuse_identifier: str
    style: str
    centered: bool
    accessory: Optional[str]
    shows_description: bool
    # 0 means unlimited
    description_lines: int = 1


BUTTON_ROW = RowAppearance(
    reuse_identifier=DEFAULT_CELL_IDENTIFIER,
    style="default",
    centered=True,
    accessory=None,
    shows_description=False,
)

SUBTITLE_ROW = RowAppearance(
    reuse_identifier=SUBTITLE_CELL_IDENTIFIER,
    style="subtitle",
    centered=False,
    accessory="disclosure",
    shows_description=True,
    description_lines=0,
)


class MenuController:
    """
    Owns the menu entries and turns row selections into flows.

    Entries are loaded once, when contacts access is granted, and never
    change afterwards.
    """

    def __init__(
        self,
        source: MenuSource,
        dispatcher: "ActionDispatcher",
        events: Optional["EventBus"] = None,
        row_height: float = DEFAULT_ROW_HEIGHT,
        edit_unknown_row_height: float = EDIT_UNKNOWN_CONTACT_ROW_HEIGHT,
    ):
        self._source = source
        self._dispatcher = dispatcher
        self._events = events
        self._row_height = float(row_height)
        self._edit_unknown_row_height = float(edit_unknown_row_height)
        self._entries: Optional[Tuple[MenuEntry, ...]] = None

    def access_granted(self) -> None:
        """
        Load the menu and announce `menu.loaded` so the table redraws.

        Must run on the UI context.
        """
        if self._entries is not None:
            logger.debug("Menu already loaded; ignoring repeated grant")
            return

        self._entries = self._source.load()
        logger.info(f"Menu loaded with {len(self._entries)} sections")
        if self._events:
            self._events.emit("menu.loaded", {"sections": len(self._entries)}, source="menu")

    @property
    def is_loaded(self) -> bool:
        return self._entries is not None

    @property
    def entries(self) -> Tuple[MenuEntry, ...]:
        return self._entries or ()

    # Table data

    def section_count(self) -> int:
        return len(self._entries) if self._entries is not None else 0

    def rows_in_section(self, section: int) -> int:
        return 1

    def title_for(self, section: int) -> str:
        return self.entries[section].title

    def description_for(self, section: int) -> Optional[str]:
        return self.entries[section].description

    def row_height_for(self, section: int) -> float:
        if section == ActionType.EDIT_UNKNOWN_CONTACT:
            return self._edit_unknown_row_height
        return self._row_height

    def appearance_for(self, section: int) -> RowAppearance:
        return BUTTON_ROW if section < BUTTON_SECTION_LIMIT else SUBTITLE_ROW

    # Selection

    def select(self, section: int) -> ActionType:
        action = action_for_section(section)
        if action.value != section:
            logger.debug(f"Section {section} has no action, falling back to {action.name}")
        self._dispatcher.run(action)
        return action
