"""
Action Dispatcher - starts one of the four demo flows.

Each flow builds a screen description, wires the shared callback handler as
its delegate and hands it to the presenter.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from loguru import logger

from mycontacts.contacts.models import LabeledValue, LABEL_OTHER, MutableContact
from mycontacts.contacts.store import ContactStore, ContactStoreError
from mycontacts.flows.actions import ActionType
from mycontacts.flows.handlers import ContactFlowHandler
from mycontacts.ui.screens import (
    Alert,
    AlertAction,
    ContactPickerScreen,
    ContactViewScreen,
    Screen,
)

if TYPE_CHECKING:
    from mycontacts.contacts.models import Contact
    from mycontacts.core.events import EventBus
    from mycontacts.ui.context import UiContext
    from mycontacts.ui.presenter import Presenter


@dataclass(frozen=True)
class UnknownContactSettings:
    email: str = "John-Appleseed@mac.com"
    alternate_name: str = "John Appleseed"
    title: str = "John Appleseed"
    message: str = "Company, Inc"

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "UnknownContactSettings":
        data = data or {}
        defaults = cls()
        return cls(
            email=str(data.get("email") or defaults.email),
            alternate_name=str(data.get("alternate_name") or defaults.alternate_name),
            title=str(data.get("title") or defaults.title),
            message=str(data.get("message") or defaults.message),
        )


class ActionDispatcher:
    """Maps an `ActionType` to its flow and runs it on the UI context."""

    def __init__(
        self,
        store: ContactStore,
        presenter: "Presenter",
        ui: "UiContext",
        events: Optional["EventBus"] = None,
        search_name: str = "Appleseed",
        unknown_contact: Optional[UnknownContactSettings] = None,
    ):
        self._store = store
        self._presenter = presenter
        self._events = events
        self.search_name = search_name
        self.unknown_contact = unknown_contact or UnknownContactSettings()
        self.handler = ContactFlowHandler(presenter, ui, events)

    def run(self, action: ActionType) -> Optional[Screen]:
        logger.info(f"Running flow {action.name}")
        if action == ActionType.CREATE_NEW_CONTACT:
            return self.show_new_contact()
        if action == ActionType.DISPLAY_CONTACT:
            return self.show_contact()
        if action == ActionType.EDIT_UNKNOWN_CONTACT:
            return self.show_unknown_contact()
        return self.show_contact_picker()

    def show_contact_picker(self) -> ContactPickerScreen:
        """Let the user pick a phone number, email address or birthday of any contact."""
        picker = ContactPickerScreen(delegate=self.handler)
        self._presenter.present(picker)
        self._emit_presented(picker, "present")
        return picker

    def show_new_contact(self) -> ContactViewScreen:
        view = ContactViewScreen.for_new_contact(self.handler)
        view.embed_in_navigation = True
        self._presenter.present(view)
        self._emit_presented(view, "present")
        return view

    def show_contact(self) -> Optional[ContactViewScreen]:
        """
        Show the first contact matching `search_name`, editable.

        A store failure is reported the same way as no match.
        """
        name = self.search_name
        contacts = self._find_contacts(name)

        if not contacts:
            self.handler.show_alert(
                Alert(
                    title="Error",
                    message=f"Could not find {name} in the Contacts application.",
                    actions=(AlertAction("Cancel"),),
                )
            )
            return None

        view = ContactViewScreen.for_contact(contacts[0], self.handler)
        view.allows_editing = True
        self._presenter.push(view)
        self._emit_presented(view, "push")
        return view

    def show_unknown_contact(self) -> ContactViewScreen:
        settings = self.unknown_contact
        draft = MutableContact()
        draft.email_addresses.append(LabeledValue(value=settings.email, label=LABEL_OTHER))

        view = ContactViewScreen.for_unknown_contact(draft, self.handler)
        view.allows_editing = True
        view.allows_actions = True
        view.alternate_name = settings.alternate_name
        view.title = settings.title
        view.message = settings.message

        self._presenter.push(view)
        self._emit_presented(view, "push")
        return view

    def _find_contacts(self, name: str) -> List["Contact"]:
        keys = ContactViewScreen.descriptor_for_required_keys()
        try:
            return self._store.unified_contacts_matching_name(name, keys_to_fetch=keys)
        except ContactStoreError as e:
            # TODO: surface data-source failures separately from "not found".
            logger.warning(f"Contact lookup for {name!r} failed, treating as not found: {e}")
            return []

    def _emit_presented(self, screen: Screen, how: str) -> None:
        if self._events:
            self._events.emit(
                "flow.presented",
                {"screen": type(screen).__name__, "mode": getattr(screen, "mode", None), "how": how},
                source="flows",
            )
