"""
Contact-flow callback handlers.

Receives completion and cancellation events from the picker and the
viewer/editor and closes the flow on the UI context.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from loguru import logger

from mycontacts.contacts.models import Contact, ContactProperty, full_name, localized_key
from mycontacts.ui.screens import (
    Alert,
    AlertAction,
    ContactPickerDelegate,
    ContactPickerScreen,
    ContactViewDelegate,
    ContactViewScreen,
    Screen,
)

if TYPE_CHECKING:
    from mycontacts.core.events import EventBus
    from mycontacts.ui.context import UiContext
    from mycontacts.ui.presenter import Presenter


def picked_message(prop: ContactProperty) -> str:
    return f"Picked {localized_key(prop.key)} for {full_name(prop.contact)}"


class ContactFlowHandler(ContactPickerDelegate, ContactViewDelegate):
    """Shared delegate for every flow the dispatcher starts."""

    def __init__(self, presenter: "Presenter", ui: "UiContext", events: Optional["EventBus"] = None):
        self._presenter = presenter
        self._ui = ui
        self._events = events

    # Picker

    def picker_did_select_property(self, picker: ContactPickerScreen, prop: ContactProperty) -> None:
        message = picked_message(prop)
        logger.info(message)
        alert = Alert(title="Picker Result", message=message, actions=(AlertAction("OK"),))
        # Pickers may report from their own thread.
        self._ui.run_or_post(self._finish_with_alert, picker, alert)

    def picker_did_cancel(self, picker: ContactPickerScreen) -> None:
        logger.debug("Contact picker cancelled")
        self._ui.run_or_post(self._dismiss, picker)

    # Viewer / editor

    def contact_view_did_complete(self, view: ContactViewScreen, contact: Optional[Contact]) -> None:
        if contact is not None:
            logger.info(f"Contact view completed with contact {contact.identifier}")
        else:
            logger.debug("Contact view completed without a contact")
        self._ui.run_or_post(self._dismiss, view)

    def contact_view_should_perform_default_action(self, view: ContactViewScreen, prop: ContactProperty) -> bool:
        return True

    # UI context only

    def show_alert(self, alert: Alert) -> None:
        self._presenter.present_alert(alert)
        if self._events:
            self._events.emit("alert.presented", {"title": alert.title, "message": alert.message}, source="flows")

    def _finish_with_alert(self, picker: ContactPickerScreen, alert: Alert) -> None:
        self._dismiss(picker)
        self.show_alert(alert)

    def _dismiss(self, screen: Screen) -> None:
        self._presenter.dismiss(screen)
        if self._events:
            self._events.emit("flow.dismissed", {"screen": type(screen).__name__}, source="flows")
