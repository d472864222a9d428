"""
Screen descriptions handed to the presenter.

These describe *what* to show (an alert, a contact picker, a contact
viewer/editor) and who receives the result; the presenter decides how.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from mycontacts.contacts.models import (
    ALL_KEYS,
    BIRTHDAY_KEY,
    EMAIL_ADDRESSES_KEY,
    PHONE_NUMBERS_KEY,
    Contact,
    ContactProperty,
    MutableContact,
)


@dataclass(frozen=True)
class AlertAction:
    title: str
    style: str = "default"


@dataclass(frozen=True)
class Alert:
    """A one-shot informational alert; every action simply dismisses it."""

    title: str
    message: str
    actions: Tuple[AlertAction, ...] = (AlertAction("OK"),)


class ContactPickerDelegate(ABC):
    """Receives the outcome of a contact picker."""

    @abstractmethod
    def picker_did_select_property(self, picker: "ContactPickerScreen", prop: ContactProperty) -> None:
        pass

    @abstractmethod
    def picker_did_cancel(self, picker: "ContactPickerScreen") -> None:
        pass


class ContactViewDelegate(ABC):
    """Receives the outcome of a contact viewer/editor."""

    @abstractmethod
    def contact_view_did_complete(self, view: "ContactViewScreen", contact: Optional[Contact]) -> None:
        pass

    @abstractmethod
    def contact_view_should_perform_default_action(
        self, view: "ContactViewScreen", prop: ContactProperty
    ) -> bool:
        pass


@dataclass(eq=False)
class ContactPickerScreen:
    delegate: ContactPickerDelegate
    displayed_property_keys: Tuple[str, ...] = (PHONE_NUMBERS_KEY, EMAIL_ADDRESSES_KEY, BIRTHDAY_KEY)


class ContactViewMode(str, Enum):
    EXISTING = "existing"
    NEW = "new"
    UNKNOWN = "unknown"


@dataclass(eq=False)
class ContactViewScreen:
    """
    A contact viewer/editor.

    `EXISTING` shows a stored contact, `NEW` edits an empty draft that the
    editor may save, `UNKNOWN` shows a transient record the user can save as
    a new contact.
    """

    mode: ContactViewMode
    delegate: ContactViewDelegate
    contact: Union[Contact, MutableContact, None] = None
    allows_editing: bool = False
    allows_actions: bool = False
    alternate_name: Optional[str] = None
    title: Optional[str] = None
    message: Optional[str] = None
    # Wrap in its own navigation stack when presented modally.
    embed_in_navigation: bool = False

    @classmethod
    def for_contact(cls, contact: Contact, delegate: ContactViewDelegate) -> "ContactViewScreen":
        return cls(mode=ContactViewMode.EXISTING, delegate=delegate, contact=contact)

    @classmethod
    def for_new_contact(
        cls, delegate: ContactViewDelegate, contact: Optional[MutableContact] = None
    ) -> "ContactViewScreen":
        return cls(
            mode=ContactViewMode.NEW,
            delegate=delegate,
            contact=contact if contact is not None else MutableContact(),
            allows_editing=True,
        )

    @classmethod
    def for_unknown_contact(cls, contact: MutableContact, delegate: ContactViewDelegate) -> "ContactViewScreen":
        return cls(mode=ContactViewMode.UNKNOWN, delegate=delegate, contact=contact)

    @staticmethod
    def descriptor_for_required_keys() -> Tuple[str, ...]:
        """Keys a viewer needs fetched to display a contact."""
        return ALL_KEYS


Screen = Union[ContactPickerScreen, ContactViewScreen]
