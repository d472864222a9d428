"""
MyContacts - Contacts framework sample application

A permission-gated menu of four contact flows: pick a contact property,
create a new contact, display and edit an existing contact, and edit a
contact that is not yet in the address book.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "0.1.0"

if TYPE_CHECKING:
    from mycontacts.core.app import MyContactsApp as MyContactsApp

__all__ = ["MyContactsApp", "__version__"]


def __getattr__(name: str):
    # Lazy import to avoid pulling in the whole app when importing submodules.
    if name == "MyContactsApp":
        from mycontacts.core.app import MyContactsApp  # local import

        return MyContactsApp
    raise AttributeError(name)
