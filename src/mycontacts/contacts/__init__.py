"""Contacts data source - records, local store and authorization."""

from mycontacts.contacts.access import AuthorizationState, ContactsAccess, LocalContactsAccess
from mycontacts.contacts.models import Contact, ContactProperty, LabeledValue, MutableContact
from mycontacts.contacts.store import ContactStore, ContactStoreError

__all__ = [
    "AuthorizationState",
    "Contact",
    "ContactProperty",
    "ContactStore",
    "ContactStoreError",
    "ContactsAccess",
    "LabeledValue",
    "LocalContactsAccess",
    "MutableContact",
]
