from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, List, Optional, Tuple


# Property keys understood by the store, the picker and the viewer.
PHONE_NUMBERS_KEY = "phoneNumbers"
EMAIL_ADDRESSES_KEY = "emailAddresses"
BIRTHDAY_KEY = "birthday"
GIVEN_NAME_KEY = "givenName"
FAMILY_NAME_KEY = "familyName"
ORGANIZATION_NAME_KEY = "organizationName"
IDENTIFIER_KEY = "identifier"

ALL_KEYS = (
    IDENTIFIER_KEY,
    GIVEN_NAME_KEY,
    FAMILY_NAME_KEY,
    ORGANIZATION_NAME_KEY,
    PHONE_NUMBERS_KEY,
    EMAIL_ADDRESSES_KEY,
    BIRTHDAY_KEY,
)

LABEL_HOME = "_$!<Home>!$_"
LABEL_WORK = "_$!<Work>!$_"
LABEL_OTHER = "_$!<Other>!$_"
LABEL_MOBILE = "_$!<Mobile>!$_"

_LABEL_NAMES = {
    LABEL_HOME: "home",
    LABEL_WORK: "work",
    LABEL_OTHER: "other",
    LABEL_MOBILE: "mobile",
}

_KEY_NAMES = {
    PHONE_NUMBERS_KEY: "phone",
    EMAIL_ADDRESSES_KEY: "email",
    BIRTHDAY_KEY: "birthday",
    GIVEN_NAME_KEY: "first name",
    FAMILY_NAME_KEY: "last name",
    ORGANIZATION_NAME_KEY: "company",
    IDENTIFIER_KEY: "identifier",
}


def localized_label(label: Optional[str]) -> str:
    """Display string for a labeled value's label ("" when unlabeled)."""
    if not label:
        return ""
    if label in _LABEL_NAMES:
        return _LABEL_NAMES[label]
    # Tokenised labels we do not know still read better without the wrapper.
    if label.startswith("_$!<") and label.endswith(">!$_"):
        return label[4:-4].lower()
    return label


def label_name(label: Optional[str]) -> str:
    """
    Storable name for a label.

    Built-in labels use their short name; any other label, tokenised or not,
    is kept verbatim so `label_for_name` gives it back unchanged.
    """
    if not label:
        return ""
    return _LABEL_NAMES.get(label, label)


def label_for_name(name: str) -> Optional[str]:
    """Inverse of `label_name`."""
    n = str(name or "").strip().lower()
    if not n:
        return None
    for token, display in _LABEL_NAMES.items():
        if display == n:
            return token
    return name.strip()


def localized_key(key: str) -> str:
    return _KEY_NAMES.get(key, key)


@dataclass(frozen=True)
class LabeledValue:
    value: str
    label: Optional[str] = None


@dataclass(frozen=True)
class Contact:
    identifier: str
    given_name: str = ""
    family_name: str = ""
    organization_name: str = ""
    phone_numbers: Tuple[LabeledValue, ...] = ()
    email_addresses: Tuple[LabeledValue, ...] = ()
    birthday: Optional[date] = None

    def value_for_key(self, key: str) -> Any:
        if key == IDENTIFIER_KEY:
            return self.identifier
        if key == GIVEN_NAME_KEY:
            return self.given_name
        if key == FAMILY_NAME_KEY:
            return self.family_name
        if key == ORGANIZATION_NAME_KEY:
            return self.organization_name
        if key == PHONE_NUMBERS_KEY:
            return self.phone_numbers
        if key == EMAIL_ADDRESSES_KEY:
            return self.email_addresses
        if key == BIRTHDAY_KEY:
            return self.birthday
        raise KeyError(key)

    def mutable_copy(self) -> "MutableContact":
        return MutableContact(
            given_name=self.given_name,
            family_name=self.family_name,
            organization_name=self.organization_name,
            phone_numbers=list(self.phone_numbers),
            email_addresses=list(self.email_addresses),
            birthday=self.birthday,
            identifier=self.identifier,
        )


@dataclass
class MutableContact:
    """Editable contact draft. `identifier` stays None until the store saves it."""

    given_name: str = ""
    family_name: str = ""
    organization_name: str = ""
    phone_numbers: List[LabeledValue] = field(default_factory=list)
    email_addresses: List[LabeledValue] = field(default_factory=list)
    birthday: Optional[date] = None
    identifier: Optional[str] = None

    def freeze(self, identifier: str) -> Contact:
        return Contact(
            identifier=identifier,
            given_name=self.given_name.strip(),
            family_name=self.family_name.strip(),
            organization_name=self.organization_name.strip(),
            phone_numbers=tuple(self.phone_numbers),
            email_addresses=tuple(self.email_addresses),
            birthday=self.birthday,
        )


@dataclass(frozen=True)
class ContactProperty:
    """A single property of a contact, as chosen in the picker."""

    contact: Contact
    key: str
    value: Any
    label: Optional[str] = None


def full_name(contact: Any) -> str:
    """
    Format a contact's display name.

    Falls back to the organization name and then to the first email address,
    the way an address book lists companies and bare addresses.
    """
    given = str(getattr(contact, "given_name", "") or "").strip()
    family = str(getattr(contact, "family_name", "") or "").strip()
    name = " ".join(p for p in (given, family) if p)
    if name:
        return name
    org = str(getattr(contact, "organization_name", "") or "").strip()
    if org:
        return org
    emails = getattr(contact, "email_addresses", None) or ()
    for email in emails:
        if email.value:
            return email.value
    return ""


def properties_for(contact: Contact, keys: Tuple[str, ...]) -> List[ContactProperty]:
    """Expand a contact into pickable properties, limited to `keys`."""
    out: List[ContactProperty] = []
    for key in keys:
        value = contact.value_for_key(key)
        if isinstance(value, tuple):
            for item in value:
                out.append(ContactProperty(contact=contact, key=key, value=item.value, label=item.label))
        elif value:
            out.append(ContactProperty(contact=contact, key=key, value=value))
    return out
