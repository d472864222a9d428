import asyncio
import threading
from datetime import date

import pytest

from mycontacts.contacts.models import (
    BIRTHDAY_KEY,
    EMAIL_ADDRESSES_KEY,
    LABEL_OTHER,
    LABEL_WORK,
    PHONE_NUMBERS_KEY,
    Contact,
    ContactProperty,
    LabeledValue,
    MutableContact,
)
from mycontacts.contacts.store import ContactStore
from mycontacts.core.events import EventBus
from mycontacts.flows.actions import ActionType
from mycontacts.flows.dispatcher import ActionDispatcher
from mycontacts.flows.handlers import picked_message
from mycontacts.ui.context import UiContext
from mycontacts.ui.screens import ContactPickerScreen, ContactViewMode, ContactViewScreen


def _appleseed() -> MutableContact:
    return MutableContact(
        given_name="John",
        family_name="Appleseed",
        email_addresses=[LabeledValue("John-Appleseed@mac.com", LABEL_WORK)],
        birthday=date(1980, 6, 1),
    )


@pytest.fixture
def store(tmp_path):
    return ContactStore(tmp_path / "contacts.md")


def test_display_contact_not_found_shows_error(store, presenter, ui):
    events = EventBus()
    dispatcher = ActionDispatcher(store, presenter, ui, events=events)

    assert dispatcher.run(ActionType.DISPLAY_CONTACT) is None

    assert presenter.pushed == []
    assert len(presenter.alerts) == 1
    alert = presenter.alerts[0]
    assert alert.title == "Error"
    assert alert.message == "Could not find Appleseed in the Contacts application."
    assert [a.title for a in alert.actions] == ["Cancel"]
    assert events.get_history("alert.presented")[0].data["title"] == "Error"


def test_display_contact_pushes_editable_view(store, presenter, ui):
    saved = store.add(_appleseed())
    store.add(MutableContact(given_name="Kate", family_name="Bell"))
    dispatcher = ActionDispatcher(store, presenter, ui)

    view = dispatcher.run(ActionType.DISPLAY_CONTACT)

    assert presenter.alerts == []
    assert presenter.pushed == [view]
    assert view.mode == ContactViewMode.EXISTING
    assert view.allows_editing is True
    assert view.contact == saved


def test_lookup_failure_is_reported_as_not_found(tmp_path, presenter, ui):
    # A directory where the contacts file should be cannot be read.
    broken = tmp_path / "contacts.md"
    broken.mkdir()
    dispatcher = ActionDispatcher(ContactStore(broken), presenter, ui)

    dispatcher.show_contact()

    assert presenter.pushed == []
    assert "Appleseed" in presenter.alerts[0].message


def test_create_new_contact_is_modal_and_dismissed_on_completion(store, presenter, ui):
    dispatcher = ActionDispatcher(store, presenter, ui)

    view = dispatcher.run(ActionType.CREATE_NEW_CONTACT)

    assert presenter.presented == [view]
    assert view.mode == ContactViewMode.NEW
    assert view.embed_in_navigation is True
    assert isinstance(view.contact, MutableContact)
    assert view.contact == MutableContact()

    saved = store.add(_appleseed())
    view.delegate.contact_view_did_complete(view, saved)

    assert presenter.presented == []
    assert presenter.dismissed == [view]


def test_edit_unknown_contact_builds_fresh_draft(store, presenter, ui):
    dispatcher = ActionDispatcher(store, presenter, ui)

    first = dispatcher.run(ActionType.EDIT_UNKNOWN_CONTACT)
    second = dispatcher.run(ActionType.EDIT_UNKNOWN_CONTACT)

    assert presenter.pushed == [first, second]
    assert first.contact is not second.contact
    assert first.mode == ContactViewMode.UNKNOWN
    assert first.allows_editing is True
    assert first.allows_actions is True
    assert first.alternate_name == "John Appleseed"
    assert first.title == "John Appleseed"
    assert first.message == "Company, Inc"
    assert first.contact.email_addresses == [LabeledValue("John-Appleseed@mac.com", LABEL_OTHER)]
    # Nothing is persisted just by showing the draft.
    assert store.load() == []


def test_default_action_is_always_approved(store, presenter, ui):
    dispatcher = ActionDispatcher(store, presenter, ui)
    view = dispatcher.show_unknown_contact()
    contact = view.contact.freeze(identifier="x")
    prop = ContactProperty(contact, EMAIL_ADDRESSES_KEY, "John-Appleseed@mac.com", LABEL_OTHER)

    assert view.delegate.contact_view_should_perform_default_action(view, prop) is True


def test_picker_shows_only_phone_email_birthday(store, presenter, ui):
    dispatcher = ActionDispatcher(store, presenter, ui)

    picker = dispatcher.run(ActionType.PICK_CONTACT)

    assert isinstance(picker, ContactPickerScreen)
    assert presenter.presented == [picker]
    assert picker.displayed_property_keys == (PHONE_NUMBERS_KEY, EMAIL_ADDRESSES_KEY, BIRTHDAY_KEY)


def test_picker_cancel_dismisses(store, presenter, ui):
    dispatcher = ActionDispatcher(store, presenter, ui)
    picker = dispatcher.show_contact_picker()

    picker.delegate.picker_did_cancel(picker)

    assert presenter.dismissed == [picker]
    assert presenter.alerts == []


def test_picked_message_format():
    contact = Contact(identifier="1", given_name="Kate", family_name="Bell")
    prop = ContactProperty(contact, PHONE_NUMBERS_KEY, "(555) 564-8583")

    assert picked_message(prop) == "Picked phone for Kate Bell"


@pytest.mark.asyncio
async def test_picked_property_alert_runs_on_ui_context(store, presenter, wait_for):
    ui = UiContext(asyncio.get_running_loop())
    dispatcher = ActionDispatcher(store, presenter, ui)
    picker = dispatcher.show_contact_picker()
    contact = Contact(
        identifier="1",
        given_name="John",
        family_name="Appleseed",
        email_addresses=(LabeledValue("John-Appleseed@mac.com", LABEL_WORK),),
    )
    prop = ContactProperty(contact, EMAIL_ADDRESSES_KEY, "John-Appleseed@mac.com", LABEL_WORK)

    t = threading.Thread(target=picker.delegate.picker_did_select_property, args=(picker, prop))
    t.start()
    t.join()

    assert presenter.alerts == []
    assert await wait_for(lambda: len(presenter.alerts) == 1)
    assert presenter.alerts[0].message == "Picked email for John Appleseed"
    assert presenter.alert_threads == [threading.get_ident()]
    assert presenter.dismissed == [picker]
