import asyncio
import threading

import pytest

from mycontacts.contacts.access import AuthorizationState, LocalContactsAccess
from mycontacts.core.events import EventBus
from mycontacts.security.gate import GateBranch, PermissionGate
from mycontacts.ui.context import UiContext


class GrantRecorder:
    def __init__(self):
        self.calls = 0
        self.threads = []

    def __call__(self):
        self.calls += 1
        self.threads.append(threading.get_ident())


def test_authorized_loads_immediately(presenter, ui, fake_access_factory):
    access = fake_access_factory(AuthorizationState.AUTHORIZED)
    granted = GrantRecorder()
    gate = PermissionGate(access, ui, presenter, granted)

    assert gate.evaluate() == GateBranch.GRANTED
    assert granted.calls == 1
    assert access.requests == []
    assert presenter.alerts == []


@pytest.mark.parametrize("state", [AuthorizationState.DENIED, AuthorizationState.RESTRICTED])
def test_denied_or_restricted_shows_privacy_warning(presenter, ui, fake_access_factory, state):
    access = fake_access_factory(state)
    granted = GrantRecorder()
    events = EventBus()
    gate = PermissionGate(access, ui, presenter, granted, events=events)

    assert gate.evaluate() == GateBranch.WARNED
    assert granted.calls == 0
    assert access.requests == []
    assert len(presenter.alerts) == 1
    alert = presenter.alerts[0]
    assert alert.title == "Privacy Warning!"
    assert alert.message == "Permission was not granted for Contacts."
    assert [a.title for a in alert.actions] == ["OK"]
    assert events.get_history("alert.presented")


def test_not_determined_requests_only_once(presenter, ui, fake_access_factory):
    access = fake_access_factory(AuthorizationState.NOT_DETERMINED)
    gate = PermissionGate(access, ui, presenter, GrantRecorder())

    assert gate.evaluate() == GateBranch.REQUESTED
    assert gate.evaluate() == GateBranch.REQUESTED
    assert len(access.requests) == 1
    assert gate.has_requested is True


@pytest.mark.asyncio
async def test_granted_request_resumes_on_ui_context(presenter, fake_access_factory, wait_for):
    ui = UiContext(asyncio.get_running_loop())
    access = fake_access_factory(AuthorizationState.NOT_DETERMINED)
    granted = GrantRecorder()
    gate = PermissionGate(access, ui, presenter, granted)

    gate.evaluate()
    access.resolve_from_thread(True)

    # Posted, not run inline on the worker thread.
    assert granted.calls == 0
    assert await wait_for(lambda: granted.calls == 1)
    assert granted.threads == [threading.get_ident()]


@pytest.mark.asyncio
async def test_declined_request_is_silent(presenter, fake_access_factory, wait_for):
    ui = UiContext(asyncio.get_running_loop())
    access = fake_access_factory(AuthorizationState.NOT_DETERMINED)
    granted = GrantRecorder()
    gate = PermissionGate(access, ui, presenter, granted)

    gate.evaluate()
    access.resolve_from_thread(False)
    await wait_for(lambda: False, attempts=5)

    assert granted.calls == 0
    assert presenter.alerts == []


def test_local_access_resolves_on_worker_thread():
    changes = []
    access = LocalContactsAccess(AuthorizationState.NOT_DETERMINED, grant_on_request=True, on_change=changes.append)
    results = []

    access.request_access(lambda granted, error: results.append((granted, error, threading.get_ident())))
    access.join(timeout=5)

    assert len(results) == 1
    granted, error, thread_id = results[0]
    assert granted is True
    assert error is None
    assert thread_id != threading.get_ident()
    assert access.check_access() == AuthorizationState.AUTHORIZED
    assert changes == [AuthorizationState.AUTHORIZED]


def test_local_access_declines_when_configured():
    access = LocalContactsAccess("not_determined", grant_on_request=False)
    results = []

    access.request_access(lambda granted, error: results.append(granted))
    access.join(timeout=5)

    assert results == [False]
    assert access.check_access() == AuthorizationState.DENIED


def test_authorization_state_parse():
    assert AuthorizationState.parse("Authorized") == AuthorizationState.AUTHORIZED
    assert AuthorizationState.parse("not-determined") == AuthorizationState.NOT_DETERMINED
    with pytest.raises(ValueError):
        AuthorizationState.parse("maybe")
