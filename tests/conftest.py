import asyncio
import sys
import threading
from pathlib import Path

import pytest


def pytest_configure():
    # Ensure `src/` is on sys.path so `import mycontacts` works without an editable install.
    root = Path(__file__).resolve().parent.parent
    src = root / "src"
    if src.exists():
        p = str(src)
        if p not in sys.path:
            sys.path.insert(0, p)


class RecordingPresenter:
    """Headless presenter that records what the app asked it to show."""

    def __init__(self):
        self.alerts = []
        self.alert_threads = []
        self.presented = []
        self.pushed = []
        self.dismissed = []
        self.reloads = 0
        self.closed = False

    def present_alert(self, alert):
        self.alerts.append(alert)
        self.alert_threads.append(threading.get_ident())

    def present(self, screen):
        self.presented.append(screen)

    def push(self, screen):
        self.pushed.append(screen)

    def dismiss(self, screen=None):
        self.dismissed.append(screen)
        for stack in (self.presented, self.pushed):
            if screen in stack:
                stack.remove(screen)

    def reload(self):
        self.reloads += 1

    def close(self):
        self.closed = True


class FakeAccess:
    """Authorization provider whose request resolves only when the test says so."""

    def __init__(self, state):
        self.state = state
        self.requests = []

    def check_access(self):
        return self.state

    def request_access(self, callback):
        self.requests.append(callback)

    def resolve_from_thread(self, granted, error=None):
        callback = self.requests[-1]
        t = threading.Thread(target=callback, args=(granted, error))
        t.start()
        t.join()


@pytest.fixture
def presenter():
    return RecordingPresenter()


@pytest.fixture
def fake_access_factory():
    return FakeAccess


@pytest.fixture
def ui():
    """A UI context bound to the test thread; run_or_post executes inline."""
    from mycontacts.ui.context import UiContext

    loop = asyncio.new_event_loop()
    try:
        yield UiContext(loop)
    finally:
        loop.close()


@pytest.fixture
def menu_file(tmp_path):
    path = tmp_path / "Menu.plist"
    path.write_text(
        """<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE plist PUBLIC "-//Apple//DTD PLIST 1.0//EN" "http://www.apple.com/DTDs/PropertyList-1.0.dtd">
<plist version="1.0">
<array>
    <dict><key>title</key><string>Display Picker</string><key>description</key><string></string></dict>
    <dict><key>title</key><string>Create New Contact</string><key>description</key><string></string></dict>
    <dict><key>title</key><string>Display and Edit Contact</string><key>description</key><string>Shows Appleseed.</string></dict>
    <dict><key>title</key><string>Edit Unknown Contact</string><key>description</key><string>Shows an unknown email.</string></dict>
</array>
</plist>
""",
        encoding="utf-8",
    )
    return path


async def drain(predicate, attempts: int = 200):
    """Let the running loop process posted callbacks until `predicate()` holds."""
    for _ in range(attempts):
        if predicate():
            return True
        await asyncio.sleep(0.005)
    return predicate()


@pytest.fixture
def wait_for():
    return drain
