"""
Permission Gate - contacts authorization at startup.

Decides, from the data source's authorization state, whether the menu may be
loaded, whether access has to be requested first, or whether the user only
gets a privacy warning.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional

from loguru import logger

from mycontacts.contacts.access import AuthorizationState, ContactsAccess
from mycontacts.ui.screens import Alert, AlertAction

if TYPE_CHECKING:
    from mycontacts.core.events import EventBus
    from mycontacts.ui.context import UiContext
    from mycontacts.ui.presenter import Presenter


PRIVACY_WARNING = Alert(
    title="Privacy Warning!",
    message="Permission was not granted for Contacts.",
    actions=(AlertAction("OK"),),
)


class GateBranch(str, Enum):
    """What the gate did for a given authorization state."""
    GRANTED = "granted"
    REQUESTED = "requested"
    WARNED = "warned"


class PermissionGate:
    """
    Security gate between the contacts data source and the menu.

    `on_granted` is always invoked on the UI context, at most once per
    evaluation path.
    """

    def __init__(
        self,
        access: ContactsAccess,
        ui: "UiContext",
        presenter: "Presenter",
        on_granted: Callable[[], None],
        events: Optional["EventBus"] = None,
    ):
        self._access = access
        self._ui = ui
        self._presenter = presenter
        self._on_granted = on_granted
        self._events = events
        self._requested = False

    @property
    def has_requested(self) -> bool:
        return self._requested

    def evaluate(self) -> GateBranch:
        """Read the authorization state and act on it. Call on the UI context."""
        state = self._access.check_access()
        logger.info(f"Contacts authorization: {state.value}")
        self._emit(state)

        if state == AuthorizationState.AUTHORIZED:
            self._on_granted()
            return GateBranch.GRANTED

        if state == AuthorizationState.NOT_DETERMINED:
            self._request()
            return GateBranch.REQUESTED

        self._presenter.present_alert(PRIVACY_WARNING)
        if self._events:
            self._events.emit(
                "alert.presented",
                {"title": PRIVACY_WARNING.title, "message": PRIVACY_WARNING.message},
                source="security",
            )
        return GateBranch.WARNED

    def _request(self) -> None:
        if self._requested:
            logger.debug("Contacts access already requested this session")
            return
        self._requested = True
        self._access.request_access(self._on_request_result)

    def _on_request_result(self, granted: bool, error: Optional[Exception]) -> None:
        # Arbitrary thread: nothing here may touch UI state.
        if error is not None:
            logger.warning(f"Contacts access request failed: {error}")

        if granted:
            self._ui.post(self._on_granted)
            return

        # A declined request leaves the menu empty with no alert and no retry.
        logger.warning("Contacts access request declined; menu stays empty")

    def _emit(self, state: AuthorizationState) -> None:
        if self._events:
            self._events.emit("contacts.authorization", {"state": state.value}, source="security")
