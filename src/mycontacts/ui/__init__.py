"""UI module - presenter interface, screen descriptions and the UI context.

The Qt main window lives in `mycontacts.ui.window` and is imported on demand.
"""

from mycontacts.ui.context import UiContext
from mycontacts.ui.presenter import Presenter
from mycontacts.ui.screens import Alert, AlertAction, ContactPickerScreen, ContactViewMode, ContactViewScreen

__all__ = [
    "Alert",
    "AlertAction",
    "ContactPickerScreen",
    "ContactViewMode",
    "ContactViewScreen",
    "Presenter",
    "UiContext",
]
