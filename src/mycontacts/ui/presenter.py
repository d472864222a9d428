from abc import ABC, abstractmethod
from typing import Optional

from mycontacts.ui.screens import Alert, Screen


class Presenter(ABC):
    """
    Capability interface over the UI surface.

    All methods must be called on the UI context.
    """

    @abstractmethod
    def present_alert(self, alert: Alert) -> None:
        """Show a blocking alert."""
        pass

    @abstractmethod
    def present(self, screen: Screen) -> None:
        """Present a screen modally over the menu."""
        pass

    @abstractmethod
    def push(self, screen: Screen) -> None:
        """Push a screen onto the navigation stack."""
        pass

    @abstractmethod
    def dismiss(self, screen: Optional[Screen] = None) -> None:
        """Dismiss a presented or pushed screen (the topmost one when None)."""
        pass

    def reload(self) -> None:
        """Re-read the menu rows. Optional for headless presenters."""
        return None

    def close(self) -> None:
        return None
