"""
Main application for MyContacts.

This module wires all components together and manages the application
lifecycle.
"""

import asyncio
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from loguru import logger

from mycontacts.config.manager import ConfigManager
from mycontacts.contacts.access import AuthorizationState, ContactsAccess, LocalContactsAccess
from mycontacts.contacts.store import ContactStore
from mycontacts.core.events import EventBus
from mycontacts.flows.dispatcher import ActionDispatcher, UnknownContactSettings
from mycontacts.menu.controller import MenuController
from mycontacts.menu.source import MenuSource
from mycontacts.security.gate import PermissionGate
from mycontacts.ui.context import UiContext
from mycontacts.ui.presenter import Presenter


class MyContactsApp:
    """
    Main application class that coordinates all MyContacts components.

    Startup order:
    - configuration
    - contacts store and authorization provider
    - UI context and presenter
    - dispatcher, menu controller and permission gate
    """

    def __init__(
        self,
        config_path: Optional[str] = None,
        presenter: Optional[Presenter] = None,
        access: Optional[ContactsAccess] = None,
    ):
        """
        Initialize the application.

        Args:
            config_path: Path to the configuration file
            presenter: UI surface; the Qt main window when omitted
            access: Authorization provider; the local one when omitted
        """
        self._running = False
        self._shutdown_event = asyncio.Event()
        self._config_path = config_path

        self.event_bus: EventBus = EventBus()
        self.config: Optional[ConfigManager] = None
        self.store: Optional[ContactStore] = None
        self.access: Optional[ContactsAccess] = access
        self.ui: Optional[UiContext] = None
        self.presenter: Optional[Presenter] = presenter
        self.dispatcher: Optional[ActionDispatcher] = None
        self.menu: Optional[MenuController] = None
        self.gate: Optional[PermissionGate] = None

        logger.info("MyContacts application instance created")

    async def startup(self) -> None:
        """Initialize all components in the correct order."""
        logger.info("Starting MyContacts...")

        # 1. Configuration
        self.config = ConfigManager(self._config_path)
        await self.config.load()

        # 2. Contacts data source
        self.store = ContactStore(Path(self.config.get("contacts.store_path", "data/contacts.md")))
        if self.access is None:
            self.access = LocalContactsAccess(
                state=self._configured_authorization(),
                grant_on_request=bool(self.config.get("contacts.grant_on_request", True)),
                on_change=self._on_authorization_changed,
            )
        logger.info(f"Contacts store at {self.store.path}")

        # 3. UI context and presenter
        self.ui = UiContext(asyncio.get_running_loop())
        if self.presenter is None:
            self.presenter = self._create_window()

        # 4. Flows, menu and gate
        self.dispatcher = ActionDispatcher(
            store=self.store,
            presenter=self.presenter,
            ui=self.ui,
            events=self.event_bus,
            search_name=str(self.config.get("demo.search_name", "Appleseed")),
            unknown_contact=UnknownContactSettings.from_dict(self.config.get("demo.unknown_contact", {})),
        )

        menu_path = self.config.get("menu.path")
        self.menu = MenuController(
            source=MenuSource(Path(menu_path) if menu_path else None),
            dispatcher=self.dispatcher,
            events=self.event_bus,
            row_height=self.config.get("ui.row_height", 44.0),
            edit_unknown_row_height=self.config.get("ui.edit_unknown_row_height", 81.0),
        )
        self.event_bus.subscribe("menu.loaded", self._on_menu_loaded)

        bind_menu = getattr(self.presenter, "bind_menu", None)
        if callable(bind_menu):
            bind_menu(self.menu)

        self.gate = PermissionGate(
            access=self.access,
            ui=self.ui,
            presenter=self.presenter,
            on_granted=self.menu.access_granted,
            events=self.event_bus,
        )

        self._running = True
        logger.success("MyContacts started")

        self.gate.evaluate()

    async def shutdown(self) -> None:
        """Gracefully shutdown all components."""
        if not self._running:
            return
        logger.info("Shutting down MyContacts...")
        self._running = False

        if self.presenter:
            self.presenter.close()

        if self.config:
            await self.config.save()

        self._shutdown_event.set()
        logger.success("MyContacts shutdown complete")

    async def run(self) -> None:
        """Run until the window closes or shutdown is requested."""
        logger.info("Entering main loop")
        try:
            await self._shutdown_event.wait()
        except asyncio.CancelledError:
            pass
        finally:
            await self.shutdown()

    def request_shutdown(self) -> None:
        """Ask `run` to return. Safe to call from UI callbacks."""
        self._shutdown_event.set()

    def _configured_authorization(self) -> AuthorizationState:
        value = self.config.get("contacts.authorization", "not_determined") if self.config else None
        try:
            return AuthorizationState.parse(value)
        except ValueError as e:
            logger.warning(f"{e}; treating as not determined")
            return AuthorizationState.NOT_DETERMINED

    def _on_authorization_changed(self, state: AuthorizationState) -> None:
        # Called from the access provider's worker thread.
        if self.ui and self.config:
            self.ui.post(self.config.set, "contacts.authorization", state.value)

    def _on_menu_loaded(self, _event) -> None:
        if self.presenter:
            self.presenter.reload()

    def _create_window(self) -> Presenter:
        from mycontacts.ui.window import MainWindow

        window = MainWindow(
            store=self.store,
            title=str(self.config.get("ui.title", "MyContacts")),
            width=int(self.config.get("ui.width", 420)),
            height=int(self.config.get("ui.height", 640)),
            on_close=self.request_shutdown,
        )
        window.show()
        return window

    @property
    def is_running(self) -> bool:
        """Check if the application is running."""
        return self._running


@asynccontextmanager
async def create_app(
    config_path: Optional[str] = None,
    presenter: Optional[Presenter] = None,
    access: Optional[ContactsAccess] = None,
):
    """Context manager for creating and running the app."""
    app = MyContactsApp(config_path, presenter=presenter, access=access)
    try:
        await app.startup()
        yield app
    finally:
        await app.shutdown()
