"""
Main Window - Qt rendition of the menu table and the contact screens.

PyQt6-based window with a navigation stack: the menu table at the bottom,
pushed contact viewers above it, and modal dialogs for the picker, the
new-contact editor and alerts.
"""

from datetime import date
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Tuple

from loguru import logger
from PyQt6.QtCore import Qt, QUrl
from PyQt6.QtGui import QDesktopServices
from PyQt6.QtWidgets import (
    QAbstractItemView,
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QMessageBox,
    QPlainTextEdit,
    QPushButton,
    QStackedWidget,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from mycontacts.contacts.models import (
    EMAIL_ADDRESSES_KEY,
    PHONE_NUMBERS_KEY,
    Contact,
    ContactProperty,
    LabeledValue,
    MutableContact,
    full_name,
    label_for_name,
    label_name,
    localized_key,
    localized_label,
    properties_for,
)
from mycontacts.contacts.store import ContactStore, ContactStoreError
from mycontacts.ui.presenter import Presenter
from mycontacts.ui.screens import Alert, ContactPickerScreen, ContactViewMode, ContactViewScreen, Screen

if TYPE_CHECKING:
    from mycontacts.menu.controller import MenuController


def _values_to_text(values) -> str:
    lines = []
    for v in values:
        label = label_name(v.label)
        lines.append(f"{label}: {v.value}" if label else v.value)
    return "\n".join(lines)


def _text_to_values(text: str) -> List[LabeledValue]:
    out: List[LabeledValue] = []
    for line in (text or "").splitlines():
        line = line.strip()
        if not line:
            continue
        if ": " in line:
            label, value = line.split(": ", 1)
            out.append(LabeledValue(value=value.strip(), label=label_for_name(label)))
        else:
            out.append(LabeledValue(value=line))
    return out


class MainWindow(Presenter):
    """
    Presenter backed by a Qt main window.

    Owns the window, the navigation stack of pushed screens and the modal
    dialogs currently on screen.
    """

    def __init__(
        self,
        store: ContactStore,
        title: str = "MyContacts",
        width: int = 420,
        height: int = 640,
        on_close: Optional[Callable[[], None]] = None,
    ):
        self._store = store
        self._menu: Optional["MenuController"] = None
        self._window = MenuWindow(title, width, height, on_close=on_close)
        self._window.table.cellClicked.connect(self._on_row_clicked)
        self._pushed: List[Tuple[Screen, QWidget]] = []
        self._modals: Dict[int, QDialog] = {}

        logger.info("Main window created")

    def bind_menu(self, menu: "MenuController") -> None:
        self._menu = menu
        self.reload()

    def show(self) -> None:
        self._window.show()

    # Presenter

    def reload(self) -> None:
        if self._menu is not None:
            self._window.populate(self._menu)

    def present_alert(self, alert: Alert) -> None:
        box = QMessageBox(self._window)
        box.setWindowTitle(alert.title)
        box.setText(alert.title)
        box.setInformativeText(alert.message)
        for action in alert.actions:
            box.addButton(action.title, QMessageBox.ButtonRole.AcceptRole)
        box.setWindowModality(Qt.WindowModality.ApplicationModal)
        box.open()

    def present(self, screen: Screen) -> None:
        if isinstance(screen, ContactPickerScreen):
            dialog: QDialog = ContactPickerDialog(screen, self._store, self._window)
        else:
            dialog = ContactViewDialog(screen, self._store, self._window)
        self._modals[id(screen)] = dialog
        dialog.open()

    def push(self, screen: Screen) -> None:
        if not isinstance(screen, ContactViewScreen):
            raise TypeError(f"Only contact views can be pushed, got {type(screen).__name__}")
        widget = ContactViewWidget(screen, self._store)
        self._pushed.append((screen, widget))
        self._window.stack.addWidget(widget)
        self._window.stack.setCurrentWidget(widget)

    def dismiss(self, screen: Optional[Screen] = None) -> None:
        if screen is not None and id(screen) in self._modals:
            self._modals.pop(id(screen)).finish_quietly()
            return

        if not self._pushed:
            if screen is None and self._modals:
                _, dialog = self._modals.popitem()
                dialog.finish_quietly()
            return

        index = len(self._pushed) - 1
        if screen is not None:
            matches = [i for i, (s, _) in enumerate(self._pushed) if s is screen]
            if not matches:
                logger.debug("Dismiss for a screen that is not on screen; ignoring")
                return
            index = matches[0]

        # Popping a screen also pops everything above it.
        while len(self._pushed) > index:
            _, widget = self._pushed.pop()
            self._window.stack.removeWidget(widget)
            widget.deleteLater()
        self._window.stack.setCurrentIndex(self._window.stack.count() - 1)

    def close(self) -> None:
        for dialog in list(self._modals.values()):
            dialog.close()
        self._modals.clear()
        self._window.close()

    def _on_row_clicked(self, row: int, _column: int) -> None:
        if self._menu is not None:
            self._menu.select(row)


class MenuWindow(QMainWindow):
    """Window hosting the menu table at the bottom of a navigation stack."""

    def __init__(self, title: str, width: int, height: int, on_close: Optional[Callable[[], None]] = None):
        super().__init__()
        self._on_close = on_close
        self.setWindowTitle(title)
        self.resize(width, height)

        self.stack = QStackedWidget()
        self.setCentralWidget(self.stack)

        self.table = QTableWidget(0, 1)
        self.table.horizontalHeader().setVisible(False)
        self.table.verticalHeader().setVisible(False)
        self.table.horizontalHeader().setSectionResizeMode(0, QHeaderView.ResizeMode.Stretch)
        self.table.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        self.table.setSelectionMode(QAbstractItemView.SelectionMode.NoSelection)
        self.table.setShowGrid(False)
        self.stack.addWidget(self.table)

    def populate(self, menu: "MenuController") -> None:
        self.table.clearContents()
        count = menu.section_count()
        self.table.setRowCount(count)

        for section in range(count):
            appearance = menu.appearance_for(section)
            self.table.setRowHeight(section, int(menu.row_height_for(section)))
            title = menu.title_for(section)

            if not appearance.shows_description:
                item = QTableWidgetItem(title)
                if appearance.centered:
                    item.setTextAlignment(Qt.AlignmentFlag.AlignCenter)
                self.table.setItem(section, 0, item)
                continue

            cell = QWidget()
            layout = QHBoxLayout(cell)
            layout.setContentsMargins(12, 4, 8, 4)
            text = QVBoxLayout()
            text.addWidget(QLabel(title))
            description = QLabel(menu.description_for(section) or "")
            description.setWordWrap(appearance.description_lines == 0)
            description.setStyleSheet("color: gray; font-size: 11px;")
            text.addWidget(description)
            layout.addLayout(text, stretch=1)
            if appearance.accessory == "disclosure":
                layout.addWidget(QLabel("›"))
            self.table.setItem(section, 0, QTableWidgetItem())
            self.table.setCellWidget(section, 0, cell)

    def closeEvent(self, event):
        """Handle window close."""
        if self._on_close:
            self._on_close()
        super().closeEvent(event)


class ContactPickerDialog(QDialog):
    """Lists contacts, then the displayed properties of the chosen one."""

    def __init__(self, screen: ContactPickerScreen, store: ContactStore, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._screen = screen
        self._finished = False
        self.setWindowTitle("Contacts")

        try:
            contacts = store.load()
        except ContactStoreError as e:
            logger.warning(f"Contact picker could not load contacts: {e}")
            contacts = []
        self._contacts: List[Contact] = sorted(contacts, key=lambda c: full_name(c).lower())

        layout = QVBoxLayout(self)
        self.contact_list = QListWidget()
        for c in self._contacts:
            self.contact_list.addItem(full_name(c) or "No Name")
        self.contact_list.currentRowChanged.connect(self._show_properties)
        layout.addWidget(self.contact_list)

        self.property_list = QListWidget()
        self.property_list.itemActivated.connect(self._on_property_activated)
        layout.addWidget(self.property_list)

        buttons = QDialogButtonBox(QDialogButtonBox.StandardButton.Cancel)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

        self.rejected.connect(self._on_rejected)

    def finish_quietly(self) -> None:
        self._finished = True
        self.close()

    def _show_properties(self, row: int) -> None:
        self.property_list.clear()
        if row < 0 or row >= len(self._contacts):
            return
        for prop in properties_for(self._contacts[row], self._screen.displayed_property_keys):
            label = localized_label(prop.label) or localized_key(prop.key)
            value = prop.value.isoformat() if isinstance(prop.value, date) else str(prop.value)
            item = QListWidgetItem(f"{label}: {value}")
            item.setData(Qt.ItemDataRole.UserRole, prop)
            self.property_list.addItem(item)

    def _on_property_activated(self, item: QListWidgetItem) -> None:
        if self._finished:
            return
        self._finished = True
        prop = item.data(Qt.ItemDataRole.UserRole)
        self._screen.delegate.picker_did_select_property(self._screen, prop)

    def _on_rejected(self) -> None:
        if self._finished:
            return
        self._finished = True
        self._screen.delegate.picker_did_cancel(self._screen)


class ContactViewWidget(QWidget):
    """Viewer/editor for one contact record."""

    def __init__(self, screen: ContactViewScreen, store: ContactStore, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._screen = screen
        self._store = store
        self._completed = False

        contact = screen.contact
        if isinstance(contact, Contact):
            draft = contact.mutable_copy()
        else:
            draft = contact or MutableContact()
        self._draft: MutableContact = draft

        layout = QVBoxLayout(self)

        heading = screen.title or screen.alternate_name or full_name(draft)
        if heading:
            title = QLabel(heading)
            title.setStyleSheet("font-size: 18px; font-weight: bold;")
            layout.addWidget(title)
        if screen.message:
            layout.addWidget(QLabel(screen.message))

        form = QFormLayout()
        self.given_name = QLineEdit(draft.given_name)
        self.family_name = QLineEdit(draft.family_name)
        self.organization = QLineEdit(draft.organization_name)
        self.phones = QPlainTextEdit(_values_to_text(draft.phone_numbers))
        self.emails = QPlainTextEdit(_values_to_text(draft.email_addresses))
        self.birthday = QLineEdit(draft.birthday.isoformat() if draft.birthday else "")
        self.birthday.setPlaceholderText("YYYY-MM-DD")
        form.addRow("First name", self.given_name)
        form.addRow("Last name", self.family_name)
        form.addRow("Company", self.organization)
        form.addRow("Phone", self.phones)
        form.addRow("Email", self.emails)
        form.addRow("Birthday", self.birthday)
        layout.addLayout(form)

        read_only = not screen.allows_editing
        for field in (self.given_name, self.family_name, self.organization, self.birthday):
            field.setReadOnly(read_only)
        for field in (self.phones, self.emails):
            field.setReadOnly(read_only)

        if screen.allows_actions:
            actions = QHBoxLayout()
            for key, caption in ((PHONE_NUMBERS_KEY, "Call"), (EMAIL_ADDRESSES_KEY, "Send Email")):
                button = QPushButton(caption)
                button.clicked.connect(lambda _checked=False, k=key: self._perform_default_action(k))
                actions.addWidget(button)
            layout.addLayout(actions)

        buttons = QHBoxLayout()
        buttons.addStretch()
        if screen.mode == ContactViewMode.UNKNOWN:
            create = QPushButton("Create New Contact")
            create.clicked.connect(self._save)
            buttons.addWidget(create)
            done = QPushButton("Done")
            done.clicked.connect(lambda: self._complete(None))
            buttons.addWidget(done)
        elif screen.mode == ContactViewMode.NEW:
            cancel = QPushButton("Cancel")
            cancel.clicked.connect(lambda: self._complete(None))
            buttons.addWidget(cancel)
            done = QPushButton("Done")
            done.clicked.connect(self._save)
            buttons.addWidget(done)
        else:
            done = QPushButton("Done")
            done.clicked.connect(self._save if screen.allows_editing else lambda: self._complete(None))
            buttons.addWidget(done)
        layout.addLayout(buttons)

    @property
    def completed(self) -> bool:
        return self._completed

    def _read_draft(self) -> MutableContact:
        birthday_text = self.birthday.text().strip()
        try:
            birthday = date.fromisoformat(birthday_text) if birthday_text else None
        except ValueError:
            logger.debug(f"Ignoring invalid birthday {birthday_text!r}")
            birthday = self._draft.birthday
        return MutableContact(
            given_name=self.given_name.text(),
            family_name=self.family_name.text(),
            organization_name=self.organization.text(),
            phone_numbers=_text_to_values(self.phones.toPlainText()),
            email_addresses=_text_to_values(self.emails.toPlainText()),
            birthday=birthday,
            identifier=self._draft.identifier,
        )

    def _save(self) -> None:
        try:
            contact = self._store.save_draft(self._read_draft())
        except (ContactStoreError, OSError) as e:
            logger.error(f"Failed to save contact: {e}")
            QMessageBox.warning(self, "Error", f"Could not save the contact: {e}")
            return
        self._complete(contact)

    def _complete(self, contact: Optional[Contact]) -> None:
        if self._completed:
            return
        self._completed = True
        self._screen.delegate.contact_view_did_complete(self._screen, contact)

    def _perform_default_action(self, key: str) -> None:
        values = _text_to_values((self.phones if key == PHONE_NUMBERS_KEY else self.emails).toPlainText())
        if not values:
            return
        first = values[0]
        snapshot = self._read_draft().freeze(identifier=self._draft.identifier or "")
        prop = ContactProperty(contact=snapshot, key=key, value=first.value, label=first.label)
        if not self._screen.delegate.contact_view_should_perform_default_action(self._screen, prop):
            return
        scheme = "tel:" if key == PHONE_NUMBERS_KEY else "mailto:"
        QDesktopServices.openUrl(QUrl(scheme + first.value))


class ContactViewDialog(QDialog):
    """Modal wrapper giving a contact view its own navigation context."""

    def __init__(self, screen: ContactViewScreen, store: ContactStore, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._screen = screen
        self._finished = False
        self.setWindowTitle(screen.title or "New Contact")
        layout = QVBoxLayout(self)
        self.view = ContactViewWidget(screen, store, self)
        layout.addWidget(self.view)
        self.rejected.connect(self._on_rejected)

    def finish_quietly(self) -> None:
        self._finished = True
        self.close()

    def _on_rejected(self) -> None:
        # Closing the dialog by hand counts as completing without a contact.
        if self._finished or self.view.completed:
            return
        self._finished = True
        self._screen.delegate.contact_view_did_complete(self._screen, None)
