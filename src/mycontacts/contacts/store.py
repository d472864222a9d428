from __future__ import annotations

import re
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import Iterable, List, Optional, Sequence
from uuid import uuid4

from loguru import logger

from mycontacts.contacts.models import (
    ALL_KEYS,
    Contact,
    LabeledValue,
    MutableContact,
    label_for_name,
    label_name,
)


class ContactStoreError(Exception):
    """Raised when the contacts file cannot be read or a fetch request is invalid."""


# Characters with meaning inside a table row; each is written with a backslash.
_SPECIAL = "\\|;="


def _escape(text: str) -> str:
    s = str(text or "").replace("\r", " ").replace("\n", " ")
    return "".join("\\" + ch if ch in _SPECIAL else ch for ch in s)


def _unescape(text: str) -> str:
    return re.sub(r"\\(.)", r"\1", text)


def _split_unescaped(text: str, sep: str, maxsplit: int = -1) -> List[str]:
    """Split on `sep` where it is not backslash-escaped; escapes are left in place."""
    parts: List[str] = []
    current: List[str] = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "\\" and i + 1 < len(text):
            current.append(text[i : i + 2])
            i += 2
            continue
        if ch == sep and len(parts) != maxsplit:
            parts.append("".join(current))
            current = []
        else:
            current.append(ch)
        i += 1
    parts.append("".join(current))
    return parts


def _parse_values(cell: str) -> tuple:
    out: List[LabeledValue] = []
    for part in _split_unescaped(str(cell or ""), ";"):
        part = part.strip()
        if not part:
            continue
        pieces = _split_unescaped(part, "=", maxsplit=1)
        if len(pieces) == 2:
            label, value = pieces
            out.append(LabeledValue(value=_unescape(value.strip()), label=label_for_name(_unescape(label))))
        else:
            out.append(LabeledValue(value=_unescape(part)))
    return tuple(out)


def _render_values(values: Iterable[LabeledValue]) -> str:
    parts = []
    for v in values:
        label = label_name(v.label)
        value = _escape(v.value.strip())
        parts.append(f"{_escape(label)}={value}" if label else value)
    return "; ".join(parts)


def _row_cells(line: str) -> List[str]:
    """Cells of one `| a | b |` table row, still escaped."""
    parts = _split_unescaped(line.strip(), "|")[1:]
    if len(parts) > 1 and not parts[-1].strip():
        parts = parts[:-1]
    return parts


def _parse_birthday(value: str) -> Optional[date]:
    s = str(value or "").strip()
    if not s:
        return None
    try:
        return date.fromisoformat(s)
    except ValueError:
        logger.debug(f"Ignoring unparsable birthday: {s!r}")
        return None


class ContactStore:
    """
    Markdown-backed contacts store.

    Canonical format:

    | identifier | given_name | family_name | organization | phones | emails | birthday |

    Multi-valued cells hold `label=value` pairs separated by `;`. A literal
    `\`, `|`, `;` or `=` inside a value is written with a backslash before it.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> List[Contact]:
        if not self.path.exists():
            return []
        try:
            text = self.path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise ContactStoreError(f"Failed to read {self.path}: {e}") from e
        return self._parse_markdown(text)

    def save(self, contacts: Iterable[Contact]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        normalized = list(contacts)
        normalized.sort(key=lambda c: ((c.family_name or "").lower(), (c.given_name or "").lower()))
        self.path.write_text(self._render_markdown(normalized), encoding="utf-8")

    def get(self, identifier: str) -> Optional[Contact]:
        for c in self.load():
            if c.identifier == identifier:
                return c
        return None

    def add(self, draft: MutableContact) -> Contact:
        contact = draft.freeze(identifier=str(uuid4()))
        existing = self.load()
        existing.append(contact)
        self.save(existing)
        logger.info(f"Contact added: {contact.identifier}")
        return contact

    def update(self, contact: Contact) -> Contact:
        existing = self.load()
        updated = [c for c in existing if c.identifier != contact.identifier]
        if len(updated) == len(existing):
            raise ContactStoreError(f"No contact with identifier {contact.identifier}")
        updated.append(contact)
        self.save(updated)
        logger.info(f"Contact updated: {contact.identifier}")
        return contact

    def save_draft(self, draft: MutableContact) -> Contact:
        """Persist a draft, updating in place when it came from an existing contact."""
        if draft.identifier and self.get(draft.identifier) is not None:
            return self.update(draft.freeze(identifier=draft.identifier))
        return self.add(replace(draft, identifier=None))

    def unified_contacts_matching_name(
        self, name: str, keys_to_fetch: Sequence[str] = ALL_KEYS
    ) -> List[Contact]:
        """
        Return contacts whose name matches `name`.

        Every word of the query must prefix-match one of the contact's name
        components (given name, family name or organization), ignoring case.
        """
        unknown = [k for k in keys_to_fetch if k not in ALL_KEYS]
        if unknown:
            raise ContactStoreError(f"Unknown keys to fetch: {', '.join(unknown)}")

        words = [w for w in str(name or "").lower().split() if w]
        if not words:
            return []

        out: List[Contact] = []
        for c in self.load():
            components = " ".join([c.given_name, c.family_name, c.organization_name]).lower().split()
            if all(any(comp.startswith(w) for comp in components) for w in words):
                out.append(c)
        return out

    @staticmethod
    def _parse_markdown(text: str) -> List[Contact]:
        lines = [ln.rstrip("\n") for ln in (text or "").splitlines()]
        # Find the first markdown table header
        header_idx = -1
        for i, ln in enumerate(lines):
            if ln.strip().startswith("|") and "identifier" in ln.lower():
                header_idx = i
                break
        if header_idx < 0:
            return []

        header_cols = [c.strip().lower() for c in _row_cells(lines[header_idx])]
        col_map = {name: idx for idx, name in enumerate(header_cols) if name}

        def _raw(row: List[str], key: str) -> str:
            idx = col_map.get(key)
            if idx is None or idx >= len(row):
                return ""
            return row[idx].strip()

        def _get(row: List[str], key: str) -> str:
            return _unescape(_raw(row, key))

        out: List[Contact] = []
        for ln in lines[header_idx + 1 :]:
            s = ln.strip()
            if not s.startswith("|"):
                # End table on first non-row line
                break
            cells = [c.strip() for c in _row_cells(s)]
            # Skip separator row
            if all(set(c) <= {"-"} for c in cells if c):
                continue

            identifier = _get(cells, "identifier")
            if not identifier:
                continue
            out.append(
                Contact(
                    identifier=identifier,
                    given_name=_get(cells, "given_name"),
                    family_name=_get(cells, "family_name"),
                    organization_name=_get(cells, "organization"),
                    phone_numbers=_parse_values(_raw(cells, "phones")),
                    email_addresses=_parse_values(_raw(cells, "emails")),
                    birthday=_parse_birthday(_get(cells, "birthday")),
                )
            )
        return out

    @staticmethod
    def _render_markdown(contacts: List[Contact]) -> str:
        def _cell(v: str) -> str:
            return _escape(str(v or "").strip())

        header = [
            "# Contacts",
            "",
            "| identifier | given_name | family_name | organization | phones | emails | birthday |",
            "| --- | --- | --- | --- | --- | --- | --- |",
        ]
        rows: List[str] = []
        for c in contacts:
            birthday = c.birthday.isoformat() if c.birthday else ""
            rows.append(
                f"| {_cell(c.identifier)} | {_cell(c.given_name)} | {_cell(c.family_name)} "
                f"| {_cell(c.organization_name)} | {_render_values(c.phone_numbers)} "
                f"| {_render_values(c.email_addresses)} | {_cell(birthday)} |"
            )
        return "\n".join(header + rows + [""])
