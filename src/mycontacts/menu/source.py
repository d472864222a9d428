"""
Menu source - loads the static menu configuration.

The canonical file is a property list (`Menu.plist`) holding an array of
`{title, description}` dictionaries. YAML and JSON files with the same shape
are accepted by suffix. A missing or malformed file yields an empty menu.
"""

from __future__ import annotations

import json
import plistlib
from importlib import resources
from pathlib import Path
from typing import Any, List, Optional, Tuple

import yaml
from loguru import logger
from pydantic import ValidationError

from mycontacts.menu.models import MenuEntry


def bundled_menu_path() -> Path:
    """Path of the Menu.plist shipped with the package."""
    return Path(str(resources.files("mycontacts") / "resources" / "Menu.plist"))


class MenuSource:
    """Reads menu entries once per call to `load`."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else bundled_menu_path()

    def load(self) -> Tuple[MenuEntry, ...]:
        if not self.path.exists():
            logger.warning(f"Menu configuration not found: {self.path}")
            return ()

        try:
            data = self._read(self.path)
        except Exception as e:
            logger.warning(f"Failed to read menu configuration {self.path}: {e}")
            return ()

        if not isinstance(data, list):
            logger.warning(f"Menu configuration {self.path} must be an array, got {type(data).__name__}")
            return ()

        entries: List[MenuEntry] = []
        for i, item in enumerate(data):
            try:
                entries.append(MenuEntry.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Menu configuration {self.path} entry {i} is invalid: {e}")
                return ()

        logger.debug(f"Loaded {len(entries)} menu entries from {self.path}")
        return tuple(entries)

    @staticmethod
    def _read(path: Path) -> Any:
        suffix = path.suffix.lower()
        if suffix == ".plist":
            with path.open("rb") as f:
                return plistlib.load(f)
        content = path.read_text(encoding="utf-8")
        if suffix in (".yaml", ".yml"):
            return yaml.safe_load(content)
        return json.loads(content)
