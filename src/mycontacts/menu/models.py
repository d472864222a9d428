"""
Menu models (Pydantic).

Defines the schema of the menu configuration file: an ordered array of
dictionaries with string keys `title` and `description`.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class MenuEntry(BaseModel):
    """One section of the demo menu. Its position in the list selects the action."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    title: str
    description: Optional[str] = None

    @field_validator("description")
    @classmethod
    def _blank_description_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v if v.strip() else None
