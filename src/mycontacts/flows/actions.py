from enum import IntEnum


class ActionType(IntEnum):
    """Demo flow bound to each menu section, by section index."""
    PICK_CONTACT = 0
    CREATE_NEW_CONTACT = 1
    DISPLAY_CONTACT = 2
    EDIT_UNKNOWN_CONTACT = 3


def action_for_section(section: int) -> ActionType:
    """Map a section index to its flow; unknown sections fall back to the picker."""
    try:
        return ActionType(section)
    except ValueError:
        return ActionType.PICK_CONTACT
