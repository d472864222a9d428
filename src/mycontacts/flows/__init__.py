"""Contact flows - action mapping, dispatcher and callback handlers."""

from mycontacts.flows.actions import ActionType, action_for_section
from mycontacts.flows.dispatcher import ActionDispatcher, UnknownContactSettings
from mycontacts.flows.handlers import ContactFlowHandler

__all__ = [
    "ActionDispatcher",
    "ActionType",
    "ContactFlowHandler",
    "UnknownContactSettings",
    "action_for_section",
]
