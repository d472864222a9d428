"""Security module - contacts permission gate."""

from mycontacts.security.gate import GateBranch, PermissionGate

__all__ = ["GateBranch", "PermissionGate"]
