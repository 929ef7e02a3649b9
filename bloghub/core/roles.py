"""User roles and the admin predicate used by the auth gate and the client session."""

from enum import Enum
from typing import Any


class Role(str, Enum):
    """Closed set of account roles; stored as the lower-case value."""

    USER = "user"
    ADMIN = "admin"

    @classmethod
    def parse(cls, value: Any) -> "Role | None":
        """Return the Role for a raw value (case-insensitive), or None if unrecognized."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


def is_admin(identity: Any) -> bool:
    """
    True iff the identity's role is admin.

    Total: returns False for None, for objects without a role, and for any
    role value that is not a recognized admin role.
    """
    if identity is None:
        return False
    if isinstance(identity, dict):
        role = identity.get("role")
    else:
        role = getattr(identity, "role", None)
    return Role.parse(role) is Role.ADMIN
