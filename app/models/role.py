"""Principal roles."""

from enum import Enum

_RANK = {
    "user": 0,
    "editor": 1,
    "admin": 2,
    "super_admin": 3,
}


class Role(str, Enum):
    """Closed set of roles a session token can carry, ordered by privilege."""

    USER = "user"
    EDITOR = "editor"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"

    @property
    def rank(self) -> int:
        return _RANK[self.value]

    @property
    def is_admin(self) -> bool:
        return self in ADMIN_ROLES

    def at_least(self, other: "Role") -> bool:
        """Return True if this role is as privileged as ``other`` or more."""
        return self.rank >= other.rank

    @classmethod
    def parse(cls, value: str) -> "Role | None":
        """Return the Role for ``value`` or None if it is not a known role."""
        try:
            return cls(value)
        except ValueError:
            return None


ADMIN_ROLES: frozenset[Role] = frozenset({Role.EDITOR, Role.ADMIN, Role.SUPER_ADMIN})
