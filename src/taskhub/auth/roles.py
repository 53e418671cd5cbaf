"""Role hierarchy.

Learn: Roles are a strict total order, not a permission set:
employee < manager < admin. Holding a higher role satisfies any
requirement for a lower or equal one.
"""

from enum import Enum

from taskhub.errors import ValidationError


class Role(str, Enum):
    EMPLOYEE = "employee"
    MANAGER = "manager"
    ADMIN = "admin"

    @property
    def rank(self) -> int:
        return _RANK[self]

    def at_least(self, other: "Role") -> bool:
        """True if this role satisfies a requirement of `other`."""
        return self.rank >= other.rank

    @classmethod
    def parse(cls, value: str) -> "Role":
        """Parse caller input against the closed set of roles."""
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(r.value for r in cls)
            raise ValidationError(f"Invalid role '{value}'. Must be one of: {allowed}")


_RANK = {Role.EMPLOYEE: 0, Role.MANAGER: 1, Role.ADMIN: 2}

DEFAULT_ROLE = Role.EMPLOYEE
