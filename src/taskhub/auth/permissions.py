"""Role and ownership checks.

Learn: Two independent authorization paths, both pure functions:

- authorize(principal, min_role): tier check against
  employee < manager < admin. Used through require_role() as a route
  dependency, so it always runs after authentication and before any
  record is looked up (403 wins over 404).
- check_ownership(principal, owner_id): the principal owns the record,
  or is an admin. Record-scoped, so routes call it after loading the
  record (404 wins over 403). Each call site picks the owner field —
  for task updates it is the assignee, not the creator.
"""

from typing import Callable, Optional

from fastapi import Depends

from taskhub.auth.dependencies import get_current_principal
from taskhub.auth.principal import Principal
from taskhub.auth.roles import Role
from taskhub.errors import AuthorizationError


def authorize(principal: Principal, min_role: Role) -> bool:
    return principal.role.at_least(min_role)


def check_ownership(principal: Principal, owner_id: Optional[int]) -> bool:
    if principal.role == Role.ADMIN:
        return True
    return owner_id is not None and principal.id == owner_id


def ensure_owner(
    principal: Principal,
    owner_id: Optional[int],
    message: str = "You can only modify your own records",
) -> None:
    if not check_ownership(principal, owner_id):
        raise AuthorizationError(message)


def require_role(min_role: Role) -> Callable[..., Principal]:
    """Build a dependency that admits principals holding at least `min_role`."""

    async def dependency(
        principal: Principal = Depends(get_current_principal),
    ) -> Principal:
        if not authorize(principal, min_role):
            raise AuthorizationError(f"Requires {min_role.value} role or higher")
        return principal

    dependency.__name__ = f"require_{min_role.value}"
    return dependency


require_manager = require_role(Role.MANAGER)
require_admin = require_role(Role.ADMIN)
