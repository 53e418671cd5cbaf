"""Role hierarchy and ownership checks (pure functions)."""

import pytest

from taskhub.auth.permissions import authorize, check_ownership, ensure_owner
from taskhub.auth.principal import Principal
from taskhub.auth.roles import Role
from taskhub.errors import AuthorizationError, ValidationError


def _p(role: Role, id: int = 1) -> Principal:
    return Principal(id=id, name="p", email=f"p{id}@example.com", role=role)


@pytest.mark.parametrize(
    "role, manager_ok, admin_ok",
    [
        (Role.EMPLOYEE, False, False),
        (Role.MANAGER, True, False),
        (Role.ADMIN, True, True),
    ],
)
def test_role_ordering(role, manager_ok, admin_ok):
    assert authorize(_p(role), Role.MANAGER) is manager_ok
    assert authorize(_p(role), Role.ADMIN) is admin_ok
    assert authorize(_p(role), Role.EMPLOYEE) is True


def test_role_parse_rejects_unknown():
    assert Role.parse("manager") is Role.MANAGER
    with pytest.raises(ValidationError):
        Role.parse("superuser")
    with pytest.raises(ValidationError):
        Role.parse("Admin")


def test_owner_allowed_regardless_of_role():
    assert check_ownership(_p(Role.EMPLOYEE, id=5), owner_id=5) is True


def test_non_owner_denied_even_as_manager():
    assert check_ownership(_p(Role.MANAGER, id=5), owner_id=6) is False
    assert check_ownership(_p(Role.EMPLOYEE, id=5), owner_id=6) is False


def test_admin_owns_everything():
    assert check_ownership(_p(Role.ADMIN, id=1), owner_id=99) is True
    assert check_ownership(_p(Role.ADMIN, id=1), owner_id=None) is True


def test_missing_owner_denied():
    assert check_ownership(_p(Role.MANAGER, id=1), owner_id=None) is False


def test_ensure_owner_raises_with_message():
    with pytest.raises(AuthorizationError, match="own tasks"):
        ensure_owner(_p(Role.EMPLOYEE, id=1), 2, "You can only modify your own tasks")
    ensure_owner(_p(Role.EMPLOYEE, id=2), 2)
