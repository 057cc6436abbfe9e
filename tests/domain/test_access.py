"""Tests for access rules."""

import pytest

from catalog_service.domain import (
    AuthenticatedUser,
    Forbidden,
    Role,
    ensure_can_mutate,
    ensure_role,
)

ADMIN = AuthenticatedUser(id="1", role="admin")
MANAGER = AuthenticatedUser(id="2", role="manager", tenant="7")
CUSTOMER = AuthenticatedUser(id="3", role="customer")


class TestEnsureRole:
    """Tests for role checks."""

    def test_allowed_role(self) -> None:
        """Allowed roles pass."""
        ensure_role(MANAGER, [Role.ADMIN, Role.MANAGER])

    def test_disallowed_role(self) -> None:
        """Other roles are forbidden."""
        with pytest.raises(Forbidden) as exc_info:
            ensure_role(CUSTOMER, [Role.ADMIN, Role.MANAGER])
        assert exc_info.value.status_code == 403
        assert exc_info.value.details["allowed_roles"] == ["admin", "manager"]


class TestEnsureCanMutate:
    """Tests for tenant ownership checks."""

    def test_admin_mutates_any_tenant(self) -> None:
        """Admins are not bound to a tenant."""
        ensure_can_mutate(ADMIN, "99", "product")

    def test_owner_mutates(self) -> None:
        """Callers may mutate their own tenant's entities."""
        ensure_can_mutate(MANAGER, "7", "product")

    def test_other_tenant_forbidden(self) -> None:
        """Callers may not mutate another tenant's entities."""
        with pytest.raises(Forbidden, match="You are not allowed to access this topping"):
            ensure_can_mutate(MANAGER, "8", "topping")

    def test_caller_without_tenant_forbidden(self) -> None:
        """Non-admin callers without a tenant own nothing."""
        with pytest.raises(Forbidden):
            ensure_can_mutate(CUSTOMER, "7", "product")
