"""Access control rules for catalog mutations.

The identity provider authenticates callers; these rules decide what an
authenticated caller may change.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from catalog_service.domain.exceptions import Forbidden


class Role(str, Enum):
    """Roles issued by the identity provider."""

    ADMIN = "admin"
    MANAGER = "manager"
    CUSTOMER = "customer"


@dataclass(frozen=True)
class AuthenticatedUser:
    """Claims of a verified access token.

    Attributes:
        id: Subject claim.
        role: Role claim.
        tenant: Tenant claim (absent for admins and customers).
    """

    id: str
    role: str
    tenant: str | None = None

    @property
    def is_admin(self) -> bool:
        """Whether the caller holds the elevated role."""
        return self.role == Role.ADMIN.value


def ensure_role(user: AuthenticatedUser, allowed: Iterable[Role]) -> None:
    """Require one of the given roles.

    Raises:
        Forbidden: If the caller's role is not allowed.
    """
    allowed_values = [role.value for role in allowed]
    if user.role not in allowed_values:
        raise Forbidden(
            "You don't have enough permissions",
            details={"role": user.role, "allowed_roles": allowed_values},
        )


def ensure_can_mutate(user: AuthenticatedUser, tenant_id: str, entity_type: str) -> None:
    """Require admin, or a caller whose tenant owns the entity.

    Args:
        user: Authenticated caller.
        tenant_id: Tenant that owns (or would own) the entity.
        entity_type: Entity name used in the error message.

    Raises:
        Forbidden: If the caller is neither admin nor the owning tenant.
    """
    if user.is_admin:
        return
    if user.tenant is None or str(user.tenant) != str(tenant_id):
        raise Forbidden(
            f"You are not allowed to access this {entity_type}",
            details={"tenant_id": tenant_id},
        )
