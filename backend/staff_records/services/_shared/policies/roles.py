"""Role groups used by route guards and services."""

from __future__ import annotations

from staff_records.models.enums import Role

# Read access: every authenticated role
READERS: frozenset[Role] = frozenset({Role.SUPER_ADMIN, Role.ADMIN, Role.GESTOR})
# Create/update of institutions, principals and acts
EDITORS: frozenset[Role] = frozenset({Role.SUPER_ADMIN, Role.ADMIN})
# Day-to-day employee workflows also open to gestores
EMPLOYEE_OPERATORS: frozenset[Role] = READERS
# Physical deletes and reactivation
SUPERUSERS: frozenset[Role] = frozenset({Role.SUPER_ADMIN})


def coerce_role(value: Role | str | None) -> Role | None:
    """Return the :class:`Role` member for ``value`` or ``None`` if unknown."""
    if value is None or isinstance(value, Role):
        return value
    try:
        return Role(str(value))
    except ValueError:
        return None


def is_allowed(role: Role | str | None, allowed: frozenset[Role]) -> bool:
    """Return ``True`` if ``role`` belongs to the ``allowed`` group."""
    member = coerce_role(role)
    return member is not None and member in allowed
