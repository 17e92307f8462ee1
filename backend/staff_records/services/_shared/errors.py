"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never depend on Flask or
HTTP. The translation to HTTP responses (RFC 7807) is handled by
:func:`staff_records.services._shared.base.translate_exceptions`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        The name of the database constraint to match (e.g., 'uq_users_email').

    Returns
    -------
    bool
        True if the IntegrityError matches the given constraint.

    Notes
    -----
    PostgreSQL reports the constraint name in ``diag``; SQLite only reports
    the offending columns (``UNIQUE constraint failed: t.a, t.b``), so callers
    may pass the column list as an alternative name.
    """
    orig = getattr(exc, "orig", None)
    diag = getattr(orig, "diag", None)
    name = getattr(diag, "constraint_name", None)
    if name:
        return name.lower() == constraint_name.lower()
    message = str(orig).lower() if orig else ""
    return constraint_name.lower() in message


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - They can be safely raised from repositories or domain logic.
    """


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "Site").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    entity: str
    key: str | int

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "Employee").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str

    def __str__(self) -> str:
        return f"Conflict on {self.entity}: {self.detail}"


class AuthorizationError(ServiceError):
    """Raised when the caller lacks permission for the operation."""

    def __init__(self, message: str = "You do not have permission for this action") -> None:
        super().__init__(message)


class BusinessRuleError(ServiceError):
    """
    A request that is well-formed but refused by a business rule (HTTP 400).

    Subclasses set a stable ``code`` clients can branch on.
    """

    code = "business_rule_violation"


class SiteInactiveError(BusinessRuleError):
    code = "site_inactive"

    def __init__(self, site_id: int) -> None:
        super().__init__(f"Site {site_id} is not active")
        self.site_id = site_id


class EmployeeInactiveError(BusinessRuleError):
    code = "employee_inactive"

    def __init__(self, employee_id: int) -> None:
        super().__init__(f"Employee {employee_id} is not active")
        self.employee_id = employee_id


class NoActiveAssignmentError(BusinessRuleError):
    code = "no_active_assignment"

    def __init__(self, employee_id: int) -> None:
        super().__init__(f"Employee {employee_id} has no active site assignment")
        self.employee_id = employee_id


class SameSiteTransferError(BusinessRuleError):
    code = "same_site_transfer"

    def __init__(self, site_id: int) -> None:
        super().__init__(f"Employee is already assigned to site {site_id}")
        self.site_id = site_id


class InvalidTransferDateError(BusinessRuleError):
    code = "invalid_transfer_date"

    def __init__(self, on: date, current_start: date) -> None:
        super().__init__(
            f"Transfer date {on.isoformat()} is before the current assignment start "
            f"{current_start.isoformat()}"
        )
        self.on = on
        self.current_start = current_start


class InvalidPositionError(BusinessRuleError):
    code = "invalid_position"


class UnknownShiftError(BusinessRuleError):
    code = "unknown_shift"

    def __init__(self, name: str, valid: list[str]) -> None:
        super().__init__(f"Unknown shift '{name}'. Valid shifts: {', '.join(valid)}")
        self.name = name
        self.valid = valid


class SiteInUseError(BusinessRuleError):
    code = "site_in_use"

    def __init__(self, site_id: int) -> None:
        super().__init__(f"Site {site_id} has active assignments and cannot be deleted")
        self.site_id = site_id


class InstitutionHasSitesError(BusinessRuleError):
    code = "institution_has_sites"

    def __init__(self, institution_id: int) -> None:
        super().__init__(f"Institution {institution_id} still has linked sites")
        self.institution_id = institution_id


class InvalidCurrentPassword(BusinessRuleError):
    code = "invalid_current_password"

    def __init__(self, message: str = "Current password is incorrect") -> None:
        super().__init__(message)


class DuplicateEmployeeError(ConflictError):
    """An employee with the same document number or email already exists."""

    def __init__(self, detail: str = "document number or email already registered") -> None:
        super().__init__("Employee", detail)


class ActiveAssignmentExistsError(ConflictError):
    """The employee already holds an active site assignment."""

    def __init__(self, employee_id: int | None = None) -> None:
        detail = (
            f"employee {employee_id} already has an active site assignment"
            if employee_id is not None
            else "employee already has an active site assignment"
        )
        super().__init__("SiteAssignment", detail)


# --------------------------------------------------------------------------- #
# Authentication
# --------------------------------------------------------------------------- #


class AuthenticationError(ServiceError):
    """
    Base for every way a caller can fail to authenticate.

    The specific subclass is for server logs; clients get a generic 401.
    """

    reason = "authentication_failed"


class MissingToken(AuthenticationError):
    reason = "missing_token"

    def __init__(self, message: str = "No token provided") -> None:
        super().__init__(message)


class TokenMalformed(AuthenticationError):
    reason = "token_malformed"


class TokenExpired(AuthenticationError):
    reason = "token_expired"


class TokenBlacklisted(AuthenticationError):
    reason = "token_blacklisted"


class InvalidCredentials(AuthenticationError):
    reason = "invalid_credentials"

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)
