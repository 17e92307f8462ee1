"""What every service shares: transaction scopes and the error bridge to HTTP."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from staff_records.core import errors as api_errors
from staff_records.models.enums import Role
from staff_records.repositories.base import Pagination
from staff_records.services._shared.errors import (
    AuthenticationError,
    AuthorizationError,
    BusinessRuleError,
    ConflictError,
    InvalidCredentials,
    NotFoundError,
    ServiceError,
)
from staff_records.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)

log = logging.getLogger(__name__)

_DIRECT = (
    (NotFoundError, api_errors.NotFound),
    (ConflictError, api_errors.Conflict),
    (AuthorizationError, api_errors.Forbidden),
)


@dataclass(slots=True)
class ServiceContext:
    """Who is calling, and under which request id."""

    actor_id: int | None = None
    actor_role: Role | None = None
    request_id: str | None = None


def translate_exceptions(exc: Exception) -> Exception:
    """
    Turn a :class:`ServiceError` into the :class:`APIError` the client sees.

    Anything that is not a service error comes back unchanged. Authentication
    failures collapse to two messages so a caller cannot tell a wrong password
    from an unknown account; the precise reason only reaches the log.

    :param exc: Exception raised inside a service.
    :returns: Exception to re-raise.
    """
    if not isinstance(exc, ServiceError):
        return exc
    if isinstance(exc, AuthenticationError):
        log.info("Authentication rejected", extra={"auth_error": exc.reason})
        message = "Invalid credentials" if isinstance(exc, InvalidCredentials) else "Unauthorized"
        return api_errors.Unauthorized(message)
    if isinstance(exc, BusinessRuleError):
        return api_errors.BadRequest(str(exc), code=exc.code)
    for service_type, api_type in _DIRECT:
        if isinstance(exc, service_type):
            return api_type(str(exc))
    return api_errors.BadRequest(str(exc))


class BaseService:
    """
    Parent of the workflow services.

    A workflow opens exactly one :meth:`rw_uow` block and performs every step
    inside it; reads go through :meth:`ro_uow`. Services never reach for
    ``db.session`` directly.
    """

    read_isolation = "READ COMMITTED"

    def __init__(self, *, ctx: ServiceContext | None = None) -> None:
        self.ctx = ctx or ServiceContext()

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork()

    def ro_uow(
        self, *, isolation: str | None = None, enforce_db_readonly: bool = True
    ) -> SQLAlchemyReadOnlyUnitOfWork:
        return SQLAlchemyReadOnlyUnitOfWork(
            isolation_level=isolation or self.read_isolation,
            enforce_db_readonly=enforce_db_readonly,
        )

    @staticmethod
    def ensure_pagination(
        *, page: int, limit: int, sort: Iterable[str] | None = None
    ) -> Pagination:
        """Clamp ``page``/``limit`` to at least 1 and wrap them for a repository."""
        return Pagination(page=max(1, int(page)), limit=max(1, int(limit)), sort=list(sort or ()))

    def translate_exceptions(self, exc: Exception) -> Exception:
        return translate_exceptions(exc)
