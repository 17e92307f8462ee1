"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request

from staff_records.core.logger import ensure_request_id
from staff_records.core.security import get_token_provider
from staff_records.models.enums import Role
from staff_records.schemas.common import PaginationQuerySchema
from staff_records.services._shared.base import ServiceContext
from staff_records.services._shared.dto import PaginationIn
from staff_records.services._shared.errors import AuthorizationError, MissingToken
from staff_records.services._shared.policies.roles import is_allowed
from staff_records.services._shared.ports.token_provider import TokenIdentity

F = TypeVar("F", bound=Callable[..., Any])


def parse_pagination(default_limit: int = 20, max_limit: int = 200) -> PaginationIn:
    """Parse pagination parameters from ``request.args`` using Marshmallow."""

    schema = PaginationQuerySchema(default_limit=default_limit, max_limit=max_limit)
    data = schema.load(request.args)
    return PaginationIn(page=data["page"], limit=data["limit"], sort=tuple(data["sort"]))


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def ok(data: Any = None, *, status: int = 200, meta: dict[str, Any] | None = None) -> Response:
    """Wrap ``data`` in the ``{"ok": true, "data": ...}`` success envelope."""

    body: dict[str, Any] = {"ok": True, "data": data}
    if meta is not None:
        body["meta"] = meta
    return json_response(body, status=status)


def bearer_token() -> str | None:
    """Return the raw bearer token of the current request, if any."""

    return get_token_provider().extract_bearer(request.headers.get("Authorization"))


def current_identity() -> TokenIdentity:
    """Identity attached by :func:`require_auth`."""

    return g.current_user


def service_context() -> ServiceContext:
    identity: TokenIdentity | None = getattr(g, "current_user", None)
    return ServiceContext(
        actor_id=identity.id if identity else None,
        actor_role=identity.role if identity else None,
        request_id=ensure_request_id(),
    )


def authenticate() -> TokenIdentity:
    """Verify the bearer token and attach its identity to ``flask.g``.

    :raises MissingToken: No ``Authorization: Bearer`` header.
    :raises TokenMalformed | TokenExpired | TokenBlacklisted: Bad token.
    """

    token = bearer_token()
    if token is None:
        raise MissingToken()
    identity = get_token_provider().verify_access_token(token)
    g.current_user = identity
    g.current_token = token
    return identity


def require_auth(func: F) -> F:
    """Ensure the request carries a valid, non-blacklisted access token."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        authenticate()
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def require_roles(allowed: Iterable[Role]) -> Callable[[F], F]:
    """Authenticate, then ensure the caller's role is in ``allowed``."""

    allowed_set = frozenset(allowed)

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            identity = authenticate()
            if not is_allowed(identity.role, allowed_set):
                current_app.logger.info(
                    "authz.denied",
                    extra={"user_id": identity.id, "role": identity.role.value},
                )
                raise AuthorizationError()
            return func(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
