"""Authentication endpoints: login, refresh, logout and profile."""

from __future__ import annotations

from flask import Blueprint, request

from staff_records.api.deps import (
    bearer_token,
    current_identity,
    ok,
    require_auth,
    timing,
)
from staff_records.core.errors import BadRequest
from staff_records.core.security import get_token_provider
from staff_records.schemas.auth import (
    ChangePasswordSchema,
    LoginResponseSchema,
    LoginSchema,
    LogoutSchema,
    RefreshSchema,
    TokenPairSchema,
    UserSchema,
)
from staff_records.services._shared.errors import MissingToken
from staff_records.services.auth.dto import ChangePasswordIn, LogoutIn
from staff_records.services.auth.service import AuthService

bp = Blueprint("auth", __name__)

login_schema = LoginSchema()
login_response_schema = LoginResponseSchema()
refresh_schema = RefreshSchema()
logout_schema = LogoutSchema()
token_pair_schema = TokenPairSchema()
user_schema = UserSchema()
change_password_schema = ChangePasswordSchema()


def _service() -> AuthService:
    return AuthService(token_provider=get_token_provider())


@bp.post("/login")
@timing
def login():
    """Exchange credentials for an access/refresh token pair."""

    dto = login_schema.load(request.get_json(silent=True) or {})
    result = _service().login(dto)
    return ok(login_response_schema.dump(result))


@bp.post("/refresh")
@timing
def refresh():
    """Rotate the token pair; the presented refresh token stops working."""

    dto = refresh_schema.load(request.get_json(silent=True) or {})
    pair = _service().refresh(dto)
    return ok(token_pair_schema.dump(pair))


@bp.post("/logout")
@timing
def logout():
    """Blacklist the bearer token and the optional ``refreshToken``.

    Expired or already blacklisted tokens still log out: the handler never
    verifies the bearer token, it only needs one to be present.
    """

    body = logout_schema.load(request.get_json(silent=True) or {})
    try:
        result = _service().logout(
            LogoutIn(access_token=bearer_token(), refresh_token=body.get("refresh_token"))
        )
    except MissingToken as exc:
        raise BadRequest(str(exc), code="missing_token") from exc
    return ok({"message": result.message, "fully_invalidated": result.fully_invalidated})


@bp.get("/me")
@require_auth
@timing
def me():
    return ok(user_schema.dump(_service().me(current_identity().id)))


@bp.post("/change-password")
@require_auth
@timing
def change_password():
    payload = change_password_schema.load(request.get_json(silent=True) or {})
    _service().change_password(ChangePasswordIn(user_id=current_identity().id, **payload))
    return ok({"message": "Password updated"})
