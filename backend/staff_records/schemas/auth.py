"""Authentication-related Marshmallow schemas.

Token fields use the camelCase keys the front-end client sends and expects
(``refreshToken``).
"""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, fields, post_load, validate

from staff_records.models.enums import AccountStatus, Role
from staff_records.services.auth.dto import LoginIn, RefreshIn


class LoginSchema(Schema):
    """Input payload for authenticating a user."""

    class Meta:
        unknown = EXCLUDE

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))

    @post_load
    def make_dto(self, data: dict[str, Any], **_: Any) -> LoginIn:
        return LoginIn(**data)


class RefreshSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    refresh_token = fields.String(
        required=True, data_key="refreshToken", validate=validate.Length(min=1)
    )

    @post_load
    def make_dto(self, data: dict[str, Any], **_: Any) -> RefreshIn:
        return RefreshIn(**data)


class LogoutSchema(Schema):
    """Optional body of a logout; the access token comes from the header."""

    class Meta:
        unknown = EXCLUDE

    refresh_token = fields.String(load_default=None, allow_none=True, data_key="refreshToken")


class ChangePasswordSchema(Schema):
    current_password = fields.String(required=True, validate=validate.Length(min=1, max=128))
    new_password = fields.String(required=True, validate=validate.Length(min=6, max=128))


class UserSchema(Schema):
    """Response payload exposing a system account (never the hash)."""

    id = fields.Integer(required=True)
    email = fields.Email(required=True)
    first_name = fields.String(required=True)
    last_name = fields.String(required=True)
    document_type = fields.String(required=True)
    document_number = fields.String(required=True)
    phone = fields.String(allow_none=True)
    role = fields.Enum(Role, by_value=True)
    status = fields.Enum(AccountStatus, by_value=True)


class TokenPairSchema(Schema):
    token = fields.String(attribute="access_token")
    refresh_token = fields.String(data_key="refreshToken")


class LoginResponseSchema(Schema):
    """``{user, token, refreshToken}`` built from a :class:`LoginOut`."""

    user = fields.Nested(UserSchema)
    token = fields.String(attribute="tokens.access_token")
    refresh_token = fields.String(attribute="tokens.refresh_token", data_key="refreshToken")
