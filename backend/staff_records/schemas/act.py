"""Administrative act schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate

from staff_records.schemas.common import QuerySchema


class ActCreateSchema(Schema):
    """The name is generated server-side; only the owner and text are sent."""

    class Meta:
        unknown = EXCLUDE

    institution_id = fields.Integer(required=True, validate=validate.Range(min=1))
    description = fields.String(
        load_default=None, allow_none=True, validate=validate.Length(max=5000)
    )


class ActUpdateSchema(Schema):
    description = fields.String(required=True, allow_none=True, validate=validate.Length(max=5000))


class ActFilterSchema(QuerySchema):
    institution_id = fields.Integer(load_default=None)


class ActSchema(Schema):
    id = fields.Integer()
    name = fields.String()
    sequence = fields.Integer()
    institution_id = fields.Integer()
    institution_name = fields.String()
    description = fields.String(allow_none=True)
    created_at = fields.DateTime(allow_none=True)
