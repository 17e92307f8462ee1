"""Site and institution representations."""

from __future__ import annotations

from marshmallow import Schema, fields

from staff_records.models.enums import SiteStatus, SiteZone


class SiteSchema(Schema):
    id = fields.Integer()
    name = fields.String()
    status = fields.Enum(SiteStatus, by_value=True)
    zone = fields.Enum(SiteZone, by_value=True)
    address = fields.String(allow_none=True)
    dane_code = fields.String(allow_none=True)
    shifts = fields.List(fields.String())
    active_staff = fields.Integer(allow_none=True)


class InstitutionSchema(Schema):
    id = fields.Integer()
    name = fields.String()
    principal_id = fields.Integer(allow_none=True)
    site_count = fields.Integer()
    sites = fields.List(fields.Nested(SiteSchema))
