"""Principal ("rector") workflow schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, fields, post_load, validate

from staff_records.models.enums import EmployeePosition, SiteZone
from staff_records.schemas.common import QuerySchema
from staff_records.schemas.employee import (
    AcademicRecordInputSchema,
    AcademicRecordSchema,
    AssignmentSchema,
    EmployeeInputSchema,
    EmployeeSchema,
)
from staff_records.schemas.site import InstitutionSchema, SiteSchema
from staff_records.services.principals.dto import (
    AvailableInstitutionsIn,
    CreatePrincipalCompleteIn,
    NewSiteIn,
)

# ------------------------------- Inputs ------------------------------------ #


class PrincipalInputSchema(EmployeeInputSchema):
    """Employee data where ``position`` defaults to ``principal``."""

    position = fields.Enum(
        EmployeePosition, by_value=True, load_default=EmployeePosition.PRINCIPAL
    )


class NewSiteInputSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    name = fields.String(required=True, validate=validate.Length(min=1, max=200))
    zone = fields.Enum(SiteZone, by_value=True, load_default=SiteZone.URBAN)
    address = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=255))
    dane_code = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=30))
    # Free strings: unknown names are reported with the valid vocabulary
    shifts = fields.List(fields.String(), load_default=list)

    @post_load
    def make_dto(self, data: dict[str, Any], **_: Any) -> NewSiteIn:
        data["shifts"] = tuple(data["shifts"])
        return NewSiteIn(**data)


class PrincipalCompleteInputSchema(Schema):
    """Body of ``POST /principals/complete``."""

    employee = fields.Nested(PrincipalInputSchema, required=True)
    institution_name = fields.String(required=True, validate=validate.Length(min=1, max=200))
    academic = fields.Nested(AcademicRecordInputSchema, load_default=None, allow_none=True)
    new_sites = fields.List(fields.Nested(NewSiteInputSchema), load_default=list)
    existing_site_ids = fields.List(
        fields.Integer(validate=validate.Range(min=1)), load_default=list
    )
    start_date = fields.Date(load_default=None, allow_none=True)

    @post_load
    def make_dto(self, data: dict[str, Any], **_: Any) -> CreatePrincipalCompleteIn:
        data["new_sites"] = tuple(data["new_sites"])
        data["existing_site_ids"] = tuple(data["existing_site_ids"])
        return CreatePrincipalCompleteIn(**data)


class AssignInstitutionInputSchema(Schema):
    institution_id = fields.Integer(required=True, validate=validate.Range(min=1))
    all_sites = fields.Boolean(load_default=True)
    site_ids = fields.List(fields.Integer(validate=validate.Range(min=1)), load_default=list)
    start_date = fields.Date(load_default=None, allow_none=True)


class AvailableInstitutionsQuerySchema(QuerySchema):
    without_principal = fields.Boolean(load_default=False)
    with_sites = fields.Boolean(load_default=False)

    @post_load
    def make_dto(self, data: dict[str, Any], **_: Any) -> AvailableInstitutionsIn:
        return AvailableInstitutionsIn(**data)


# ------------------------------- Outputs ----------------------------------- #


class CompleteSummarySchema(Schema):
    sites_created = fields.Integer()
    sites_attached = fields.Integer()
    assignments_made = fields.Integer()
    shifts_linked = fields.Integer()


class PrincipalCompleteSchema(Schema):
    employee = fields.Nested(EmployeeSchema)
    academic_record = fields.Nested(AcademicRecordSchema, allow_none=True)
    institution = fields.Nested(InstitutionSchema)
    sites = fields.List(fields.Nested(SiteSchema))
    assignments = fields.List(fields.Nested(AssignmentSchema))
    summary = fields.Nested(CompleteSummarySchema)


class AssignInstitutionSchema(Schema):
    institution = fields.Nested(InstitutionSchema)
    assignments = fields.List(fields.Nested(AssignmentSchema))
    assignments_made = fields.Integer()
    skipped_site_ids = fields.List(fields.Integer())


class PrincipalTotalsSchema(Schema):
    institutions = fields.Integer()
    sites = fields.Integer()
    active_assignments = fields.Integer()


class PrincipalSummarySchema(Schema):
    employee = fields.Nested(EmployeeSchema)
    institutions = fields.List(fields.Nested(InstitutionSchema))
    active_assignments = fields.List(fields.Nested(AssignmentSchema))
    totals = fields.Nested(PrincipalTotalsSchema)
