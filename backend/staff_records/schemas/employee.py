"""Employee resource schemas (workflow inputs and aggregate outputs)."""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, fields, post_load, validate

from staff_records.models.enums import (
    AcademicLevel,
    AssignmentKind,
    AssignmentStatus,
    EmployeePosition,
    EmployeeStatus,
    SiteZone,
)
from staff_records.schemas.common import QuerySchema
from staff_records.schemas.site import SiteSchema
from staff_records.services.employees.dto import (
    AcademicRecordIn,
    AvailableSitesIn,
    CreateEmployeeWithSiteIn,
    EmployeeIn,
)

# ------------------------------- Inputs ------------------------------------ #


class EmployeeInputSchema(Schema):
    """Personal data of a new employee."""

    class Meta:
        unknown = EXCLUDE

    document_type = fields.String(load_default="CC", validate=validate.Length(min=1, max=10))
    document_number = fields.String(required=True, validate=validate.Length(min=1, max=30))
    first_name = fields.String(required=True, validate=validate.Length(min=1, max=100))
    last_name = fields.String(required=True, validate=validate.Length(min=1, max=100))
    email = fields.Email(load_default=None, allow_none=True, validate=validate.Length(max=254))
    phone = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=30))
    address = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=255))
    position = fields.Enum(EmployeePosition, by_value=True, load_default=EmployeePosition.TEACHER)

    @post_load
    def make_dto(self, data: dict[str, Any], **_: Any) -> EmployeeIn:
        return EmployeeIn(**data)


class AcademicRecordInputSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    level = fields.Enum(AcademicLevel, by_value=True, required=True)
    years_experience = fields.Integer(
        load_default=None, allow_none=True, validate=validate.Range(min=0, max=80)
    )
    institution = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=200))
    degree_title = fields.String(
        load_default=None, allow_none=True, validate=validate.Length(max=200)
    )

    @post_load
    def make_dto(self, data: dict[str, Any], **_: Any) -> AcademicRecordIn:
        return AcademicRecordIn(**data)


class EmployeeWithSiteInputSchema(Schema):
    """Body of ``POST /employees/with-site``."""

    employee = fields.Nested(EmployeeInputSchema, required=True)
    site_id = fields.Integer(required=True, validate=validate.Range(min=1))
    start_date = fields.Date(load_default=None, allow_none=True)
    academic = fields.Nested(AcademicRecordInputSchema, load_default=None, allow_none=True)
    comment = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=2000))

    @post_load
    def make_dto(self, data: dict[str, Any], **_: Any) -> CreateEmployeeWithSiteIn:
        return CreateEmployeeWithSiteIn(**data)


class AssignSiteInputSchema(Schema):
    site_id = fields.Integer(required=True, validate=validate.Range(min=1))
    start_date = fields.Date(load_default=None, allow_none=True)
    replace_current = fields.Boolean(load_default=False)


class TransferInputSchema(Schema):
    site_id = fields.Integer(required=True, validate=validate.Range(min=1))
    transfer_date = fields.Date(load_default=None, allow_none=True)


class FinalizeInputSchema(Schema):
    end_date = fields.Date(load_default=None, allow_none=True)


class EmployeesBySiteQuerySchema(QuerySchema):
    position = fields.Enum(EmployeePosition, by_value=True, load_default=None)
    status = fields.Enum(EmployeeStatus, by_value=True, load_default=None)
    active_only = fields.Boolean(load_default=True)


class AvailableSitesQuerySchema(QuerySchema):
    zone = fields.Enum(SiteZone, by_value=True, load_default=None)
    with_counts = fields.Boolean(load_default=False)

    @post_load
    def make_dto(self, data: dict[str, Any], **_: Any) -> AvailableSitesIn:
        return AvailableSitesIn(**data)


# ------------------------------- Outputs ----------------------------------- #


class EmployeeSchema(Schema):
    id = fields.Integer()
    document_type = fields.String()
    document_number = fields.String()
    first_name = fields.String()
    last_name = fields.String()
    email = fields.String(allow_none=True)
    phone = fields.String(allow_none=True)
    address = fields.String(allow_none=True)
    position = fields.Enum(EmployeePosition, by_value=True)
    status = fields.Enum(EmployeeStatus, by_value=True)


class AcademicRecordSchema(Schema):
    id = fields.Integer()
    level = fields.Enum(AcademicLevel, by_value=True)
    years_experience = fields.Integer(allow_none=True)
    institution = fields.String(allow_none=True)
    degree_title = fields.String(allow_none=True)


class CommentSchema(Schema):
    id = fields.Integer()
    note = fields.String()
    author_id = fields.Integer(allow_none=True)


class AssignmentSchema(Schema):
    id = fields.Integer()
    employee_id = fields.Integer()
    site_id = fields.Integer()
    site_name = fields.String()
    start_date = fields.Date()
    end_date = fields.Date(allow_none=True)
    status = fields.Enum(AssignmentStatus, by_value=True)
    kind = fields.Enum(AssignmentKind, by_value=True)


class EmployeeWithSiteSchema(Schema):
    employee = fields.Nested(EmployeeSchema)
    academic_record = fields.Nested(AcademicRecordSchema, allow_none=True)
    comment = fields.Nested(CommentSchema, allow_none=True)
    assignment = fields.Nested(AssignmentSchema)
    site = fields.Nested(SiteSchema)


class TransferSchema(Schema):
    previous = fields.Nested(AssignmentSchema)
    current = fields.Nested(AssignmentSchema)


class EmployeeDetailSchema(Schema):
    employee = fields.Nested(EmployeeSchema)
    academic_records = fields.List(fields.Nested(AcademicRecordSchema))
    comments = fields.List(fields.Nested(CommentSchema))
    current_assignment = fields.Nested(AssignmentSchema, allow_none=True)


class SiteEmployeeSchema(Schema):
    employee = fields.Nested(EmployeeSchema)
    assignment = fields.Nested(AssignmentSchema)
