"""Employee workflow endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from staff_records.api.deps import current_identity, ok, require_roles, service_context, timing
from staff_records.schemas.employee import (
    AssignmentSchema,
    AssignSiteInputSchema,
    AvailableSitesQuerySchema,
    EmployeeDetailSchema,
    EmployeesBySiteQuerySchema,
    EmployeeSchema,
    EmployeeWithSiteInputSchema,
    EmployeeWithSiteSchema,
    FinalizeInputSchema,
    SiteEmployeeSchema,
    TransferInputSchema,
    TransferSchema,
)
from staff_records.schemas.site import SiteSchema
from staff_records.services._shared.policies.roles import (
    EDITORS,
    EMPLOYEE_OPERATORS,
    READERS,
    SUPERUSERS,
)
from staff_records.services.employees.dto import (
    AssignSiteIn,
    EmployeesBySiteIn,
    FinalizeIn,
    TransferIn,
)
from staff_records.services.employees.service import EmployeeWorkflowService

bp = Blueprint("employees", __name__)

with_site_input = EmployeeWithSiteInputSchema()
with_site_schema = EmployeeWithSiteSchema()
assign_input = AssignSiteInputSchema()
transfer_input = TransferInputSchema()
finalize_input = FinalizeInputSchema()
by_site_query = EmployeesBySiteQuerySchema()
available_sites_query = AvailableSitesQuerySchema()
employee_schema = EmployeeSchema()
detail_schema = EmployeeDetailSchema()
assignment_schema = AssignmentSchema()
assignment_list_schema = AssignmentSchema(many=True)
transfer_schema = TransferSchema()
site_employee_list_schema = SiteEmployeeSchema(many=True)
site_list_schema = SiteSchema(many=True)


def _service() -> EmployeeWorkflowService:
    return EmployeeWorkflowService(ctx=service_context())


def _body() -> dict:
    return request.get_json(silent=True) or {}


@bp.post("/with-site")
@require_roles(EMPLOYEE_OPERATORS)
@timing
def create_with_site():
    """Create an employee already placed at a site (one transaction)."""

    dto = with_site_input.load(_body())
    result = _service().create_with_site(dto, author_id=current_identity().id)
    return ok(with_site_schema.dump(result), status=201)


@bp.get("/available-sites")
@require_roles(READERS)
@timing
def available_sites():
    dto = available_sites_query.load(request.args)
    return ok(site_list_schema.dump(_service().available_sites(dto)))


@bp.get("/by-site/<int:site_id>")
@require_roles(READERS)
@timing
def employees_by_site(site_id: int):
    filters = by_site_query.load(request.args)
    rows = _service().employees_by_site(EmployeesBySiteIn(site_id=site_id, **filters))
    return ok(site_employee_list_schema.dump(rows))


@bp.get("/<int:employee_id>")
@require_roles(READERS)
@timing
def get_employee(employee_id: int):
    return ok(detail_schema.dump(_service().get(employee_id)))


@bp.get("/<int:employee_id>/assignments")
@require_roles(READERS)
@timing
def assignment_history(employee_id: int):
    return ok(assignment_list_schema.dump(_service().history(employee_id)))


@bp.post("/<int:employee_id>/assign-site")
@require_roles(EMPLOYEE_OPERATORS)
@timing
def assign_site(employee_id: int):
    payload = assign_input.load(_body())
    result = _service().assign_to_site(AssignSiteIn(employee_id=employee_id, **payload))
    return ok(assignment_schema.dump(result), status=201)


@bp.put("/<int:employee_id>/transfer-site")
@require_roles(EMPLOYEE_OPERATORS)
@timing
def transfer_site(employee_id: int):
    payload = transfer_input.load(_body())
    result = _service().transfer(TransferIn(employee_id=employee_id, **payload))
    return ok(transfer_schema.dump(result))


@bp.post("/<int:employee_id>/finalize-assignment")
@require_roles(EMPLOYEE_OPERATORS)
@timing
def finalize_assignment(employee_id: int):
    payload = finalize_input.load(_body())
    result = _service().finalize_assignment(FinalizeIn(employee_id=employee_id, **payload))
    return ok(assignment_schema.dump(result))


@bp.delete("/<int:employee_id>")
@require_roles(EDITORS)
@timing
def deactivate(employee_id: int):
    """Soft delete: status becomes inactive and active assignments end."""

    return ok(employee_schema.dump(_service().deactivate(employee_id)))


@bp.post("/<int:employee_id>/reactivate")
@require_roles(SUPERUSERS)
@timing
def reactivate(employee_id: int):
    return ok(employee_schema.dump(_service().reactivate(employee_id)))
