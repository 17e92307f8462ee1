"""Principal ("rector") workflow endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from staff_records.api.deps import ok, require_roles, service_context, timing
from staff_records.schemas.principal import (
    AssignInstitutionInputSchema,
    AssignInstitutionSchema,
    AvailableInstitutionsQuerySchema,
    PrincipalCompleteInputSchema,
    PrincipalCompleteSchema,
    PrincipalSummarySchema,
)
from staff_records.schemas.site import InstitutionSchema
from staff_records.services._shared.policies.roles import EDITORS, READERS
from staff_records.services.principals.dto import AssignInstitutionIn
from staff_records.services.principals.service import PrincipalWorkflowService

bp = Blueprint("principals", __name__)

complete_input = PrincipalCompleteInputSchema()
complete_schema = PrincipalCompleteSchema()
assign_input = AssignInstitutionInputSchema()
assign_schema = AssignInstitutionSchema()
available_query = AvailableInstitutionsQuerySchema()
institution_list_schema = InstitutionSchema(many=True)
summary_schema = PrincipalSummarySchema()


def _service() -> PrincipalWorkflowService:
    return PrincipalWorkflowService(ctx=service_context())


@bp.post("/complete")
@require_roles(EDITORS)
@timing
def create_complete():
    """Create principal, institution, sites and assignments atomically."""

    dto = complete_input.load(request.get_json(silent=True) or {})
    return ok(complete_schema.dump(_service().create_complete(dto)), status=201)


@bp.post("/<int:employee_id>/assign-institution")
@require_roles(EDITORS)
@timing
def assign_institution(employee_id: int):
    payload = assign_input.load(request.get_json(silent=True) or {})
    payload["site_ids"] = tuple(payload["site_ids"])
    result = _service().assign_to_institution(
        AssignInstitutionIn(employee_id=employee_id, **payload)
    )
    return ok(assign_schema.dump(result))


@bp.get("/available-institutions")
@require_roles(READERS)
@timing
def available_institutions():
    dto = available_query.load(request.args)
    return ok(institution_list_schema.dump(_service().available_institutions(dto)))


@bp.get("/<int:employee_id>/summary")
@require_roles(READERS)
@timing
def summary(employee_id: int):
    return ok(summary_schema.dump(_service().summary(employee_id)))
