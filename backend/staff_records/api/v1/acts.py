"""Administrative act endpoints."""

from __future__ import annotations

from flask import Blueprint, current_app, request

from staff_records.api.deps import ok, parse_pagination, require_roles, service_context, timing
from staff_records.schemas.act import ActCreateSchema, ActFilterSchema, ActSchema, ActUpdateSchema
from staff_records.schemas.common import meta_from
from staff_records.services._shared.policies.roles import EDITORS, READERS, SUPERUSERS
from staff_records.services.acts.dto import ActCreateIn, ActListIn, ActUpdateIn
from staff_records.services.acts.service import DEFAULT_MAX_RETRIES, AdministrativeActService

bp = Blueprint("administrative_acts", __name__)

act_schema = ActSchema()
act_list_schema = ActSchema(many=True)
act_create_schema = ActCreateSchema()
act_update_schema = ActUpdateSchema()
act_filter_schema = ActFilterSchema()


def _service() -> AdministrativeActService:
    return AdministrativeActService(
        max_retries=current_app.config.get("ACT_NAME_MAX_RETRIES", DEFAULT_MAX_RETRIES),
        ctx=service_context(),
    )


@bp.post("")
@require_roles(EDITORS)
@timing
def create_act():
    """Create an act; its name is the institution's next free number."""

    payload = act_create_schema.load(request.get_json(silent=True) or {})
    return ok(act_schema.dump(_service().create(ActCreateIn(**payload))), status=201)


@bp.get("")
@require_roles(READERS)
@timing
def list_acts():
    filters = act_filter_schema.load(request.args)
    result = _service().list(ActListIn(pagination=parse_pagination(), **filters))
    return ok(act_list_schema.dump(result.items), meta=meta_from(result.meta))


@bp.get("/by-institution/<int:institution_id>")
@require_roles(READERS)
@timing
def list_by_institution(institution_id: int):
    return ok(act_list_schema.dump(_service().list_by_institution(institution_id)))


@bp.get("/<int:act_id>")
@require_roles(READERS)
@timing
def get_act(act_id: int):
    return ok(act_schema.dump(_service().get(act_id)))


@bp.patch("/<int:act_id>")
@require_roles(EDITORS)
@timing
def update_act(act_id: int):
    payload = act_update_schema.load(request.get_json(silent=True) or {})
    return ok(act_schema.dump(_service().update(ActUpdateIn(id=act_id, **payload))))


@bp.delete("/<int:act_id>")
@require_roles(SUPERUSERS)
@timing
def delete_act(act_id: int):
    _service().delete(act_id)
    return ok({"id": act_id, "deleted": True})
