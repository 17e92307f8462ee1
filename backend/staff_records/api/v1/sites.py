"""Physical deletion of sites and institutions (super admin only)."""

from __future__ import annotations

from flask import Blueprint

from staff_records.api.deps import ok, require_roles, service_context, timing
from staff_records.services._shared.policies.roles import SUPERUSERS
from staff_records.services.sites.service import SiteService

sites_bp = Blueprint("sites", __name__)
institutions_bp = Blueprint("institutions", __name__)


@sites_bp.delete("/<int:site_id>")
@require_roles(SUPERUSERS)
@timing
def delete_site(site_id: int):
    SiteService(ctx=service_context()).delete_site(site_id)
    return ok({"id": site_id, "deleted": True})


@institutions_bp.delete("/<int:institution_id>")
@require_roles(SUPERUSERS)
@timing
def delete_institution(institution_id: int):
    SiteService(ctx=service_context()).delete_institution(institution_id)
    return ok({"id": institution_id, "deleted": True})
