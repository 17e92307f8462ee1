# staff_records/services/sites/service.py
from __future__ import annotations

import logging

from staff_records.services._shared.base import BaseService
from staff_records.services._shared.errors import (
    InstitutionHasSitesError,
    NotFoundError,
    SiteInUseError,
)

log = logging.getLogger(__name__)


class SiteService(BaseService):
    """Physical deletion of sites and institutions, gated by their links."""

    def delete_site(self, site_id: int) -> None:
        """
        Delete a site that nobody is currently assigned to.

        Its shift and institution links go with it.

        :raises NotFoundError: Unknown site.
        :raises SiteInUseError: Some assignment to the site is still active.
        """
        with self.rw_uow() as uow:
            site = uow.sites.get(site_id)
            if site is None:
                raise NotFoundError("Site", site_id)
            if uow.assignments.has_active_for_site(site_id):
                raise SiteInUseError(site_id)
            uow.sites.delete(site)
        log.info("Site deleted", extra={"site_id": site_id})

    def delete_institution(self, institution_id: int) -> None:
        """:raises InstitutionHasSitesError: Sites are still linked to it."""
        with self.rw_uow() as uow:
            institution = uow.institutions.get(institution_id)
            if institution is None:
                raise NotFoundError("Institution", institution_id)
            if uow.institution_sites.site_ids(institution_id):
                raise InstitutionHasSitesError(institution_id)
            uow.institutions.delete(institution)
        log.info("Institution deleted", extra={"institution_id": institution_id})
