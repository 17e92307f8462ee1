"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from staff_records.repositories.act import AdministrativeActRepository
from staff_records.repositories.assignment import SiteAssignmentRepository
from staff_records.repositories.base import (
    BaseRepository,
    Page,
    Pagination,
    order_clauses,
)
from staff_records.repositories.employee import (
    AcademicRecordRepository,
    EmployeeCommentRepository,
    EmployeeRepository,
)
from staff_records.repositories.institution import (
    InstitutionRepository,
    InstitutionSiteRepository,
)
from staff_records.repositories.site import ShiftRepository, SiteRepository, SiteShiftRepository
from staff_records.repositories.user import UserRepository

__all__ = [
    # Base
    "BaseRepository",
    "Page",
    "Pagination",
    "order_clauses",
    # Domain
    "AcademicRecordRepository",
    "AdministrativeActRepository",
    "EmployeeCommentRepository",
    "EmployeeRepository",
    "InstitutionRepository",
    "InstitutionSiteRepository",
    "ShiftRepository",
    "SiteAssignmentRepository",
    "SiteRepository",
    "SiteShiftRepository",
    "UserRepository",
]
