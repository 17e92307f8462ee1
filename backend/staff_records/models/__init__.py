from staff_records.models.act import AdministrativeAct
from staff_records.models.assignment import SiteAssignment
from staff_records.models.employee import AcademicRecord, Employee, EmployeeComment
from staff_records.models.enums import (
    AcademicLevel,
    AccountStatus,
    AssignmentKind,
    AssignmentStatus,
    EmployeePosition,
    EmployeeStatus,
    Role,
    ShiftName,
    SiteStatus,
    SiteZone,
)
from staff_records.models.institution import Institution, InstitutionSite
from staff_records.models.site import Shift, Site, SiteShift
from staff_records.models.user import User

__all__ = [
    "AcademicLevel",
    "AcademicRecord",
    "AccountStatus",
    "AdministrativeAct",
    "AssignmentKind",
    "AssignmentStatus",
    "Employee",
    "EmployeeComment",
    "EmployeePosition",
    "EmployeeStatus",
    "Institution",
    "InstitutionSite",
    "Role",
    "Shift",
    "ShiftName",
    "Site",
    "SiteAssignment",
    "SiteShift",
    "SiteStatus",
    "SiteZone",
    "User",
]
