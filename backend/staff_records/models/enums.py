"""Closed vocabularies shared by models, services and schemas."""

from __future__ import annotations

from enum import Enum

from sqlalchemy import Enum as SAEnum


class Role(str, Enum):
    """Account roles, from most to least privileged."""

    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    GESTOR = "gestor"


class AccountStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class EmployeePosition(str, Enum):
    TEACHER = "teacher"
    PRINCIPAL = "principal"


class EmployeeStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class AssignmentStatus(str, Enum):
    ACTIVE = "active"
    ENDED = "ended"


class AssignmentKind(str, Enum):
    """Why an employee is linked to a site.

    ``STAFF`` is the employee's working placement (one active at a time);
    ``PRINCIPAL`` is oversight of a site of the institution they run.
    """

    STAFF = "staff"
    PRINCIPAL = "principal"


class SiteStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class SiteZone(str, Enum):
    URBAN = "urban"
    RURAL = "rural"


class ShiftName(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    SATURDAY = "saturday"
    NIGHT = "night"


class AcademicLevel(str, Enum):
    BASIC_STUDIES = "basic_studies"
    HIGH_SCHOOL = "high_school"
    PROFESSIONAL = "professional"
    TECHNOLOGIST = "technologist"
    LICENTIATE = "licentiate"
    SPECIALIZATION = "specialization"
    MASTERS = "masters"
    DOCTORATE = "doctorate"


def enum_type(enum_cls: type[Enum], name: str) -> SAEnum:
    """Build a SQLAlchemy ``Enum`` column type persisting member *values*.

    :param enum_cls: Python enumeration to map.
    :type enum_cls: type[enum.Enum]
    :param name: Database type name (PostgreSQL ``CREATE TYPE``).
    :type name: str
    :returns: Column type with a CHECK constraint on non-native backends.
    :rtype: sqlalchemy.Enum
    """
    return SAEnum(
        enum_cls,
        name=name,
        native_enum=True,
        create_constraint=True,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )
