"""Factories for employees and their academic records."""

from __future__ import annotations

import factory

from staff_records.models import (
    AcademicLevel,
    AcademicRecord,
    Employee,
    EmployeePosition,
    EmployeeStatus,
)
from tests.factories import BaseFactory


class EmployeeFactory(BaseFactory):
    """Build persisted active teachers."""

    class Meta:
        model = Employee

    class Params:
        principal = factory.Trait(position=EmployeePosition.PRINCIPAL)
        inactive = factory.Trait(status=EmployeeStatus.INACTIVE)

    id = None
    document_type = "CC"
    document_number = factory.Sequence(lambda n: f"10{n:08d}")
    first_name = factory.Faker("first_name")
    last_name = factory.Faker("last_name")
    email = factory.Sequence(lambda n: f"employee{n}@school.example.com")
    phone = None
    address = None
    position = EmployeePosition.TEACHER
    status = EmployeeStatus.ACTIVE


class AcademicRecordFactory(BaseFactory):
    class Meta:
        model = AcademicRecord

    id = None
    employee = factory.SubFactory(EmployeeFactory)
    level = AcademicLevel.LICENTIATE
    years_experience = 5
    institution = "Universidad de Antioquia"
    degree_title = "Licenciatura en Matematicas"
