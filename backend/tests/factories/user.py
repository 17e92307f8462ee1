"""Factory Boy definition for :class:`staff_records.models.user.User`."""

from __future__ import annotations

import factory

from staff_records.models import AccountStatus, Role, User
from tests.factories import BaseFactory

DEFAULT_PASSWORD = "Passw0rd!"


class UserFactory(BaseFactory):
    """
    Build persisted :class:`staff_records.models.user.User` instances.

    Notes
    -----
    - The plain password is ``DEFAULT_PASSWORD`` unless ``password=`` is given.
    - Role defaults to ``gestor``; use the traits for the other roles.
    """

    class Meta:
        model = User

    class Params:
        super_admin = factory.Trait(role=Role.SUPER_ADMIN)
        admin = factory.Trait(role=Role.ADMIN)

    id = None  # let autoincrement handle it
    email = factory.Sequence(lambda n: f"user{n}@district.example.com")
    document_number = factory.Sequence(lambda n: f"9{n:09d}")
    first_name = factory.Faker("first_name")
    last_name = factory.Faker("last_name")
    role = Role.GESTOR
    status = AccountStatus.ACTIVE
    password_hash = factory.LazyFunction(lambda: "")  # set via postgen

    @factory.post_generation
    def password(obj, create, extracted, **kwargs):
        """Set password using model setter (ensures hashing)."""
        obj.password = extracted or DEFAULT_PASSWORD
