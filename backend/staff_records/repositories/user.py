"""Account lookups."""

from __future__ import annotations

from sqlalchemy import select

from staff_records.models.user import User
from staff_records.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    model = User

    def _sortable_fields(self):
        return {
            "id": User.id,
            "email": User.email,
            "last_name": User.last_name,
            "created_at": User.created_at,
        }

    def _filterable_fields(self):
        return {"email": User.email, "role": User.role, "status": User.status}

    def _updatable_fields(self):
        # password and role change through AuthService only
        return {"first_name", "last_name", "phone", "email"}

    def get_by_email(self, email: str) -> User | None:
        """Account whose login matches ``email`` once trimmed and lowercased."""
        return self.session.scalar(select(User).filter_by(email=email.strip().lower()))
