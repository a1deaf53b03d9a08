"""Application service: Create Admin use case."""

from __future__ import annotations

from backoffice.domain.exceptions import ValidationError
from backoffice.domain.model.identity import new_id
from backoffice.domain.model.user import User, UserRole
from backoffice.domain.repository.user_repository import UserRepository


class CreateAdminHandler:

    def __init__(self, user_repo: UserRepository) -> None:
        self._user_repo = user_repo

    def handle(self, name: str, email: str, role: str = UserRole.ADMIN.value) -> User:
        """Register a back-office account able to call the admin API."""
        if not name or not name.strip():
            raise ValidationError("User name is required")
        if not email or "@" not in email:
            raise ValidationError(f"Invalid email: {email!r}")
        try:
            user_role = UserRole(role)
        except ValueError:
            raise ValidationError(f"Unknown role '{role}'") from None

        if self._user_repo.get_by_email(email.strip()) is not None:
            raise ValidationError(f"User '{email.strip()}' already exists")

        user = User(id=new_id(), name=name.strip(), email=email.strip(), role=user_role)
        self._user_repo.save(user)
        return user
