"""JSON-file-backed implementation of UserRepository."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from backoffice.domain.model.user import User, UserRole
from backoffice.domain.repository.user_repository import UserRepository
from backoffice.infrastructure.persistence.json_file import ensure_json_list, read_json, write_json


class JsonUserRepository(UserRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    def get_by_id(self, user_id: str) -> User | None:
        return self._load().get(user_id)

    def get_by_email(self, email: str) -> User | None:
        for user in self._load().values():
            if user.email.lower() == email.lower():
                return user
        return None

    def list_all(self) -> list[User]:
        return list(self._load().values())

    def save(self, user: User) -> None:
        users = self._load()
        users[user.id] = user
        self._persist(users)

    def _load(self) -> dict[str, User]:
        raw = read_json(self._file_path)
        return {
            item["id"]: User(
                id=item["id"],
                name=item["name"],
                email=item["email"],
                role=UserRole(item["role"]),
                is_active=item.get("is_active", True),
                created_at=datetime.fromisoformat(item["created_at"]),
            )
            for item in raw
        }

    def _persist(self, users: dict[str, User]) -> None:
        raw = [
            {
                "id": u.id,
                "name": u.name,
                "email": u.email,
                "role": u.role.value,
                "is_active": u.is_active,
                "created_at": u.created_at.isoformat(),
            }
            for u in users.values()
        ]
        write_json(self._file_path, raw)

    def _ensure_file(self) -> None:
        ensure_json_list(self._file_path)
