"""Back-office user accounts.

Only staff accounts exist here; storefront shoppers are captured as
customer snapshots on their orders instead.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class UserRole(Enum):
    ADMIN = "admin"
    SUPER_ADMIN = "super-admin"


@dataclass
class User:
    id: str
    name: str
    email: str
    role: UserRole = UserRole.ADMIN
    is_active: bool = True
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def can_manage_store(self) -> bool:
        return self.is_active and self.role in (UserRole.ADMIN, UserRole.SUPER_ADMIN)
