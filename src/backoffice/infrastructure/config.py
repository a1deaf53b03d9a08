"""Runtime settings, read from ``BACKOFFICE_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"

_TRUE = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    data_dir: Path = _DEFAULT_DATA_DIR
    environment: str = "development"
    log_level: str = "INFO"
    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"
    jwt_ttl_days: int = 7
    max_page_limit: int = 100
    strict_status_transitions: bool = False

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @classmethod
    def from_env(cls) -> Settings:
        env = os.environ
        return cls(
            data_dir=Path(env.get("BACKOFFICE_DATA_DIR", str(_DEFAULT_DATA_DIR))),
            environment=env.get("BACKOFFICE_ENV", "development"),
            log_level=env.get("BACKOFFICE_LOG_LEVEL", "INFO").upper(),
            jwt_secret=env.get("BACKOFFICE_JWT_SECRET", "change-me"),
            jwt_ttl_days=int(env.get("BACKOFFICE_JWT_TTL_DAYS", "7")),
            max_page_limit=int(env.get("BACKOFFICE_MAX_PAGE_LIMIT", "100")),
            strict_status_transitions=(
                env.get("BACKOFFICE_STRICT_STATUS_TRANSITIONS", "").lower() in _TRUE
            ),
        )
