"""Objects shared by every CLI command through ``click``'s context."""

from __future__ import annotations

from dataclasses import dataclass

from backoffice.infrastructure.bootstrap import Repositories
from backoffice.infrastructure.config import Settings


@dataclass(frozen=True)
class CliContext:
    settings: Settings
    repos: Repositories
