"""Identifiers for persisted aggregates.

Ids are 24 lowercase hex characters, the same shape as a document-store
object id, so they can be told apart from human-facing order numbers.
"""

from __future__ import annotations

import re
import secrets

_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")


def new_id() -> str:
    return secrets.token_hex(12)


def looks_like_id(value: str) -> bool:
    return bool(_ID_PATTERN.match(value))
