"""Turn application DTOs into JSON-ready dicts.

Field names are camelCased on the way out, Decimals become floats and
timestamps ISO-8601 strings.  Plain dict keys (status names, payment
methods) are left as they are.
"""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any


def camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def present(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return {camel(f.name): present(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, dict):
        return {key: present(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [present(item) for item in value]
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value
