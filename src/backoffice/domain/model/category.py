"""Category aggregate: the grouping products are filed under."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Category:
    id: str
    name: str
    is_active: bool = True
