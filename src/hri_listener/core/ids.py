"""
Identifier value type for tracked human features.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True, order=True)
class ID:
    """Opaque token naming one tracked entity within one feature category.

    Equality, ordering and hashing follow the wrapped string, so IDs sort
    and compare exactly like their tokens and can key a dict directly.
    """

    token: str

    def __str__(self) -> str:
        return self.token

    @classmethod
    def coerce(cls, value: Union["ID", str]) -> "ID":
        """Return ``value`` unchanged if it is already an ID, else wrap it."""
        if isinstance(value, cls):
            return value
        return cls(str(value))
