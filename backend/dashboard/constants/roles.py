from __future__ import annotations
import enum


class Role(str, enum.Enum):
    """Closed set of account roles. Values match the stored/wire representation."""
    ADMIN = 'admin'
    SUPER_ADMIN = 'super-admin'

    @classmethod
    def parse(cls, value) -> 'Role':
        if isinstance(value, cls):
            return value
        return cls(str(value))
