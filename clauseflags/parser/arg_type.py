# Clauseflags CLI Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `ArgType` and `Scope`, the enums that describe how a flag argument is
converted and where its value is stored.

Both accept config-friendly aliases so schemas loaded from YAML or TOML can
say `integer` or `datetime` instead of the canonical member value.

Example:
    ArgType("int")      → ArgType.INT
    ArgType("integer")  → ArgType.INT (via alias)
    ArgType("datetime") → ArgType.TIMESTAMP (via alias)
    Scope("clause")     → Scope.LOCAL (via alias)
"""
from __future__ import annotations

from enum import Enum


class ArgType(Enum):
    """
    Declared type of a single flag or positional argument.

    Members:
        STRING: Keep the raw token.
        INT: Base-10 integer.
        FLOAT: Floating point number.
        BOOL: true/false style literal (`true`, `t`, `1`, `yes`, `on`, ...).
        DURATION: Go-style duration such as `90s`, `1h30m` or `250ms`.
        TIMESTAMP: Date/time, parsed with explicit formats or dateutil.

    Aliases:
        - "str", "text" → "string"
        - "integer" → "int"
        - "number", "double" → "float"
        - "boolean" → "bool"
        - "time", "datetime" → "timestamp"
    """

    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    DURATION = "duration"
    TIMESTAMP = "timestamp"

    @classmethod
    def _get_alias(cls, value: str) -> str:
        aliases = {
            "str": "string",
            "text": "string",
            "integer": "int",
            "number": "float",
            "double": "float",
            "boolean": "bool",
            "time": "timestamp",
            "datetime": "timestamp",
        }
        return aliases.get(value, value)

    @classmethod
    def _missing_(cls, value: object) -> ArgType:
        if isinstance(value, type):
            by_type = {str: "string", int: "int", float: "float", bool: "bool"}
            if value in by_type:
                return cls(by_type[value])
        if not isinstance(value, str):
            raise ValueError(f"Invalid {cls.__name__}: {value!r}")
        normalized = value.strip().lower()
        alias = cls._get_alias(normalized)
        for member in cls:
            if member.value == alias:
                return member
        valid = ", ".join(member.value for member in cls)
        raise ValueError(f"Invalid {cls.__name__}: '{value}'. Must be one of: {valid}")

    def __str__(self) -> str:
        return self.value


class Scope(Enum):
    """
    Where a flag's value lives.

    Members:
        GLOBAL: Resolved once for the whole invocation.
        LOCAL: Resolved independently inside every clause.
    """

    GLOBAL = "global"
    LOCAL = "local"

    @classmethod
    def _missing_(cls, value: object) -> Scope:
        if not isinstance(value, str):
            raise ValueError(f"Invalid {cls.__name__}: {value!r}")
        normalized = value.strip().lower()
        alias = {"clause": "local", "command": "global"}.get(normalized, normalized)
        for member in cls:
            if member.value == alias:
                return member
        raise ValueError(f"Invalid {cls.__name__}: '{value}'. Must be global or local")

    def __str__(self) -> str:
        return self.value
