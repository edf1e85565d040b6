# Clauseflags CLI Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Tagged value model for parsed flag and positional values.

Every stored value is a `ResolvedValue`: a `ValueKind` tag plus the decoded
payload. Scalars carry the kind matching their `ArgType`; multi-argument flags
produce a `RECORD` (ordered name → ResolvedValue); accumulate flags and
variadic positionals produce a `LIST` of ResolvedValues. `LIST` is the "many"
side of the single/many split, every other kind is "single".

Handlers normally read plain Python through `unwrap()`:

    ResolvedValue.record({"FIELD": ResolvedValue.of("a")}).unwrap()
    # {'FIELD': 'a'}
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Mapping, Sequence

from clauseflags.parser.arg_type import ArgType


class ValueKind(Enum):
    """Tag of a `ResolvedValue` payload."""

    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    DURATION = "duration"
    TIMESTAMP = "timestamp"
    RECORD = "record"
    LIST = "list"

    @classmethod
    def for_arg_type(cls, arg_type: ArgType) -> ValueKind:
        return cls(arg_type.value)


@dataclass(frozen=True)
class ResolvedValue:
    """A parsed value together with the kind it was decoded as."""

    kind: ValueKind
    payload: Any

    @classmethod
    def scalar(cls, arg_type: ArgType, payload: Any) -> ResolvedValue:
        return cls(ValueKind.for_arg_type(arg_type), payload)

    @classmethod
    def record(cls, items: Mapping[str, ResolvedValue]) -> ResolvedValue:
        return cls(ValueKind.RECORD, dict(items))

    @classmethod
    def many(cls, items: Sequence[ResolvedValue]) -> ResolvedValue:
        return cls(ValueKind.LIST, tuple(items))

    @classmethod
    def of(cls, value: Any) -> ResolvedValue:
        """Wrap a plain Python value (used for defaults), inferring its kind."""
        if isinstance(value, ResolvedValue):
            return value
        if isinstance(value, bool):
            return cls(ValueKind.BOOL, value)
        if isinstance(value, int):
            return cls(ValueKind.INT, value)
        if isinstance(value, float):
            return cls(ValueKind.FLOAT, value)
        if isinstance(value, timedelta):
            return cls(ValueKind.DURATION, value)
        if isinstance(value, datetime):
            return cls(ValueKind.TIMESTAMP, value)
        if isinstance(value, Mapping):
            return cls.record({str(k): cls.of(v) for k, v in value.items()})
        if isinstance(value, (list, tuple)):
            return cls.many([cls.of(item) for item in value])
        return cls(ValueKind.STRING, str(value))

    @property
    def is_many(self) -> bool:
        return self.kind == ValueKind.LIST

    @property
    def items(self) -> tuple[ResolvedValue, ...]:
        """Elements of a LIST value; a single value is a one-element tuple."""
        if self.kind == ValueKind.LIST:
            return self.payload
        return (self,)

    def unwrap(self) -> Any:
        """Return the payload as plain Python (dict for records, list for lists)."""
        if self.kind == ValueKind.RECORD:
            return {name: value.unwrap() for name, value in self.payload.items()}
        if self.kind == ValueKind.LIST:
            return [item.unwrap() for item in self.payload]
        return self.payload

    def __hash__(self) -> int:
        if self.kind == ValueKind.RECORD:
            return hash((self.kind, tuple(self.payload.items())))
        return hash((self.kind, self.payload))
