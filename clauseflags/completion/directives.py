# Clauseflags CLI Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Completion directive protocol.

Completion output is a list of lines. A line that starts with the marker
`{"type":` is a directive, a compact JSON object the shell integration
interprets (cache these field names, export this variable, show this hint).
Every other line is a candidate and is passed through untouched.

Directive shapes:
    {"type":"field_cache","fields":[...],"filepath":"/abs/data.csv"}
    {"type":"field_values","field":"city","values":[...]}
    {"type":"hint","value":"<FILE>"}
    {"type":"env","key":"FIELDS","value":"..."}
"""
from __future__ import annotations

from enum import Enum
from typing import Iterable

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

DIRECTIVE_MARKER = '{"type":'


class DirectiveType(str, Enum):
    FIELD_CACHE = "field_cache"
    FIELD_VALUES = "field_values"
    HINT = "hint"
    ENV = "env"


class CompletionDirective(BaseModel):
    """A structured message carried among completion candidates."""

    model_config = ConfigDict(extra="forbid", use_enum_values=True)

    type: DirectiveType
    fields: list[str] | None = None
    field: str | None = None
    values: list[str] | None = None
    key: str | None = None
    value: str | None = None
    filepath: str | None = None

    @model_validator(mode="after")
    def check_payload(self) -> CompletionDirective:
        required = {
            DirectiveType.FIELD_CACHE.value: ("fields",),
            DirectiveType.FIELD_VALUES.value: ("field", "values"),
            DirectiveType.HINT.value: ("value",),
            DirectiveType.ENV.value: ("key", "value"),
        }[DirectiveType(self.type).value]
        missing = [name for name in required if getattr(self, name) is None]
        if missing:
            raise ValueError(f"{self.type} directive requires {', '.join(missing)}")
        return self

    @classmethod
    def field_cache(
        cls, fields: Iterable[str], filepath: str | None = None
    ) -> CompletionDirective:
        return cls(type=DirectiveType.FIELD_CACHE, fields=list(fields), filepath=filepath)

    @classmethod
    def field_values(cls, field: str, values: Iterable[str]) -> CompletionDirective:
        return cls(type=DirectiveType.FIELD_VALUES, field=field, values=list(values))

    @classmethod
    def hint(cls, message: str) -> CompletionDirective:
        return cls(type=DirectiveType.HINT, value=message)

    @classmethod
    def env(cls, key: str, value: str) -> CompletionDirective:
        return cls(type=DirectiveType.ENV, key=key, value=value)

    def to_line(self) -> str:
        """Serialize as one compact JSON line beginning with the marker."""
        return self.model_dump_json(exclude_none=True)


def is_directive(line: str) -> bool:
    return line.startswith(DIRECTIVE_MARKER)


def parse_directive(line: str) -> CompletionDirective | None:
    """Decode a directive line; `None` for candidates and malformed lines."""
    if not is_directive(line):
        return None
    try:
        return CompletionDirective.model_validate_json(line)
    except ValidationError:
        return None


def split_completion_output(
    lines: Iterable[str],
) -> tuple[list[str], list[CompletionDirective]]:
    """Separate candidate lines from directive lines, keeping order within each."""
    candidates: list[str] = []
    directives: list[CompletionDirective] = []
    for line in lines:
        directive = parse_directive(line)
        if directive is not None:
            directives.append(directive)
        elif not is_directive(line):
            candidates.append(line)
    return candidates, directives
