# Clauseflags CLI Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Final parser stages: defaults, then required and validator checks.

Both stages look at every spec visible from the routed command: its own flags
and positionals plus the global flags of its ancestors. Global specs are
handled once against the global table, local specs once per clause.

A local required flag is satisfied when any clause supplies it; it does not
have to appear in every clause.
"""
from __future__ import annotations

from clauseflags.exceptions import ValidationError
from clauseflags.parser.arg_type import Scope
from clauseflags.parser.command import visible_flags
from clauseflags.parser.flag_spec import FlagSpec
from clauseflags.parser.parser_types import ParseResult
from clauseflags.parser.values import ResolvedValue


def default_for(spec: FlagSpec) -> ResolvedValue | None:
    """Stored form of a spec's default, or `None` when the slot stays unset."""
    if spec.default is None:
        if spec.variadic and not spec.required:
            return ResolvedValue.many([])
        return None
    value = ResolvedValue.of(spec.default)
    if (spec.accumulate or spec.variadic) and not value.is_many:
        value = ResolvedValue.many([value])
    return value


def apply_defaults(result: ParseResult) -> ParseResult:
    """Fill unset slots from defaults (global table once, each clause for local)."""
    for spec in visible_flags(result.nodes):
        value = default_for(spec)
        if value is None:
            continue
        if spec.scope == Scope.GLOBAL:
            result.global_values.setdefault(spec.name, value)
        else:
            for clause in result.clauses:
                clause.values.setdefault(spec.name, value)
    return result


def _run_validator(spec: FlagSpec, value: ResolvedValue, clause_index: int | None) -> None:
    if spec.validator is None:
        return
    try:
        spec.validator(value.unwrap())
    except Exception as error:
        raise ValidationError(spec.name, str(error), clause_index) from error


def validate(result: ParseResult) -> ParseResult:
    """
    Enforce required specs and run custom validators.

    Raises:
        ValidationError: On the first missing required spec or rejected value.
    """
    for spec in visible_flags(result.nodes):
        if spec.scope == Scope.GLOBAL:
            if spec.required and spec.name not in result.global_values:
                kind = "argument" if spec.positional else "flag"
                raise ValidationError(spec.name, f"required {kind} not provided")
            if spec.name in result.global_values:
                _run_validator(spec, result.global_values[spec.name], None)
            continue

        if spec.required and not any(spec.name in clause for clause in result.clauses):
            kind = "argument" if spec.positional else "flag"
            raise ValidationError(spec.name, f"required {kind} not provided in any clause")
        for index, clause in enumerate(result.clauses):
            if spec.name in clause:
                _run_validator(spec, clause.values[spec.name], index)
    return result
