# Clauseflags CLI Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Third parser stage: assign leftover bare tokens to positional specs.

Positional specs of the active node match in definition order. Global
positionals match once, against the first clause's leftovers; local
positionals match independently in every clause. Each fixed spec takes one
token when one remains and is left unset otherwise; a trailing variadic spec
takes every remaining token as a LIST value. Consumed tokens are removed from
the clause leftovers, extra tokens stay there for the handler.
"""
from __future__ import annotations

from typing import Sequence

from clauseflags.exceptions import ParseError
from clauseflags.parser.arg_type import Scope
from clauseflags.parser.flag_spec import ArgSpec, FlagSpec
from clauseflags.parser.parser_types import ParseResult
from clauseflags.parser.utils import convert_argument
from clauseflags.parser.values import ResolvedValue


def _zone_for(arg: ArgSpec, result: ParseResult) -> str | None:
    if not arg.timezone_from:
        return None
    value = result.global_values.get(arg.timezone_from)
    if value is not None and value.payload:
        return str(value.payload)
    for node in reversed(result.nodes):
        spec = node.find_flag(arg.timezone_from)
        if spec is not None and spec.default:
            return str(spec.default)
    return None


def _convert(spec: FlagSpec, raw: str, result: ParseResult, where: str) -> ResolvedValue:
    arg = spec.args[0]
    try:
        return convert_argument(raw, arg, _zone_for(arg, result))
    except ValueError as error:
        raise ParseError(spec.name, f"{where}invalid value '{raw}': {error}") from error


def match_specs(
    specs: Sequence[FlagSpec],
    tokens: Sequence[str],
    target: dict[str, ResolvedValue],
    result: ParseResult,
    where: str = "",
) -> int:
    """Match `tokens` to `specs`, writing into `target`. Returns tokens consumed."""
    consumed = 0
    for spec in specs:
        if spec.variadic:
            remaining = tokens[consumed:]
            if remaining:
                target[spec.name] = ResolvedValue.many(
                    [_convert(spec, raw, result, where) for raw in remaining]
                )
                consumed = len(tokens)
            break
        if consumed < len(tokens):
            target[spec.name] = _convert(spec, tokens[consumed], result, where)
            consumed += 1
    return consumed


def match_positionals(result: ParseResult) -> ParseResult:
    """
    Fill positional values of `result` in place.

    Raises:
        ParseError: If a token fails conversion for its positional spec.
    """
    positionals = result.command.positionals
    if not positionals:
        return result
    global_specs = [spec for spec in positionals if spec.scope == Scope.GLOBAL]
    local_specs = [spec for spec in positionals if spec.scope == Scope.LOCAL]

    if global_specs:
        first = result.clauses[0]
        consumed = match_specs(global_specs, first.leftovers, result.global_values, result)
        del first.leftovers[:consumed]

    if local_specs:
        for index, clause in enumerate(result.clauses):
            where = f"clause {index}: " if len(result.clauses) > 1 else ""
            consumed = match_specs(local_specs, clause.leftovers, clause.values, result, where)
            del clause.leftovers[:consumed]
    return result
