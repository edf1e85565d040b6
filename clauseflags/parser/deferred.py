# Clauseflags CLI Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Second parser stage: convert the occurrences the scan deferred.

A timestamp argument declared with `timezone_from` reads its zone from a
global flag that may appear anywhere in the input, including after the
timestamp itself. The scan leaves a `PendingConversion` in the occurrence
list; once the scan is complete this pass converts each placeholder in place.

Zone lookup for a dependency, first match wins:
1. the value given for the dependency flag on the command line,
2. the dependency flag's default,
3. the argument's own `timezone`,
4. local time.
"""
from __future__ import annotations

from clauseflags.logger import logger
from clauseflags.parser.command import lookup_flag
from clauseflags.parser.parser_types import PendingConversion, ScanState
from clauseflags.parser.scanner import convert_occurrence, polarity_for
from clauseflags.parser.values import ResolvedValue


def dependency_timezone(state: ScanState, dependency: str) -> str | None:
    occurrences = state.global_entries.get(dependency)
    if occurrences:
        value = occurrences[-1]
        if isinstance(value, ResolvedValue) and value.payload:
            return str(value.payload)
    spec = lookup_flag(state.path, dependency)
    if spec is not None and spec.default:
        return str(spec.default)
    return None


def resolve_timezones(state: ScanState, pending: PendingConversion) -> dict[str, str]:
    zones: dict[str, str] = {}
    for dependency in pending.spec.dependencies:
        zone = dependency_timezone(state, dependency)
        if zone:
            zones[dependency] = zone
    return zones


def resolve_deferred(state: ScanState) -> ScanState:
    """
    Replace every `PendingConversion` in `state` with its converted value.

    Raises:
        ParseError: If a deferred value fails conversion.
    """
    polarity = polarity_for(state.path)
    for entries, index, pending in state.pending():
        zones = resolve_timezones(state, pending)
        logger.debug(
            "Resolving deferred value for %s with zones %s", pending.spec.name, zones
        )
        entries[index] = convert_occurrence(
            pending.spec,
            pending.raw,
            pending.token,
            pending.inverted,
            polarity,
            zones,
        )
    return state
