# Clauseflags CLI Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
First parser stage: a single left-to-right scan over the argument tokens.

The scan splits the input into clauses at separator tokens, resolves named
flags against the active schema node (and the global flags of its ancestors),
routes into subcommands and collects bare tokens as clause leftovers. Flags
whose conversion depends on another flag are not converted here; the scan
stores a `PendingConversion` placeholder and leaves them to the deferred pass.

Token rules, checked in order:
- `--` ends flag processing; everything after it becomes residual.
- A separator of the active node opens a new clause.
- `-name` / `+name` is a flag (`+` marks inverted polarity). A token that
  reads as a negative number and matches no flag is a bare token.
- A bare token naming a child of the active node, before any bare token or
  separator in that node, switches the active node to the child.
- Anything else is a leftover of the current clause.
"""
from __future__ import annotations

from typing import Sequence

from clauseflags.exceptions import ParseError
from clauseflags.logger import logger
from clauseflags.parser.arg_type import ArgType, Scope
from clauseflags.parser.command import (
    CommandNode,
    PolarityHandler,
    effective_separators,
    identity_polarity,
    lookup_flag,
)
from clauseflags.parser.flag_spec import END_OF_FLAGS, FLAG_PREFIX, INVERTED_PREFIX, FlagSpec
from clauseflags.parser.parser_types import ClauseBuffer, Entry, PendingConversion, ScanState
from clauseflags.parser.utils import convert_argument, looks_like_number
from clauseflags.parser.values import ResolvedValue


def polarity_for(path: tuple[CommandNode, ...]) -> PolarityHandler:
    """Polarity handler of the innermost node on `path` that declares one."""
    for node in reversed(path):
        if node.polarity_handler is not None:
            return node.polarity_handler
    return identity_polarity


def normalize_flag_token(token: str) -> tuple[str, bool]:
    """Map `+name` to `(-name, True)` and `-name` to `(-name, False)`."""
    if token.startswith(INVERTED_PREFIX):
        return FLAG_PREFIX + token[1:], True
    return token, False


def is_flag_token(token: str, path: tuple[CommandNode, ...]) -> bool:
    if len(token) < 2 or not token.startswith((FLAG_PREFIX, INVERTED_PREFIX)):
        return False
    if looks_like_number(token):
        name, _ = normalize_flag_token(token)
        return lookup_flag(path, name) is not None
    return True


def convert_occurrence(
    spec: FlagSpec,
    raw: Sequence[str],
    token: str,
    inverted: bool,
    polarity: PolarityHandler,
    timezones: dict[str, str] | None = None,
) -> ResolvedValue:
    """
    Convert the raw tokens of one flag occurrence into its stored value.

    A single argument yields a scalar, several arguments yield a record keyed
    by argument name. `timezones` maps a `timezone_from` flag name to the
    zone it resolved to, for deferred timestamp arguments. The polarity
    handler sees the converted value last.

    Raises:
        ParseError: If any argument fails conversion.
    """
    converted: dict[str, ResolvedValue] = {}
    for position, (arg, raw_value) in enumerate(zip(spec.args, raw)):
        zone = (timezones or {}).get(arg.timezone_from) if arg.timezone_from else None
        try:
            converted[arg.name] = convert_argument(raw_value, arg, zone)
        except ValueError as error:
            if spec.arity == 1:
                message = f"invalid argument: {error}"
            else:
                message = f"invalid argument {position} ({arg.name}): {error}"
            raise ParseError(token, message) from error
    if spec.arity == 1:
        value = next(iter(converted.values()))
    else:
        value = ResolvedValue.record(converted)
    return ResolvedValue.of(polarity(spec, inverted, value))


def store(table: dict[str, list[Entry]], spec: FlagSpec, entry: Entry) -> None:
    """Record an occurrence; accumulate flags append, others replace."""
    if spec.accumulate:
        table.setdefault(spec.name, []).append(entry)
    else:
        table[spec.name] = [entry]


class Scanner:
    """Runs the scan stage for one invocation."""

    def __init__(self, root: CommandNode) -> None:
        self.root = root

    def scan(self, tokens: Sequence[str]) -> ScanState:
        state = ScanState(path=(self.root,))
        routing_open = True
        index = 0
        while index < len(tokens):
            token = tokens[index]
            if token == END_OF_FLAGS:
                state.residual = list(tokens[index + 1 :])
                break
            if token in effective_separators(state.path):
                state.clauses.append(ClauseBuffer(separator=token))
                routing_open = False
                index += 1
                continue
            if is_flag_token(token, state.path):
                index += self._consume_flag(state, tokens, index)
                continue
            child = state.node.get_subcommand(token) if routing_open else None
            if child is not None:
                logger.debug("Routing to subcommand '%s'", child.name)
                state.path = state.path + (child,)
                index += 1
                continue
            state.current.leftovers.append(token)
            routing_open = False
            index += 1
        return state

    def _consume_flag(self, state: ScanState, tokens: Sequence[str], index: int) -> int:
        token = tokens[index]
        name, inverted = normalize_flag_token(token)
        spec = lookup_flag(state.path, name)
        if spec is None:
            raise ParseError(token, "unknown flag")

        if spec.scope == Scope.GLOBAL:
            table = state.global_entries
            clause_index = None
        else:
            table = state.current.entries
            clause_index = len(state.clauses) - 1
        polarity = polarity_for(state.path)

        if spec.is_boolean:
            value = ResolvedValue.scalar(ArgType.BOOL, True)
            store(table, spec, ResolvedValue.of(polarity(spec, inverted, value)))
            return 1

        raw = tuple(tokens[index + 1 : index + 1 + spec.arity])
        if len(raw) < spec.arity:
            raise ParseError(token, f"requires {spec.arity} argument(s)")

        entry: Entry
        if spec.deferred:
            entry = PendingConversion(spec, raw, token, inverted, clause_index)
        else:
            entry = convert_occurrence(spec, raw, token, inverted, polarity)
        store(table, spec, entry)
        return 1 + spec.arity
