# Clauseflags CLI Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Result and intermediate state models for the clause parser.

Contents:
- `Clause`: One run of tokens between separators, with its local values and
  any bare tokens no positional spec consumed.
- `ParseResult`: Everything a handler receives.
- `PendingConversion`: A flag occurrence whose conversion waits for the
  complete global table (deferred timestamp arguments).
- `ScanState` / `ClauseBuffer`: Mutable buffers filled by the scanner and
  drained into `Clause` / `ParseResult` once every stage has run.

Buffers keep, per canonical flag name, the list of occurrences in input order.
An entry is either a `ResolvedValue` or a `PendingConversion` placeholder, so a
deferred value lands at the right position of an accumulate list.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Union

from clauseflags.parser.flag_spec import FlagSpec
from clauseflags.parser.values import ResolvedValue

if TYPE_CHECKING:
    from clauseflags.parser.command import CommandNode


@dataclass
class PendingConversion:
    """Raw tokens of a flag occurrence waiting for the deferred pass."""

    spec: FlagSpec
    raw: tuple[str, ...]
    token: str
    inverted: bool = False
    clause_index: int | None = None


Entry = Union[ResolvedValue, PendingConversion]


@dataclass
class ClauseBuffer:
    """Scan-time storage for one clause."""

    separator: str = ""
    entries: dict[str, list[Entry]] = field(default_factory=dict)
    leftovers: list[str] = field(default_factory=list)


@dataclass
class ScanState:
    """Scan-time storage for a whole invocation."""

    path: tuple[CommandNode, ...]
    clauses: list[ClauseBuffer] = field(default_factory=lambda: [ClauseBuffer()])
    global_entries: dict[str, list[Entry]] = field(default_factory=dict)
    residual: list[str] = field(default_factory=list)

    @property
    def current(self) -> ClauseBuffer:
        return self.clauses[-1]

    @property
    def node(self) -> CommandNode:
        return self.path[-1]

    def pending(self) -> list[tuple[list[Entry], int, PendingConversion]]:
        """Every placeholder with the entry list and index it occupies."""
        found = []
        tables = [self.global_entries] + [clause.entries for clause in self.clauses]
        for table in tables:
            for entries in table.values():
                for index, entry in enumerate(entries):
                    if isinstance(entry, PendingConversion):
                        found.append((entries, index, entry))
        return found


def finalize_entries(
    entries: dict[str, list[Entry]], specs: dict[str, FlagSpec]
) -> dict[str, ResolvedValue]:
    """Collapse occurrence lists: accumulate flags become LIST values."""
    values: dict[str, ResolvedValue] = {}
    for name, occurrences in entries.items():
        if any(isinstance(entry, PendingConversion) for entry in occurrences):
            raise RuntimeError(f"unresolved deferred value for {name}")
        spec = specs.get(name)
        if spec is not None and spec.accumulate:
            values[name] = ResolvedValue.many(occurrences)  # type: ignore[arg-type]
        else:
            values[name] = occurrences[-1]  # type: ignore[assignment]
    return values


@dataclass
class Clause:
    """
    One clause of the invocation.

    Attributes:
        separator (str): Separator token that opened the clause ("" for the first).
        values (dict[str, ResolvedValue]): Local values by canonical name.
        leftovers (list[str]): Bare tokens no positional spec consumed.
    """

    separator: str = ""
    values: dict[str, ResolvedValue] = field(default_factory=dict)
    leftovers: list[str] = field(default_factory=list)

    def __contains__(self, name: str) -> bool:
        return name in self.values

    def get(self, name: str, default: Any = None) -> Any:
        """Return the plain Python value of `name`, or `default` when unset."""
        if name not in self.values:
            return default
        return self.values[name].unwrap()


@dataclass
class ParseResult:
    """
    The outcome of parsing one invocation.

    Attributes:
        clauses (list[Clause]): Clauses in input order; never empty.
        global_values (dict[str, ResolvedValue]): Global values by canonical name.
        residual (list[str]): Tokens after `--`, verbatim.
        raw_args (list[str]): The input tokens, for diagnostics.
        command (CommandNode): The node selected by subcommand routing.
        command_path (tuple[str, ...]): Names from the root to `command`.
    """

    clauses: list[Clause]
    global_values: dict[str, ResolvedValue]
    residual: list[str]
    raw_args: list[str]
    command: CommandNode
    command_path: tuple[str, ...] = ()
    nodes: tuple[CommandNode, ...] = field(default=(), repr=False)

    def get(self, name: str, default: Any = None) -> Any:
        """Return the plain Python value of a global flag or positional."""
        if name not in self.global_values:
            return default
        return self.global_values[name].unwrap()

    def is_subcommand_path(self, *names: str) -> bool:
        """True when routing selected exactly `names` below the root."""
        return self.command_path[1:] == names

    def local_values(self, name: str) -> list[Any]:
        """Plain values of a local flag from every clause that has it."""
        return [clause.get(name) for clause in self.clauses if name in clause]
