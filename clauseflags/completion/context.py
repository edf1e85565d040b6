# Clauseflags CLI Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
`CompletionContext` describes what is being completed and everything a
completer may need to know about the tokens typed before the cursor.

Values recorded here are raw strings (records of raw strings for
multi-argument flags, lists for accumulate flags); the resolver never converts
values, so partially typed input cannot fail completion.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from clauseflags.completion.cache import KeyValueStore
from clauseflags.parser.command import CommandNode, lookup_flag
from clauseflags.parser.flag_spec import ArgSpec, FlagSpec


class CompletionTarget(Enum):
    """Kind of slot under the cursor."""

    SUBCOMMAND = "subcommand"
    FLAG_NAME = "flag_name"
    FLAG_ARGUMENT = "flag_argument"
    POSITIONAL = "positional"
    RESIDUAL = "residual"


@dataclass
class CompletionContext:
    """
    Attributes:
        partial (str): Text of the word under the cursor.
        args (list[str]): All words of the command line, program name excluded.
        index (int): Index of the word under the cursor in `args`.
        target (CompletionTarget): Classification of the cursor position.
        flag (FlagSpec | None): Flag whose argument is being completed.
        flag_token (str): The flag as typed (`-filter`, `+filter`).
        arg_index (int): Argument of `flag` being completed (0-based).
        previous_args (list[str]): Earlier arguments of the same occurrence.
        positional (FlagSpec | None): Positional spec under the cursor.
        path (tuple[CommandNode, ...]): Root to active node.
        global_values (dict[str, Any]): Global flags and positionals so far.
        clause_values (dict[str, Any]): Local values of the current clause.
        clause_index (int): Index of the clause holding the cursor.
        store (KeyValueStore | None): External cache, when available.
    """

    partial: str
    args: list[str]
    index: int
    target: CompletionTarget
    path: tuple[CommandNode, ...]
    flag: FlagSpec | None = None
    flag_token: str = ""
    arg_index: int = 0
    previous_args: list[str] = field(default_factory=list)
    positional: FlagSpec | None = None
    global_values: dict[str, Any] = field(default_factory=dict)
    clause_values: dict[str, Any] = field(default_factory=dict)
    clause_index: int = 0
    store: KeyValueStore | None = None

    @property
    def node(self) -> CommandNode:
        return self.path[-1]

    @property
    def command_path(self) -> tuple[str, ...]:
        return tuple(node.name for node in self.path)

    @property
    def flag_name(self) -> str:
        return self.flag.name if self.flag else ""

    @property
    def arg(self) -> ArgSpec | None:
        """Argument spec being completed, for flag arguments and positionals."""
        if self.target == CompletionTarget.FLAG_ARGUMENT and self.flag:
            return self.flag.args[self.arg_index]
        if self.target == CompletionTarget.POSITIONAL and self.positional:
            return self.positional.args[0]
        return None

    def previous_arg(self, name: str) -> str | None:
        """Value typed for the argument `name` earlier in the current occurrence."""
        if self.flag is None:
            return None
        for position, arg in enumerate(self.flag.args):
            if arg.name == name and position < len(self.previous_args):
                return self.previous_args[position]
        return None

    def value_of(self, name: str) -> str | None:
        """
        Raw string given so far for flag or positional `name`.

        Looks in the current clause, then the global values, then falls back
        to a literal `name VALUE` pair anywhere on the command line.
        """
        spec = lookup_flag(self.path, name)
        key = spec.name if spec is not None else name
        for table in (self.clause_values, self.global_values):
            value = _as_text(table.get(key))
            if value:
                return value
        names = spec.names if spec is not None else (name,)
        for position, token in enumerate(self.args[:-1]):
            if token in names and position + 1 != self.index:
                return self.args[position + 1]
        return None


def _as_text(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, list) and value:
        return _as_text(value[-1])
    return None
