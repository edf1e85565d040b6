# Clauseflags CLI Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Completion context resolution.

`CompletionResolver` replays the clause grammar over the words before the
cursor and classifies the word under it. The replay follows the parser's
token rules (separators, `--`, flags with their arity, subcommand routing,
bare tokens) but never converts values and ignores unknown flags, so any
partial command line can be classified.

Classification, in order:
1. after `--`: residual, nothing to complete;
2. inside the argument span of a flag: the open argument of that flag;
3. a word starting with `-` or `+`: a flag name;
4. a node with subcommands before any bare word: a subcommand name;
5. anything else: the positional slot the word would fill.
"""
from __future__ import annotations

from typing import Any, Sequence

from clauseflags.completion.cache import KeyValueStore
from clauseflags.completion.context import CompletionContext, CompletionTarget
from clauseflags.parser.arg_type import Scope
from clauseflags.parser.command import CommandNode, effective_separators, lookup_flag
from clauseflags.parser.flag_spec import END_OF_FLAGS, FLAG_PREFIX, INVERTED_PREFIX, FlagSpec
from clauseflags.parser.scanner import is_flag_token, normalize_flag_token
from clauseflags.parser.utils import looks_like_number


def _flag_like(partial: str) -> bool:
    return partial.startswith((FLAG_PREFIX, INVERTED_PREFIX)) and not looks_like_number(partial)


class _Replay:
    """Mutable state of one replay."""

    def __init__(self, root: CommandNode) -> None:
        self.path: tuple[CommandNode, ...] = (root,)
        self.global_values: dict[str, Any] = {}
        self.clause_values: dict[str, Any] = {}
        self.clause_index = 0
        self.bare: list[str] = []
        self.routing_open = True

    @property
    def node(self) -> CommandNode:
        return self.path[-1]

    def record(self, spec: FlagSpec, raw: Sequence[str]) -> None:
        if spec.is_boolean:
            value: Any = "true"
        elif spec.arity == 1:
            value = raw[0]
        else:
            value = {arg.name: text for arg, text in zip(spec.args, raw)}
        table = self.global_values if spec.scope == Scope.GLOBAL else self.clause_values
        if spec.accumulate:
            table.setdefault(spec.name, []).append(value)
        else:
            table[spec.name] = value

    def new_clause(self) -> None:
        self.clause_index += 1
        self.clause_values = {}
        self.bare = []
        self.routing_open = False

    def positional_order(self) -> list[FlagSpec]:
        """Positional specs in the order the current clause's bare words fill them."""
        positionals = self.node.positionals
        local = [spec for spec in positionals if spec.scope == Scope.LOCAL]
        if self.clause_index > 0:
            return local
        return [spec for spec in positionals if spec.scope == Scope.GLOBAL] + local

    def assign_positionals(self) -> None:
        order = self.positional_order()
        for position, spec in enumerate(order):
            table = self.global_values if spec.scope == Scope.GLOBAL else self.clause_values
            if spec.variadic:
                if self.bare[position:]:
                    table[spec.name] = list(self.bare[position:])
                break
            if position < len(self.bare):
                table[spec.name] = self.bare[position]

    def positional_at(self, count: int) -> FlagSpec | None:
        order = self.positional_order()
        if count < len(order):
            return order[count]
        for spec in order:
            if spec.variadic:
                return spec
        return None


class CompletionResolver:
    """
    Classifies the cursor position of a partial command line.

    Args:
        root (CommandNode): Root of the schema tree.
        store (KeyValueStore | None): External cache handed to completers.
    """

    def __init__(self, root: CommandNode, store: KeyValueStore | None = None) -> None:
        self.root = root
        self.store = store

    def resolve(self, args: Sequence[str], index: int) -> CompletionContext:
        """
        Build the `CompletionContext` for the word at `index` of `args`.

        `index == len(args)` completes a new, empty word.
        """
        args = list(args)
        index = max(0, min(index, len(args)))
        partial = args[index] if index < len(args) else ""
        before = args[:index]
        replay = _Replay(self.root)

        position = 0
        while position < len(before):
            token = before[position]
            if token == END_OF_FLAGS:
                return self._context(replay, args, index, partial, CompletionTarget.RESIDUAL)
            if token in effective_separators(replay.path):
                replay.new_clause()
                position += 1
                continue
            if is_flag_token(token, replay.path):
                name, _ = normalize_flag_token(token)
                spec = lookup_flag(replay.path, name)
                if spec is None or spec.is_boolean:
                    if spec is not None:
                        replay.record(spec, ())
                    position += 1
                    continue
                available = before[position + 1 : position + 1 + spec.arity]
                if len(available) < spec.arity:
                    replay.assign_positionals()
                    if _flag_like(partial):
                        return self._context(
                            replay, args, index, partial, CompletionTarget.FLAG_NAME
                        )
                    return self._context(
                        replay,
                        args,
                        index,
                        partial,
                        CompletionTarget.FLAG_ARGUMENT,
                        flag=spec,
                        flag_token=token,
                        arg_index=len(available),
                        previous_args=list(available),
                    )
                replay.record(spec, available)
                position += 1 + spec.arity
                continue
            child = replay.node.get_subcommand(token) if replay.routing_open else None
            if child is not None:
                replay.path = replay.path + (child,)
                position += 1
                continue
            replay.bare.append(token)
            replay.routing_open = False
            position += 1

        replay.assign_positionals()
        if _flag_like(partial):
            return self._context(replay, args, index, partial, CompletionTarget.FLAG_NAME)
        if replay.node.subcommands and replay.routing_open:
            return self._context(replay, args, index, partial, CompletionTarget.SUBCOMMAND)
        return self._context(
            replay,
            args,
            index,
            partial,
            CompletionTarget.POSITIONAL,
            positional=replay.positional_at(len(replay.bare)),
        )

    def _context(
        self,
        replay: _Replay,
        args: list[str],
        index: int,
        partial: str,
        target: CompletionTarget,
        **kwargs: Any,
    ) -> CompletionContext:
        return CompletionContext(
            partial=partial,
            args=args,
            index=index,
            target=target,
            path=replay.path,
            global_values=replay.global_values,
            clause_values=replay.clause_values,
            clause_index=replay.clause_index,
            store=self.store,
            **kwargs,
        )
