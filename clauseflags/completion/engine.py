# Clauseflags CLI Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
`CompletionEngine` answers one completion request: resolve the cursor, pick a
completer, return candidate lines (directive lines included).

Completion must never fail visibly. Every exception raised while resolving
or completing is logged at debug level and turns into an empty answer.
"""
from __future__ import annotations

from typing import Sequence

from clauseflags.completion.cache import KeyValueStore
from clauseflags.completion.completers import (
    BaseCompleter,
    DurationCompleter,
    StaticCompleter,
    filter_prefix,
)
from clauseflags.completion.context import CompletionContext, CompletionTarget
from clauseflags.completion.resolver import CompletionResolver
from clauseflags.logger import logger
from clauseflags.parser.arg_type import ArgType
from clauseflags.parser.command import CommandNode, visible_flags
from clauseflags.parser.flag_spec import FLAG_PREFIX, INVERTED_PREFIX, ArgSpec

TYPE_COMPLETERS: dict[ArgType, BaseCompleter] = {
    ArgType.BOOL: StaticCompleter(["true", "false"]),
    ArgType.DURATION: DurationCompleter(),
}


def flag_names(context: CompletionContext) -> list[str]:
    """Non-hidden flag names visible at the cursor that match the partial word."""
    inverted = context.partial.startswith(INVERTED_PREFIX)
    names: list[str] = []
    for spec in visible_flags(context.path):
        if spec.positional or spec.hidden:
            continue
        for name in spec.names:
            offered = INVERTED_PREFIX + name[len(FLAG_PREFIX) :] if inverted else name
            if offered.startswith(context.partial) and offered not in names:
                names.append(offered)
    return names


def completer_for(arg: ArgSpec | None) -> BaseCompleter | None:
    if arg is None:
        return None
    if arg.completer is not None:
        return arg.completer
    return TYPE_COMPLETERS.get(arg.type)


class CompletionEngine:
    """
    Dispatches completion requests for a command tree.

    Args:
        root (CommandNode): Root of the schema tree.
        store (KeyValueStore | None): External cache handed to completers.
    """

    def __init__(self, root: CommandNode, store: KeyValueStore | None = None) -> None:
        self.root = root
        self.resolver = CompletionResolver(root, store)

    def complete(self, args: Sequence[str], index: int) -> list[str]:
        """Candidate lines for the word at `index` of `args`; never raises."""
        try:
            context = self.resolver.resolve(args, index)
            return self.dispatch(context)
        except Exception as error:
            logger.debug("Completion failed at %d of %r: %s", index, list(args), error)
            return []

    def dispatch(self, context: CompletionContext) -> list[str]:
        logger.debug(
            "Completing %s for '%s' in %s",
            context.target.value,
            context.partial,
            " ".join(context.command_path),
        )
        if context.target == CompletionTarget.RESIDUAL:
            return []
        if context.target == CompletionTarget.FLAG_NAME:
            return flag_names(context)
        if context.target == CompletionTarget.SUBCOMMAND:
            children = filter_prefix(
                [child.name for child in context.node.subcommands], context.partial
            )
            if not context.partial:
                children.extend(flag_names(context))
            return children
        if context.target == CompletionTarget.POSITIONAL and context.positional is None:
            return flag_names(context) if not context.partial else []

        completer = completer_for(context.arg)
        if completer is None:
            return []
        return list(completer.complete(context))
