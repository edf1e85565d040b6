# Clauseflags CLI Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Provides `CommandBuilder`, a small declarative API that assembles a finished,
immutable `CommandNode` tree.

Flags and positionals are registered with `add_flag()` / `add_positional()`,
child commands with `subcommand()` (returns the child's builder) or
`add_subcommand()` (accepts a builder or a finished node). Nothing is shared
or mutated after `build()`: children are built first and handed to their
parent, so the tree is constructed bottom-up.

Example Usage:
    builder = CommandBuilder("datatool", description="Filter tabular data")
    builder.add_flag("-input", "-i", completer=FileCompleter("*.{csv,tsv}"),
                     scope="global", required=True)
    builder.add_flag("-filter", args=["FIELD", "OPERATOR", "VALUE"], accumulate=True)
    builder.add_flag("-verbose", "-v", boolean=True, scope="global")
    builder.set_handler(run)
    root = builder.build()
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Sequence

from clauseflags.exceptions import SchemaError
from clauseflags.parser.arg_type import ArgType, Scope
from clauseflags.parser.command import CommandNode, Example, Handler, PolarityHandler, validate_tree
from clauseflags.parser.flag_spec import ArgSpec, FlagSpec, Validator

if TYPE_CHECKING:
    from clauseflags.completion.completers import BaseCompleter


class CommandBuilder:
    """
    Collects the definition of one command and builds its `CommandNode`.

    Args:
        name (str): Program or subcommand name.
        description (str): One line summary for help output.
        version (str): Version shown in help and man output.
        author (str): Author shown in man output.
        separators (Sequence[str] | None): Clause separators; `None` inherits
            the parent's (`+` and `-` at the root).
        handler (Callable | None): Receives the `ParseResult`.
        polarity_handler (Callable | None): Interprets `+flag`.
        clause_description (str): Extra help text about clauses.
    """

    def __init__(
        self,
        name: str,
        description: str = "",
        version: str = "",
        author: str = "",
        separators: Sequence[str] | None = None,
        handler: Handler | None = None,
        polarity_handler: PolarityHandler | None = None,
        clause_description: str = "",
    ) -> None:
        self.name = name
        self.description = description
        self.version = version
        self.author = author
        self.separators = tuple(separators) if separators is not None else None
        self.handler = handler
        self.polarity_handler = polarity_handler
        self.clause_description = clause_description
        self._flags: list[FlagSpec] = []
        self._subcommands: list[CommandBuilder | CommandNode] = []
        self._examples: list[Example] = []
        self._parent: CommandBuilder | None = None

    def set_handler(self, handler: Handler) -> CommandBuilder:
        self.handler = handler
        return self

    def add_example(self, command: str, description: str = "") -> CommandBuilder:
        self._examples.append(Example(command, description))
        return self

    def add_flag(
        self,
        *names: str,
        type: ArgType | str = ArgType.STRING,
        args: Sequence[ArgSpec | str] | None = None,
        boolean: bool = False,
        scope: Scope | str = Scope.LOCAL,
        accumulate: bool = False,
        required: bool = False,
        default: Any = None,
        validator: Validator | None = None,
        completer: BaseCompleter | None = None,
        time_formats: Sequence[str] = (),
        timezone: str | None = None,
        timezone_from: str | None = None,
        hidden: bool = False,
        help: str = "",
    ) -> CommandBuilder:
        """
        Register a named flag.

        Args:
            *names: Aliases, canonical first (`"-input", "-i"`).
            type: Type of the single argument (ignored when `args` is given
                as `ArgSpec`s).
            args: Argument names (strings) or full `ArgSpec`s for
                multi-argument flags.
            boolean: Flag takes no argument and stores `True`.
            scope: `global` or `local`.
            accumulate: Repeated occurrences build a list.
            required, default, validator, hidden, help: See `FlagSpec`.
            completer: Completer for the single argument.
            time_formats, timezone, timezone_from: Timestamp options for
                arguments built here.

        Raises:
            SchemaError: If the flag definition is invalid.
        """
        if not names:
            raise SchemaError("add_flag() requires at least one name")
        if any(not name.startswith("-") for name in names):
            raise SchemaError(f"Flag names must start with '-': {names}")
        options = dict(
            completer=completer,
            time_formats=tuple(time_formats),
            timezone=timezone,
            timezone_from=timezone_from,
        )
        if boolean:
            if args:
                raise SchemaError(f"Boolean flag '{names[0]}' cannot take arguments")
            arg_specs: tuple[ArgSpec, ...] = ()
        elif args is None:
            arg_specs = (ArgSpec("VALUE", type, **options),)
        else:
            arg_specs = tuple(
                arg if isinstance(arg, ArgSpec) else ArgSpec(arg, type, **options)
                for arg in args
            )
            if not arg_specs:
                raise SchemaError(f"Flag '{names[0]}': use boolean=True for no arguments")
        self._flags.append(
            FlagSpec(
                names=tuple(names),
                args=arg_specs,
                scope=scope,
                accumulate=accumulate,
                required=required,
                default=default,
                validator=validator,
                hidden=hidden,
                help=help,
            )
        )
        return self

    def add_positional(
        self,
        name: str,
        type: ArgType | str = ArgType.STRING,
        scope: Scope | str = Scope.LOCAL,
        variadic: bool = False,
        required: bool = False,
        default: Any = None,
        validator: Validator | None = None,
        completer: BaseCompleter | None = None,
        time_formats: Sequence[str] = (),
        timezone: str | None = None,
        timezone_from: str | None = None,
        help: str = "",
    ) -> CommandBuilder:
        """Register a positional slot; slots match in registration order."""
        if name.startswith(("-", "+")):
            raise SchemaError(f"Positional name '{name}' cannot start with '-' or '+'")
        self._flags.append(
            FlagSpec(
                names=(name,),
                args=(
                    ArgSpec(
                        name,
                        type,
                        completer=completer,
                        time_formats=tuple(time_formats),
                        timezone=timezone,
                        timezone_from=timezone_from,
                    ),
                ),
                scope=scope,
                variadic=variadic,
                required=required,
                default=default,
                validator=validator,
                help=help,
            )
        )
        return self

    def subcommand(self, name: str, **kwargs: Any) -> CommandBuilder:
        """Create, register and return the builder of a child command."""
        child = CommandBuilder(name, **kwargs)
        child._parent = self
        self._subcommands.append(child)
        return child

    def add_subcommand(self, child: CommandBuilder | CommandNode) -> CommandBuilder:
        if isinstance(child, CommandBuilder):
            child._parent = self
        self._subcommands.append(child)
        return self

    def done(self) -> CommandBuilder:
        """Return the parent builder (or self at the root) for chaining."""
        return self._parent or self

    def build(self) -> CommandNode:
        """
        Build the finished tree rooted at this command.

        Raises:
            SchemaError: If any node is structurally invalid, or the root has
                neither a handler nor subcommands.
        """
        node = self._build_node()
        if self._parent is None:
            if node.handler is None and not node.subcommands:
                raise SchemaError(
                    f"command '{self.name}' requires either a handler or subcommands"
                )
            validate_tree(node)
        return node

    def _build_node(self) -> CommandNode:
        children = tuple(
            child._build_node() if isinstance(child, CommandBuilder) else child
            for child in self._subcommands
        )
        return CommandNode(
            name=self.name,
            flags=tuple(self._flags),
            separators=self.separators,
            subcommands=children,
            handler=self.handler,
            polarity_handler=self.polarity_handler,
            description=self.description,
            version=self.version,
            author=self.author,
            clause_description=self.clause_description,
            examples=tuple(self._examples),
        )
