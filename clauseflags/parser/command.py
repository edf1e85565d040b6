# Clauseflags CLI Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `CommandNode`, the immutable schema tree consumed by the clause parser,
the completion resolver and the help renderer.

A tree is assembled bottom-up: children are finished `CommandNode`s passed to
their parent. Every node checks its own structure on construction, and also
checks that no flag anywhere below it reuses one of its global flag names, so a
finished root is known to be collision free.

Checks that need the whole path from the root (for example that a
`timezone_from` dependency names a reachable global flag) run in
`validate_tree`, which the builder and the parser call on the root.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterator

from clauseflags.exceptions import SchemaError
from clauseflags.parser.arg_type import ArgType, Scope
from clauseflags.parser.flag_spec import END_OF_FLAGS, FLAG_PREFIX, INVERTED_PREFIX, FlagSpec
from clauseflags.parser.values import ResolvedValue, ValueKind

if TYPE_CHECKING:
    from clauseflags.parser.parser_types import ParseResult

DEFAULT_SEPARATORS = ("+", "-")

Handler = Callable[["ParseResult"], "int | None"]
PolarityHandler = Callable[[FlagSpec, bool, ResolvedValue], Any]


def identity_polarity(spec: FlagSpec, inverted: bool, value: ResolvedValue) -> Any:
    """Ignore the `+` prefix; `+flag` and `-flag` store the same value."""
    return value


def boolean_polarity(spec: FlagSpec, inverted: bool, value: ResolvedValue) -> Any:
    """Store `False` for `+flag` on boolean values, leave everything else as is."""
    if inverted and value.kind == ValueKind.BOOL:
        return ResolvedValue(ValueKind.BOOL, not value.payload)
    return value


@dataclass(frozen=True)
class Example:
    """A usage example shown in help and man output."""

    command: str
    description: str = ""


@dataclass(frozen=True, eq=False)
class CommandNode:
    """
    One node of the command tree: the root program or a subcommand.

    Attributes:
        name (str): Program or subcommand name.
        flags (tuple[FlagSpec, ...]): Named flags and positionals, in
            definition order (positional order is matching order).
        separators (tuple[str, ...] | None): Clause separator tokens. `None`
            inherits the parent's separators (the root falls back to `+`, `-`).
        subcommands (tuple[CommandNode, ...]): Child nodes.
        handler (Callable | None): Called with the `ParseResult`.
        polarity_handler (Callable | None): Decides what `+flag` stores.
        description, version, author, clause_description (str): Help text.
        examples (tuple[Example, ...]): Usage examples.
    """

    name: str
    flags: tuple[FlagSpec, ...] = ()
    separators: tuple[str, ...] | None = None
    subcommands: tuple[CommandNode, ...] = ()
    handler: Handler | None = None
    polarity_handler: PolarityHandler | None = None
    description: str = ""
    version: str = ""
    author: str = ""
    clause_description: str = ""
    examples: tuple[Example, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "flags", tuple(self.flags))
        object.__setattr__(self, "subcommands", tuple(self.subcommands))
        object.__setattr__(
            self,
            "examples",
            tuple(
                example if isinstance(example, Example) else Example(*example)
                for example in self.examples
            ),
        )
        if self.separators is not None:
            object.__setattr__(self, "separators", tuple(self.separators))
        if not self.name:
            raise SchemaError("Command name cannot be empty")
        self._validate_flags()
        self._validate_positionals()
        self._validate_separators()
        self._validate_subcommands()

    def _validate_flags(self) -> None:
        seen: set[str] = set()
        for spec in self.flags:
            if not isinstance(spec, FlagSpec):
                raise SchemaError(f"{self.name}: expected FlagSpec, got {spec!r}")
            for name in spec.names:
                if name in seen:
                    raise SchemaError(f"{self.name}: duplicate flag name '{name}'")
                seen.add(name)

    def _validate_positionals(self) -> None:
        positionals = self.positionals
        variadic = [index for index, spec in enumerate(positionals) if spec.variadic]
        if len(variadic) > 1:
            raise SchemaError(
                f"{self.name}: only one positional argument can be variadic"
            )
        if variadic and variadic[0] != len(positionals) - 1:
            raise SchemaError(
                f"{self.name}: variadic positional '{positionals[variadic[0]].name}' must be last"
            )

    def _validate_separators(self) -> None:
        for separator in self.separators or ():
            if not isinstance(separator, str) or not separator:
                raise SchemaError(f"{self.name}: separators must be non-empty strings")
            if separator == END_OF_FLAGS:
                raise SchemaError(f"{self.name}: '--' cannot be a clause separator")
            if separator in self.flag_names:
                raise SchemaError(
                    f"{self.name}: separator '{separator}' is also a flag name"
                )

    def _validate_subcommands(self) -> None:
        names: set[str] = set()
        for child in self.subcommands:
            if not isinstance(child, CommandNode):
                raise SchemaError(f"{self.name}: expected CommandNode, got {child!r}")
            if child.name.startswith((FLAG_PREFIX, INVERTED_PREFIX)):
                raise SchemaError(
                    f"subcommand name cannot start with - or +: {child.name}"
                )
            if child.name in names:
                raise SchemaError(f"subcommand '{child.name}' already defined")
            names.add(child.name)

        global_names = {
            name for spec in self.global_flags for name in spec.names
        }
        if not global_names:
            return
        for path, node in self.walk():
            if node is self:
                continue
            for spec in node.flags:
                for name in spec.names:
                    if name in global_names:
                        where = " ".join(child.name for child in path[1:])
                        raise SchemaError(
                            f"flag '{name}' in subcommand '{where}' conflicts "
                            f"with global flag of '{self.name}'"
                        )

    @property
    def flag_names(self) -> set[str]:
        return {name for spec in self.flags for name in spec.names}

    @property
    def named_flags(self) -> tuple[FlagSpec, ...]:
        return tuple(spec for spec in self.flags if not spec.positional)

    @property
    def positionals(self) -> tuple[FlagSpec, ...]:
        return tuple(spec for spec in self.flags if spec.positional)

    @property
    def global_flags(self) -> tuple[FlagSpec, ...]:
        return tuple(spec for spec in self.flags if spec.scope == Scope.GLOBAL)

    def find_flag(self, name: str) -> FlagSpec | None:
        """Find a named flag of this node by any of its aliases."""
        for spec in self.named_flags:
            if name in spec.names:
                return spec
        return None

    def get_subcommand(self, name: str) -> CommandNode | None:
        for child in self.subcommands:
            if child.name == name:
                return child
        return None

    def walk(
        self, path: tuple[CommandNode, ...] = ()
    ) -> Iterator[tuple[tuple[CommandNode, ...], CommandNode]]:
        """Yield `(path, node)` pairs depth first; `path` ends with `node`."""
        path = path + (self,)
        yield path, self
        for child in self.subcommands:
            yield from child.walk(path)

    def __repr__(self) -> str:
        return (
            f"CommandNode(name={self.name!r}, flags={[s.name for s in self.flags]}, "
            f"subcommands={[c.name for c in self.subcommands]})"
        )


def effective_separators(path: tuple[CommandNode, ...]) -> tuple[str, ...]:
    """Separators of the last node in `path`, inherited from the nearest ancestor."""
    for node in reversed(path):
        if node.separators is not None:
            return node.separators
    return DEFAULT_SEPARATORS


def visible_flags(path: tuple[CommandNode, ...]) -> list[FlagSpec]:
    """
    Specs usable at the end of `path`: its own flags and positionals, then
    the global named flags of its ancestors, inward out. Positionals are
    never inherited.
    """
    if not path:
        return []
    flags = list(path[-1].flags)
    for ancestor in reversed(path[:-1]):
        flags.extend(spec for spec in ancestor.global_flags if not spec.positional)
    return flags


def lookup_flag(path: tuple[CommandNode, ...], name: str) -> FlagSpec | None:
    """Find a named flag visible at the end of `path`."""
    for spec in visible_flags(path):
        if not spec.positional and name in spec.names:
            return spec
    return None


def validate_tree(root: CommandNode) -> CommandNode:
    """
    Run the checks that need the full path from the root.

    Every `timezone_from` must name a named, global, non deferred flag visible
    from the node declaring it.

    Raises:
        SchemaError: If a dependency cannot be satisfied.
    """
    for path, node in root.walk():
        for spec in node.flags:
            for dependency in spec.dependencies:
                target = lookup_flag(path, dependency)
                if target is None:
                    raise SchemaError(
                        f"Flag '{spec.name}': timezone_from names unknown flag '{dependency}'"
                    )
                if target.scope != Scope.GLOBAL:
                    raise SchemaError(
                        f"Flag '{spec.name}': timezone_from flag '{dependency}' must be global"
                    )
                if target.deferred or target.arity != 1 or target.args[0].type != ArgType.STRING:
                    raise SchemaError(
                        f"Flag '{spec.name}': timezone_from flag '{dependency}' "
                        "must take a single string argument"
                    )
    return root
