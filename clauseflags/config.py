# Clauseflags CLI Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""config.py
Configuration loader for clauseflags command trees.

A command tree can be declared in YAML or TOML instead of code:

```yaml
name: datatool
description: Filter tabular data
version: "1.2"
handler: datatool.handlers.run
flags:
  - names: [-input, -i]
    scope: global
    required: true
    file_pattern: "*.{csv,json}"
  - names: [-filter]
    accumulate: true
    args:
      - {name: FIELD, fields_from: -input}
      - {name: OPERATOR, options: [eq, ne, gt, lt]}
      - {name: VALUE, values_from: -input}
positionals:
  - {name: PATTERN}
subcommands:
  - name: stats
    handler: datatool.handlers.stats
```

Handlers, validators and custom completers are dotted import paths.
Completers can also be declared inline with `options`, `file_pattern`,
`fields_from` and `values_from`.
"""
from __future__ import annotations

import importlib
import sys
from pathlib import Path
from typing import Any

import toml
import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from clauseflags.completion.completers import (
    BaseCompleter,
    ChainCompleter,
    FieldCompleter,
    FieldValueCompleter,
    FileCompleter,
    StaticCompleter,
)
from clauseflags.console import error_console
from clauseflags.logger import logger
from clauseflags.parser.arg_type import ArgType, Scope
from clauseflags.parser.builder import CommandBuilder
from clauseflags.parser.command import CommandNode, boolean_polarity, identity_polarity
from clauseflags.parser.flag_spec import ArgSpec

POLARITIES = {"identity": identity_polarity, "boolean": boolean_polarity}


def import_action(dotted_path: str) -> Any:
    """Dynamically imports a callable from a dotted path like 'my.module.func'."""
    module_path, _, attr = dotted_path.rpartition(".")
    if not module_path:
        error_console.print(f"[red]❌ Invalid import path:[/] {dotted_path}")
        sys.exit(1)
    try:
        module = importlib.import_module(module_path)
    except ModuleNotFoundError as error:
        logger.error("Failed to import module '%s': %s", module_path, error)
        error_console.print(
            f"[red]❌ Could not import '{dotted_path}': {error}[/]\n"
            "[dim]Ensure the module is installed and discoverable via PYTHONPATH."
        )
        sys.exit(1)
    try:
        action = getattr(module, attr)
    except AttributeError as error:
        logger.error(
            "Module '%s' does not have attribute '%s': %s", module_path, attr, error
        )
        error_console.print(
            f"[red]❌ Module '{module_path}' has no attribute '{attr}': {error}[/]"
        )
        sys.exit(1)
    return action


class RawArgument(BaseModel):
    """One flag or positional argument as written in a config file."""

    model_config = ConfigDict(extra="forbid")

    name: str = "VALUE"
    type: ArgType = ArgType.STRING
    options: list[str] = Field(default_factory=list)
    file_pattern: str | None = None
    dirs_only: bool = False
    fields_from: str | None = None
    values_from: str | None = None
    field_arg: str = "FIELD"
    completer: str | None = None
    time_formats: list[str] = Field(default_factory=list)
    timezone: str | None = None
    timezone_from: str | None = None

    @field_validator("type", mode="before")
    @classmethod
    def validate_type(cls, value: Any) -> ArgType:
        return ArgType(value)

    def build_completer(self) -> BaseCompleter | None:
        completers: list[BaseCompleter] = []
        if self.completer:
            completer = import_action(self.completer)
            completers.append(completer() if isinstance(completer, type) else completer)
        if self.options:
            completers.append(StaticCompleter(self.options))
        if self.file_pattern is not None or self.dirs_only:
            completers.append(FileCompleter(self.file_pattern or "", dirs_only=self.dirs_only))
        if self.fields_from:
            completers.append(FieldCompleter(self.fields_from))
        if self.values_from:
            completers.append(FieldValueCompleter(self.values_from, field_arg=self.field_arg))
        if not completers:
            return None
        if len(completers) == 1:
            return completers[0]
        return ChainCompleter(*completers)

    def to_arg_spec(self, name: str | None = None) -> ArgSpec:
        return ArgSpec(
            name=name or self.name,
            type=self.type,
            completer=self.build_completer(),
            time_formats=tuple(self.time_formats),
            timezone=self.timezone,
            timezone_from=self.timezone_from,
        )


class RawFlag(RawArgument):
    """
    A flag or positional as written in a config file.

    Single-argument flags put their argument options (`type`, `options`,
    `file_pattern`, ...) directly on the flag; multi-argument flags list
    them under `args`.
    """

    names: list[str] = Field(default_factory=list)
    args: list[RawArgument] | None = None
    boolean: bool = False
    scope: Scope = Scope.LOCAL
    accumulate: bool = False
    variadic: bool = False
    required: bool = False
    default: Any = None
    validator: str | None = None
    hidden: bool = False
    help: str = ""

    @field_validator("names", mode="before")
    @classmethod
    def validate_names(cls, value: Any) -> list[str]:
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("scope", mode="before")
    @classmethod
    def validate_scope(cls, value: Any) -> Scope:
        return Scope(value)

    @model_validator(mode="after")
    def validate_shape(self) -> RawFlag:
        if self.boolean and self.args:
            raise ValueError(f"Boolean flag {self.names} cannot declare args")
        return self


class RawExample(BaseModel):
    command: str
    description: str = ""


class RawCommand(BaseModel):
    """Raw command model for clauseflags configuration."""

    model_config = ConfigDict(extra="forbid")

    name: str
    description: str = ""
    version: str = ""
    author: str = ""
    separators: list[str] | None = None
    handler: str | None = None
    polarity: str | None = None
    clause_description: str = ""
    flags: list[RawFlag] = Field(default_factory=list)
    positionals: list[RawFlag] = Field(default_factory=list)
    examples: list[RawExample] = Field(default_factory=list)
    subcommands: list[RawCommand] = Field(default_factory=list)

    def to_builder(self) -> CommandBuilder:
        polarity = None
        if self.polarity:
            polarity = POLARITIES.get(self.polarity) or import_action(self.polarity)
        builder = CommandBuilder(
            self.name,
            description=self.description,
            version=self.version,
            author=self.author,
            separators=self.separators,
            handler=import_action(self.handler) if self.handler else None,
            polarity_handler=polarity,
            clause_description=self.clause_description,
        )
        for raw in self.flags:
            validator = import_action(raw.validator) if raw.validator else None
            if raw.boolean:
                args: list[ArgSpec] | None = None
            elif raw.args:
                args = [arg.to_arg_spec() for arg in raw.args]
            else:
                args = [raw.to_arg_spec()]
            builder.add_flag(
                *raw.names,
                args=args,
                boolean=raw.boolean,
                scope=raw.scope,
                accumulate=raw.accumulate,
                required=raw.required,
                default=raw.default,
                validator=validator,
                hidden=raw.hidden,
                help=raw.help,
            )
        for raw in self.positionals:
            name = raw.names[0] if raw.names else raw.name
            builder.add_positional(
                name,
                type=raw.type,
                scope=raw.scope,
                variadic=raw.variadic,
                required=raw.required,
                default=raw.default,
                validator=import_action(raw.validator) if raw.validator else None,
                completer=raw.build_completer(),
                time_formats=raw.time_formats,
                timezone=raw.timezone,
                timezone_from=raw.timezone_from,
                help=raw.help,
            )
        for example in self.examples:
            builder.add_example(example.command, example.description)
        for child in self.subcommands:
            builder.add_subcommand(child.to_builder())
        return builder


RawCommand.model_rebuild()


def loader(file_path: Path | str) -> CommandNode:
    """
    Load a clauseflags command tree from a YAML or TOML file.

    Args:
        file_path (str | Path): Path to the config file (YAML or TOML).

    Returns:
        CommandNode: The finished root of the command tree.

    Raises:
        ValueError: If the file format is unsupported or the content is not
            a command mapping.
        FileNotFoundError: If the file does not exist.
        SchemaError: If the declared tree is structurally invalid.
    """
    if isinstance(file_path, (str, Path)):
        path = Path(file_path)
    else:
        raise TypeError("file_path must be a string or Path object.")

    if not path.is_file():
        raise FileNotFoundError(f"No such config file: {file_path}")

    suffix = path.suffix
    with path.open("r", encoding="UTF-8") as config_file:
        if suffix in (".yaml", ".yml"):
            raw_config = yaml.safe_load(config_file)
        elif suffix == ".toml":
            raw_config = toml.load(config_file)
        else:
            raise ValueError(f"Unsupported config format: {suffix}")

    if not isinstance(raw_config, dict):
        raise ValueError(
            "Configuration file must contain a command mapping.\n"
            "Example:\n"
            "name: 'datatool'\n"
            "handler: 'my_module.run'\n"
            "flags:\n"
            "  - names: ['-input']"
        )

    logger.debug("Loading command tree from '%s'", path)
    return RawCommand.model_validate(raw_config).to_builder().build()
