"""
Clauseflags CLI Parser

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

import logging

from .completer import ClauseCompleter
from .completion import (
    ChainCompleter,
    CompletionEngine,
    EnvironStore,
    FieldCompleter,
    FieldValueCompleter,
    FileCompleter,
    MemoryStore,
    NoCompleter,
    StaticCompleter,
)
from .config import loader
from .exceptions import ClauseflagsError, ParseError, SchemaError, ValidationError
from .help import generate_man_page, render_help
from .parser import (
    ArgSpec,
    ArgType,
    ClauseParser,
    CommandBuilder,
    CommandNode,
    FlagSpec,
    ParseResult,
    Scope,
)
from .program import Program

logger = logging.getLogger("clauseflags")


__all__ = [
    "ArgSpec",
    "ArgType",
    "ChainCompleter",
    "ClauseCompleter",
    "ClauseParser",
    "ClauseflagsError",
    "CommandBuilder",
    "CommandNode",
    "CompletionEngine",
    "EnvironStore",
    "FieldCompleter",
    "FieldValueCompleter",
    "FileCompleter",
    "FlagSpec",
    "MemoryStore",
    "NoCompleter",
    "ParseError",
    "ParseResult",
    "Program",
    "SchemaError",
    "Scope",
    "StaticCompleter",
    "ValidationError",
    "generate_man_page",
    "loader",
    "render_help",
]
