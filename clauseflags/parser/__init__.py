"""
Clauseflags CLI Parser

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

from .arg_type import ArgType, Scope
from .builder import CommandBuilder
from .clause_parser import ClauseParser
from .command import (
    CommandNode,
    Example,
    boolean_polarity,
    identity_polarity,
    validate_tree,
)
from .flag_spec import ArgSpec, FlagSpec
from .parser_types import Clause, ParseResult, PendingConversion
from .values import ResolvedValue, ValueKind

__all__ = [
    "ArgSpec",
    "ArgType",
    "Clause",
    "ClauseParser",
    "CommandBuilder",
    "CommandNode",
    "Example",
    "FlagSpec",
    "ParseResult",
    "PendingConversion",
    "ResolvedValue",
    "Scope",
    "ValueKind",
    "boolean_polarity",
    "identity_polarity",
    "validate_tree",
]
