"""
Clauseflags CLI Parser

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

from .cache import EnvironStore, KeyValueStore, MemoryStore
from .completers import (
    BaseCompleter,
    ChainCompleter,
    DurationCompleter,
    DynamicCompleter,
    FieldCacheCompleter,
    FieldCompleter,
    FieldValueCompleter,
    FileCompleter,
    FunctionCompleter,
    NoCompleter,
    StaticCompleter,
)
from .context import CompletionContext, CompletionTarget
from .directives import CompletionDirective, split_completion_output
from .engine import CompletionEngine
from .resolver import CompletionResolver
from .script import generate_completion_script

__all__ = [
    "BaseCompleter",
    "ChainCompleter",
    "CompletionContext",
    "CompletionDirective",
    "CompletionEngine",
    "CompletionResolver",
    "CompletionTarget",
    "DurationCompleter",
    "DynamicCompleter",
    "EnvironStore",
    "FieldCacheCompleter",
    "FieldCompleter",
    "FieldValueCompleter",
    "FileCompleter",
    "FunctionCompleter",
    "KeyValueStore",
    "MemoryStore",
    "NoCompleter",
    "StaticCompleter",
    "generate_completion_script",
    "split_completion_output",
]
