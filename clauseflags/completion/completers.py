# Clauseflags CLI Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Built-in completion strategies.

A completer receives a `CompletionContext` and returns candidate lines in the
order they should be offered. Lines may include directive lines (see
`clauseflags.completion.directives`) ahead of the candidates. Completers
degrade to an empty list or a hint on I/O and data errors; the engine also
guards against anything that still escapes.

Completers:
- StaticCompleter: fixed options, case-insensitive prefix match.
- NoCompleter: nothing, or a single hint.
- FunctionCompleter: wraps a callable.
- ChainCompleter: first completer with a non-empty answer.
- DynamicCompleter: picks a completer from the context.
- DurationCompleter: common durations.
- FileCompleter: directory listing with glob and brace patterns.
- FieldCompleter / FieldCacheCompleter / FieldValueCompleter: data file
  field names and sampled field values.
"""
from __future__ import annotations

import csv
import fnmatch
import os
from abc import ABC, abstractmethod
from typing import Callable, Iterable, Sequence

from clauseflags.completion.cache import load_fields, load_values, store_fields, store_values
from clauseflags.completion.context import CompletionContext
from clauseflags.completion.directives import CompletionDirective
from clauseflags.completion.fields import (
    DEFAULT_MAX_RECORDS,
    DEFAULT_MAX_VALUES,
    extract_fields,
    is_data_file,
    sample_field_values,
)
from clauseflags.logger import logger

FILE_HINT = "<FILE>"
FIELD_HINT = "<FIELD>"
VALUE_HINT = "<VALUE>"
DURATION_HINT = "<DURATION>"
CACHE_DONE = "DONE"

DEFAULT_DURATIONS = (
    "1s", "5s", "10s", "30s",
    "1m", "5m", "10m", "30m",
    "1h", "2h", "6h", "12h", "24h",
)

DATA_ERRORS = (OSError, ValueError, KeyError, csv.Error)


def filter_prefix(options: Iterable[str], partial: str) -> list[str]:
    """Options starting with `partial`, ignoring case, in their given order."""
    lowered = partial.lower()
    return [option for option in options if option.lower().startswith(lowered)]


class BaseCompleter(ABC):
    """Base class of all completion strategies."""

    @abstractmethod
    def complete(self, context: CompletionContext) -> list[str]:
        """Return candidate lines for `context`."""

    def __call__(self, context: CompletionContext) -> list[str]:
        return self.complete(context)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class StaticCompleter(BaseCompleter):
    def __init__(self, options: Iterable[str]) -> None:
        self.options: tuple[str, ...] = tuple(options)

    def complete(self, context: CompletionContext) -> list[str]:
        return filter_prefix(self.options, context.partial)

    def __repr__(self) -> str:
        return f"StaticCompleter(options={list(self.options)!r})"


class NoCompleter(BaseCompleter):
    """Offers nothing, or only `hint` (for example `<NUMBER>`)."""

    def __init__(self, hint: str = "") -> None:
        self.hint = hint

    def complete(self, context: CompletionContext) -> list[str]:
        return [self.hint] if self.hint else []


class FunctionCompleter(BaseCompleter):
    def __init__(self, func: Callable[[CompletionContext], Iterable[str]]) -> None:
        self.func = func

    def complete(self, context: CompletionContext) -> list[str]:
        return list(self.func(context) or [])


class ChainCompleter(BaseCompleter):
    """Try completers in order; the first non-empty result wins, errors skip."""

    def __init__(self, *completers: BaseCompleter) -> None:
        self.completers: tuple[BaseCompleter, ...] = completers

    def complete(self, context: CompletionContext) -> list[str]:
        for completer in self.completers:
            try:
                results = completer.complete(context)
            except Exception as error:
                logger.debug("%r failed in chain: %s", completer, error)
                continue
            if results:
                return results
        return []


class DynamicCompleter(BaseCompleter):
    def __init__(
        self, chooser: Callable[[CompletionContext], BaseCompleter | None]
    ) -> None:
        self.chooser = chooser

    def complete(self, context: CompletionContext) -> list[str]:
        completer = self.chooser(context)
        if completer is None:
            return []
        return completer.complete(context)


class DurationCompleter(BaseCompleter):
    """Suggest common durations; `<DURATION>` when typed text matches none."""

    def __init__(self, suggestions: Sequence[str] | None = None) -> None:
        self.suggestions: tuple[str, ...] = tuple(suggestions or DEFAULT_DURATIONS)

    def complete(self, context: CompletionContext) -> list[str]:
        matches = filter_prefix(self.suggestions, context.partial)
        if not matches and context.partial:
            return [DURATION_HINT]
        return matches


def expand_braces(pattern: str) -> list[str]:
    """Expand one `{a,b,c}` group: `*.{csv,tsv}` → `*.csv`, `*.tsv`."""
    start = pattern.find("{")
    end = pattern.find("}", start + 1)
    if start == -1 or end == -1:
        return [pattern]
    prefix, suffix = pattern[:start], pattern[end + 1 :]
    return [prefix + option.strip() + suffix for option in pattern[start + 1 : end].split(",")]


def matches_pattern(filename: str, pattern: str) -> bool:
    """Case-insensitive glob match supporting one brace group."""
    name = filename.lower()
    return any(
        fnmatch.fnmatchcase(name, candidate)
        for candidate in expand_braces(pattern.lower())
    )


class FileCompleter(BaseCompleter):
    """
    Complete file and directory paths.

    Directories are always offered (with a trailing `/`) so the user can
    descend; files must match `pattern` when one is set. Dotfiles are hidden
    unless the typed name starts with `.`. When nothing matches, a hint is
    offered: `<pattern>` (braces escaped so the shell does not expand them)
    or `hint`.

    When the only match is a data file, its field names are extracted and a
    `field_cache` directive is emitted ahead of the match, so later pipeline
    stages can complete field names without reading the file again.
    """

    def __init__(self, pattern: str = "", dirs_only: bool = False, hint: str = FILE_HINT) -> None:
        self.pattern = pattern
        self.dirs_only = dirs_only
        self.hint = hint

    def __repr__(self) -> str:
        return f"FileCompleter(pattern={self.pattern!r}, dirs_only={self.dirs_only})"

    def build_hint(self, prefix: str) -> str:
        if self.pattern:
            escaped = self.pattern.replace("{", "\\{").replace("}", "\\}")
            hint = f"<{escaped}>"
        else:
            hint = self.hint
        return f"{prefix}{hint}"

    def _no_match(self, prefix: str) -> list[str]:
        if not self.hint:
            return []
        return [self.build_hint(prefix)]

    def complete(self, context: CompletionContext) -> list[str]:
        partial = context.partial
        cut = partial.rfind("/") + 1
        prefix, stem = partial[:cut], partial[cut:]
        directory = os.path.expanduser(prefix) if prefix else "."
        try:
            with os.scandir(directory) as listing:
                entries = sorted(listing, key=lambda entry: entry.name)
        except OSError as error:
            logger.debug("Cannot list '%s': %s", directory, error)
            return self._no_match(prefix)

        matches: list[str] = []
        for entry in entries:
            name = entry.name
            if name.startswith(".") and not stem.startswith("."):
                continue
            if not name.lower().startswith(stem.lower()):
                continue
            try:
                is_dir = entry.is_dir()
            except OSError:
                continue
            if is_dir:
                matches.append(f"{prefix}{name}/")
                continue
            if self.dirs_only:
                continue
            if self.pattern and not matches_pattern(name, self.pattern):
                continue
            matches.append(f"{prefix}{name}")

        if not matches:
            return self._no_match(prefix)

        if len(matches) == 1 and not matches[0].endswith("/") and is_data_file(matches[0]):
            path = os.path.expanduser(matches[0])
            try:
                fields = extract_fields(path)
            except DATA_ERRORS as error:
                logger.debug("Cannot extract fields from '%s': %s", path, error)
                fields = []
            if fields:
                absolute = os.path.abspath(path)
                store_fields(context.store, fields, absolute)
                directive = CompletionDirective.field_cache(fields, absolute)
                return [directive.to_line(), *matches]
        return matches


class FieldCompleter(BaseCompleter):
    """
    Complete field names of the data file named by flag or positional `source`.

    Reads the file when its path is known and emits a `field_cache` directive
    with every field ahead of the filtered names. Otherwise falls back to the
    cache (file key, then the generic key), then to `<FIELD>`.
    """

    def __init__(self, source: str) -> None:
        self.source = source

    def __repr__(self) -> str:
        return f"FieldCompleter(source={self.source!r})"

    def complete(self, context: CompletionContext) -> list[str]:
        path = context.value_of(self.source)
        if path:
            try:
                fields = extract_fields(os.path.expanduser(path))
            except DATA_ERRORS as error:
                logger.debug("Cannot extract fields from '%s': %s", path, error)
                fields = []
            if fields:
                store_fields(context.store, fields, path)
                directive = CompletionDirective.field_cache(fields, os.path.abspath(path))
                return [directive.to_line(), *filter_prefix(fields, context.partial)]
        cached = load_fields(context.store, path)
        if cached:
            return filter_prefix(cached, context.partial)
        return [FIELD_HINT]


class FieldCacheCompleter(BaseCompleter):
    """Emit a `field_cache` directive for `source` followed by `DONE`."""

    def __init__(self, source: str) -> None:
        self.source = source

    def __repr__(self) -> str:
        return f"FieldCacheCompleter(source={self.source!r})"

    def complete(self, context: CompletionContext) -> list[str]:
        path = context.value_of(self.source)
        if path:
            try:
                fields = extract_fields(os.path.expanduser(path))
            except DATA_ERRORS as error:
                logger.debug("Cannot extract fields from '%s': %s", path, error)
                fields = []
            if fields:
                store_fields(context.store, fields, path)
                directive = CompletionDirective.field_cache(fields, os.path.abspath(path))
                return [directive.to_line(), CACHE_DONE]
        return [CACHE_DONE]


class FieldValueCompleter(BaseCompleter):
    """
    Complete values of a field chosen earlier in the same flag occurrence.

    For `-match FIELD VALUE`, completing VALUE reads FIELD from the previous
    arguments, samples that column of the `source` file (bounded head scan,
    distinct values in first-seen order) and emits a `field_values`
    directive ahead of the filtered values. Falls back to cached values, then
    `<VALUE>`.
    """

    def __init__(
        self,
        source: str,
        field_arg: str = "FIELD",
        max_values: int = DEFAULT_MAX_VALUES,
        max_records: int = DEFAULT_MAX_RECORDS,
    ) -> None:
        self.source = source
        self.field_arg = field_arg
        self.max_values = max_values or DEFAULT_MAX_VALUES
        self.max_records = max_records or DEFAULT_MAX_RECORDS

    def __repr__(self) -> str:
        return f"FieldValueCompleter(source={self.source!r}, field_arg={self.field_arg!r})"

    def complete(self, context: CompletionContext) -> list[str]:
        field = context.previous_arg(self.field_arg)
        if not field:
            return [VALUE_HINT]
        path = context.value_of(self.source)
        values: list[str] = []
        if path:
            try:
                values = sample_field_values(
                    os.path.expanduser(path), field, self.max_values, self.max_records
                )
            except DATA_ERRORS as error:
                logger.debug("Cannot sample '%s' from '%s': %s", field, path, error)
        if not values:
            cached = load_values(context.store, field)
            if cached:
                return filter_prefix(cached, context.partial)
            return [VALUE_HINT]
        store_values(context.store, field, values)
        directive = CompletionDirective.field_values(field, values)
        return [directive.to_line(), *filter_prefix(values, context.partial)]
