# Clauseflags CLI Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Cross-process key/value cache used by the field completers.

Each completion request is a fresh process, so anything reused between
keystrokes (field names extracted once, sampled values) lives outside the
process. The store is injected; every helper here tolerates `store=None`.

Key layout:
- `FIELDS_<sanitized basename>`: field names of one data file.
- `FIELDS`: field names of the most recently cached file.
- `VALUES_<sanitized field>`: sampled values of one field.

Values are lists joined with the ASCII unit separator, which cannot occur in
a field name typed on a command line.
"""
from __future__ import annotations

import os
import re
from typing import MutableMapping, Protocol, Sequence, runtime_checkable

ENV_PREFIX = "CLAUSEFLAGS_"
LIST_SEPARATOR = "\x1f"
FIELDS_KEY = "FIELDS"
VALUES_KEY = "VALUES"

_UNSAFE = re.compile(r"[^A-Za-z0-9]")


@runtime_checkable
class KeyValueStore(Protocol):
    """Minimal get/set contract of the external cache."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """In-process store, for tests and long-lived prompt sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class EnvironStore:
    """
    Store backed by environment variables written by the shell integration.

    Key `K` maps to variable `CLAUSEFLAGS_K`. `set` only updates the mapping
    it was given; the shell learns about new values from directive lines.
    """

    def __init__(
        self, environ: MutableMapping[str, str] | None = None, prefix: str = ENV_PREFIX
    ) -> None:
        self.environ = os.environ if environ is None else environ
        self.prefix = prefix

    def get(self, key: str) -> str | None:
        return self.environ.get(f"{self.prefix}{key}")

    def set(self, key: str, value: str) -> None:
        self.environ[f"{self.prefix}{key}"] = value


def sanitize_key(name: str) -> str:
    """Map every non-alphanumeric character to `_`."""
    return _UNSAFE.sub("_", name)


def fields_key(path: str | None = None) -> str:
    if not path:
        return FIELDS_KEY
    return f"{FIELDS_KEY}_{sanitize_key(os.path.basename(path))}"


def values_key(field: str) -> str:
    return f"{VALUES_KEY}_{sanitize_key(field)}"


def encode_list(values: Sequence[str]) -> str:
    return LIST_SEPARATOR.join(values)


def decode_list(text: str | None) -> list[str]:
    if not text:
        return []
    return [item for item in text.split(LIST_SEPARATOR) if item]


def store_fields(store: KeyValueStore | None, fields: Sequence[str], path: str | None) -> None:
    """Cache field names under the file key and the generic key."""
    if store is None or not fields:
        return
    encoded = encode_list(fields)
    if path:
        store.set(fields_key(path), encoded)
    store.set(FIELDS_KEY, encoded)


def load_fields(store: KeyValueStore | None, path: str | None = None) -> list[str]:
    """Cached field names for `path`, falling back to the generic key."""
    if store is None:
        return []
    if path:
        fields = decode_list(store.get(fields_key(path)))
        if fields:
            return fields
    return decode_list(store.get(FIELDS_KEY))


def store_values(store: KeyValueStore | None, field: str, values: Sequence[str]) -> None:
    if store is None or not values:
        return
    store.set(values_key(field), encode_list(values))


def load_values(store: KeyValueStore | None, field: str) -> list[str]:
    if store is None:
        return []
    return decode_list(store.get(values_key(field)))
