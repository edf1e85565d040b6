# Clauseflags CLI Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Field-name extraction and field-value sampling for tabular data files.

Supported formats, chosen by extension:
- `.csv` / `.tsv`: header row names the fields.
- `.jsonl` / `.ndjson`: one JSON object per line.
- `.json`: an array of objects (streamed element by element) or one object.
- anything else is read as CSV.

Field names keep the order they appear in the file. Sampling is a bounded
head scan: records are read from the start of the file, at most
`max_records` of them, and distinct non-empty values are collected in first
seen order until `max_values` are found. It is not a statistical sample of
the whole file; both caps bound the work regardless of file size.

Functions here raise on unreadable or malformed input; completers turn
failures into fallbacks.
"""
from __future__ import annotations

import csv
import json
import os
from itertools import islice
from typing import IO, Any, Iterator

DATA_EXTENSIONS = (".csv", ".tsv", ".json", ".jsonl", ".ndjson")
DEFAULT_MAX_VALUES = 100
DEFAULT_MAX_RECORDS = 10000

_CHUNK_SIZE = 65536
_WHITESPACE = " \t\r\n"


def is_data_file(path: str) -> bool:
    return os.path.splitext(path)[1].lower() in DATA_EXTENSIONS


def data_format(path: str) -> str:
    """One of `csv`, `tsv`, `jsonl`, `json`; unknown extensions read as `csv`."""
    extension = os.path.splitext(path)[1].lower()
    if extension == ".tsv":
        return "tsv"
    if extension in (".jsonl", ".ndjson"):
        return "jsonl"
    if extension == ".json":
        return "json"
    return "csv"


def _open(path: str) -> IO[str]:
    return open(path, "r", encoding="utf-8", errors="replace", newline="")


def _csv_rows(handle: IO[str], delimiter: str) -> Iterator[list[str]]:
    return csv.reader(handle, delimiter=delimiter, skipinitialspace=True)


def _jsonl_objects(handle: IO[str]) -> Iterator[Any]:
    """One item per line; blank and malformed lines yield `None`."""
    for line in handle:
        line = line.strip()
        if not line:
            yield None
            continue
        try:
            yield json.loads(line)
        except json.JSONDecodeError:
            yield None


def _skip_whitespace(buffer: str, position: int) -> int:
    while position < len(buffer) and buffer[position] in _WHITESPACE:
        position += 1
    return position


def iter_json_array(handle: IO[str], chunk_size: int = _CHUNK_SIZE) -> Iterator[Any]:
    """
    Yield the elements of a top-level JSON array without loading the file.

    Raises:
        ValueError: If the document is not an array or is malformed.
    """
    decoder = json.JSONDecoder()
    buffer = handle.read(chunk_size)
    eof = not buffer
    position = _skip_whitespace(buffer, 0)
    if position >= len(buffer) or buffer[position] != "[":
        raise ValueError("JSON document is not an array")
    position += 1
    while True:
        position = _skip_whitespace(buffer, position)
        while position >= len(buffer) and not eof:
            chunk = handle.read(chunk_size)
            eof = not chunk
            buffer = buffer[position:] + chunk
            position = _skip_whitespace(buffer, 0)
        if position >= len(buffer):
            raise ValueError("unterminated JSON array")
        if buffer[position] == "]":
            return
        if buffer[position] == ",":
            position += 1
            continue
        try:
            element, end = decoder.raw_decode(buffer, position)
            complete = end < len(buffer) or eof
        except json.JSONDecodeError:
            if eof:
                raise
            complete = False
        if not complete:
            chunk = handle.read(chunk_size)
            eof = not chunk
            buffer = buffer[position:] + chunk
            position = 0
            continue
        yield element
        buffer = buffer[end:]
        position = 0


def _json_objects(handle: IO[str]) -> Iterator[Any]:
    head = handle.read(1)
    while head and head in _WHITESPACE:
        head = handle.read(1)
    if not head:
        return
    if head == "[":
        handle.seek(0)
        yield from iter_json_array(handle)
    else:
        yield json.loads(head + handle.read())


def scan_records(path: str) -> Iterator[dict[str, Any] | None]:
    """
    Yield one item per scanned row, line or array element.

    CSV/TSV records are keyed by the stripped header. JSON lines or elements
    that are not objects yield `None`, so callers can count them toward a
    scan limit.
    """
    layout = data_format(path)
    with _open(path) as handle:
        if layout in ("csv", "tsv"):
            rows = _csv_rows(handle, "\t" if layout == "tsv" else ",")
            header = next(rows, None)
            if header is None:
                return
            names = [name.strip() for name in header]
            for row in rows:
                yield dict(zip(names, row))
            return
        objects = _jsonl_objects(handle) if layout == "jsonl" else _json_objects(handle)
        for item in objects:
            yield item if isinstance(item, dict) else None


def iter_records(path: str) -> Iterator[dict[str, Any]]:
    """Yield the records of a data file that are objects, skipping the rest."""
    for record in scan_records(path):
        if record is not None:
            yield record


def extract_fields(path: str) -> list[str]:
    """Field names of a data file: header row, or the first object's keys."""
    layout = data_format(path)
    if layout in ("csv", "tsv"):
        with _open(path) as handle:
            header = next(_csv_rows(handle, "\t" if layout == "tsv" else ","), None)
        return [name.strip() for name in header or [] if name.strip()]
    first = next(iter_records(path), None)
    if first is None:
        return []
    return [str(key) for key in first]


def stringify(value: Any) -> str:
    """Render a record value the way a user would type it."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return json.dumps(value, ensure_ascii=False)


def sample_field_values(
    path: str,
    field: str,
    max_values: int = DEFAULT_MAX_VALUES,
    max_records: int = DEFAULT_MAX_RECORDS,
) -> list[str]:
    """
    Distinct non-empty values of `field`, in first-seen order.

    Scans at most `max_records` rows, lines or elements (malformed ones
    included) and stops early once `max_values`
    distinct values are collected.

    Raises:
        KeyError: If a CSV/TSV header does not contain `field`.
    """
    if data_format(path) in ("csv", "tsv") and field not in extract_fields(path):
        raise KeyError(f"field '{field}' not found in header")
    seen: dict[str, None] = {}
    for record in islice(scan_records(path), max_records):
        if record is None:
            continue
        value = stringify(record.get(field))
        if value and value not in seen:
            seen[value] = None
            if len(seen) >= max_values:
                break
    return list(seen)
