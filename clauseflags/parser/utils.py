# Clauseflags CLI Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Contains value coercion utilities for clauseflags argument parsing.

This module converts raw string tokens into the Python value described by an
`ArgSpec`, wrapped as a `ResolvedValue`.

Functions:
- coerce_bool: Convert a string to a boolean (strict).
- parse_duration: Convert a Go-style duration (`1h30m`, `250ms`) to a timedelta.
- parse_timestamp: Convert a string to an aware datetime, honoring formats and zone.
- coerce_value: Convert a raw token according to an `ArgType`.
- convert_argument: Convert a raw token for an `ArgSpec` into a `ResolvedValue`.
"""
import re
from datetime import datetime, timedelta, tzinfo
from typing import Any

from dateutil import parser as date_parser
from dateutil import tz

from clauseflags.parser.arg_type import ArgType
from clauseflags.parser.flag_spec import ArgSpec
from clauseflags.parser.values import ResolvedValue

_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")
_DURATION_UNITS = {
    "ns": timedelta(microseconds=0.001),
    "us": timedelta(microseconds=1),
    "µs": timedelta(microseconds=1),
    "μs": timedelta(microseconds=1),
    "ms": timedelta(milliseconds=1),
    "s": timedelta(seconds=1),
    "m": timedelta(minutes=1),
    "h": timedelta(hours=1),
}
LOCAL_TIMEZONE = "Local"


def coerce_bool(value: str) -> bool:
    """
    Convert a string to a boolean.

    Accepts 'true', 't', '1', 'yes', 'on' and their false counterparts,
    case-insensitively.

    Raises:
        ValueError: If the string is not a recognised boolean literal.
    """
    if isinstance(value, bool):
        return value
    normalized = value.strip().lower()
    if normalized in {"true", "t", "1", "yes", "y", "on"}:
        return True
    elif normalized in {"false", "f", "0", "no", "n", "off"}:
        return False
    raise ValueError(f"'{value}' is not a boolean")


def parse_duration(value: str) -> timedelta:
    """
    Parse a duration such as `300ms`, `-1.5h` or `2h45m`.

    A bare `0` is accepted; any other value needs a unit on every component.
    """
    text = value.strip()
    sign = 1
    if text[:1] in ("+", "-"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    if text == "0":
        return timedelta(0)
    if not text:
        raise ValueError(f"invalid duration '{value}'")
    total = timedelta(0)
    position = 0
    for match in _DURATION_PART.finditer(text):
        if match.start() != position:
            break
        total += _DURATION_UNITS[match.group(2)] * float(match.group(1))
        position = match.end()
    if position != len(text):
        raise ValueError(f"invalid duration '{value}'")
    return total * sign


def resolve_timezone(name: str | None) -> tzinfo:
    """Return the tzinfo for a zone name; `None` and `Local` mean local time."""
    if not name or name == LOCAL_TIMEZONE:
        return tz.tzlocal()
    zone = tz.gettz(name)
    if zone is None:
        raise ValueError(f"invalid timezone '{name}'")
    return zone


def parse_timestamp(
    value: str, formats: tuple[str, ...] = (), timezone: str | None = None
) -> datetime:
    """
    Parse a timestamp, trying each strptime format in order.

    Without formats the string is handed to dateutil. Naive results are placed
    in `timezone` (local time when unset); aware results keep their offset.
    """
    zone = resolve_timezone(timezone)
    parsed: datetime | None = None
    if formats:
        last_error: ValueError | None = None
        for layout in formats:
            try:
                parsed = datetime.strptime(value, layout)
                break
            except ValueError as error:
                last_error = error
        if parsed is None:
            raise ValueError(
                f"could not parse '{value}' with any format: {last_error}"
            ) from last_error
    else:
        try:
            parsed = date_parser.parse(value)
        except (ValueError, OverflowError) as error:
            raise ValueError(f"could not parse '{value}' as a timestamp") from error
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=zone)
    return parsed


def coerce_value(value: str, arg_type: ArgType, **options: Any) -> Any:
    """
    Attempt to convert a string to the given argument type.

    Args:
        value (str): The raw token.
        arg_type (ArgType): The declared type.
        **options: `formats` and `timezone` for TIMESTAMP arguments.

    Raises:
        ValueError: If conversion fails.
    """
    if arg_type == ArgType.STRING:
        return value
    if arg_type == ArgType.INT:
        return int(value.strip(), 10)
    if arg_type == ArgType.FLOAT:
        return float(value)
    if arg_type == ArgType.BOOL:
        return coerce_bool(value)
    if arg_type == ArgType.DURATION:
        return parse_duration(value)
    if arg_type == ArgType.TIMESTAMP:
        return parse_timestamp(
            value, options.get("formats", ()), options.get("timezone")
        )
    raise ValueError(f"unsupported argument type {arg_type}")


def convert_argument(
    raw: str, arg: ArgSpec, timezone: str | None = None
) -> ResolvedValue:
    """
    Convert one raw token for `arg`.

    `timezone` overrides the argument's own zone; the deferred pass uses it to
    supply the value of the flag named by `timezone_from`.
    """
    payload = coerce_value(
        raw,
        arg.type,
        formats=arg.time_formats,
        timezone=timezone or arg.timezone,
    )
    return ResolvedValue.scalar(arg.type, payload)


def looks_like_number(token: str) -> bool:
    """True for tokens such as `-5` or `-0.25` that should not be read as flags."""
    try:
        float(token)
    except ValueError:
        return False
    return True
