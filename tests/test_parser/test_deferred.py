from datetime import datetime, timedelta, timezone

import pytest

from clauseflags.exceptions import ParseError
from clauseflags.parser import ArgSpec, ClauseParser, CommandBuilder


def noop(result):
    return None


def build_events(tz_default=None, accumulate=False):
    builder = CommandBuilder("events", handler=noop)
    builder.add_flag("-tz", scope="global", default=tz_default)
    builder.add_flag(
        "-since",
        type="timestamp",
        time_formats=["%Y-%m-%d %H:%M"],
        timezone_from="-tz",
        accumulate=accumulate,
    )
    return ClauseParser(builder.build())


def test_dependency_declared_after_deferred_flag():
    parser = build_events()

    result = parser.parse(["-since", "2024-03-01 12:00", "-tz", "Asia/Tokyo"])

    since = result.clauses[0].get("-since")
    assert since.utcoffset() == timedelta(hours=9)
    assert since.astimezone(timezone.utc) == datetime(2024, 3, 1, 3, 0, tzinfo=timezone.utc)


def test_dependency_declared_before_deferred_flag():
    parser = build_events()

    result = parser.parse(["-tz", "UTC", "-since", "2024-03-01 12:00"])

    since = result.clauses[0].get("-since")
    assert since.utcoffset() == timedelta(0)
    assert since.hour == 12


def test_dependency_default_used_when_absent():
    parser = build_events(tz_default="Asia/Kolkata")

    result = parser.parse(["-since", "2024-03-01 12:00"])

    assert result.clauses[0].get("-since").utcoffset() == timedelta(hours=5, minutes=30)


def test_deferred_values_keep_accumulate_order():
    parser = build_events(accumulate=True)

    result = parser.parse(
        ["-since", "2024-01-01 00:00", "-since", "2024-06-01 00:00", "-tz", "UTC"]
    )

    values = result.clauses[0].get("-since")
    assert [value.month for value in values] == [1, 6]
    assert all(value.utcoffset() == timedelta(0) for value in values)


def test_deferred_in_later_clause():
    parser = build_events()

    result = parser.parse(
        ["-since", "2024-01-01 08:00", "+", "-since", "2024-01-02 08:00", "-tz", "UTC"]
    )

    assert [clause.get("-since").day for clause in result.clauses] == [1, 2]
    assert all(clause.get("-since").utcoffset() == timedelta(0) for clause in result.clauses)


def test_unknown_zone_fails_at_deferred_stage():
    parser = build_events()

    with pytest.raises(ParseError) as exc_info:
        parser.parse(["-since", "2024-01-01 08:00", "-tz", "Mars/Olympus"])

    assert exc_info.value.flag == "-since"
    assert "invalid timezone" in exc_info.value.message


def test_aware_input_keeps_its_offset():
    builder = CommandBuilder("events", handler=noop)
    builder.add_flag("-tz", scope="global")
    builder.add_flag("-at", args=[ArgSpec("WHEN", "timestamp", timezone_from="-tz")])
    parser = ClauseParser(builder.build())

    result = parser.parse(["-at", "2024-05-01T10:00:00+02:00", "-tz", "UTC"])

    assert result.clauses[0].get("-at").utcoffset() == timedelta(hours=2)
