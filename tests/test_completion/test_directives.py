import json

import pytest
from pydantic import ValidationError

from clauseflags.completion.directives import (
    CompletionDirective,
    is_directive,
    parse_directive,
    split_completion_output,
)


def test_field_cache_line_is_compact_json_with_marker():
    line = CompletionDirective.field_cache(["id", "full name"], "/data/x.csv").to_line()

    assert line.startswith('{"type":"field_cache"')
    assert json.loads(line) == {
        "type": "field_cache",
        "fields": ["id", "full name"],
        "filepath": "/data/x.csv",
    }


def test_values_with_awkward_characters_survive():
    values = ['say "hi"', "a,b", "tab\there", "new\nline"]
    line = CompletionDirective.field_values("note", values).to_line()

    assert "\n" not in line
    assert parse_directive(line).values == values


def test_hint_and_env_shapes():
    assert json.loads(CompletionDirective.hint("<FILE>").to_line()) == {
        "type": "hint",
        "value": "<FILE>",
    }
    assert json.loads(CompletionDirective.env("FIELDS", "a").to_line()) == {
        "type": "env",
        "key": "FIELDS",
        "value": "a",
    }


def test_missing_payload_rejected():
    with pytest.raises(ValidationError):
        CompletionDirective(type="field_values", field="city")


def test_unknown_type_rejected():
    with pytest.raises(ValidationError):
        CompletionDirective(type="launch_missiles")


def test_is_directive():
    assert is_directive('{"type":"hint","value":"x"}')
    assert not is_directive("json")
    assert not is_directive('{"value":"x"}')


def test_split_keeps_order_and_drops_malformed_directives():
    lines = [
        CompletionDirective.field_cache(["a", "b"]).to_line(),
        "alpha",
        '{"type":"field_values"}',
        "beta",
        CompletionDirective.hint("<X>").to_line(),
    ]

    candidates, directives = split_completion_output(lines)

    assert candidates == ["alpha", "beta"]
    assert [directive.type for directive in directives] == ["field_cache", "hint"]


def test_parse_candidate_returns_none():
    assert parse_directive("plain") is None
