import pytest

from clauseflags.completion import (
    CompletionEngine,
    FunctionCompleter,
    MemoryStore,
    split_completion_output,
)
from clauseflags.parser import CommandBuilder


def test_static_flag_argument(datatool):
    engine = CompletionEngine(datatool)

    assert engine.complete(["-format", "j"], 1) == ["json"]


def test_static_completion_ignores_case(datatool):
    engine = CompletionEngine(datatool)

    assert engine.complete(["-format", "Y"], 1) == ["yaml"]


def test_flag_names_by_prefix(datatool):
    engine = CompletionEngine(datatool)

    assert engine.complete(["-f"], 0) == ["-format", "-filter"]


def test_flag_names_offered_where_argument_expected(datatool):
    engine = CompletionEngine(datatool)

    assert engine.complete(["-format", "-f"], 1) == ["-format", "-filter"]


def test_hidden_flags_not_offered(datatool):
    engine = CompletionEngine(datatool)

    assert "-debug-dump" not in engine.complete(["-d"], 0)
    assert engine.complete(["-d"], 0) == []


def test_inverted_flag_names(datatool):
    engine = CompletionEngine(datatool)

    assert engine.complete(["+verb"], 0) == ["+verbose"]


def test_bool_type_default_completer(datatool):
    engine = CompletionEngine(datatool)

    assert engine.complete(["-strict", ""], 1) == ["true", "false"]


@pytest.mark.parametrize(
    "partial,expected",
    [
        ("1h", ["1h"]),
        ("3", ["30s", "30m"]),
        ("zz", ["<DURATION>"]),
    ],
)
def test_duration_type_default_completer(datatool, partial, expected):
    engine = CompletionEngine(datatool)

    assert engine.complete(["-timeout", partial], 1) == expected


def test_positional_completer(datatool):
    engine = CompletionEngine(datatool)

    assert engine.complete(["-format", "json", "b"], 2) == ["beta"]


def test_positional_exhausted_offers_flags(datatool):
    engine = CompletionEngine(datatool)

    candidates = engine.complete(["alpha", ""], 1)

    assert "-format" in candidates
    assert "-input" in candidates
    assert "-debug-dump" not in candidates


def test_residual_completes_nothing(datatool):
    engine = CompletionEngine(datatool)

    assert engine.complete(["--", ""], 1) == []


def test_subcommand_names(gitlike):
    engine = CompletionEngine(gitlike)

    assert engine.complete(["re"], 0) == ["remote"]
    assert engine.complete(["remote", "re"], 1) == ["remove"]


def test_empty_word_at_router_offers_subcommands_and_flags(gitlike):
    engine = CompletionEngine(gitlike)

    assert engine.complete([""], 0) == ["query", "remote", "-verbose"]


def test_subcommand_flag_and_positional(gitlike):
    engine = CompletionEngine(gitlike)

    assert engine.complete(["query", "-field", "n"], 2) == ["name"]
    assert engine.complete(["query", "o"], 1) == ["orders"]


def test_failing_completer_degrades_to_empty():
    def explode(context):
        raise RuntimeError("boom")

    root = (
        CommandBuilder("tool", handler=lambda result: None)
        .add_flag("-x", completer=FunctionCompleter(explode))
        .build()
    )

    assert CompletionEngine(root).complete(["-x", ""], 1) == []


def test_out_of_range_index_is_clamped(datatool):
    engine = CompletionEngine(datatool)

    assert engine.complete(["-format"], 10) == ["json", "yaml", "xml"]


def test_field_names_from_input_file(datatool, cities_csv, monkeypatch):
    monkeypatch.chdir(cities_csv.parent)
    store = MemoryStore()
    engine = CompletionEngine(datatool, store)

    lines = engine.complete(["-input", "cities.csv", "-filter", "c"], 3)

    candidates, directives = split_completion_output(lines)
    assert candidates == ["city"]
    assert directives[0].type == "field_cache"
    assert directives[0].fields == ["name", "city"]
    assert store.get("FIELDS") == "name\x1fcity"
    assert store.get("FIELDS_cities_csv") == "name\x1fcity"


def test_field_values_from_input_file(datatool, cities_csv, monkeypatch):
    monkeypatch.chdir(cities_csv.parent)
    engine = CompletionEngine(datatool, MemoryStore())

    lines = engine.complete(["-input", "cities.csv", "-filter", "city", "eq", ""], 5)

    candidates, directives = split_completion_output(lines)
    assert candidates == ["New York", "Chicago"]
    assert directives[0].type == "field_values"
    assert directives[0].field == "city"


def test_field_names_fall_back_to_cache(datatool):
    store = MemoryStore({"FIELDS": "name\x1fnumber\x1fcity"})
    engine = CompletionEngine(datatool, store)

    assert engine.complete(["-filter", "n"], 1) == ["name", "number"]


def test_field_names_without_file_or_cache_hint(datatool):
    engine = CompletionEngine(datatool)

    assert engine.complete(["-filter", ""], 1) == ["<FIELD>"]


def test_field_values_fall_back_to_cache(datatool):
    store = MemoryStore({"VALUES_city": "Chicago\x1fBoston\x1fCairo"})
    engine = CompletionEngine(datatool, store)

    assert engine.complete(["-filter", "city", "eq", "C"], 3) == ["Chicago", "Cairo"]


def test_field_values_without_field_hint(datatool):
    engine = CompletionEngine(datatool)

    assert engine.complete(["-filter", "", "eq", ""], 3) == ["<VALUE>"]
