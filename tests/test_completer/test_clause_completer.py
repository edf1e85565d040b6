import pytest
from prompt_toolkit.document import Document

from clauseflags.completer import ClauseCompleter, is_hint
from clauseflags.completion import (
    FieldCompleter,
    FieldValueCompleter,
    MemoryStore,
    StaticCompleter,
)
from clauseflags.parser import ArgSpec, CommandBuilder


@pytest.fixture
def root():
    builder = CommandBuilder("datatool", handler=lambda result: None)
    builder.add_flag("-input", scope="global")
    builder.add_flag("-format", completer=StaticCompleter(["json", "yaml"]))
    builder.add_flag("-mode", completer=StaticCompleter(["AETHERWARP", "AETHERZOOM"]))
    builder.add_flag(
        "-filter",
        args=[
            ArgSpec("FIELD", completer=FieldCompleter("-input")),
            ArgSpec("OPERATOR", completer=StaticCompleter(["eq", "ne"])),
            ArgSpec("VALUE", completer=FieldValueCompleter("-input")),
        ],
    )
    return builder.build()


def completions(completer, text):
    return list(completer.get_completions(Document(text), None))


def test_single_match_replaces_stub(root):
    results = completions(ClauseCompleter(root), "-format j")

    assert [c.text for c in results] == ["json"]
    assert results[0].start_position == -1


def test_lcp_completions(root):
    results = completions(ClauseCompleter(root), "-mode A")

    assert [c.text for c in results] == ["AETHER", "AETHERWARP", "AETHERZOOM"]


def test_flag_names_skip_lcp(root):
    results = completions(ClauseCompleter(root), "-f")

    assert [c.text for c in results] == ["-format", "-filter"]


def test_trailing_space_completes_new_word(root):
    results = completions(ClauseCompleter(root), "-format ")

    assert [c.text for c in results] == ["json", "yaml"]
    assert all(c.start_position == 0 for c in results)


def test_hint_is_displayed_but_inserts_nothing(root):
    results = completions(ClauseCompleter(root), "-filter ")

    assert len(results) == 1
    assert results[0].text == ""
    assert results[0].display_text == "<FIELD>"


def test_values_with_spaces_are_quoted(root):
    store = MemoryStore({"VALUES_city": "New York\x1fNewark"})
    results = completions(ClauseCompleter(root, store), "-filter city eq N")

    assert [c.text for c in results] == ["New", '"New York"', "Newark"]
    assert results[1].display_text == "New York"


def test_directives_are_consumed_not_shown(root, tmp_path, monkeypatch):
    (tmp_path / "cities.csv").write_text("name,city\nAnn,Oslo\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    completer = ClauseCompleter(root)

    results = completions(completer, "-input cities.csv -filter c")

    assert [c.text for c in results] == ["city"]
    assert completer.store.get("FIELDS") == "name\x1fcity"


def test_unbalanced_quote_yields_nothing(root):
    assert completions(ClauseCompleter(root), '-format "js') == []


def test_is_hint():
    assert is_hint("<FILE>")
    assert is_hint("data/<*.csv>")
    assert not is_hint("json")
