import pytest

from clauseflags.completion import (
    FieldCompleter,
    FieldValueCompleter,
    FileCompleter,
    StaticCompleter,
)
from clauseflags.parser import ArgSpec, CommandBuilder


def noop(result):
    return None


@pytest.fixture
def datatool():
    builder = CommandBuilder("datatool", handler=noop)
    builder.add_flag(
        "-input", "-i", scope="global", completer=FileCompleter("*.{csv,json}")
    )
    builder.add_flag("-format", completer=StaticCompleter(["json", "yaml", "xml"]))
    builder.add_flag(
        "-filter",
        args=[
            ArgSpec("FIELD", completer=FieldCompleter("-input")),
            ArgSpec("OPERATOR", completer=StaticCompleter(["eq", "ne", "gt", "lt"])),
            ArgSpec("VALUE", completer=FieldValueCompleter("-input")),
        ],
        accumulate=True,
    )
    builder.add_flag("-verbose", "-v", boolean=True, scope="global")
    builder.add_flag("-strict", type="bool")
    builder.add_flag("-timeout", type="duration")
    builder.add_flag("-debug-dump", boolean=True, hidden=True)
    builder.add_positional("PATTERN", completer=StaticCompleter(["alpha", "beta"]))
    return builder.build()


@pytest.fixture
def gitlike():
    builder = CommandBuilder("vcs")
    builder.add_flag("-verbose", boolean=True, scope="global")
    query = builder.subcommand("query", handler=noop)
    query.add_flag("-field", completer=StaticCompleter(["id", "name"]))
    query.add_positional("TABLE", completer=StaticCompleter(["users", "orders"]))
    remote = builder.subcommand("remote")
    remote.subcommand("add", handler=noop).add_positional("NAME")
    remote.subcommand("remove", handler=noop).add_positional("NAME")
    return builder.build()


@pytest.fixture
def cities_csv(tmp_path):
    path = tmp_path / "cities.csv"
    path.write_text("name,city\nAnn,New York\nBob,New York\nCid,Chicago\n", encoding="utf-8")
    return path
