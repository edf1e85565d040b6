"""datatool.py

A small data filter built with clauseflags.

    python datatool.py -input people.csv -filter age gt 30 + -filter city eq Oslo
    python datatool.py -help
    eval "$(python datatool.py -completion-script)"
"""
import sys

from rich.console import Console
from rich.table import Table

from clauseflags import CommandBuilder, Program
from clauseflags.completion import (
    FieldCompleter,
    FieldValueCompleter,
    FileCompleter,
    StaticCompleter,
)
from clauseflags.parser import ArgSpec
from clauseflags.utils import setup_logging

setup_logging()
console = Console()


def run(result):
    table = Table(title=f"datatool {result.get('-input')}")
    table.add_column("clause")
    table.add_column("filters")
    table.add_column("limit")
    for index, clause in enumerate(result.clauses):
        filters = clause.get("-filter", [])
        table.add_row(
            str(index),
            ", ".join(" ".join(str(part) for part in item.values()) for item in filters),
            str(clause.get("-limit")),
        )
    console.print(table)
    if result.get("-verbose"):
        console.print(f"residual: {result.residual}")


def stats(result):
    console.print(f"[bold]stats[/] for {result.get('-input')} by {result.clauses[0].get('-by')}")


builder = CommandBuilder(
    "datatool",
    description="Filter tabular data",
    version="0.1.0",
    clause_description="Rows matching any clause are kept.",
    handler=run,
)
builder.add_flag(
    "-input",
    "-i",
    scope="global",
    required=True,
    completer=FileCompleter("*.{csv,tsv,json,jsonl}"),
    help="Data file to read",
)
builder.add_flag(
    "-filter",
    args=[
        ArgSpec("FIELD", completer=FieldCompleter("-input")),
        ArgSpec("OPERATOR", completer=StaticCompleter(["eq", "ne", "gt", "lt"])),
        ArgSpec("VALUE", completer=FieldValueCompleter("-input")),
    ],
    accumulate=True,
    help="Keep rows where FIELD OPERATOR VALUE holds",
)
builder.add_flag("-limit", type="int", default=100, help="Maximum rows per clause")
builder.add_flag("-verbose", "-v", boolean=True, scope="global", help="Show more detail")
builder.add_example(
    "datatool -input people.csv -filter age gt 30 + -filter city eq Oslo",
    "People over 30, plus everyone in Oslo",
)
builder.subcommand("stats", description="Column summary", handler=stats).add_flag(
    "-by", completer=FieldCompleter("-input"), help="Group by this field"
)
root = builder.build()

if __name__ == "__main__":
    sys.exit(Program(root).run())
