# Clauseflags CLI Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
This module implements `ClauseParser`, which turns a flat argument list into a
`ParseResult` of clauses, global values and residual tokens.

Parsing runs as a pipeline of separate stages:

1. scan (`scanner.Scanner`): clauses, flags, subcommand routing, leftovers;
   deferred flags are recorded as `PendingConversion`.
2. deferred resolution (`deferred.resolve_deferred`): converts the recorded
   occurrences with the complete global table.
3. positional matching (`positional.match_positionals`).
4. defaults (`validation.apply_defaults`).
5. validation (`validation.validate`), optional.

Example Usage:
    root = CommandNode(
        "tool",
        flags=(
            FlagSpec(("-filter",), args=(ArgSpec("FIELD"), ArgSpec("OP"), ArgSpec("VALUE")),
                     accumulate=True),
            FlagSpec(("FILE",)),
        ),
    )
    result = ClauseParser(root).parse(["data.csv", "-filter", "age", "gt", "30"])
    result.clauses[0].get("-filter")
    # [{'FIELD': 'age', 'OP': 'gt', 'VALUE': '30'}]
"""
from __future__ import annotations

from typing import Sequence

from clauseflags.logger import logger
from clauseflags.parser.command import CommandNode, validate_tree
from clauseflags.parser.deferred import resolve_deferred
from clauseflags.parser.parser_types import Clause, ParseResult, ScanState, finalize_entries
from clauseflags.parser.positional import match_positionals
from clauseflags.parser.scanner import Scanner
from clauseflags.parser.validation import apply_defaults
from clauseflags.parser.validation import validate as validate_result


class ClauseParser:
    """
    Parses argument lists against a finished `CommandNode` tree.

    The tree is checked once on construction (`validate_tree`); the parser
    keeps no state between calls to `parse`.
    """

    def __init__(self, root: CommandNode) -> None:
        self.root: CommandNode = validate_tree(root)
        self.scanner = Scanner(root)

    def parse(self, args: Sequence[str], validate: bool = True) -> ParseResult:
        """
        Parse `args` (program name excluded).

        Args:
            args (Sequence[str]): Tokens to parse.
            validate (bool): Run required and validator checks.

        Raises:
            ParseError: Unknown flag, missing or unconvertible argument.
            ValidationError: Missing required spec or rejected value.
        """
        args = list(args)
        state = self.scanner.scan(args)
        resolve_deferred(state)
        result = self._build_result(state, args)
        match_positionals(result)
        apply_defaults(result)
        if validate:
            validate_result(result)
        logger.debug(
            "Parsed %d clause(s) for '%s'", len(result.clauses), " ".join(result.command_path)
        )
        return result

    def _build_result(self, state: ScanState, args: list[str]) -> ParseResult:
        specs = {spec.name: spec for node in state.path for spec in node.flags}
        clauses = [
            Clause(
                separator=buffer.separator,
                values=finalize_entries(buffer.entries, specs),
                leftovers=list(buffer.leftovers),
            )
            for buffer in state.clauses
        ]
        return ParseResult(
            clauses=clauses,
            global_values=finalize_entries(state.global_entries, specs),
            residual=list(state.residual),
            raw_args=args,
            command=state.node,
            command_path=tuple(node.name for node in state.path),
            nodes=state.path,
        )
