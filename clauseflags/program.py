# Clauseflags CLI Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `Program`, the entry point that turns `sys.argv` into a handler call.

`Program.run` recognises the reserved first tokens before any parsing:

- `-help`, `--help`, `-h`: Rich help for the root, or for a subcommand when
  preceded by subcommand names (`tool query -help`, `tool -verbose query -help`).
- `-man`: groff manual page on stdout.
- `-complete <n> <words...>`: completion candidates and directive lines,
  one per line, for the word at index `n` of `words`.
- `-completion-script`: bash integration script.

Anything else is parsed, validated and handed to the handler of the deepest
node on the command path that has one. The handler's return value (`int` or
`None`) becomes the exit status. Parse and validation errors are printed in
red on stderr and exit with status 2; handler exceptions propagate.

Example Usage:
    root = (
        CommandBuilder("datatool", description="Query data files")
        .add_positional("INPUT", completer=FileCompleter("*.{csv,json}"))
        .add_flag("-limit", type="int", scope="global", default=10)
        .set_handler(run_query)
        .build()
    )

    if __name__ == "__main__":
        sys.exit(Program(root).run())
"""
from __future__ import annotations

import sys
from typing import Sequence

from rich.console import Console

from clauseflags.completion.cache import EnvironStore, KeyValueStore
from clauseflags.completion.engine import CompletionEngine
from clauseflags.completion.script import generate_completion_script
from clauseflags.console import console as default_console
from clauseflags.console import error_console
from clauseflags.exceptions import ParseError, ValidationError
from clauseflags.help import generate_man_page, get_usage, render_help
from clauseflags.logger import logger
from clauseflags.parser.clause_parser import ClauseParser
from clauseflags.parser.command import CommandNode, Handler, effective_separators, lookup_flag
from clauseflags.parser.flag_spec import END_OF_FLAGS
from clauseflags.parser.scanner import is_flag_token, normalize_flag_token

HELP_TOKENS = ("-help", "--help", "-h")
MAN_TOKEN = "-man"
COMPLETE_TOKEN = "-complete"
SCRIPT_TOKEN = "-completion-script"

EXIT_USAGE = 2


class Program:
    """
    Runs a command tree against an argument list.

    Args:
        root (CommandNode): Finished schema tree.
        store (KeyValueStore | None): Completion cache; defaults to the
            `CLAUSEFLAGS_*` environment written by the bash integration.
        console (Console | None): Console for help output.
        err_console (Console | None): Console for error messages.
    """

    def __init__(
        self,
        root: CommandNode,
        store: KeyValueStore | None = None,
        console: Console | None = None,
        err_console: Console | None = None,
    ) -> None:
        self.root = root
        self.parser = ClauseParser(root)
        self.store = store if store is not None else EnvironStore()
        self.console = console or default_console
        self.error_console = err_console or error_console

    def route(self, args: Sequence[str]) -> tuple[tuple[CommandNode, ...], list[str]]:
        """
        Follow subcommand names the way the scanner does; return the path and
        the tokens from the first one that ends routing.

        Known flags and their arguments are stepped over, so
        `vcs -verbose query -help` routes to `vcs query`. Routing ends at a
        reserved help or man token, an unknown flag, a clause separator,
        `--` or the first bare token.
        """
        path: tuple[CommandNode, ...] = (self.root,)
        position = 0
        while position < len(args):
            token = args[position]
            if token in HELP_TOKENS or token == MAN_TOKEN:
                break
            if token == END_OF_FLAGS or token in effective_separators(path):
                break
            if is_flag_token(token, path):
                name, _ = normalize_flag_token(token)
                spec = lookup_flag(path, name)
                if spec is None:
                    break
                position += 1 if spec.is_boolean else 1 + spec.arity
                continue
            child = path[-1].get_subcommand(token)
            if child is None:
                break
            path = path + (child,)
            position += 1
        return path, list(args[position:])

    def run(self, argv: Sequence[str] | None = None) -> int:
        """
        Execute one invocation.

        Args:
            argv (Sequence[str] | None): Arguments without the program name;
                `sys.argv[1:]` when omitted.

        Returns:
            int: Exit status.
        """
        args = list(sys.argv[1:] if argv is None else argv)
        if args:
            if args[0] == COMPLETE_TOKEN:
                return self.complete(args[1:])
            if args[0] == SCRIPT_TOKEN:
                print(generate_completion_script(self.root.name), end="")
                return 0
        path, rest = self.route(args)
        if rest and rest[0] in HELP_TOKENS:
            render_help(path, self.console)
            return 0
        if rest and rest[0] == MAN_TOKEN:
            print(generate_man_page(path), end="")
            return 0

        try:
            result = self.parser.parse(args)
        except (ParseError, ValidationError) as error:
            logger.debug("Rejected arguments %r: %s", args, error)
            self.error_console.print(f"[red]error:[/] {error}", markup=True, highlight=False)
            self.error_console.print(f"usage: {get_usage(path, plain_text=True)}", markup=False)
            return EXIT_USAGE

        handler = self.handler_for(result.nodes)
        if handler is None:
            self.error_console.print(
                f"[red]error:[/] {' '.join(result.command_path)}: missing command",
                highlight=False,
            )
            render_help(result.nodes, self.error_console)
            return EXIT_USAGE
        logger.debug("Dispatching '%s'", " ".join(result.command_path))
        status = handler(result)
        return 0 if status is None else int(status)

    @staticmethod
    def handler_for(path: Sequence[CommandNode]) -> Handler | None:
        """Handler of the deepest node on `path` that has one."""
        for node in reversed(path):
            if node.handler is not None:
                return node.handler
        return None

    def complete(self, args: Sequence[str]) -> int:
        """Answer `-complete <n> <words...>`; prints one candidate per line."""
        if not args:
            self.error_console.print(
                f"[red]error:[/] {COMPLETE_TOKEN} requires a word index", highlight=False
            )
            return EXIT_USAGE
        try:
            index = int(args[0])
        except ValueError:
            logger.debug("Invalid completion index %r", args[0])
            return 0
        engine = CompletionEngine(self.root, self.store)
        for line in engine.complete(args[1:], index):
            print(line)
        return 0
