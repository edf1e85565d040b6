# Clauseflags CLI Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Provides `ClauseCompleter`, a Prompt Toolkit completer backed by the
clauseflags completion engine.

The same engine that answers `<program> -complete <n> <words...>` for the
shell serves interactive prompt sessions in-process:
- Flag names, subcommand names, flag arguments and positionals
- Directive lines are consumed, never shown; the session keeps an in-memory
  cache so field names extracted once are reused on later keystrokes
- Hints such as `<FILE>` are displayed but insert nothing
- Longest-common-prefix insertion and automatic quoting of completions with
  spaces

Example:
    session = PromptSession(completer=ClauseCompleter(root))
    text = session.prompt("datatool> ")
"""
from __future__ import annotations

import os
import shlex
from typing import Iterable

from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document

from clauseflags.completion.cache import KeyValueStore, MemoryStore
from clauseflags.completion.directives import split_completion_output
from clauseflags.completion.engine import CompletionEngine
from clauseflags.parser.command import CommandNode


def is_hint(text: str) -> bool:
    """True for placeholders such as `<FILE>` or `data/<*.csv>`."""
    name = text.rsplit("/", 1)[-1]
    return name.startswith("<") and name.endswith(">")


class ClauseCompleter(Completer):
    """
    Prompt Toolkit completer for argument lines of a clauseflags program.

    Args:
        root (CommandNode): Root of the schema tree.
        store (KeyValueStore | None): Cache shared across keystrokes; an
            in-memory store is created when omitted.
    """

    def __init__(self, root: CommandNode, store: KeyValueStore | None = None):
        self.store = store if store is not None else MemoryStore()
        self.engine = CompletionEngine(root, self.store)

    def get_completions(
        self, document: Document, complete_event: CompleteEvent
    ) -> Iterable[Completion]:
        """
        Compute completions for the text before the cursor.

        The text is split shell-style; when the cursor follows whitespace a
        new empty word is completed, otherwise the last word.

        Yields:
            Completion: Candidates for the word under the cursor.
        """
        text = document.text_before_cursor
        try:
            tokens = shlex.split(text)
        except ValueError:
            return
        if not tokens or text.endswith((" ", "\t")):
            tokens.append("")
        stub = tokens[-1]

        lines = self.engine.complete(tokens, len(tokens) - 1)
        candidates, _ = split_completion_output(lines)
        hints = [candidate for candidate in candidates if is_hint(candidate)]
        suggestions = [candidate for candidate in candidates if not is_hint(candidate)]
        if not suggestions:
            for hint in hints:
                yield Completion("", start_position=0, display=hint)
            return
        yield from self._yield_lcp_completions(suggestions, stub)

    def _ensure_quote(self, text: str) -> str:
        """Quote completions containing whitespace so they stay one word."""
        if " " in text or "\t" in text:
            return f'"{text}"'
        return text

    def _yield_lcp_completions(self, suggestions: list[str], stub: str) -> Iterable[Completion]:
        """
        Yield completions for `stub` using longest-common-prefix logic.

        - One match: yield it fully.
        - Several matches sharing a longer prefix: insert the prefix, list all.
        - Otherwise: list all matches.
        """
        lowered = stub.lower()
        matches = [s for s in suggestions if s.lower().startswith(lowered)]
        if not matches:
            return

        lcp = os.path.commonprefix(matches)

        if len(matches) == 1:
            yield Completion(
                self._ensure_quote(matches[0]),
                start_position=-len(stub),
                display=matches[0],
            )
            return
        if len(lcp) > len(stub) and not lcp.startswith(("-", "+")):
            yield Completion(lcp, start_position=-len(stub), display=lcp)
        for match in matches:
            yield Completion(
                self._ensure_quote(match), start_position=-len(stub), display=match
            )
