# Clauseflags CLI Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Help and manual page rendering for clauseflags command trees.

`render_help` prints `-help` output with Rich: a usage line, the command
description, positional arguments, options (own flags first, then globals
inherited from parent commands), clause separators, subcommands and usage
examples shown as panels.

`generate_man_page` returns the same information as a groff `man(7)` page
for `-man`, ready to be piped into `man -l -`.

Both take the command path (root first) so a subcommand's page shows the
full invocation and the global flags it inherits.
"""
from __future__ import annotations

from datetime import date

from rich.console import Console
from rich.markup import escape
from rich.padding import Padding
from rich.panel import Panel

from clauseflags.console import console as default_console
from clauseflags.parser.arg_type import ArgType, Scope
from clauseflags.parser.command import CommandNode, effective_separators, visible_flags
from clauseflags.parser.flag_spec import FlagSpec

TYPE_LABELS = {
    ArgType.INT: "integer",
    ArgType.FLOAT: "float",
    ArgType.BOOL: "boolean",
    ArgType.DURATION: "duration",
    ArgType.TIMESTAMP: "time",
}


def command_label(path: tuple[CommandNode, ...]) -> str:
    return " ".join(node.name for node in path)


def shown_flags(path: tuple[CommandNode, ...]) -> list[FlagSpec]:
    return [spec for spec in visible_flags(path) if not spec.hidden]


def flag_details(spec: FlagSpec) -> list[str]:
    """Short facts about a flag: type, scope, default, required, repeatable."""
    details = []
    if spec.positional and spec.args[0].type in TYPE_LABELS:
        details.append(f"Type: {TYPE_LABELS[spec.args[0].type]}")
    details.append("Scope: global" if spec.scope == Scope.GLOBAL else "Scope: per-clause")
    if spec.default is not None:
        details.append(f"Default: {spec.default}")
    if spec.required:
        details.append("Required")
    if spec.accumulate:
        details.append("Can be specified multiple times")
    return details


def get_options_text(path: tuple[CommandNode, ...], plain_text: bool = False) -> str:
    options_list = []
    flags = shown_flags(path)
    for spec in flags:
        if spec.positional:
            continue
        choice_text = spec.get_choice_text()
        if choice_text:
            options_list.append(f"[{spec.name} {choice_text}]")
        else:
            options_list.append(f"[{spec.name}]")
    for spec in flags:
        if spec.positional:
            options_list.append(spec.get_choice_text())
    text = " ".join(options_list)
    return text if plain_text else escape(text)


def get_usage(path: tuple[CommandNode, ...], plain_text: bool = False) -> str:
    """
    Render the usage line for the command at the end of `path`.

    Returns:
        str: e.g. `datatool query [-input FILE] [-limit N] [PATTERN]`.
    """
    label = command_label(path)
    if path[-1].subcommands:
        label = f"{label} <command>"
    options_text = get_options_text(path, plain_text)
    if options_text:
        return f"{label} {options_text}"
    return label


def _print_entry(console: Console, label: str, help_text: str) -> None:
    arg_line = f"  {escape(label):<30} "
    if help_text and len(label) > 30:
        help_text = f"\n{'':<33}{help_text}"
    console.print(f"{arg_line}{escape(help_text)}")


def render_help(path: tuple[CommandNode, ...], console: Console | None = None) -> None:
    """
    Print formatted help for the command at the end of `path`.

    Includes usage, description, positional arguments, options, clause
    separators, subcommands and examples.
    """
    console = console or default_console
    node = path[-1]
    usage = get_usage(path)
    console.print(f"[bold]usage: {usage}[/bold]\n")

    header = command_label(path)
    if node.version:
        header = f"{header} v{node.version}"
    if node.description:
        console.print(f"{escape(header)} - {escape(node.description)}\n")

    flags = shown_flags(path)
    positionals = [spec for spec in flags if spec.positional]
    if positionals:
        console.print("[bold]positional:[/bold]")
        for spec in positionals:
            label = spec.name + ("..." if spec.variadic else "")
            _print_entry(console, label, _help_line(spec))
    options = [spec for spec in flags if not spec.positional]
    if options:
        console.print("[bold]options:[/bold]")
        for spec in options:
            label = ", ".join(spec.names)
            if spec.args:
                label = f"{label} {spec.get_choice_text()}"
            _print_entry(console, label, _help_line(spec))

    separators = effective_separators(path)
    if separators:
        console.print("\n[bold]clauses:[/bold]")
        console.print(
            "  Arguments are grouped into clauses with the separators: "
            + ", ".join(f"'{escape(separator)}'" for separator in separators)
        )
        if node.clause_description:
            console.print(f"  {escape(node.clause_description)}")
        console.print(
            "  Global flags apply to every clause, per-clause flags only to the "
            "clause they appear in. Prefix a flag with '+' instead of '-' to "
            "invert it."
        )

    if node.subcommands:
        console.print("\n[bold]commands:[/bold]")
        for child in node.subcommands:
            _print_entry(console, child.name, child.description)

    if node.examples:
        console.print("\n[bold]examples:[/bold]")
        for example in node.examples:
            block = f"[bold]{escape(example.command.strip())}[/bold]"
            console.print(Padding(Panel(block, expand=False), (0, 2)))
            if example.description:
                console.print(f"    {escape(example.description.strip())}", style="dim")

    console.print(
        f"\nUse '{escape(command_label(path[:1]))} -man' to view the full manual page.",
        style="dim",
    )


def _help_line(spec: FlagSpec) -> str:
    details = ". ".join(flag_details(spec))
    if spec.help and details:
        return f"{spec.help} ({details})"
    return spec.help or details


def escape_groff(text: str) -> str:
    """Escape backslashes, hyphens and a leading dot for groff."""
    text = text.replace("\\", "\\\\").replace("-", "\\-")
    if text.startswith("."):
        text = "\\&" + text
    return text


def _man_details(spec: FlagSpec) -> list[str]:
    details = flag_details(spec)
    if not details:
        return []
    return [".RS", escape_groff(". ".join(details)) + ".", ".RE"]


def _man_positional(spec: FlagSpec) -> list[str]:
    name = escape_groff(spec.name) + ("..." if spec.variadic else "")
    lines = [".TP", f".I {name}"]
    if spec.help:
        lines.append(escape_groff(spec.help))
    return lines + _man_details(spec)


def _man_flag(spec: FlagSpec) -> list[str]:
    names = "|".join(escape_groff(name) for name in spec.names)
    lines = [".TP"]
    if spec.args:
        lines.append(f'.BI {names} " {escape_groff(spec.get_choice_text())}"')
    else:
        lines.append(f".B {names}")
    if spec.help:
        lines.append(escape_groff(spec.help))
    return lines + _man_details(spec)


def generate_man_page(path: tuple[CommandNode, ...], today: date | None = None) -> str:
    """
    Build a groff man page for the command at the end of `path`.

    Args:
        path (tuple[CommandNode, ...]): Command path, root first.
        today (date | None): Date printed in the title line; defaults to today.

    Returns:
        str: The page source, one groff request or text line per line.
    """
    node = path[-1]
    name = command_label(path)
    version = path[0].version or node.version or "1.0"
    stamp = (today or date.today()).isoformat()
    lines = [
        f'.TH {escape_groff(name.upper().replace(" ", "-"))} 1 "{stamp}" '
        f'"{escape_groff(path[0].name)} v{version}"',
        ".SH NAME",
    ]
    if node.description:
        lines.append(f"{escape_groff(name)} \\- {escape_groff(node.description)}")
    else:
        lines.append(escape_groff(name))

    flags = shown_flags(path)
    positionals = [spec for spec in flags if spec.positional]
    options = [spec for spec in flags if not spec.positional]

    lines += [".SH SYNOPSIS", f".B {escape_groff(name)}"]
    if node.subcommands:
        lines.append(".I command")
    lines.append("[\\fIOPTIONS\\fR]")
    for spec in positionals:
        argument = escape_groff(spec.name) + ("..." if spec.variadic else "")
        if spec.required:
            lines.append(f".I {argument}")
        else:
            lines.append(f".RI [ {argument} ]")

    if node.description:
        lines += [".SH DESCRIPTION", f".B {escape_groff(name)}", escape_groff(node.description)]

    if positionals:
        lines.append(".SH ARGUMENTS")
        for spec in positionals:
            lines += _man_positional(spec)

    if options:
        lines.append(".SH OPTIONS")
        for spec in options:
            lines += _man_flag(spec)

    if node.subcommands:
        lines.append(".SH COMMANDS")
        for child in node.subcommands:
            lines += [".TP", f".B {escape_groff(child.name)}"]
            if child.description:
                lines.append(escape_groff(child.description))

    separators = effective_separators(path)
    if separators:
        lines += [
            ".SH CLAUSES",
            "Arguments can be grouped into clauses using separators.",
            "The following separators are recognized:",
        ]
        lines += [f".B {escape_groff(separator)}" for separator in separators]
        lines.append(".PP")
        if node.clause_description:
            lines += [escape_groff(node.clause_description), ".PP"]
        lines += [
            "Flags with global scope apply to all clauses,",
            "while flags with per\\-clause scope apply only within their clause.",
        ]

    if node.examples:
        lines.append(".SH EXAMPLES")
        for example in node.examples:
            lines += [".TP", escape_groff(example.command)]
            if example.description:
                lines.append(escape_groff(example.description))

    author = node.author or path[0].author
    if author:
        lines += [".SH AUTHOR", escape_groff(author)]

    return "\n".join(lines) + "\n"
