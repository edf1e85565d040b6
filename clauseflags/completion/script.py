# Clauseflags CLI Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Bash completion script generator.

The generated function calls `<program> -complete <n> <words...>` on every
completion request, interprets directive lines with `jq` and hands the rest
to bash as candidates:

- `field_cache`: exports `CLAUSEFLAGS_FIELDS` and `CLAUSEFLAGS_FIELDS_<file>`.
- `field_values`: exports `CLAUSEFLAGS_VALUES_<field>`.
- `env`: exports `CLAUSEFLAGS_<key>`.
- `hint`: shown as a candidate that bash will not insert.

List values are joined with the ASCII unit separator, matching
`clauseflags.completion.cache.EnvironStore`.

Usage:
    eval "$(datatool -completion-script)"
"""
from __future__ import annotations

import re

_TEMPLATE = r"""# bash completion for __PROG__ (generated by clauseflags)
___FUNC__() {
    local index=$((COMP_CWORD - 1))
    local -a words=("${COMP_WORDS[@]:1}")
    local -a candidates=()
    local hint=""
    local line kind key value

    while IFS= read -r line; do
        if [[ "$line" == '{"type":'* ]]; then
            command -v jq >/dev/null 2>&1 || continue
            kind=$(jq -r '.type' <<<"$line" 2>/dev/null)
            case "$kind" in
                field_cache)
                    value=$(jq -r '.fields | join("\u001f")' <<<"$line" 2>/dev/null)
                    export CLAUSEFLAGS_FIELDS="$value"
                    key=$(jq -r '.filepath // empty' <<<"$line" 2>/dev/null)
                    if [[ -n "$key" ]]; then
                        key="${key##*/}"
                        export "CLAUSEFLAGS_FIELDS_${key//[^A-Za-z0-9]/_}=$value"
                    fi
                    ;;
                field_values)
                    key=$(jq -r '.field' <<<"$line" 2>/dev/null)
                    value=$(jq -r '.values | join("\u001f")' <<<"$line" 2>/dev/null)
                    export "CLAUSEFLAGS_VALUES_${key//[^A-Za-z0-9]/_}=$value"
                    ;;
                env)
                    key=$(jq -r '.key' <<<"$line" 2>/dev/null)
                    value=$(jq -r '.value' <<<"$line" 2>/dev/null)
                    export "CLAUSEFLAGS_${key//[^A-Za-z0-9_]/_}=$value"
                    ;;
                hint)
                    hint=$(jq -r '.value' <<<"$line" 2>/dev/null)
                    ;;
            esac
            continue
        fi
        candidates+=("$line")
    done < <("__PROG__" -complete "$index" "${words[@]}" 2>/dev/null)

    if [[ ${#candidates[@]} -eq 0 && -n "$hint" ]]; then
        candidates=("$hint")
    fi
    if [[ ${#candidates[@]} -eq 1 && "${candidates[0]}" == *"<"*">" ]]; then
        COMPREPLY=("${candidates[0]}" " ")
        return 0
    fi

    COMPREPLY=("${candidates[@]}")
    local candidate
    for candidate in "${candidates[@]}"; do
        if [[ "$candidate" == */ ]]; then
            compopt -o nospace 2>/dev/null
            break
        fi
    done
    return 0
}
complete -o default -F ___FUNC__ __PROG__
"""


def completion_function_name(program: str) -> str:
    return "_clauseflags_" + re.sub(r"[^A-Za-z0-9_]", "_", program)


def generate_completion_script(program: str) -> str:
    """Return the bash completion script for `program`."""
    return _TEMPLATE.replace("___FUNC__", completion_function_name(program)).replace(
        "__PROG__", program
    )
