# Clauseflags CLI Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""Logging setup for programs built on clauseflags."""
from __future__ import annotations

import logging
import os
import sys

import pythonjsonlogger.json
from rich.console import Console
from rich.logging import RichHandler

LOG_MODE_ENV = "CLAUSEFLAGS_LOG_MODE"
LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
CONTAINER_MARKERS = ("docker", "kubepods", "containerd", "podman")


def running_in_container() -> bool:
    try:
        with open("/proc/1/cgroup", "r", encoding="UTF-8") as cgroup:
            content = cgroup.read()
    except OSError:
        return False
    return any(marker in content for marker in CONTAINER_MARKERS)


def _json_formatter() -> logging.Formatter:
    return pythonjsonlogger.json.JsonFormatter(LOG_FORMAT)


def setup_logging(
    mode: str | None = None,
    log_filename: str | None = None,
    json_log_to_file: bool = False,
    file_log_level: int = logging.DEBUG,
    console_log_level: int = logging.WARNING,
) -> None:
    """
    Replace the root logger's handlers with a stderr console handler and an
    optional file handler.

    `mode` is `cli` (Rich) or `json`; when omitted it is read from
    `CLAUSEFLAGS_LOG_MODE`, then chosen by container detection. Stdout stays
    free of log lines because completion answers are printed there.

    Raises:
        ValueError: If `mode` is not `cli` or `json`.
    """
    mode = mode or os.getenv(LOG_MODE_ENV) or ("json" if running_in_container() else "cli")
    if mode == "cli":
        console_handler: logging.Handler = RichHandler(
            console=Console(stderr=True), rich_tracebacks=True, show_path=False
        )
    elif mode == "json":
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(_json_formatter())
    else:
        raise ValueError(f"Invalid log mode: {mode}")

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    root.handlers.clear()
    console_handler.setLevel(console_log_level)
    root.addHandler(console_handler)

    if log_filename:
        file_handler = logging.FileHandler(log_filename, "a", "UTF-8")
        file_handler.setLevel(file_log_level)
        file_handler.setFormatter(
            _json_formatter()
            if json_log_to_file
            else logging.Formatter("%(asctime)s [%(name)s] [%(levelname)s] %(message)s")
        )
        root.addHandler(file_handler)

    logging.getLogger("clauseflags").debug("Logging initialized in '%s' mode.", mode)
