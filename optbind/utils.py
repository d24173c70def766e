# Optbind Option Parsing — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Logging setup for programs started through `optbind.run_main()`.

Optbind modules only log through the "optbind" logger (parse start, option
resolution, defaults loading, usage errors) and never install handlers
themselves. `run_main(..., log_mode="cli")` or a direct `setup_logging()` call
routes those records to the console and to a log file.
"""
from __future__ import annotations

import logging
import os

import pythonjsonlogger.json
from rich.logging import RichHandler

LOG_MODE_ENV = "OPTBIND_LOG_MODE"
LOG_MODES = ("cli", "json")
JSON_LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
TEXT_LOG_FORMAT = "%(asctime)s [%(name)s] [%(levelname)s] %(message)s"


def running_in_container() -> bool:
    """Check the cgroup of PID 1 for a container runtime."""
    try:
        with open("/proc/1/cgroup", "r", encoding="UTF-8") as f:
            content = f.read()
    except OSError:
        return False
    return any(
        runtime in content for runtime in ("docker", "kubepods", "containerd", "podman")
    )


def resolve_log_mode(mode: str | None = None) -> str:
    """
    Pick the logging mode: the argument, then `OPTBIND_LOG_MODE`, then "json"
    inside containers and "cli" elsewhere.

    Raises:
        ValueError: If the chosen mode is not "cli" or "json".
    """
    if not mode:
        mode = os.getenv(LOG_MODE_ENV) or ("json" if running_in_container() else "cli")
    if mode not in LOG_MODES:
        raise ValueError(f"Invalid log mode: {mode}")
    return mode


def _console_handler(mode: str) -> logging.Handler:
    if mode == "cli":
        # Option values are user input and may contain Rich markup characters.
        return RichHandler(
            rich_tracebacks=True,
            show_time=True,
            show_level=True,
            show_path=False,
            markup=False,
            log_time_format="[%Y-%m-%d %H:%M:%S]",
        )
    handler = logging.StreamHandler()
    handler.setFormatter(pythonjsonlogger.json.JsonFormatter(JSON_LOG_FORMAT))
    return handler


def setup_logging(
    mode: str | None = None,
    log_filename: str = "optbind.log",
    json_log_to_file: bool = False,
    file_log_level: int = logging.DEBUG,
    console_log_level: int = logging.WARNING,
) -> None:
    """
    Configure the root logger with a console handler and a file handler.

    Args:
        mode (str | None): "cli" for Rich console logs or "json" for structured
            logs. Resolved with `resolve_log_mode()` when not given.
        log_filename (str): Path to the log file. Defaults to "optbind.log".
        json_log_to_file (bool): Format file logs as JSON instead of plain text.
        file_log_level (int): Level for file output. Defaults to `logging.DEBUG`.
        console_log_level (int): Level for console output. Defaults to
            `logging.WARNING`, so parse tracing only reaches the file.

    Raises:
        ValueError: If an invalid logging `mode` is passed.
    """
    mode = resolve_log_mode(mode)
    console_handler = _console_handler(mode)
    console_handler.setLevel(console_log_level)

    file_handler = logging.FileHandler(log_filename, "a", "UTF-8")
    file_handler.setLevel(file_log_level)
    if json_log_to_file:
        file_handler.setFormatter(pythonjsonlogger.json.JsonFormatter(JSON_LOG_FORMAT))
    else:
        file_handler.setFormatter(
            logging.Formatter(TEXT_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
        )

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    if root.hasHandlers():
        root.handlers.clear()
    root.addHandler(console_handler)
    root.addHandler(file_handler)

    logger = logging.getLogger("optbind")
    logger.propagate = True
    logger.debug("Logging initialized in '%s' mode.", mode)
