# Optbind Option Parsing — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Process entry point wiring for option records.

`run_main()` parses the process arguments into an option record, reports
parsing errors on the console with a usage line, and otherwise hands the
record to the program's main function.

Example:
    def main(options: Options) -> int:
        ...

    if __name__ == "__main__":
        sys.exit(run_main(Options, main))
"""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Callable, Mapping, Sequence, TypeVar

from rich.markup import escape

from optbind.logger import logger
from optbind.parser import CommandLineOptionsParser
from optbind.utils import setup_logging

T = TypeVar("T")

EXIT_USAGE = 2


def run_main(
    target_type: type[T],
    main: Callable[[T], int | None],
    args: Sequence[str] | None = None,
    *,
    program: str | None = None,
    defaults: Mapping[str, Any] | Path | str | None = None,
    log_mode: str | None = None,
    log_filename: str = "optbind.log",
) -> int:
    """
    Parse arguments into `target_type` and run `main` with the record.

    Args:
        target_type (type): The dataclass option record type.
        main (Callable): Program body receiving the parsed record.
        args (Sequence[str] | None): Arguments; defaults to `sys.argv[1:]`.
        program (str | None): Program name shown in the usage line.
        defaults (Mapping | Path | str | None): Defaults mapping or defaults file.
        log_mode (str | None): When given, configure logging in this mode
            ("cli" or "json") through `setup_logging()` before parsing.
        log_filename (str): Log file used together with `log_mode`.

    Returns:
        int: `main`'s integer result, 0 if it returns None, or 2 when the
        arguments could not be parsed.
    """
    if log_mode is not None:
        setup_logging(mode=log_mode, log_filename=log_filename)
    if args is None:
        args = sys.argv[1:]
    parser = CommandLineOptionsParser(target_type, defaults=defaults, program=program)
    result = parser.try_parse(args)
    if not result.ok:
        logger.debug("Exiting with usage error: %s", result.error_kind)
        parser.console.print(f"[bold red]error:[/] {escape(str(result.error))}")
        parser.console.print(f"usage: {parser.get_usage()}")
        return EXIT_USAGE
    outcome = main(result.unwrap())
    return outcome if isinstance(outcome, int) else 0
