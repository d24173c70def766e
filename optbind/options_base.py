# Optbind Option Parsing — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Base class for option records.

`CommandLineOptions` declares the positional sink `additional_arguments` and a
default `validate()` that rejects any positional argument. Records that accept
positional arguments override `validate()` and inspect `additional_arguments`
themselves.

Example:
    @dataclass
    class CopyOptions(CommandLineOptions):
        force: bool = option("force", "f", "none")

        def validate(self) -> None:
            if len(self.additional_arguments) != 2:
                raise OptionValidationError("copy needs a source and a destination")
"""
from __future__ import annotations

from dataclasses import dataclass

from optbind.exceptions import UnknownOptionError
from optbind.option import positional_arguments


@dataclass
class CommandLineOptions:
    """Option record base with a positional sink and a strict default `validate()`."""

    additional_arguments: list[str] = positional_arguments(
        help="Positional arguments not bound to any option."
    )

    def validate(self) -> None:
        """Reject positional arguments; subclasses that accept them override this."""
        if self.additional_arguments:
            argument = self.additional_arguments[0]
            raise UnknownOptionError(
                f"Unexpected positional argument '{argument}'", option_text=argument
            )
