# Optbind Option Parsing — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines all custom exception classes used by the Optbind option parser.

Every error carries enough context (the raw option text and, where one exists,
the raw value text) for a caller to report a precise user-facing message.

All exceptions inherit from `OptionParsingError`, the base exception for the
package.

Exception Hierarchy:
- OptionParsingError
    ├── UnknownOptionError
    ├── OptionArgumentError
    ├── OptionValidationError
    └── OptionDefinitionError
            └── DuplicateOptionError

Parsing errors are fatal to the current parse call. Definition errors are
raised while the option registry for a target type is built, before any
argument is looked at.
"""
from __future__ import annotations


class OptionParsingError(Exception):
    """Base exception for all option parsing failures."""

    def __init__(
        self,
        message: str,
        *,
        option_text: str | None = None,
        value_text: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.option_text = option_text
        self.value_text = value_text


class UnknownOptionError(OptionParsingError):
    """Raised for an unrecognized option name or an unconsumed positional argument."""


class OptionArgumentError(OptionParsingError):
    """Raised when an option value is missing, unexpected, or cannot be converted."""


class OptionValidationError(OptionParsingError):
    """Raised by `validate()` hooks when parsed options are inconsistent."""


class OptionDefinitionError(OptionParsingError):
    """Raised when the option declarations of a target type are inconsistent."""


class DuplicateOptionError(OptionDefinitionError):
    """Raised when two options of one target type share a long or short name."""
