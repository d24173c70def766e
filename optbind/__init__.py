"""
Optbind Option Parsing

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

from .config import load_defaults
from .exceptions import (
    DuplicateOptionError,
    OptionArgumentError,
    OptionDefinitionError,
    OptionParsingError,
    OptionValidationError,
    UnknownOptionError,
)
from .main import run_main
from .option import OptionArgument, option, option_present, positional_arguments
from .options_base import CommandLineOptions
from .parser import (
    CommandLineOptionsParser,
    ParseResult,
    parse_options,
    try_parse_options,
)
from .protocols import SupportsValidate
from .utils import setup_logging

__all__ = [
    "CommandLineOptions",
    "CommandLineOptionsParser",
    "DuplicateOptionError",
    "OptionArgument",
    "OptionArgumentError",
    "OptionDefinitionError",
    "OptionParsingError",
    "OptionValidationError",
    "ParseResult",
    "SupportsValidate",
    "UnknownOptionError",
    "load_defaults",
    "option",
    "option_present",
    "parse_options",
    "positional_arguments",
    "run_main",
    "setup_logging",
    "try_parse_options",
]
