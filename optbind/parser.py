# Optbind Option Parsing — (c) 2025 rtj.dev LLC — MIT Licensed
"""
This module implements `CommandLineOptionsParser`, which populates a dataclass
option record from a raw argument vector.

Parsing runs the pipeline
    argument vector → Tokenizer → resolver (registry lookups) → converters
and then hands the populated record to its `validate()` hook.

Key Features:
- Declarative options via `option()`, `option_present()` and `positional_arguments()`
- `--name value`, `--name=value`, `--name:value`, `-n value`, `-n=value`, `-n:value`
- `--` to end option scanning
- Type conversion for primitives, nullable types, literals, enums and flag enums
- Defaults from the record, optionally overridden by a YAML/TOML defaults file
- Rich-powered usage and help rendering

Public Interface:
- `CommandLineOptionsParser(target_type).parse(args)`: Return the populated record.
- `CommandLineOptionsParser(target_type).try_parse(args)`: Return a `ParseResult`.
- `parse_options(target_type, args)` / `try_parse_options(target_type, args)`.
- `render_help()`: Print a rich-styled help text.

Example Usage:
    @dataclass
    class Options(CommandLineOptions):
        level: int = option("level", "l", default=1)
        verbose: bool = option("verbose", "v", "none")

    options = parse_options(Options, ["-l", "3", "--verbose"])
    # Options(additional_arguments=[], level=3, verbose=True)

The first error stops the parse. No partial record is ever returned.
"""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Generic, Mapping, Sequence, TypeVar

from rich.console import Console
from rich.markup import escape

from optbind.config import default_text, load_defaults
from optbind.console import console
from optbind.exceptions import OptionParsingError, UnknownOptionError
from optbind.logger import logger
from optbind.option import OptionArgument, OptionDescriptor
from optbind.protocols import SupportsValidate
from optbind.registry import OptionRegistry, get_registry
from optbind.resolver import ResolvedOption, resolve_tokens
from optbind.tokenizer import PositionalToken, Tokenizer

T = TypeVar("T")


@dataclass
class ParseResult(Generic[T]):
    """
    Outcome of a parse: the populated record or the error that stopped it.

    Attributes:
        options (T | None): The populated record, None on failure.
        positional (list[str]): Positional values in encounter order.
        error (OptionParsingError | None): The terminal error, None on success.
    """

    options: T | None = None
    positional: list[str] = field(default_factory=list)
    error: OptionParsingError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def error_kind(self) -> str | None:
        """Return the error class name, such as 'UnknownOptionError'."""
        return type(self.error).__name__ if self.error is not None else None

    def unwrap(self) -> T:
        """Return the record, raising the terminal error if parsing failed."""
        if self.error is not None:
            raise self.error
        assert self.options is not None, "options should not be None on success"
        return self.options


class CommandLineOptionsParser(Generic[T]):
    """
    Parser binding command-line arguments to a dataclass option record.

    The option registry of the target type is built (and cached) when the
    parser is created, so declaration errors surface before any argument is
    parsed.

    Features:
    - Long and short option references with inline or separate values.
    - Required, optional and value-less options.
    - Presence flags and a positional sink.
    - Defaults from the record and from a defaults file.
    - Validation hook invoked once after population.
    - Render help using the Rich library.
    """

    def __init__(
        self,
        target_type: type[T],
        defaults: Mapping[str, Any] | Path | str | None = None,
        program: str | None = None,
        description: str = "",
    ) -> None:
        self.target_type: type[T] = target_type
        self.registry: OptionRegistry = get_registry(target_type)
        if isinstance(defaults, (str, Path)):
            defaults = load_defaults(defaults)
        self.defaults: dict[str, Any] = dict(defaults or {})
        self.program: str = program or target_type.__name__
        self.description: str = description or (target_type.__doc__ or "").strip()
        self.console: Console = console

    def _lookup_default_option(self, name: str) -> OptionDescriptor:
        descriptor = (
            self.registry.get_short(name)
            if len(name) == 1
            else self.registry.get_long(name)
        )
        if descriptor is None:
            raise UnknownOptionError(
                f"Unrecognized option '{name}' in defaults", option_text=name
            )
        return descriptor

    def _apply_defaults(self, values: dict[str, Any]) -> None:
        """Overlay defaults-file values onto the record defaults."""
        for name, raw in self.defaults.items():
            descriptor = self._lookup_default_option(name)
            values[descriptor.field_name] = descriptor.converter.convert(
                default_text(raw), descriptor.display_name
            )

    def _apply_option(self, resolved: ResolvedOption, values: dict[str, Any]) -> None:
        descriptor = resolved.descriptor
        if descriptor.argument == OptionArgument.NONE:
            values[descriptor.field_name] = True
        elif resolved.value is not None:
            values[descriptor.field_name] = descriptor.converter.convert(
                resolved.value, resolved.option_text
            )
        for presence_field in descriptor.presence_fields:
            values[presence_field] = True
        logger.debug(
            "Resolved %s → %s=%r",
            resolved.token.raw,
            descriptor.field_name,
            values[descriptor.field_name],
        )

    def _instantiate(self, values: dict[str, Any]) -> T:
        init_fields = {
            data_field.name
            for data_field in dataclasses.fields(self.target_type)  # type: ignore[arg-type]
            if data_field.init
        }
        instance = self.target_type(
            **{name: value for name, value in values.items() if name in init_fields}
        )
        for name, value in values.items():
            if name not in init_fields:
                object.__setattr__(instance, name, value)
        return instance

    def _parse(self, args: Sequence[str], positional: list[str]) -> T:
        logger.debug("Parsing %d arguments into %s", len(args), self.target_type.__name__)
        values = self.registry.initial_values()
        self._apply_defaults(values)

        for item in resolve_tokens(Tokenizer(args), self.registry):
            if isinstance(item, PositionalToken):
                positional.append(item.value)
            else:
                self._apply_option(item, values)

        if positional:
            sink = self.registry.positional_field
            if sink is None:
                raise UnknownOptionError(
                    f"Unexpected positional argument '{positional[0]}'",
                    option_text=positional[0],
                )
            logger.debug("Collected %d positional arguments in '%s'", len(positional), sink)
            values[sink] = list(positional)

        instance = self._instantiate(values)
        if isinstance(instance, SupportsValidate):
            instance.validate()
        return instance

    def parse(self, args: Sequence[str] | None = None) -> T:
        """
        Parse an argument vector into a populated option record.

        Args:
            args (Sequence[str] | None): Arguments, excluding the program name.

        Returns:
            T: The populated and validated record.

        Raises:
            UnknownOptionError: For unknown options or unexpected positional values.
            OptionArgumentError: For missing, unexpected or unconvertible values.
            OptionParsingError: Any error raised by the record's `validate()` hook.
        """
        return self._parse(list(args or []), [])

    def try_parse(self, args: Sequence[str] | None = None) -> ParseResult[T]:
        """Parse like `parse()`, returning errors inside a `ParseResult`."""
        positional: list[str] = []
        try:
            options = self._parse(list(args or []), positional)
        except OptionParsingError as error:
            logger.debug("Parsing %s failed: %s", self.target_type.__name__, error)
            return ParseResult(positional=positional, error=error)
        return ParseResult(options=options, positional=positional)

    def _metavar(self, descriptor: OptionDescriptor) -> str:
        choices = descriptor.converter.choices()
        if choices:
            return f"{{{','.join(choices)}}}"
        return descriptor.field_name.upper()

    def get_option_text(self, descriptor: OptionDescriptor) -> str:
        """Return the flags and value placeholder of one option (`-l, --level LEVEL`)."""
        flags = ", ".join(descriptor.flags)
        if descriptor.argument == OptionArgument.REQUIRED:
            return f"{flags} {self._metavar(descriptor)}"
        if descriptor.argument == OptionArgument.OPTIONAL:
            return f"{flags}[={self._metavar(descriptor)}]"
        return flags

    def get_usage(self, plain_text: bool = False) -> str:
        """
        Render the usage line for the target type.

        Returns:
            str: A usage line such as `Options [-l LEVEL] [--verbose] [ARGS ...]`.
        """
        parts = [self.program]
        for descriptor in self.registry:
            flag = descriptor.flags[0]
            if descriptor.argument == OptionArgument.REQUIRED:
                parts.append(f"[{flag} {self._metavar(descriptor)}]")
            elif descriptor.argument == OptionArgument.OPTIONAL:
                parts.append(f"[{flag}[={self._metavar(descriptor)}]]")
            else:
                parts.append(f"[{flag}]")
        if self.registry.positional_field:
            parts.append(f"[{self.registry.positional_field.upper()} ...]")
        usage = " ".join(parts)
        return usage if plain_text else escape(usage)

    def render_help(self) -> None:
        """
        Print formatted help text for the target type using Rich output.

        Includes usage, description and one line per option with its default.
        """
        self.console.print(f"[bold]usage: {self.get_usage()}[/bold]\n")

        if self.description:
            self.console.print(escape(self.description) + "\n")

        if len(self.registry):
            self.console.print("[bold]options:[/bold]")
            for descriptor in self.registry:
                option_text = self.get_option_text(descriptor)
                help_text = descriptor.help
                if descriptor.default not in (None, False) and not isinstance(
                    descriptor.default, (list, dict)
                ):
                    default = getattr(descriptor.default, "name", descriptor.default)
                    help_text = f"{help_text} (default: {default})".strip()
                arg_line = f"  {option_text:<30} "
                if help_text and len(option_text) > 30:
                    help_text = f"\n{'':<33}{help_text}"
                self.console.print(escape(f"{arg_line}{help_text}"))

    def __str__(self) -> str:
        required = sum(
            1 for option in self.registry if option.argument == OptionArgument.REQUIRED
        )
        return (
            f"CommandLineOptionsParser({self.target_type.__name__}, "
            f"options={len(self.registry)}, required_values={required}, "
            f"positional={self.registry.positional_field is not None})"
        )

    def __repr__(self) -> str:
        return str(self)


def parse_options(target_type: type[T], args: Sequence[str] | None = None) -> T:
    """Parse `args` into a new instance of `target_type`, raising on error."""
    return CommandLineOptionsParser(target_type).parse(args)


def try_parse_options(
    target_type: type[T], args: Sequence[str] | None = None
) -> ParseResult[T]:
    """
    Parse `args` into a new instance of `target_type` without raising.

    Declaration errors of the target type (such as `DuplicateOptionError`) are
    reported in the result as well.
    """
    try:
        parser = CommandLineOptionsParser(target_type)
    except OptionParsingError as error:
        return ParseResult(error=error)
    return parser.try_parse(args)
