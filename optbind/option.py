# Optbind Option Parsing — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Declaration surface for Optbind option records.

Option records are plain dataclasses. Each field that should be populated from
the command line is declared with one of the field helpers defined here, which
attach Optbind metadata to a regular `dataclasses.field`:

- `option()`: a named option (`--level`, `-l`) with an argument requirement.
- `option_present()`: a `bool` field tracking whether an option was referenced.
- `positional_arguments()`: a `list[str]` sink for leftover positional values.

Example:
    @dataclass
    class Options(CommandLineOptions):
        level: int = option("level", "l", default=3)
        name: str | None = option("name", argument="optional")
        name_present: bool = option_present("name")

The metadata is read once per record type by `OptionRegistry`, which turns it
into immutable `OptionDescriptor` instances.
"""
from __future__ import annotations

from dataclasses import MISSING, dataclass, field
from enum import Enum
from typing import Any, Callable

OPTION_METADATA_KEY = "optbind"


class OptionArgument(Enum):
    """
    Defines whether an option takes an argument value.

    Members:
        NONE: The option never takes a value (`--verbose`).
        OPTIONAL: The option takes an inline value only (`--color`, `--color=auto`).
        REQUIRED: The option needs a value, inline or as the next argument.

    Aliases:
        - "no", "off" → "none"
        - "opt" → "optional"
        - "req" → "required"

    Example:
        OptionArgument("optional") → OptionArgument.OPTIONAL
        OptionArgument("REQ")      → OptionArgument.REQUIRED
    """

    NONE = "none"
    OPTIONAL = "optional"
    REQUIRED = "required"

    @classmethod
    def choices(cls) -> list[OptionArgument]:
        """Return a list of all argument requirements."""
        return list(cls)

    @classmethod
    def _get_alias(cls, value: str) -> str:
        aliases = {
            "no": "none",
            "off": "none",
            "opt": "optional",
            "req": "required",
        }
        return aliases.get(value, value)

    @classmethod
    def _missing_(cls, value: object) -> OptionArgument:
        if not isinstance(value, str):
            raise ValueError(f"Invalid {cls.__name__}: {value!r}")
        normalized = value.strip().lower()
        alias = cls._get_alias(normalized)
        for member in cls:
            if member.value == alias:
                return member
        valid = ", ".join(member.value for member in cls)
        raise ValueError(f"Invalid {cls.__name__}: '{value}'. Must be one of: {valid}")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class OptionSpec:
    """Raw option metadata as declared on a dataclass field."""

    long_name: str
    short_name: str | None = None
    argument: OptionArgument = OptionArgument.REQUIRED
    explicit_default: bool = False
    help: str = ""


@dataclass(frozen=True)
class PresenceSpec:
    """Raw presence-flag metadata as declared on a dataclass field."""

    name: str


@dataclass(frozen=True)
class PositionalSpec:
    """Marks the field that collects leftover positional values."""

    help: str = ""


@dataclass(frozen=True)
class OptionDescriptor:
    """
    Immutable description of one option of a target record type.

    Attributes:
        long_name (str): Name used with a double dash (`--level`).
        short_name (str | None): Single character used with a single dash (`-l`).
        argument (OptionArgument): Whether the option takes a value.
        field_name (str): Name of the dataclass field receiving the value.
        field_type (Any): Resolved type annotation of that field.
        converter (Converter): Converter selected for `field_type`.
        default (Any): Default value applied before parsing.
        default_factory (Callable | None): Factory producing the default, if any.
        presence_fields (tuple[str, ...]): Fields set to True when the option appears.
        help (str): Help text shown in usage output.
    """

    long_name: str
    short_name: str | None
    argument: OptionArgument
    field_name: str
    field_type: Any
    converter: Any
    default: Any = None
    default_factory: Callable[[], Any] | None = None
    presence_fields: tuple[str, ...] = ()
    help: str = ""

    @property
    def flags(self) -> tuple[str, ...]:
        """Return the option's flags, short first (`-l`, `--level`)."""
        if self.short_name:
            return (f"-{self.short_name}", f"--{self.long_name}")
        return (f"--{self.long_name}",)

    @property
    def display_name(self) -> str:
        return f"--{self.long_name}"


def option(
    long_name: str,
    short_name: str | None = None,
    argument: OptionArgument | str = OptionArgument.REQUIRED,
    *,
    default: Any = MISSING,
    default_factory: Callable[[], Any] | Any = MISSING,
    help: str = "",
) -> Any:
    """
    Declare a dataclass field as a command-line option.

    Args:
        long_name (str): Long name, referenced as `--long_name`.
        short_name (str | None): Optional single character, referenced as `-x`.
        argument (OptionArgument | str): Argument requirement (default: REQUIRED).
        default (Any): Value the field holds when the option is not given.
        default_factory (Callable | None): Factory for mutable defaults.
        help (str): Help text for usage rendering.

    Returns:
        dataclasses.Field: A field carrying Optbind option metadata.

    When neither `default` nor `default_factory` is given the field defaults to
    `None` in the dataclass, and the registry derives the effective default
    from the field type (False for `bool`, the zero member for flag enums).

    Field annotations are resolved with `typing.get_type_hints()` against the
    module globals of the record. Under `from __future__ import annotations`,
    records and the types they reference must therefore be defined at module
    level; types local to a function raise `OptionDefinitionError`.
    """
    if default is not MISSING and default_factory is not MISSING:
        raise ValueError("cannot specify both default and default_factory")
    if not isinstance(argument, OptionArgument):
        argument = OptionArgument(argument)
    spec = OptionSpec(
        long_name=long_name,
        short_name=short_name,
        argument=argument,
        explicit_default=default is not MISSING or default_factory is not MISSING,
        help=help,
    )
    metadata = {OPTION_METADATA_KEY: spec}
    if default_factory is not MISSING:
        return field(default_factory=default_factory, metadata=metadata)
    return field(default=None if default is MISSING else default, metadata=metadata)


def option_present(name: str) -> Any:
    """
    Declare a `bool` field that becomes True when the named option is referenced.

    A one-character `name` refers to an option's short name; anything longer
    refers to its long name.
    """
    return field(default=False, metadata={OPTION_METADATA_KEY: PresenceSpec(name)})


def positional_arguments(help: str = "") -> Any:
    """Declare a `list[str]` field that collects leftover positional values."""
    return field(
        default_factory=list, metadata={OPTION_METADATA_KEY: PositionalSpec(help)}
    )
