# Optbind Option Parsing — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Converters turning raw option text into typed field values.

The converter for a field is selected once, when the option registry for a
record type is built, by `select_converter()`. Parsing then only calls
`Converter.convert()`, which is pure: it returns the typed value or raises
`OptionArgumentError` naming the option and the offending text.

Converter variants:
- PrimitiveConverter: `str`, `int`, `float`, `bool`, `Path`, `datetime`, and
  any class constructible from a single string.
- NullableConverter: `T | None`; absence yields None, text is converted as T.
- UnionConverter: `A | B`; the first member type that accepts the text wins.
- LiteralConverter: `Literal["a", "b"]` string choices.
- EnumConverter: `Enum` subclasses, matched by member name or value.
- FlagEnumConverter: `Flag` subclasses, comma-separated names combined with OR.

Functions:
- coerce_bool: Convert a string to a boolean.
- parse_datetime: Convert a string to a datetime using dateutil.
- select_converter: Pick the converter variant for a type annotation.
"""
from __future__ import annotations

import operator
import types
from datetime import datetime
from enum import Enum, Flag
from functools import reduce
from typing import Any, Callable, Literal, Union, get_args, get_origin

from dateutil import parser as date_parser

from optbind.exceptions import OptionArgumentError, OptionDefinitionError

TRUE_STRINGS = {"true", "t", "1", "yes", "on"}
FALSE_STRINGS = {"false", "f", "0", "no", "off"}


def coerce_bool(value: str) -> bool:
    """
    Convert a string to a boolean.

    Accepts 'true', 't', 'yes', '1', 'on' and 'false', 'f', 'no', '0',
    'off' in any case.

    Raises:
        ValueError: If the text is not a recognized boolean.
    """
    normalized = value.strip().lower()
    if normalized in TRUE_STRINGS:
        return True
    if normalized in FALSE_STRINGS:
        return False
    raise ValueError(f"'{value}' is not a valid boolean")


def parse_datetime(value: str) -> datetime:
    """Convert a string to a datetime using dateutil's flexible parser."""
    try:
        return date_parser.parse(value)
    except (ValueError, OverflowError) as error:
        raise ValueError(f"'{value}' could not be parsed as a datetime") from error


class Converter:
    """Base class for all converter variants."""

    target_type: Any = None

    def convert(self, value: str | None, option_text: str) -> Any:
        """
        Convert raw option text into the field's typed representation.

        Args:
            value (str | None): Raw value text, or None when absent.
            option_text (str): Option reference used in error messages.

        Raises:
            OptionArgumentError: If the value is absent or cannot be converted.
        """
        if value is None:
            raise OptionArgumentError(
                f"Option '{option_text}' requires a value",
                option_text=option_text,
            )
        try:
            return self._convert(value)
        except ValueError as error:
            raise OptionArgumentError(
                f"Invalid value for '{option_text}': {error}",
                option_text=option_text,
                value_text=value,
            ) from error

    def _convert(self, value: str) -> Any:
        raise NotImplementedError

    def choices(self) -> list[str]:
        """Return the accepted textual values, if the type restricts them."""
        return []

    @property
    def type_name(self) -> str:
        return getattr(self.target_type, "__name__", str(self.target_type))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.type_name})"


class PrimitiveConverter(Converter):
    """Converts text with a single parse callable, such as `int` or `coerce_bool`."""

    def __init__(self, target_type: Any, parse: Callable[[str], Any]) -> None:
        self.target_type = target_type
        self.parse = parse

    def _convert(self, value: str) -> Any:
        try:
            return self.parse(value)
        except (ValueError, TypeError, ArithmeticError) as error:
            raise ValueError(f"'{value}' is not a valid {self.type_name}") from error


class NullableConverter(Converter):
    """Wraps another converter for `T | None` fields."""

    def __init__(self, inner: Converter) -> None:
        self.inner = inner
        self.target_type = inner.target_type

    def convert(self, value: str | None, option_text: str) -> Any:
        if value is None:
            return None
        return self.inner.convert(value, option_text)

    def choices(self) -> list[str]:
        return self.inner.choices()

    def __repr__(self) -> str:
        return f"NullableConverter({self.inner!r})"


class UnionConverter(Converter):
    """Tries each member converter of a union in declaration order."""

    def __init__(self, members: list[Converter]) -> None:
        self.members = members
        self.target_type = tuple(member.target_type for member in members)

    def _convert(self, value: str) -> Any:
        for member in self.members:
            try:
                return member._convert(value)
            except ValueError:
                continue
        names = ", ".join(member.type_name for member in self.members)
        raise ValueError(f"'{value}' could not be converted to any of ({names})")

    @property
    def type_name(self) -> str:
        return " | ".join(member.type_name for member in self.members)


class LiteralConverter(Converter):
    """Accepts exactly one of the values listed in a `Literal[...]` annotation."""

    def __init__(self, target_type: Any) -> None:
        self.target_type = target_type
        self.values = get_args(target_type)

    def _convert(self, value: str) -> Any:
        for literal in self.values:
            if str(literal) == value:
                return literal
        raise ValueError(f"'{value}' should be one of {{{', '.join(self.choices())}}}")

    def choices(self) -> list[str]:
        return [str(literal) for literal in self.values]

    @property
    def type_name(self) -> str:
        return "literal"


class EnumConverter(Converter):
    """
    Converts text to a single member of an `Enum`.

    Member names are matched case-insensitively. A value that parses as an
    integer is matched against the member values, as is the exact textual form
    of a member value.
    """

    def __init__(self, target_type: type[Enum]) -> None:
        self.target_type = target_type
        self.members: dict[str, Enum] = {}
        for name, member in target_type.__members__.items():
            self.members.setdefault(name.lower(), member)

    def _lookup_name(self, name: str) -> Enum | None:
        return self.members.get(name.strip().lower())

    def _convert(self, value: str) -> Any:
        if "," in value:
            raise ValueError(
                f"'{value}' lists several members but {self.type_name} accepts one"
            )
        member = self._lookup_name(value)
        if member is not None:
            return member
        text = value.strip()
        for candidate in self.target_type:
            if str(candidate.value) == text:
                return candidate
        try:
            number = int(text)
        except ValueError:
            number = None
        if number is not None:
            try:
                return self.target_type(number)
            except ValueError:
                pass
        raise ValueError(f"'{value}' should be one of {{{', '.join(self.choices())}}}")

    def choices(self) -> list[str]:
        return list(self.target_type.__members__)


class FlagEnumConverter(EnumConverter):
    """
    Converts comma-separated member names of a `Flag` enum into their bitwise OR.

    A single integer value is accepted when it is non-negative and the enum
    itself accepts it: a plain `Flag` rejects bits no member declares, while an
    `IntFlag` keeps them.
    """

    def _convert_number(self, number: int, text: str) -> Flag:
        if number < 0:
            raise ValueError(f"'{text}' is outside the range of {self.type_name}")
        try:
            return self.target_type(number)
        except ValueError as error:
            raise ValueError(
                f"'{text}' is outside the range of {self.type_name}"
            ) from error

    def _convert(self, value: str) -> Any:
        pieces = [piece.strip() for piece in value.split(",")]
        if len(pieces) == 1:
            try:
                number = int(pieces[0])
            except ValueError:
                pass
            else:
                return self._convert_number(number, value)
        members = []
        for piece in pieces:
            member = self._lookup_name(piece)
            if member is None:
                raise ValueError(
                    f"'{piece}' is not a member of {self.type_name}; "
                    f"expected any of {{{', '.join(self.choices())}}}"
                )
            members.append(member)
        return reduce(operator.or_, members)

    def zero(self) -> Flag:
        """Return the member with no bits set."""
        return self.target_type(0)


def _is_union(target_type: Any) -> bool:
    return isinstance(target_type, types.UnionType) or get_origin(target_type) is Union


def select_converter(target_type: Any) -> Converter:
    """
    Select the converter variant for a resolved field annotation.

    Args:
        target_type (Any): The field's type annotation.

    Returns:
        Converter: The converter used for every value of that field.

    Raises:
        OptionDefinitionError: If no converter supports the type.
    """
    if target_type is Any:
        return PrimitiveConverter(str, str)

    if _is_union(target_type):
        args = get_args(target_type)
        members = [arg for arg in args if arg is not type(None)]
        inner = (
            select_converter(members[0])
            if len(members) == 1
            else UnionConverter([select_converter(member) for member in members])
        )
        if len(members) < len(args):
            return NullableConverter(inner)
        return inner

    if get_origin(target_type) is Literal:
        return LiteralConverter(target_type)

    if get_origin(target_type) is not None:
        raise OptionDefinitionError(
            f"Unsupported option type {target_type!r}: collection types are not supported"
        )

    if isinstance(target_type, type):
        if issubclass(target_type, Flag):
            return FlagEnumConverter(target_type)
        if issubclass(target_type, Enum):
            return EnumConverter(target_type)
        if target_type is bool:
            return PrimitiveConverter(bool, coerce_bool)
        if target_type is datetime:
            return PrimitiveConverter(datetime, parse_datetime)
        return PrimitiveConverter(target_type, target_type)

    raise OptionDefinitionError(f"Unsupported option type {target_type!r}")
