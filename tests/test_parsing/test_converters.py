from datetime import datetime
from decimal import Decimal
from enum import Enum, Flag, IntEnum, IntFlag
from pathlib import Path
from typing import Literal, Optional, Union

import pytest

from optbind.converters import (
    EnumConverter,
    FlagEnumConverter,
    LiteralConverter,
    NullableConverter,
    PrimitiveConverter,
    UnionConverter,
    coerce_bool,
    select_converter,
)
from optbind.exceptions import OptionArgumentError, OptionDefinitionError


class Color(Enum):
    RED = "red"
    GREEN = "green"
    BLUE = "blue"


class Status(IntEnum):
    SUCCESS = 0
    FAILURE = 1
    PENDING = 2


class Permission(Flag):
    NONE = 0
    READ = 1
    WRITE = 2
    EXECUTE = 4


class Mode(IntFlag):
    NONE = 0
    READ = 1
    WRITE = 2


def convert(target_type, value):
    return select_converter(target_type).convert(value, "--opt")


@pytest.mark.parametrize(
    "value, target_type, expected",
    [
        ("42", int, 42),
        ("-7", int, -7),
        ("3.14", float, 3.14),
        ("True", bool, True),
        ("hello", str, "hello"),
        ("", str, ""),
        ("off", bool, False),
        ("1.50", Decimal, Decimal("1.50")),
    ],
)
def test_convert_primitives(value, target_type, expected):
    assert convert(target_type, value) == expected


@pytest.mark.parametrize(
    "value, target_type",
    [("abc", int), ("1.2.3", float), ("maybe", bool), ("", int), ("x", Decimal)],
)
def test_convert_primitive_failures(value, target_type):
    with pytest.raises(OptionArgumentError) as excinfo:
        convert(target_type, value)
    assert excinfo.value.option_text == "--opt"
    assert excinfo.value.value_text == value
    assert isinstance(excinfo.value.__cause__, ValueError)


def test_coerce_bool():
    assert coerce_bool("true") is True
    assert coerce_bool("YES") is True
    assert coerce_bool("1") is True
    assert coerce_bool("on") is True
    assert coerce_bool("False") is False
    assert coerce_bool("no") is False
    assert coerce_bool("0") is False
    with pytest.raises(ValueError):
        coerce_bool("")


def test_path_conversion():
    result = convert(Path, "/tmp/test.txt")
    assert isinstance(result, Path)
    assert str(result) == "/tmp/test.txt"


def test_datetime_conversion():
    result = convert(datetime, "2023-10-01T13:00:00")
    assert isinstance(result, datetime)
    assert result.year == 2023 and result.month == 10 and result.hour == 13

    with pytest.raises(OptionArgumentError):
        convert(datetime, "not-a-date")


@pytest.mark.parametrize("target_type", [int | None, Optional[int], Union[None, int]])
def test_nullable_conversion(target_type):
    converter = select_converter(target_type)
    assert isinstance(converter, NullableConverter)
    assert converter.convert(None, "--opt") is None
    assert converter.convert("13", "--opt") == 13
    with pytest.raises(OptionArgumentError):
        converter.convert("bob", "--opt")


def test_absent_value_for_non_nullable():
    with pytest.raises(OptionArgumentError):
        select_converter(int).convert(None, "--opt")


def test_union_conversion():
    assert isinstance(select_converter(int | float), UnionConverter)
    assert convert(int | float, "42") == 42
    assert convert(int | float, "3.14") == 3.14
    assert convert(int | str, "abc") == "abc"
    with pytest.raises(OptionArgumentError) as excinfo:
        convert(int | float, "abc")
    assert "could not be converted" in str(excinfo.value)


def test_literal_conversion():
    assert isinstance(select_converter(Literal["dev", "prod"]), LiteralConverter)
    assert convert(Literal["dev", "prod"], "dev") == "dev"
    with pytest.raises(OptionArgumentError):
        convert(Literal["dev", "prod"], "staging")


def test_enum_conversion_by_name_and_value():
    assert isinstance(select_converter(Color), EnumConverter)
    assert convert(Color, "RED") == Color.RED
    assert convert(Color, "green") == Color.GREEN
    assert convert(Color, "blue") == Color.BLUE
    with pytest.raises(OptionArgumentError):
        convert(Color, "yellow")


def test_enum_rejects_multiple_members():
    with pytest.raises(OptionArgumentError):
        convert(Color, "red,green")


def test_int_enum_conversion():
    assert convert(Status, "0") == Status.SUCCESS
    assert convert(Status, "pending") == Status.PENDING
    with pytest.raises(OptionArgumentError):
        convert(Status, "3")


def test_flag_enum_conversion():
    converter = select_converter(Permission)
    assert isinstance(converter, FlagEnumConverter)
    assert converter.zero() == Permission.NONE
    assert convert(Permission, "read") == Permission.READ
    assert convert(Permission, "Read, Write") == Permission.READ | Permission.WRITE
    assert convert(Permission, " execute ,READ") == Permission.READ | Permission.EXECUTE
    assert convert(Permission, "6") == Permission.WRITE | Permission.EXECUTE
    assert convert(Permission, "0") == Permission.NONE


@pytest.mark.parametrize("value", ["8", "-1", "1000", "read,bogus", "read,", "bogus"])
def test_flag_enum_conversion_failures(value):
    with pytest.raises(OptionArgumentError):
        convert(Permission, value)


def test_converter_choices():
    assert select_converter(Color).choices() == ["RED", "GREEN", "BLUE"]
    assert select_converter(Literal["a", "b"]).choices() == ["a", "b"]
    assert select_converter(Color | None).choices() == ["RED", "GREEN", "BLUE"]
    assert select_converter(int).choices() == []


def test_unsupported_collection_type():
    with pytest.raises(OptionDefinitionError):
        select_converter(list[str])


def test_converter_repr():
    assert repr(PrimitiveConverter(int, int)) == "PrimitiveConverter(int)"


def test_int_flag_keeps_undeclared_bits():
    assert convert(Mode, "3") == Mode.READ | Mode.WRITE
    assert convert(Mode, "8") == 8
    assert convert(Mode, "read,write") == Mode.READ | Mode.WRITE
    with pytest.raises(OptionArgumentError):
        convert(Mode, "-1")


@pytest.mark.parametrize("value", ["y", "n"])
def test_coerce_bool_rejects_single_letter_yes_no(value):
    with pytest.raises(ValueError):
        coerce_bool(value)
