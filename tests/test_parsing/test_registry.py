from dataclasses import dataclass
from typing import Literal

import pytest

from optbind import (
    CommandLineOptions,
    DuplicateOptionError,
    OptionArgument,
    OptionDefinitionError,
    option,
    option_present,
    positional_arguments,
)
from optbind.converters import FlagEnumConverter, NullableConverter, PrimitiveConverter
from optbind.registry import OptionRegistry, get_registry
from optbind.tokenizer import scan_token


@dataclass
class Sample(CommandLineOptions):
    level: int = option("level", "l", default=2, help="Level")
    name: str | None = option("name", argument="optional")
    name_present: bool = option_present("name")
    verbose: bool = option("verbose", "v", OptionArgument.NONE)
    mode: Literal["fast", "slow"] = option("mode", default="fast")


@dataclass
class DuplicateLong:
    first: str = option("name")
    second: str = option("name")


@dataclass
class DuplicateShort:
    first: str = option("first", "x")
    second: str = option("second", "x")


@dataclass
class NoneOnString:
    value: str = option("value", argument="none")


@dataclass
class PresenceOfUnknown:
    present: bool = option_present("missing")


@dataclass
class PresenceOnString:
    level: int = option("level")
    present: str = option_present("level")


@dataclass
class TwoSinks:
    first: list[str] = positional_arguments()
    second: list[str] = positional_arguments()


@dataclass
class ListOption:
    values: list[str] = option("values", default_factory=list)


class Tag:
    def __init__(self, text: str = "") -> None:
        self.text = text


@dataclass
class FactoryDefault:
    tag: Tag = option("tag", default_factory=Tag)


@dataclass
class ShortLongName:
    value: str = option("v")


@dataclass
class LongNameWithSeparator:
    value: str = option("key=value")


@dataclass
class WideShortName:
    value: str = option("value", "vv")


class NotADataclass:
    value: str = option("value")


def test_lookup_by_long_and_short_name():
    registry = OptionRegistry.from_type(Sample)
    assert registry.get_long("level").field_name == "level"
    assert registry.get_short("l").field_name == "level"
    assert registry.get_long("missing") is None
    assert registry.lookup(scan_token("-v")).field_name == "verbose"
    assert registry.lookup(scan_token("--name=x")).field_name == "name"
    assert "level" in registry and "l" in registry and "q" not in registry


def test_lookup_is_case_sensitive():
    registry = OptionRegistry.from_type(Sample)
    assert registry.get_long("LEVEL") is None
    assert registry.get_short("L") is None


def test_descriptors_in_declaration_order():
    registry = OptionRegistry.from_type(Sample)
    assert [o.long_name for o in registry] == ["level", "name", "verbose", "mode"]
    assert len(registry) == 4


def test_descriptor_details():
    registry = OptionRegistry.from_type(Sample)
    level = registry.get_long("level")
    assert level.argument == OptionArgument.REQUIRED
    assert level.default == 2
    assert level.flags == ("-l", "--level")
    assert isinstance(level.converter, PrimitiveConverter)
    name = registry.get_long("name")
    assert isinstance(name.converter, NullableConverter)
    assert name.presence_fields == ("name_present",)
    assert registry.get_long("verbose").default is False
    assert registry.positional_field == "additional_arguments"


def test_initial_values():
    values = OptionRegistry.from_type(Sample).initial_values()
    assert values == {
        "level": 2,
        "name": None,
        "verbose": False,
        "mode": "fast",
        "name_present": False,
        "additional_arguments": [],
    }


def test_default_factory_called_per_parse():
    registry = OptionRegistry.from_type(FactoryDefault)
    assert registry.initial_values()["tag"] is not registry.initial_values()["tag"]


def test_get_registry_is_cached():
    assert get_registry(Sample) is get_registry(Sample)


def test_str():
    registry = OptionRegistry.from_type(Sample)
    assert str(registry) == (
        "OptionRegistry(Sample, options=4, short=2, presence=1, positional=True)"
    )


@pytest.mark.parametrize("target_type", [DuplicateLong, DuplicateShort])
def test_duplicate_names_rejected(target_type):
    with pytest.raises(DuplicateOptionError):
        OptionRegistry.from_type(target_type)


def test_duplicate_error_names_option():
    with pytest.raises(DuplicateOptionError) as excinfo:
        OptionRegistry.from_type(DuplicateShort)
    assert excinfo.value.option_text == "-x"


@pytest.mark.parametrize(
    "target_type",
    [
        NoneOnString,
        PresenceOfUnknown,
        PresenceOnString,
        TwoSinks,
        ListOption,
        ShortLongName,
        LongNameWithSeparator,
        WideShortName,
        NotADataclass,
    ],
)
def test_inconsistent_declarations_rejected(target_type):
    with pytest.raises(OptionDefinitionError):
        OptionRegistry.from_type(target_type)


def test_flag_enum_converter_selected():
    from enum import Flag

    class Color(Flag):
        RED = 1
        BLUE = 2

    @dataclass
    class Paint:
        color: Color = option("color")

    descriptor = OptionRegistry.from_type(Paint).get_long("color")
    assert isinstance(descriptor.converter, FlagEnumConverter)
    assert descriptor.default == Color(0)


def test_unresolvable_annotation_rejected():
    @dataclass
    class LocalOptions:
        mode: "LocalMode" = option("mode")  # noqa: F821

    with pytest.raises(OptionDefinitionError) as excinfo:
        OptionRegistry.from_type(LocalOptions)
    assert "Could not resolve field types of LocalOptions" in str(excinfo.value)
