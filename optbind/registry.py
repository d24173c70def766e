# Optbind Option Parsing — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Builds the option lookup structure for a target record type.

`OptionRegistry` reads the Optbind metadata attached to the fields of a
dataclass (see `optbind.option`) and produces immutable `OptionDescriptor`
instances indexed by long and by short name. While doing so it checks that the
declarations are internally consistent:

- long and short names are unique (`DuplicateOptionError` otherwise)
- long names are at least two characters and contain no `=`, `:` or spaces
- short names are exactly one character
- `NONE` options and presence flags live on `bool` fields
- presence flags name a declared option
- at most one positional sink is declared

Registries never change after construction. `get_registry()` caches one per
type so repeated parses of the same type share it.
"""
from __future__ import annotations

import dataclasses
from copy import deepcopy
from functools import lru_cache
from typing import Any, Iterator, get_type_hints

from optbind.converters import (
    FlagEnumConverter,
    NullableConverter,
    PrimitiveConverter,
    select_converter,
)
from optbind.exceptions import DuplicateOptionError, OptionDefinitionError
from optbind.logger import logger
from optbind.option import (
    OPTION_METADATA_KEY,
    OptionArgument,
    OptionDescriptor,
    OptionSpec,
    PositionalSpec,
    PresenceSpec,
)
from optbind.tokenizer import OptionKind, OptionToken

INVALID_NAME_CHARACTERS = set("=: \t")


def _is_bool_field(field_type: Any) -> bool:
    converter = select_converter(field_type)
    if isinstance(converter, NullableConverter):
        converter = converter.inner
    return isinstance(converter, PrimitiveConverter) and converter.target_type is bool


class OptionRegistry:
    """
    Lookup of option descriptors by long and short name for one record type.

    Attributes:
        target_type (type): The dataclass the registry describes.
        positional_field (str | None): Name of the positional sink field, if any.
        presence_fields (dict[str, str]): Presence field name → option long name.
    """

    def __init__(self, target_type: type) -> None:
        if not isinstance(target_type, type) or not dataclasses.is_dataclass(
            target_type
        ):
            raise OptionDefinitionError(
                f"Option records must be dataclass types, got {target_type!r}"
            )
        self.target_type = target_type
        self._options: list[OptionDescriptor] = []
        self._long: dict[str, OptionDescriptor] = {}
        self._short: dict[str, OptionDescriptor] = {}
        self.positional_field: str | None = None
        self.presence_fields: dict[str, str] = {}
        self._build()

    @classmethod
    def from_type(cls, target_type: type) -> OptionRegistry:
        return cls(target_type)

    def _build(self) -> None:
        try:
            hints = get_type_hints(self.target_type)
        except (NameError, TypeError) as error:
            raise OptionDefinitionError(
                f"Could not resolve field types of {self.target_type.__name__}: {error}"
            ) from error

        specs: list[tuple[dataclasses.Field, OptionSpec]] = []
        presence: list[tuple[dataclasses.Field, PresenceSpec]] = []
        for data_field in dataclasses.fields(self.target_type):
            spec = data_field.metadata.get(OPTION_METADATA_KEY)
            if isinstance(spec, OptionSpec):
                specs.append((data_field, spec))
            elif isinstance(spec, PresenceSpec):
                presence.append((data_field, spec))
            elif isinstance(spec, PositionalSpec):
                if self.positional_field is not None:
                    raise OptionDefinitionError(
                        f"{self.target_type.__name__} declares more than one positional "
                        f"sink: '{self.positional_field}' and '{data_field.name}'"
                    )
                self.positional_field = data_field.name

        presence_by_name: dict[str, list[str]] = {}
        for data_field, presence_spec in presence:
            if not _is_bool_field(hints[data_field.name]):
                raise OptionDefinitionError(
                    f"Presence field '{data_field.name}' must be annotated as bool"
                )
            presence_by_name.setdefault(presence_spec.name, []).append(data_field.name)

        for data_field, spec in specs:
            self._register(self._make_descriptor(data_field, spec, hints))

        for name, field_names in presence_by_name.items():
            descriptor = self._short.get(name) if len(name) == 1 else self._long.get(name)
            if descriptor is None:
                raise OptionDefinitionError(
                    f"Presence field '{field_names[0]}' refers to unknown option '{name}'"
                )
            updated = dataclasses.replace(
                descriptor,
                presence_fields=descriptor.presence_fields + tuple(field_names),
            )
            self._replace(descriptor, updated)
            for field_name in field_names:
                self.presence_fields[field_name] = descriptor.long_name

        logger.debug(
            "Built option registry for %s: %d options, positional sink=%s",
            self.target_type.__name__,
            len(self._options),
            self.positional_field,
        )

    def _validate_names(self, field_name: str, spec: OptionSpec) -> None:
        long_name = spec.long_name
        if not isinstance(long_name, str) or len(long_name) < 2:
            raise OptionDefinitionError(
                f"Long name {long_name!r} of '{field_name}' must be at least 2 characters"
            )
        if long_name.startswith("-") or INVALID_NAME_CHARACTERS & set(long_name):
            raise OptionDefinitionError(
                f"Long name '{long_name}' of '{field_name}' must not start with '-' "
                "or contain '=', ':' or whitespace"
            )
        short_name = spec.short_name
        if short_name is not None:
            if not isinstance(short_name, str) or len(short_name) != 1:
                raise OptionDefinitionError(
                    f"Short name {short_name!r} of '{field_name}' must be a single character"
                )
            if short_name == "-" or short_name in INVALID_NAME_CHARACTERS:
                raise OptionDefinitionError(
                    f"Short name '{short_name}' of '{field_name}' is not allowed"
                )

    def _make_descriptor(
        self,
        data_field: dataclasses.Field,
        spec: OptionSpec,
        hints: dict[str, Any],
    ) -> OptionDescriptor:
        self._validate_names(data_field.name, spec)
        field_type = hints[data_field.name]
        converter = select_converter(field_type)
        if spec.argument == OptionArgument.NONE and not _is_bool_field(field_type):
            raise OptionDefinitionError(
                f"Option '--{spec.long_name}' takes no argument, so field "
                f"'{data_field.name}' must be annotated as bool"
            )

        default_factory = None
        if data_field.default_factory is not dataclasses.MISSING:
            default_factory = data_field.default_factory
            default = None
        elif spec.explicit_default:
            default = data_field.default
        elif isinstance(converter, FlagEnumConverter):
            default = converter.zero()
        elif _is_bool_field(field_type) and not isinstance(converter, NullableConverter):
            default = False
        else:
            default = None

        return OptionDescriptor(
            long_name=spec.long_name,
            short_name=spec.short_name,
            argument=spec.argument,
            field_name=data_field.name,
            field_type=field_type,
            converter=converter,
            default=default,
            default_factory=default_factory,
            help=spec.help,
        )

    def _register(self, descriptor: OptionDescriptor) -> None:
        existing = self._long.get(descriptor.long_name)
        if existing is not None:
            raise DuplicateOptionError(
                f"Long name '--{descriptor.long_name}' is used by both "
                f"'{existing.field_name}' and '{descriptor.field_name}'",
                option_text=f"--{descriptor.long_name}",
            )
        if descriptor.short_name is not None:
            existing = self._short.get(descriptor.short_name)
            if existing is not None:
                raise DuplicateOptionError(
                    f"Short name '-{descriptor.short_name}' is used by both "
                    f"'{existing.field_name}' and '{descriptor.field_name}'",
                    option_text=f"-{descriptor.short_name}",
                )
            self._short[descriptor.short_name] = descriptor
        self._long[descriptor.long_name] = descriptor
        self._options.append(descriptor)

    def _replace(self, old: OptionDescriptor, new: OptionDescriptor) -> None:
        self._options[self._options.index(old)] = new
        self._long[new.long_name] = new
        if new.short_name is not None:
            self._short[new.short_name] = new

    def get_long(self, name: str) -> OptionDescriptor | None:
        """Return the option with the given long name, if declared."""
        return self._long.get(name)

    def get_short(self, name: str) -> OptionDescriptor | None:
        """Return the option with the given short name, if declared."""
        return self._short.get(name)

    def lookup(self, token: OptionToken) -> OptionDescriptor | None:
        """Return the option an option reference token names, if declared."""
        if token.kind == OptionKind.LONG:
            return self._long.get(token.name)
        return self._short.get(token.name)

    def initial_values(self) -> dict[str, Any]:
        """
        Return the starting value of every option-related field.

        Defaults are deep-copied and factories are invoked so that no two
        parses share mutable state.
        """
        values: dict[str, Any] = {}
        for descriptor in self._options:
            if descriptor.default_factory is not None:
                values[descriptor.field_name] = descriptor.default_factory()
            else:
                values[descriptor.field_name] = deepcopy(descriptor.default)
        for field_name in self.presence_fields:
            values[field_name] = False
        if self.positional_field is not None:
            values[self.positional_field] = []
        return values

    @property
    def options(self) -> list[OptionDescriptor]:
        return list(self._options)

    def __iter__(self) -> Iterator[OptionDescriptor]:
        return iter(self._options)

    def __len__(self) -> int:
        return len(self._options)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        if len(name) == 1:
            return name in self._short
        return name in self._long

    def __str__(self) -> str:
        return (
            f"OptionRegistry({self.target_type.__name__}, options={len(self._options)}, "
            f"short={len(self._short)}, presence={len(self.presence_fields)}, "
            f"positional={self.positional_field is not None})"
        )

    def __repr__(self) -> str:
        return str(self)


@lru_cache(maxsize=None)
def get_registry(target_type: type) -> OptionRegistry:
    """Return the cached option registry for a record type, building it once."""
    return OptionRegistry(target_type)
