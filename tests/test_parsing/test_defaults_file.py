from dataclasses import dataclass
from enum import Flag

import pytest

from optbind import (
    CommandLineOptions,
    CommandLineOptionsParser,
    OptionArgumentError,
    UnknownOptionError,
    load_defaults,
    option,
    option_present,
)


class Animal(Flag):
    NONE = 0
    DOG = 1
    CAT = 2


@dataclass
class ServiceOptions(CommandLineOptions):
    level: int = option("level", "l", default=1)
    name: str = option("name", "n", "optional", default="world")
    name_present: bool = option_present("name")
    animal: Animal = option("animal")
    verbose: bool = option("verbose", "v", "none")


def test_load_yaml_defaults(tmp_path):
    path = tmp_path / "defaults.yaml"
    path.write_text("options:\n  level: 3\n  animal: [cat, dog]\n  verbose: true\n")
    assert load_defaults(path) == {"level": 3, "animal": ["cat", "dog"], "verbose": True}


def test_load_toml_defaults_without_section(tmp_path):
    path = tmp_path / "defaults.toml"
    path.write_text('level = 5\nname = "toml"\n')
    assert load_defaults(str(path)) == {"level": 5, "name": "toml"}


def test_load_empty_yaml(tmp_path):
    path = tmp_path / "empty.yml"
    path.write_text("")
    assert load_defaults(path) == {}


def test_missing_defaults_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_defaults(tmp_path / "missing.yaml")


def test_unsupported_defaults_format(tmp_path):
    path = tmp_path / "defaults.ini"
    path.write_text("[options]\nlevel = 3\n")
    with pytest.raises(ValueError):
        load_defaults(path)


@pytest.mark.parametrize(
    "content",
    ["- level\n- name\n", "options:\n  level: {nested: 1}\n", "options: [1, 2]\n", "a: [b\n"],
)
def test_malformed_defaults_file(tmp_path, content):
    path = tmp_path / "defaults.yaml"
    path.write_text(content)
    with pytest.raises(ValueError):
        load_defaults(path)


def test_defaults_applied_and_converted(tmp_path):
    path = tmp_path / "defaults.yaml"
    path.write_text("options:\n  level: 3\n  animal: [cat, dog]\n  name: file\n")
    parser = CommandLineOptionsParser(ServiceOptions, defaults=path)
    result = parser.parse([])
    assert result.level == 3
    assert result.animal == Animal.CAT | Animal.DOG
    assert result.name == "file"
    assert result.name_present is False


def test_command_line_overrides_defaults():
    parser = CommandLineOptionsParser(ServiceOptions, defaults={"level": 3, "n": "file"})
    result = parser.parse(["--level=7", "-n"])
    assert result.level == 7
    assert result.name == "file"
    assert result.name_present is True


def test_bool_default_for_no_argument_option():
    parser = CommandLineOptionsParser(ServiceOptions, defaults={"verbose": True})
    assert parser.parse([]).verbose is True


def test_unknown_default_name():
    parser = CommandLineOptionsParser(ServiceOptions, defaults={"colour": "red"})
    with pytest.raises(UnknownOptionError):
        parser.parse([])


def test_unconvertible_default():
    parser = CommandLineOptionsParser(ServiceOptions, defaults={"level": "high"})
    with pytest.raises(OptionArgumentError) as excinfo:
        parser.parse([])
    assert excinfo.value.option_text == "--level"
