# Optbind Option Parsing — (c) 2025 rtj.dev LLC — MIT Licensed
"""config.py
Loader for option defaults stored in YAML or TOML files.

A defaults file maps long option names to values, either at the top level or
under an `options` section:

    # defaults.yaml
    options:
      level: 3
      animal: [cat, dog]

    # defaults.toml
    [options]
    level = 3
    animal = ["cat", "dog"]

Values are handed to the parser as text and go through the same converters as
command-line values; lists are joined with commas so they feed flag enum
parsing. Defaults never mark an option as present.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Union

import toml
import yaml
from pydantic import BaseModel, Field, ValidationError

from optbind.logger import logger

Scalar = Union[bool, int, float, str]


class DefaultsFile(BaseModel):
    """Validated content of an option defaults file."""

    options: dict[str, Union[Scalar, list[Scalar]]] = Field(default_factory=dict)


def default_text(value: Any) -> str:
    """Render a defaults file value as the text a user would type."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(default_text(item) for item in value)
    return str(value)


def load_defaults(file_path: Path | str) -> dict[str, Any]:
    """
    Load option defaults from a YAML or TOML file.

    Args:
        file_path (Path | str): Path to a `.yaml`, `.yml` or `.toml` file.

    Returns:
        dict[str, Any]: Long option name → value.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the format is unsupported or the content is malformed.
    """
    if isinstance(file_path, (str, Path)):
        path = Path(file_path)
    else:
        raise TypeError("file_path must be a string or Path object.")

    if not path.is_file():
        raise FileNotFoundError(f"No such defaults file: {file_path}")

    suffix = path.suffix
    with path.open("r", encoding="UTF-8") as defaults_file:
        try:
            if suffix in (".yaml", ".yml"):
                raw_config = yaml.safe_load(defaults_file)
            elif suffix == ".toml":
                raw_config = toml.load(defaults_file)
            else:
                raise ValueError(f"Unsupported defaults file format: {suffix}")
        except (yaml.YAMLError, toml.TomlDecodeError) as error:
            raise ValueError(f"Could not parse defaults file {path}: {error}") from error

    if raw_config is None:
        raw_config = {}
    if not isinstance(raw_config, dict):
        raise ValueError(
            "Defaults file must contain a mapping of option names to values.\n"
            "Example:\n"
            "options:\n"
            "  level: 3\n"
            "  animal: [cat, dog]"
        )

    section = raw_config.get("options", raw_config)
    try:
        defaults = DefaultsFile(options=section)
    except ValidationError as error:
        raise ValueError(f"Invalid defaults file {path}: {error}") from error

    logger.debug("Loaded %d option defaults from %s", len(defaults.options), path)
    return dict(defaults.options)
