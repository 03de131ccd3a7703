"""Run options with validation.

Options come from the command line and, optionally, from an ``agentsmd.toml``
(or YAML) file in the target directory. Pydantic validates both, so invalid
values fail before any scanning starts.
"""

from __future__ import annotations

import re
import tomllib
from pathlib import Path
from typing import Any

import tomlkit
import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from agentsmd.core.errors import ConfigError
from agentsmd.core.patterns import parse_include_patterns
from agentsmd.core.tags import DEFAULT_TAG_NAME

CONFIG_FILENAME = "agentsmd.toml"
OUTPUT_FILENAME = "agents.md"

_TAG_NAME = re.compile(r"[A-Za-z][A-Za-z0-9_.:-]*")


class RunOptions(BaseModel):
    """Validated settings for one run."""

    model_config = {"extra": "forbid"}

    root: Path = Field(default=Path("."))
    follow_symlinks: bool = False
    exclude_docs: bool = False
    exclude_tests: bool = False
    exclude_styles: bool = False
    include_patterns: list[str] = Field(default_factory=list)
    line_limit: int | None = None  # <= 0 disables
    char_limit: int | None = None  # <= 0 disables
    project_name: str | None = None
    tag_name: str = DEFAULT_TAG_NAME
    stubs: bool = False

    @field_validator("include_patterns", mode="before")
    @classmethod
    def split_include_patterns(cls, v: Any) -> Any:
        """Accept ``"*.py, *.toml"`` as well as a list."""
        if v is None or isinstance(v, str):
            return parse_include_patterns(v)
        return v

    @field_validator("project_name")
    @classmethod
    def blank_project_is_none(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("tag_name", mode="before")
    @classmethod
    def validate_tag_name(cls, v: Any) -> Any:
        """Blank tag names fall back to the default; others must be valid."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_TAG_NAME
        if isinstance(v, str):
            v = v.strip()
            if not _TAG_NAME.fullmatch(v):
                raise ValueError(f"Invalid tag name: {v!r}")
        return v


def build_options(**values: Any) -> RunOptions:
    """Validate raw option values, wrapping failures in ``ConfigError``."""
    try:
        return RunOptions.model_validate(values)
    except ValidationError as e:
        raise ConfigError(f"Invalid options: {e}") from e


def load_config(path: Path | str) -> dict[str, Any]:
    """Load option values from a TOML or YAML file.

    The returned mapping has already been validated against ``RunOptions``
    but only contains the keys present in the file.

    Raises:
        ConfigError: If the file cannot be read, parsed, or validated.
    """
    path = Path(path)

    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        if path.suffix == ".toml":
            with open(path, "rb") as f:
                data = tomllib.load(f)
        elif path.suffix in (".yaml", ".yml"):
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        else:
            raise ConfigError(f"Unsupported config file extension: {path.suffix}")
    except ConfigError:
        raise
    except Exception as e:
        raise ConfigError(f"Failed to parse configuration file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file {path} must contain a table of options")
    if "root" in data:
        raise ConfigError(f"'root' cannot be set from a configuration file ({path})")

    try:
        validated = RunOptions.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Configuration validation failed: {e}") from e

    return validated.model_dump(include=set(data.keys()))


def load_config_or_default(path: Path | str | None = None) -> dict[str, Any]:
    """Load option values from ``path``, or return no values if absent."""
    if path is None:
        return {}
    path = Path(path)
    if not path.exists():
        return {}
    return load_config(path)


def _default_values() -> dict[str, Any]:
    # TOML has no null, so unset optional values are left out
    defaults = RunOptions().model_dump(exclude={"root"})
    return {key: value for key, value in defaults.items() if value is not None}


def create_default_config(path: Path | str) -> None:
    """Write a configuration file holding the default options.

    Raises:
        ConfigError: If the file already exists or cannot be written.
    """
    path = Path(path)

    if path.exists():
        raise ConfigError(f"Configuration file already exists: {path}")

    values = _default_values()
    if path.suffix == ".toml":
        doc = tomlkit.document()
        doc.add(tomlkit.comment("agentsmd options; command-line flags override these"))
        doc.add(tomlkit.comment("line_limit = 200"))
        doc.add(tomlkit.comment("char_limit = 200000"))
        doc.add(tomlkit.comment('project_name = "my-project"'))
        doc.add(tomlkit.nl())
        for key, value in values.items():
            doc[key] = value
        content = tomlkit.dumps(doc)
    elif path.suffix in (".yaml", ".yml"):
        content = yaml.safe_dump(values, default_flow_style=False, sort_keys=False)
    else:
        raise ConfigError(f"Unsupported config file extension: {path.suffix}")

    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
    except OSError as e:
        raise ConfigError(f"Failed to write configuration file {path}: {e}") from e
