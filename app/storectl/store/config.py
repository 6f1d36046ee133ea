"""Allowed-root configuration for the content store.

The set of allowed roots is closed and fixed at process start: it is read
once from a TOML file and never derived from user input.

Example roots.toml:

    [[roots]]
    name = "audio"
    path = "/srv/content/audio"

    [[roots]]
    name = "covers"
    path = "/srv/content/covers"
"""

import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from storectl.core.paths import get_roots_config_path
from storectl.store.models import ROOT_NAME_PATTERN, AllowedRoot

# Environment variable overriding the default config location
CONFIG_ENV_VAR = "STORECTL_CONFIG"


class RootEntry(BaseModel):
    """A single [[roots]] table in the configuration file.

    Attributes:
        name: Logical root name used as the first segment of every path.
        path: Backing directory; relative paths and ~ are resolved at load time.
    """

    model_config = ConfigDict(extra="forbid")

    name: Annotated[str, Field(description="Logical root name")]
    path: Annotated[Path, Field(description="Backing directory")]

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate that the root name is a single safe path segment."""
        if not ROOT_NAME_PATTERN.fullmatch(v) or v in (".", ".."):
            msg = f"Root name must be a single path segment of [A-Za-z0-9._-], got {v!r}"
            raise ValueError(msg)
        return v


class StoreConfig(BaseModel):
    """Content store configuration.

    Attributes:
        roots: Allowed roots, in display order.
    """

    model_config = ConfigDict(extra="forbid")

    roots: Annotated[
        list[RootEntry],
        Field(default_factory=list, description="Allowed roots"),
    ]

    @model_validator(mode="after")
    def validate_unique_names(self) -> "StoreConfig":
        """Validate that no root name is configured twice."""
        seen: set[str] = set()
        duplicates: set[str] = set()
        for entry in self.roots:
            if entry.name in seen:
                duplicates.add(entry.name)
            seen.add(entry.name)
        if duplicates:
            msg = f"Duplicate root names: {sorted(duplicates)}"
            raise ValueError(msg)
        return self

    def allowed_roots(self) -> tuple[AllowedRoot, ...]:
        """Resolve entries into AllowedRoot values.

        Returns:
            Tuple of AllowedRoot with absolute backing paths.
        """
        return tuple(
            AllowedRoot(name=entry.name, path=entry.path.expanduser().resolve())
            for entry in self.roots
        )


class StoreConfigError(Exception):
    """Base exception for store configuration errors."""


class StoreConfigNotFoundError(StoreConfigError):
    """Raised when the configuration file is not found."""


class StoreConfigParseError(StoreConfigError):
    """Raised when the configuration file cannot be parsed."""


def resolve_config_path(path: Path | None = None) -> Path:
    """Determine which configuration file to use.

    Priority: explicit path, then $STORECTL_CONFIG, then the XDG default.

    Args:
        path: Explicit path, if given on the command line.

    Returns:
        Path to the configuration file.
    """
    if path is not None:
        return path
    env_value = os.environ.get(CONFIG_ENV_VAR)
    if env_value:
        return Path(env_value)
    return get_roots_config_path()


def load_store_config(path: Path | None = None) -> StoreConfig:
    """Load the store configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses resolve_config_path().

    Returns:
        Validated StoreConfig object.

    Raises:
        StoreConfigNotFoundError: If the config file doesn't exist.
        StoreConfigParseError: If the TOML syntax is invalid.
        StoreConfigError: If the content doesn't match the schema.
    """
    config_path = resolve_config_path(path)

    if not config_path.exists():
        raise StoreConfigNotFoundError(f"Store config not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise StoreConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise StoreConfigError(f"Failed to read store config: {e}") from e

    # Relative root paths are anchored at the config file's directory
    for entry in data.get("roots", []):
        if isinstance(entry, dict) and isinstance(entry.get("path"), str):
            root_path = Path(entry["path"]).expanduser()
            if not root_path.is_absolute():
                entry["path"] = str(config_path.parent / root_path)

    try:
        return StoreConfig.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise StoreConfigError(f"Invalid store config content: {e}") from e


def save_store_config(config: StoreConfig, path: Path | None = None) -> Path:
    """Save the store configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The StoreConfig object to save.
        path: Path to save the config. If None, uses resolve_config_path().

    Returns:
        Path where the config was saved.

    Raises:
        StoreConfigError: If the file cannot be written.
    """
    config_path = resolve_config_path(path)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = {"roots": [{"name": e.name, "path": str(e.path)} for e in config.roots]}

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise StoreConfigError(f"Failed to write store config: {e}") from e

    return config_path
