"""XDG-compliant path management for storectl.

This module provides standardized paths following the XDG Base Directory
Specification for configuration and state storage.

XDG defaults:
- Config: ~/.config/storectl/
- State: ~/.local/state/storectl/
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "storectl"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/storectl/ (or XDG_CONFIG_HOME/storectl/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_state_dir() -> Path:
    """Get the state directory path.

    State data includes the deletion history, which should persist
    between runs but is not configuration.

    Returns:
        Path to ~/.local/state/storectl/ (or XDG_STATE_HOME/storectl/).
    """
    return _get_xdg_dir("XDG_STATE_HOME", ".local/state")


def get_roots_config_path() -> Path:
    """Get the default allowed-roots configuration file path.

    Returns:
        Path to ~/.config/storectl/roots.toml.
    """
    return get_config_dir() / "roots.toml"


def _ensure_dir(path: Path, name: str) -> Path:
    """Create a directory if it doesn't exist.

    Args:
        path: Directory to create.
        name: Human-readable name used in error messages.

    Returns:
        The directory path.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create {name} directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create {name} directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path


def ensure_state_dir() -> Path:
    """Create the state directory if it doesn't exist.

    Returns:
        Path to the state directory.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    return _ensure_dir(get_state_dir(), "state")
