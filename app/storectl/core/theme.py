"""Colour theme for storectl output.

Styles are layered: built-in defaults, then the bundled ``data/theme.toml``,
then the user's ``theme.toml`` in the config directory. Each layer may set
any subset of keys. A bad key in a layer is dropped on its own instead of
discarding the whole layer.

Besides the usual semantic styles, the theme carries one style per tree
entry type and one per failure status class, so a deletion report colours
a 404 differently from a 403.
"""

import logging
import re
import tomllib
from functools import cache
from importlib import resources
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from rich.theme import Theme

from storectl.core.paths import get_config_dir
from storectl.store.models import StatusClass

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"#(?:[0-9a-fA-F]{3}){1,2}")


class ThemeColors(BaseModel):
    """Hex colours (#RGB or #RRGGBB) for every themed element."""

    model_config = ConfigDict(extra="forbid")

    text: str = "#ffffff"
    muted: str = "#b2bec3"
    header: str = "#69B9A1"
    border: str = "#29526d"

    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "#f53263"
    info: str = "#0ec1c8"

    directory: str = "#0e8ac8"
    file: str = "#ffffff"
    symlink: str = "#d44ebc"
    size: str = "#0ec1c8"

    dry_run: str = "#0ec1c8"
    bad_request: str = "#f5b332"
    forbidden: str = "#f53263"
    not_found: str = "#b2bec3"
    io_failure: str = "#d44ebc"

    @field_validator("*", mode="before")
    @classmethod
    def check_hex(cls, value: object) -> str:
        if not isinstance(value, str) or not _HEX_COLOR.fullmatch(value.strip()):
            msg = f"expected a #RGB or #RRGGBB colour, got {value!r}"
            raise ValueError(msg)
        return value.strip()


# Rich style name -> (colour field, style modifiers)
_STYLES: dict[str, tuple[str, str]] = {
    "text": ("text", ""),
    "muted": ("muted", ""),
    "dim": ("muted", ""),
    "header": ("header", ""),
    "bold_header": ("header", "bold"),
    "border": ("border", ""),
    "success": ("success", ""),
    "warning": ("warning", ""),
    "error": ("error", "bold"),
    "info": ("info", ""),
    "directory": ("directory", "bold"),
    "file": ("file", ""),
    "symlink": ("symlink", "italic"),
    "size": ("size", ""),
    "outcome.dry_run": ("dry_run", ""),
}


def status_style(status_class: StatusClass) -> str:
    """Name of the Rich style used for failures of a status class."""
    return f"status.{status_class.value}"


def get_user_theme_path() -> Path:
    """Path of the user's theme override file."""
    return get_config_dir() / "theme.toml"


def _read_colors(path: Path) -> dict[str, object]:
    """Read the ``[colors]`` table of a theme file.

    A missing, unreadable or malformed file contributes nothing.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return {}

    colors = data.get("colors", {})
    if not isinstance(colors, dict):
        logger.warning("Ignoring theme file %s: 'colors' is not a table", path)
        return {}
    return colors


def _bundled_colors() -> dict[str, object]:
    with resources.as_file(resources.files("storectl.data") / "theme.toml") as path:
        return _read_colors(path)


def _apply_layer(base: ThemeColors, layer: dict[str, object], source: str) -> ThemeColors:
    """Overlay one layer of colours, dropping the keys that fail validation."""
    if not layer:
        return base
    try:
        return base.model_validate({**base.model_dump(), **layer})
    except ValidationError as e:
        bad = {str(err["loc"][0]) for err in e.errors() if err["loc"]}
        for key in sorted(bad):
            logger.warning("Ignoring theme colour %r from %s", key, source)
        kept = {k: v for k, v in layer.items() if k not in bad}
        return base.model_validate({**base.model_dump(), **kept})


def load_theme(user_path: Path | None = None) -> ThemeColors:
    """Resolve the effective colours.

    Args:
        user_path: Override file to read instead of the default location.

    Returns:
        Colours after applying the bundled theme and the user overrides.
    """
    colors = _apply_layer(ThemeColors(), _bundled_colors(), "bundled theme")
    path = user_path or get_user_theme_path()
    return _apply_layer(colors, _read_colors(path), str(path))


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Build the Rich theme, including one style per failure status class."""
    colors = colors or load_theme()
    styles = {
        name: f"{modifier} {getattr(colors, field)}".strip()
        for name, (field, modifier) in _STYLES.items()
    }
    for status_class in StatusClass:
        styles[status_style(status_class)] = getattr(colors, status_class.value)
    return Theme(styles)


@cache
def get_theme() -> Theme:
    """Rich theme for the process, loaded once."""
    return get_rich_theme()
