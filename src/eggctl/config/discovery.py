"""Locate and read ``eggctl.toml``.

The file is looked up the way git finds ``.git/``: from the working
directory upwards.  ``EGGCTL_CONFIG`` pins an explicit file instead and
disables the walk.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "eggctl.toml"
CONFIG_ENV_VAR = "EGGCTL_CONFIG"


class TomlConfigError(ValueError):
    """Raised when a config file exists but is not valid TOML."""


def _pinned_config() -> Path | None | bool:
    """The file named by ``EGGCTL_CONFIG``; False when the variable is unset."""
    pinned = os.environ.get(CONFIG_ENV_VAR)
    if not pinned:
        return False
    path = Path(pinned)
    if not path.is_file():
        logger.debug("%s points at missing file %s", CONFIG_ENV_VAR, path)
        return None
    return path


def _walk_up(start: Path) -> Path | None:
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file that applies to *start* (default: cwd), if any."""
    pinned = _pinned_config()
    if pinned is not False:
        return pinned  # type: ignore[return-value]
    found = _walk_up((start or Path.cwd()).resolve())
    logger.debug("Config file: %s", found or "none")
    return found


def read_toml(path: Path | None) -> dict[str, Any]:
    """Parse *path* as TOML; a missing or absent file reads as empty."""
    if path is None or not path.is_file():
        return {}
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise TomlConfigError(msg) from exc
