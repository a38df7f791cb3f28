from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from rc4kit.infra.paths import DEFAULT_CONFIG_FILE, SETTING_PATH, SETTING_TOML_PATH

logger = logging.getLogger(__name__)

LOCAL_FILENAMES = ("settings.toml", "settings.json")


def find_config_file(user_path: str | Path | None = None) -> Path | None:
    """
    Locate the settings file to use.

    Lookup order:
        1. ``user_path`` (if given and it exists)
        2. ``settings.toml`` / ``settings.json`` in the working directory
        3. ``settings.toml`` / ``settings.json`` in the per-user config directory

    Args:
        user_path: Optional file path explicitly provided by the user.

    Returns:
        The resolved path, or None if nothing was found.
    """
    if user_path:
        path = Path(user_path).expanduser().resolve()
        if path.is_file():
            return path
        logger.warning("Specified config file not found: %s", path)
        return None

    for name in LOCAL_FILENAMES:
        local_path = (Path.cwd() / name).resolve()
        if local_path.is_file():
            logger.debug("Using local config file: %s", local_path)
            return local_path

    for fallback in (SETTING_TOML_PATH, SETTING_PATH):
        if fallback.is_file():
            return fallback.resolve()

    return None


def read_config_file(path: Path) -> dict[str, Any]:
    """
    Parse a ``.toml`` or ``.json`` settings file.

    Raises:
        ValueError: If the extension is unsupported, parsing fails, or the
            root element is not a table/object.
    """
    ext = path.suffix.lower()

    if ext == ".json":
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except Exception as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e

    elif ext == ".toml":
        try:
            import tomllib

            with path.open("rb") as f:
                data = tomllib.load(f)
        except Exception as e:
            raise ValueError(f"Invalid TOML in {path}: {e}") from e

    else:
        raise ValueError(f"Unsupported config file extension: {ext}")

    if not isinstance(data, dict):
        raise ValueError(f"Config root must be a dict, got {type(data)} in {path}")

    return data


def load_config(
    config_path: str | Path | None = None,
    required: bool = True,
) -> dict[str, Any]:
    """
    Load cipher settings.

    Args:
        config_path: Optional explicit configuration file path.
        required: When False, a missing file yields an empty mapping so the
            built-in defaults apply. An explicit ``config_path`` that does not
            exist is always an error.

    Returns:
        Parsed configuration as a dictionary.

    Raises:
        FileNotFoundError: If no configuration file is found and one is
            required.
        ValueError: If the file cannot be parsed.
    """
    path = find_config_file(config_path)

    if not path:
        if required or config_path:
            raise FileNotFoundError("No valid config file found.")
        logger.debug("No config file found, using built-in defaults")
        return {}

    logger.debug("Loading configuration from: %s", path)
    return read_config_file(path)


def copy_default_config(target: str | Path) -> Path:
    """
    Copy the bundled sample settings (TOML) to ``target``.

    Returns:
        The absolute path written.
    """
    output = Path(target).expanduser().resolve()
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(DEFAULT_CONFIG_FILE.read_bytes())
    logger.info("Sample configuration written to: %s", output)
    return output
