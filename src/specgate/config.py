"""Where specgate keeps its settings and how the effective settings are chosen.

Settings come from five layers, highest first:

1. command-line options of ``specgate validate``;
2. ``SPECGATE_LEVEL``, ``SPECGATE_REMOTE_TIMEOUT`` and ``SPECGATE_NO_REMOTE``;
3. ``specgate.json`` in the working directory, for per-repository defaults;
4. the user file ``config.json`` in :func:`get_config_dir`;
5. the defaults declared on :class:`~specgate.models.GlobalConfig`.

On Linux and the BSDs the user file and crash logs follow the XDG base
directories; elsewhere both live under ``~/.specgate``.
"""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path
from typing import Any, Callable, Optional

from pydantic import ValidationError

from specgate.exceptions import ConfigError
from specgate.models import GlobalConfig

_APP_NAME = "specgate"
_USER_CONFIG_NAME = "config.json"
_PROJECT_CONFIG_NAME = "specgate.json"

ENV_LEVEL = "SPECGATE_LEVEL"
ENV_REMOTE_TIMEOUT = "SPECGATE_REMOTE_TIMEOUT"
ENV_NO_REMOTE = "SPECGATE_NO_REMOTE"


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _app_dir(xdg_var: str, xdg_default: str) -> Path:
    """``$xdg_var/specgate`` (``~/xdg_default/specgate`` when unset), or ``~/.specgate``."""
    if _is_xdg_platform():
        root = os.environ.get(xdg_var) or str(Path.home() / xdg_default)
        path = Path(root) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """Directory holding the user ``config.json``; created on first use."""
    return _app_dir("XDG_CONFIG_HOME", ".config")


def get_data_dir() -> Path:
    """Directory for runtime data such as crash logs; created on first use."""
    return _app_dir("XDG_DATA_HOME", ".local/share")


def _load_object(path: Path, label: str) -> dict[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
        loaded = json.loads(raw)
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Invalid {label} at {path}: {exc}") from exc
    if not isinstance(loaded, dict):
        raise ConfigError(f"Invalid {label} at {path}: expected a JSON object")
    return loaded


def load_global_config() -> GlobalConfig:
    """Read the user config, or return defaults when there is none.

    Raises:
        ConfigError: The file is unreadable, is not a JSON object, or holds
            values :class:`~specgate.models.GlobalConfig` rejects.
    """
    path = get_config_dir() / _USER_CONFIG_NAME
    if not path.is_file():
        return GlobalConfig()
    try:
        return GlobalConfig.model_validate(_load_object(path, "global config"))
    except ValidationError as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def load_project_config() -> Optional[dict[str, Any]]:
    """Raw contents of ``./specgate.json``, or ``None`` if it is absent.

    Values are checked later, once merged over the user config.
    """
    path = Path.cwd() / _PROJECT_CONFIG_NAME
    if path.is_file():
        return _load_object(path, "project config")
    return None


def resolve_config(
    cli_level: Optional[int] = None,
    cli_format: Optional[str] = None,
    cli_timeout: Optional[float] = None,
    cli_no_remote: bool = False,
) -> GlobalConfig:
    """Merge every settings layer into the configuration for this run.

    ``cli_level`` of ``0`` is a real choice and overrides lower layers; only
    ``None`` means "not given".

    Raises:
        ConfigError: Some layer holds a value that fails validation, or an
            environment variable cannot be converted.
    """
    settings = load_global_config().model_dump()

    project = load_project_config()
    if project is not None:
        try:
            merged = GlobalConfig.model_validate(_deep_merge(settings, project))
        except ValidationError as exc:
            raise ConfigError(f"Invalid project config: {exc}") from exc
        settings = merged.model_dump()

    level = _from_env(ENV_LEVEL, int)
    if level is not None:
        settings["default_level"] = level
    timeout = _from_env(ENV_REMOTE_TIMEOUT, float)
    if timeout is not None:
        settings["remote"]["timeout"] = timeout
    if os.environ.get(ENV_NO_REMOTE):
        settings["remote"]["enabled"] = False

    if cli_level is not None:
        settings["default_level"] = cli_level
    if cli_timeout is not None:
        settings["remote"]["timeout"] = cli_timeout
    if cli_no_remote:
        settings["remote"]["enabled"] = False
    if cli_format is not None:
        settings["output"]["format"] = cli_format

    try:
        return GlobalConfig.model_validate(settings)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def _from_env(name: str, convert: Callable[[str], Any]) -> Any:  # noqa: ANN401
    value = os.environ.get(name)
    if not value:
        return None
    try:
        return convert(value)
    except ValueError as exc:
        raise ConfigError(f"Invalid value for {name}: {value!r}") from exc


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged
