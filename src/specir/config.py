"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for specir:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.specir/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Global config** -- A single :class:`~specir.models.GlobalConfig` JSON
  file storing defaults (strict mode, output structure, recovery strategy).
* **Project config** -- An optional ``./specir.json`` with the same shape,
  overriding the global file key by key.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project-local config, and global config into the
  final effective configuration.

All file writes, including generated reports, go through
:func:`atomic_write` (temp file, then rename).
"""

from __future__ import annotations

import json
import logging
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from specir.exceptions import ConfigError
from specir.models import GlobalConfig, OutputStructure, RecoveryStrategy

logger = logging.getLogger(__name__)

_APP_NAME = "specir"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "specir.json"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from *env_var*, else ``$HOME/<segments>``."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    return Path.home().joinpath(*default_segments)


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/specir/`` (default ``~/.config/specir/``).
    On macOS/Windows: ``~/.specir/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/specir/`` (default ``~/.local/share/specir/``).
    On macOS/Windows: ``~/.specir/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def atomic_write(path: Path, data: str) -> None:
    """Write *data* to *path* atomically using temp file + rename.

    The temporary file lives in the target directory so that ``os.replace``
    is an atomic rename on POSIX. On any failure the temp file is removed
    and the original file, if any, is left untouched.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def _global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def _read_json(path: Path, label: str) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid {label} at {path}: {exc}") from exc


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the XDG config directory.

    Returns:
        The deserialised :class:`~specir.models.GlobalConfig`, or a default
        instance if the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    data = _read_json(path, "global config")
    try:
        return GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./specir.json``.

    The file uses the :class:`~specir.models.GlobalConfig` shape but may set
    only some keys, for example ``{"generation": {"structure": "domain-based"}}``.

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file is not valid JSON or not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    data = _read_json(path, "project config")
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    logger.debug("Loaded project config from %s", path)
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


# --- Environment ---


def _env_bool(name: str) -> Optional[bool]:
    raw = os.environ.get(name)
    if raw is None:
        return None
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean (true/false), got {raw!r}")


def _env_choice(name: str, enum_cls: type) -> Any:
    raw = os.environ.get(name)
    if not raw:
        return None
    try:
        return enum_cls(raw.strip().lower())
    except ValueError as exc:
        choices = ", ".join(member.value for member in enum_cls)
        raise ConfigError(f"{name} must be one of: {choices} (got {raw!r})") from exc


# --- Precedence resolution ---


def resolve_config(
    cli_strict: Optional[bool] = None,
    cli_structure: Optional[str] = None,
    cli_recovery: Optional[str] = None,
    cli_format: Optional[str] = None,
) -> GlobalConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_strict``, ``cli_structure``, ``cli_recovery``,
           ``cli_format``)
        2. Environment variables (``SPECIR_STRICT``, ``SPECIR_STRUCTURE``,
           ``SPECIR_RECOVERY``)
        3. Project config (``./specir.json``)
        4. User config (``~/.config/specir/config.json``)
        5. Defaults

    Raises:
        ConfigError: If any layer holds an invalid value.
    """
    # 5 + 4
    global_cfg = load_global_config()

    # 3
    project = load_project_config()
    if project is not None:
        try:
            global_cfg = GlobalConfig.model_validate(
                _deep_merge(global_cfg.model_dump(mode="json"), project)
            )
        except ValidationError as exc:
            raise ConfigError(f"Invalid project config: {exc}") from exc

    # 2
    env_strict = _env_bool("SPECIR_STRICT")
    if env_strict is not None:
        global_cfg.validation.strict = env_strict
    env_structure = _env_choice("SPECIR_STRUCTURE", OutputStructure)
    if env_structure is not None:
        global_cfg.generation.structure = env_structure
    env_recovery = _env_choice("SPECIR_RECOVERY", RecoveryStrategy)
    if env_recovery is not None:
        global_cfg.generation.recovery_strategy = env_recovery

    # 1
    if cli_strict is not None:
        global_cfg.validation.strict = cli_strict
    try:
        if cli_structure is not None:
            global_cfg.generation.structure = OutputStructure(cli_structure)
        if cli_recovery is not None:
            global_cfg.generation.recovery_strategy = RecoveryStrategy(cli_recovery)
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc
    if cli_format is not None:
        global_cfg.output.format = cli_format

    return global_cfg
