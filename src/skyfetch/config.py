"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for skyfetch:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.skyfetch/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Settings file** -- A single :class:`~skyfetch.models.Settings` JSON
  file storing the provider URL, request timeout, cache sizing, and output
  defaults.
* **Precedence resolution** -- :func:`resolve_settings` merges CLI flags,
  environment variables, and the settings file into the effective
  configuration.

The request cache itself is never written to disk; only the settings file
and the recently viewed cities list (see :mod:`skyfetch.recent`) persist.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`) to prevent data loss on crash or power failure.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

from skyfetch.exceptions import ConfigError
from skyfetch.models import Settings

_APP_NAME = "skyfetch"
_CONFIG_FILENAME = "config.json"

ENV_API_KEY = "SKYFETCH_API_KEY"
ENV_BASE_URL = "SKYFETCH_BASE_URL"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/skyfetch/`` (default ``~/.config/skyfetch/``).
    On macOS/Windows: ``~/.skyfetch/``.

    Returns:
        Absolute path to the configuration directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_CONFIG_HOME", (".config",))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (recent cities, crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/skyfetch/`` (default ``~/.local/share/skyfetch/``).
    On macOS/Windows: ``~/.skyfetch/data/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_DATA_HOME", (".local", "share"))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir() / "data"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_recent_dir() -> Path:
    """Return the directory backing the recently viewed cities store."""
    path = get_data_dir() / "recent"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is guaranteed to be an atomic rename on POSIX systems.
    On success the temp file is renamed over *path*; on any failure the temp
    file is cleaned up.
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
        fd = None  # prevent double-close in finally
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up the temp file on any error (including KeyboardInterrupt).
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Settings file ---


def _settings_path() -> Path:
    """Path to the settings file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_settings() -> Settings:
    """Load the settings from the XDG config directory.

    Returns:
        The deserialised :class:`~skyfetch.models.Settings`. If the file
        does not exist, a default instance is returned.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = _settings_path()
    if not path.is_file():
        return Settings()
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
        return Settings.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid settings at {path}: {exc}") from exc


def save_settings(settings: Settings) -> None:
    """Persist the settings atomically to disk.

    Args:
        settings: The configuration to save.
    """
    data = settings.model_dump(mode="json")
    _atomic_write(_settings_path(), json.dumps(data, indent=2) + "\n")


# --- Precedence resolution ---


def resolve_settings(
    cli_api_key: Optional[str] = None,
    cli_base_url: Optional[str] = None,
    cli_format: Optional[str] = None,
) -> Settings:
    """Resolve settings with full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_api_key``, ``cli_base_url``, ``cli_format``)
        2. Environment variables (``SKYFETCH_API_KEY``, ``SKYFETCH_BASE_URL``)
        3. Settings file (``~/.config/skyfetch/config.json``)
        4. Defaults

    Returns:
        The effective :class:`~skyfetch.models.Settings`.
    """
    settings = load_settings()

    env_api_key = os.environ.get(ENV_API_KEY)
    if cli_api_key is not None:
        settings.api.api_key = cli_api_key
    elif env_api_key:
        settings.api.api_key = env_api_key

    env_base_url = os.environ.get(ENV_BASE_URL)
    if cli_base_url is not None:
        settings.api.base_url = cli_base_url
    elif env_base_url:
        settings.api.base_url = env_base_url

    if cli_format is not None:
        settings.output.format = cli_format

    return settings


def require_api_key(settings: Settings) -> str:
    """Return the configured API key or fail before any request is made.

    Raises:
        ConfigError: If no API key is configured.
    """
    api_key = settings.api.api_key.strip()
    if not api_key:
        raise ConfigError(
            f"No API key configured. Set {ENV_API_KEY}, pass --api-key, "
            "or run 'skyfetch config set api.api_key <key>'"
        )
    return api_key
