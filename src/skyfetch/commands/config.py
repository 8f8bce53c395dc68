"""Config commands -- view and modify settings.

Provides the ``skyfetch config`` sub-command group for reading, updating,
and resetting the settings file (:class:`~skyfetch.models.Settings`).
Settings are persisted in the skyfetch config directory and control the
provider URL, the request timeout, cache sizing and TTLs, and output
defaults.
"""

from __future__ import annotations

from typing import Any

import typer

from skyfetch.commands import context_options
from skyfetch.exit_codes import EXIT_INVALID_USAGE
from skyfetch.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


def _mask(secret: str) -> str:
    if not secret:
        return ""
    if len(secret) <= 4:
        return "****"
    return f"{secret[:2]}{'*' * (len(secret) - 4)}{secret[-2:]}"


def _coerce(key: str, current: Any, value: str) -> Any:
    """Convert *value* to the type of the field's *current* value."""
    if isinstance(current, bool):
        return value.lower() in ("true", "1", "yes")
    if isinstance(current, int):
        try:
            return int(value)
        except ValueError:
            error(f"Expected integer for {key}, got: {value}")
            raise typer.Exit(code=EXIT_INVALID_USAGE) from None
    if isinstance(current, float):
        try:
            return float(value)
        except ValueError:
            error(f"Expected number for {key}, got: {value}")
            raise typer.Exit(code=EXIT_INVALID_USAGE) from None
    return value


@config_app.command("show")
def config_show() -> None:
    """Show current configuration.

    Prints the config directory path followed by the settings stored on
    disk.  The API key is masked.

    Example::

        skyfetch config show
        skyfetch config show --json
    """
    from skyfetch.config import get_config_dir, load_settings

    settings = load_settings()
    data = settings.model_dump(mode="json")
    data["api"]["api_key"] = _mask(settings.api.api_key)
    info(f"Config directory: {get_config_dir()}")
    format_response(data)


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'request.timeout')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    Uses dot notation for nested keys. The value is coerced to match the
    existing field's type (bool, int, float, or str) and the updated
    settings are validated before saving.

    Raises:
        typer.Exit: With code 2 if the key path is invalid, the value
            cannot be coerced, or validation fails.

    Example::

        skyfetch config set output.format json
        skyfetch config set cache.weather_ttl 120
        skyfetch config set request.timeout 10
    """
    from pydantic import ValidationError

    from skyfetch.config import load_settings, save_settings
    from skyfetch.models import Settings

    settings = load_settings()
    data = settings.model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=EXIT_INVALID_USAGE)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target or isinstance(target[final_key], dict):
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    coerced = _coerce(key, target[final_key], value)
    target[final_key] = coerced

    try:
        new_settings = Settings.model_validate(data)
    except ValidationError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=EXIT_INVALID_USAGE) from None

    save_settings(new_settings)
    shown = _mask(str(coerced)) if final_key == "api_key" else coerced
    success(f"Set {key} = {shown}")


@config_app.command("reset")
def config_reset(ctx: typer.Context) -> None:
    """Reset configuration to defaults.

    Asks for confirmation unless ``--force`` is active.

    Example::

        skyfetch config reset
        skyfetch --force config reset
    """
    from skyfetch.config import save_settings
    from skyfetch.models import Settings

    if not context_options(ctx).get("force", False):
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_settings(Settings())
    success("Configuration reset to defaults.")
