"""Built-in CLI sub-commands for skyfetch.

This package groups the Typer sub-command modules that form the CLI's
top-level command tree:

* :mod:`~skyfetch.commands.weather` -- ``search`` and ``weather`` lookups.
* :mod:`~skyfetch.commands.recent` -- list and prune recently viewed cities.
* :mod:`~skyfetch.commands.config` -- view and modify settings.

Each module either exports a :class:`typer.Typer` sub-application (for
multi-command groups like ``recent`` and ``config``) or plain callback
functions registered directly on the root app (for single commands like
``search``).
"""

from __future__ import annotations

from typing import Any

import typer


def context_options(ctx: typer.Context) -> dict[str, Any]:
    """Return the shared options stored by the root callback."""
    return ctx.obj if isinstance(ctx.obj, dict) else {}
