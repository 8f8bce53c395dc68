"""Recent commands -- the recently viewed cities list.

Provides the ``skyfetch recent`` sub-command group.  Cities are added by
``skyfetch weather``; these commands only read and prune the list kept by
:class:`~skyfetch.recent.RecentCitiesStore`.
"""

from __future__ import annotations

import typer

from skyfetch.commands import context_options
from skyfetch.output import error, info, print_table, success


recent_app = typer.Typer(no_args_is_help=True)


def _open_store():  # noqa: ANN202
    from skyfetch.config import get_recent_dir, resolve_settings
    from skyfetch.recent import RecentCitiesStore

    settings = resolve_settings()
    return RecentCitiesStore(get_recent_dir(), settings.recent.max_items)


@recent_app.command("list")
def recent_list() -> None:
    """List recently viewed cities, newest first.

    Example::

        skyfetch recent list
        skyfetch recent list --plain
    """
    with _open_store() as store:
        cities = store.list()

    if not cities:
        info("No recent cities.")
        return
    rows = [
        [city.name or "", city.region_name or "", city.country_name or ""]
        for city in cities
    ]
    print_table(["Name", "Region", "Country"], rows, title="Recent cities")


@recent_app.command("remove")
def recent_remove(
    name: str = typer.Argument(help="Area name of the city to remove."),
) -> None:
    """Remove a city from the recent list.

    Raises:
        typer.Exit: With code 4 if no city with that name is listed.

    Example::

        skyfetch recent remove London
    """
    from skyfetch.exit_codes import EXIT_NOT_FOUND

    with _open_store() as store:
        removed = store.remove(name)

    if not removed:
        error(f"'{name}' is not in the recent list.")
        raise typer.Exit(code=EXIT_NOT_FOUND)
    success(f"Removed '{name}'.")


@recent_app.command("clear")
def recent_clear(ctx: typer.Context) -> None:
    """Forget every recently viewed city.

    Asks for confirmation unless ``--force`` is active.

    Example::

        skyfetch --force recent clear
    """
    if not context_options(ctx).get("force", False):
        confirmed = typer.confirm("Clear all recent cities?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    with _open_store() as store:
        store.clear()
    success("Recent cities cleared.")
