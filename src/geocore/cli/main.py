"""Geocore command line client.

Every command builds its own `Geocore` handle from `GeocoreSettings`, runs
one flow on the event loop and prints the outcome with rich. A `Failure` is
rendered as an error panel and the command exits with status 1.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, TypeVar

import typer
from rich.console import Console

from geocore.cli import doctor
from geocore.cli.ui_components import build_entity_panel, build_error_panel, build_places_table, print_banner
from geocore.core.result import GeocoreResult
from geocore.core.services.geocore import FETCHABLE_KINDS, Geocore

T = TypeVar("T")

app = typer.Typer(no_args_is_help=True, help="Client for the Geocore location backend.")
app.add_typer(doctor.app, name="doctor")

_console = Console()


@app.callback()
def _main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every request."),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _run(flow: Callable[[Geocore], Awaitable[GeocoreResult[T]]]) -> T:
    async def _with_geocore() -> GeocoreResult[T]:
        async with Geocore() as geocore:
            return await flow(geocore)

    result = asyncio.run(_with_geocore())
    if result.failed:
        _console.print(build_error_panel(result.error))
        raise typer.Exit(code=1)
    return result.value


def _login_first(
    default_user: bool, flow: Callable[[Geocore], Awaitable[GeocoreResult[T]]]
) -> Callable[[Geocore], Awaitable[GeocoreResult[T]]]:
    if not default_user:
        return flow

    async def _flow(geocore: Geocore) -> GeocoreResult[T]:
        logged_in = await geocore.login_with_default_user()
        return await logged_in.then(lambda _: flow(geocore))

    return _flow


@app.command()
def login(
    user_id: str = typer.Argument(..., help="User ID (USE-...) or alternate ID."),
    password: str = typer.Option(..., "--password", "-p", prompt=True, hide_input=True),
    alt: int = typer.Option(0, "--alt", help="Alternate ID index; 0 uses the primary ID."),
) -> None:
    """Authenticate and print the access token."""

    token = _run(lambda geocore: geocore.login(user_id, password, alt))
    _console.print(f"[green]Logged in as[/green] {user_id}")
    _console.print(token)


@app.command(name="login-default")
def login_default() -> None:
    """Log in as this device's default user, registering it when needed."""

    print_banner(_console)

    async def _flow(geocore: Geocore) -> GeocoreResult[tuple[str, str]]:
        result = await geocore.login_with_default_user()
        return result.map(lambda token: (geocore.user_id or "", token))

    user_id, token = _run(_flow)
    _console.print(f"[green]Logged in as[/green] {user_id}")
    _console.print(token)


@app.command()
def get(
    kind: str = typer.Argument(..., help="Entity kind: object, place, event, item, user or tag."),
    id: str = typer.Argument(..., help="Entity ID."),
    default_user: bool = typer.Option(False, "--default-user", help="Log in as the default user first."),
) -> None:
    """Fetch one entity by ID and print it."""

    if kind not in FETCHABLE_KINDS:
        raise typer.BadParameter(f"unknown kind {kind!r}; expected one of: {', '.join(FETCHABLE_KINDS)}")

    entity: Any = _run(_login_first(default_user, lambda geocore: geocore.fetch(kind, id)))
    _console.print(build_entity_panel(kind, entity))


@app.command()
def nearest(
    latitude: float = typer.Argument(...),
    longitude: float = typer.Argument(...),
    num: int = typer.Option(10, "--num", "-n", min=1, help="Number of places to return."),
    default_user: bool = typer.Option(False, "--default-user", help="Log in as the default user first."),
) -> None:
    """List the places nearest to a point."""

    places = _run(
        _login_first(
            default_user,
            lambda geocore: geocore.places().with_center(latitude, longitude).per_page(num).nearest(),
        )
    )
    if not places:
        _console.print("[yellow]No places found.[/yellow]")
        return
    _console.print(build_places_table(places, title=f"Nearest to ({latitude}, {longitude})"))


def run() -> None:
    app()


if __name__ == "__main__":
    run()
