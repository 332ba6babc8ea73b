"""Rich components for the CLI.

Commands build tables and panels here so they stay free of layout details.
"""

from __future__ import annotations

from typing import Any, Sequence

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.pretty import Pretty
from rich.table import Table
from rich.text import Text

from geocore.core.domain.place import GeocorePlace
from geocore.core.errors import GeocoreError


def print_banner(console: Console) -> None:
    title = Text("Geocore", style="bold cyan")
    subtitle = Text("Places • Events • Items • Users", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_places_table(places: Sequence[GeocorePlace], title: str = "Places") -> Table:
    table = Table(title=title)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="white")
    table.add_column("Latitude", style="green", justify="right")
    table.add_column("Longitude", style="green", justify="right")
    for place in places:
        point = place.point
        table.add_row(
            place.id or "-",
            place.name or "-",
            f"{point.latitude:.6f}" if point and point.latitude is not None else "-",
            f"{point.longitude:.6f}" if point and point.longitude is not None else "-",
        )
    return table


def build_entity_panel(kind: str, entity: Any) -> Panel:
    """Panel with the wire representation of an entity."""

    data = entity.to_dict() if hasattr(entity, "to_dict") else entity
    return Panel(Pretty(data), title=Text(kind, style="bold magenta"), border_style="magenta")


def build_error_panel(error: GeocoreError | None) -> Panel:
    body = Text()
    body.append(type(error).__name__ if error is not None else "Error", style="bold")
    if error is not None and str(error):
        body.append(f"\n{error}")
    return Panel(body, title=Text("Geocore error", style="bold red"), border_style="red")
