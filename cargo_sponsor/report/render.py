"""Render sponsorable dependencies as JSON or a terminal table."""

from __future__ import annotations

import typing as typ

import msgspec
from rich import box
from rich.table import Table
from rich.text import Text

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from rich.console import Console

    from cargo_sponsor.pipeline.aggregate import SponsorRecord

NO_RESULTS_MESSAGE = "No sponsorable dependencies found."
_MISSING = "-"


def render_json(records: cabc.Sequence[SponsorRecord]) -> str:
    """Return ``records`` as a pretty-printed JSON array."""
    encoded = msgspec.json.encode(list(records))
    return msgspec.json.format(encoded, indent=2).decode("utf-8")


def build_sponsor_table(records: cabc.Sequence[SponsorRecord]) -> Table:
    """Build a rich table with one row per sponsorable dependency."""
    table = Table(
        box=box.MINIMAL_HEAVY_HEAD,
        header_style="bold",
        pad_edge=False,
        show_lines=False,
    )
    table.add_column("Package", style="yellow", no_wrap=True)
    table.add_column("Sponsors", style="dim")
    table.add_column("Link", style="blue underline", overflow="fold")

    for record in records:
        sponsors = (
            str(record.sponsor_count) if record.sponsor_count is not None else _MISSING
        )
        link = record.sponsor_links[0] if record.sponsor_links else _MISSING
        table.add_row(Text(record.package_name), sponsors, Text(link))
    return table


def render_table(records: cabc.Sequence[SponsorRecord], console: Console) -> None:
    """Print a human-oriented summary of ``records`` to ``console``."""
    if not records:
        console.print(NO_RESULTS_MESSAGE)
        return

    console.print()
    console.print("  [bold cyan]Sponsorable Dependencies[/bold cyan]")
    console.print()
    console.print(f"  Found [bold]{len(records)}[/bold] projects you can support:")
    console.print()
    console.print(build_sponsor_table(records))
    console.print()
