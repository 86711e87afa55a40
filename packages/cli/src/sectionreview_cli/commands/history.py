"""history command — display past comment submissions of a property."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from sectionreview_cli.session import open_session

console = Console()


@click.command("history")
@click.option("--property", "property_id", required=True, help="Property identifier.")
@click.option("--section", default=None, help="Filter by section id.")
@click.option("--limit", default=20, show_default=True, help="Maximum number of entries to show.")
@click.pass_context
def history_cmd(ctx, property_id: str, section: str | None, limit: int):
    """Show the comment submission history of a property, most recent first."""
    from sectionreview_store.noop import NoOpStore

    store = ctx.obj.get("store") if ctx.obj else None
    if store is None or isinstance(store, NoOpStore):
        raise click.UsageError(
            "No store configured. Add 'store: sqlite' or 'store: gist' to .sectionreview.yml, "
            "or run `sectionreview init` to set one up."
        )

    review, _ = open_session(ctx, property_id)
    entries = review.meta.history
    if section is not None:
        entries = [e for e in entries if e.section_id == section]
    if not entries:
        console.print("[yellow]No submissions found.[/yellow]")
        return

    entries = list(reversed(entries))[:limit]

    table = Table(title=f"Submission History — {property_id}", show_header=True, header_style="bold cyan")
    table.add_column("Submitted At", width=20)
    table.add_column("Section", max_width=40)
    table.add_column("Comments", max_width=60)

    for e in entries:
        table.add_row(e.submitted_at[:19].replace("T", " "), e.section_title, e.comments)

    console.print(table)
