"""status command — per-section review table and the global status."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from sectionreview_cli.session import open_session
from sectionreview_core.models import Answer, GlobalStatus
from sectionreview_core.snapshot import fields_editable
from sectionreview_core.submission import can_submit, submit_available

console = Console()

_ANSWER_STYLE = {
    Answer.YES: ("Sí", "green"),
    Answer.NO: ("No", "red"),
    Answer.UNSET: ("—", "dim"),
}

_STATUS_STYLE = {
    GlobalStatus.PENDING_REVIEW: "blue",
    GlobalStatus.PENDING_INFORMATION: "yellow",
    GlobalStatus.NONE: "green",
}


@click.command("status")
@click.option("--property", "property_id", required=True, help="Property identifier.")
@click.pass_context
def status_cmd(ctx, property_id: str):
    """Show the review state of every section of a property."""
    review, _ = open_session(ctx, property_id)

    table = Table(title=f"Section review — {property_id}", show_header=True, header_style="bold cyan")
    table.add_column("Section", style="bold")
    table.add_column("Title", max_width=40)
    table.add_column("Correct?", width=9)
    table.add_column("Data", width=5)
    table.add_column("Complete", width=9)
    table.add_column("Editable", width=9)
    table.add_column("Issue", width=6)
    table.add_column("Comments", max_width=40)

    for section in review.registry:
        record = review.get(section.id)
        answer = record.answer if record is not None else Answer.UNSET
        text, style = _ANSWER_STYLE[answer]
        table.add_row(
            section.id,
            section.title,
            f"[{style}]{text}[/{style}]",
            "yes" if review.has_data(section.id) else "no",
            "[green]yes[/green]" if review.is_complete(section.id) else "no",
            "yes" if fields_editable(record) else "no",
            "[red]●[/red]" if record is not None and record.has_issue else "",
            (record.comments or "").replace("\n", "; ") if record is not None else "",
        )

    console.print(table)

    status = review.global_status()
    style = _STATUS_STYLE[status]
    console.print(f"Global status: [{style}]{status.value or 'Approved'}[/{style}]")

    if submit_available(review):
        check = can_submit(review)
        if check.ok:
            console.print("[cyan]Comments ready to submit: run `sectionreview submit`.[/cyan]")
        else:
            console.print(f"[yellow]Submit blocked: {check.message}[/yellow]")
    if review.meta.comments_submitted_at:
        console.print(f"[dim]Comments first submitted at {review.meta.comments_submitted_at[:19].replace('T', ' ')}[/dim]")
