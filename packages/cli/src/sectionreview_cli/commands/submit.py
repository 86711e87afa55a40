"""submit command — freeze and submit correction comments."""

from __future__ import annotations

import click
from rich.console import Console

from sectionreview_cli.session import open_session
from sectionreview_core.submission import NOTHING_TO_SUBMIT, submit

console = Console()


@click.command("submit")
@click.option("--property", "property_id", required=True, help="Property identifier.")
@click.pass_context
def submit_cmd(ctx, property_id: str):
    """Submit the comments of every section answered "no".

    Refused while any section is unanswered or a rejected section has no
    comments. Submitting twice without new changes does nothing.
    """
    review, _ = open_session(ctx, property_id)

    result = submit(review)
    if not result.ok:
        if result.reason == NOTHING_TO_SUBMIT:
            console.print(f"[yellow]{result.message}[/yellow]")
            return
        raise click.ClickException(result.message or "Cannot submit comments.")

    console.print(f"[green]Submitted comments for {len(result.entries)} section(s).[/green]")
    for entry in result.entries:
        console.print(f"  [bold]{entry.section_title}[/bold]")
    if not result.persisted:
        console.print("[red]Warning: the submission could not be saved to the store.[/red]")
