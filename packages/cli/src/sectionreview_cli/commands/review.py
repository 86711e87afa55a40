"""Reviewer actions — answer, comment and resolve a section."""

from __future__ import annotations

import click
from rich.console import Console

from sectionreview_cli.session import check_section, open_session
from sectionreview_core.models import Answer

console = Console()

_ANSWERS = {"yes": Answer.YES, "no": Answer.NO, "unset": Answer.UNSET}


@click.command("answer")
@click.option("--property", "property_id", required=True, help="Property identifier.")
@click.argument("section")
@click.argument("answer", type=click.Choice(sorted(_ANSWERS)))
@click.pass_context
def answer_cmd(ctx, property_id: str, section: str, answer: str):
    """Answer "is this information correct?" for SECTION.

    Answering "no" snapshots the section's fields and, when no comments were
    written yet, fills them with one "Falta ..." line per empty field.
    """
    review, _ = open_session(ctx, property_id)
    check_section(review, section)

    record = review.set_answer(section, _ANSWERS[answer])

    console.print(f"[green]{section}[/green] answered [bold]{answer}[/bold].")
    if record.answer is Answer.NO and record.comments:
        console.print("[yellow]Comments:[/yellow]")
        for line in record.comments.splitlines():
            console.print(f"  {line}")
    _print_status(review)


@click.command("comment")
@click.option("--property", "property_id", required=True, help="Property identifier.")
@click.argument("section")
@click.argument("text", required=False, default="")
@click.pass_context
def comment_cmd(ctx, property_id: str, section: str, text: str):
    """Replace the correction comments of SECTION with TEXT (empty clears them)."""
    review, _ = open_session(ctx, property_id)
    check_section(review, section)

    review.set_comments(section, text)
    if text:
        console.print(f"[green]Comments updated for {section}.[/green]")
    else:
        console.print(f"[yellow]Comments cleared for {section}.[/yellow]")


@click.command("resolve")
@click.option("--property", "property_id", required=True, help="Property identifier.")
@click.argument("section")
@click.pass_context
def resolve_cmd(ctx, property_id: str, section: str):
    """Save corrections for SECTION: a section answered "no" becomes "yes"."""
    review, _ = open_session(ctx, property_id)
    check_section(review, section)

    before = review.get(section)
    was_rejected = before is not None and before.answer is Answer.NO
    review.mark_section_resolved(section)

    if was_rejected:
        console.print(f"[green]{section} corrected and approved.[/green]")
    else:
        console.print(f"[dim]{section} was not rejected; marked as reviewed.[/dim]")
    _print_status(review)


def _print_status(review) -> None:
    status = review.global_status()
    label = status.value or "Approved"
    console.print(f"Global status: [bold]{label}[/bold]")
