"""set-field command — edit a property field as the form layer would."""

from __future__ import annotations

import click
from rich.console import Console

from sectionreview_cli.session import open_session
from sectionreview_core.sections import LIST_FIELDS
from sectionreview_core.snapshot import fields_editable

console = Console()


@click.command("set-field")
@click.option("--property", "property_id", required=True, help="Property identifier.")
@click.option("--clear", is_flag=True, help="Clear the field instead of setting it.")
@click.argument("field_name")
@click.argument("values", nargs=-1)
@click.pass_context
def set_field_cmd(ctx, property_id: str, clear: bool, field_name: str, values: tuple[str, ...]):
    """Set FIELD_NAME to VALUES (several values for list fields).

    If the field belongs to a section answered "no" and the new value differs
    from what was reviewed, the section is reopened for review.

    Fields of a section are locked until the section is answered and again
    once it is approved.
    """
    if clear and values:
        raise click.UsageError("Pass either --clear or a value, not both.")
    if not clear and not values:
        raise click.UsageError("Missing value. Use --clear to empty the field.")

    if clear:
        value = [] if field_name in LIST_FIELDS else None
    elif field_name in LIST_FIELDS:
        value = list(values)
    elif len(values) > 1:
        raise click.UsageError(f"{field_name} takes a single value.")
    else:
        value = values[0]

    review, form = open_session(ctx, property_id)
    store = ctx.obj["store"]

    owner = review.registry.section_for_field(field_name)
    record = review.get(owner) if owner is not None else None
    if owner is not None and not fields_editable(record):
        reason = "answer the section before editing its fields" if record is None else "the section is approved"
        raise click.UsageError(f"{field_name} is locked: {reason} ({owner}).")

    # Pending until the backend acknowledges the write.
    form.edit(field_name, value)
    if not store.save_fields(property_id, {field_name: value}):
        form.reject(field_name)
        raise click.ClickException(f"Could not save {field_name}; nothing was changed.")

    # Values written by others meanwhile are adopted; the pending field keeps
    # the local edit until it is acknowledged.
    upstream = store.load(property_id)
    if upstream is not None:
        form.receive(upstream.fields)
    form.acknowledge(field_name)

    reopened = review.update_values(form.values())

    console.print(f"[green]{field_name} updated[/green]" + (f" [dim]({owner})[/dim]" if owner else ""))
    for section_id in reopened:
        title = review.registry.get(section_id).title
        console.print(f"[yellow]Data changed since rejection: {title} reopened for review.[/yellow]")
