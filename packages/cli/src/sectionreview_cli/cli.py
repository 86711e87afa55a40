"""CLI entry point for sectionreview.

Commands:
  status     — per-section review table and the global status
  answer     — answer "is this information correct?" for a section
  comment    — edit a section's correction comments
  resolve    — save corrections: a rejected section becomes approved
  set-field  — edit a property field (may reopen rejected sections)
  submit     — submit correction comments
  history    — show past comment submissions
  init       — interactive setup wizard
"""

from __future__ import annotations

import importlib.metadata

import click
from rich.console import Console

from sectionreview_cli.commands.fields import set_field_cmd
from sectionreview_cli.commands.history import history_cmd
from sectionreview_cli.commands.init import init_cmd
from sectionreview_cli.commands.review import answer_cmd, comment_cmd, resolve_cmd
from sectionreview_cli.commands.status import status_cmd
from sectionreview_cli.commands.submit import submit_cmd

console = Console()


def _build_store(config: dict):
    """Instantiate the configured store from .sectionreview.yml settings.

    Store selection hierarchy:
      store: gist   → GistStore  (requires gist_id and github_token)
      store: sqlite → SQLiteStore (requires store_path or uses .sectionreview.db)
      (default)     → NoOpStore  (nothing persisted)

    This factory lives in cli.py so neither sectionreview_core nor
    sectionreview_store know about the CLI config format.
    """
    from sectionreview_store.noop import NoOpStore

    store_type = config.get("store", "noop")

    if store_type == "gist":
        from sectionreview_store.gist import GistStore

        gist_id = config.get("gist_id")
        token = config.get("github_token")
        if not gist_id or not token:
            console.print("[yellow]GistStore requires gist_id and a GitHub token. Falling back to no store.[/yellow]")
            return NoOpStore()
        return GistStore(gist_id=gist_id, token=token)

    if store_type == "sqlite":
        from sectionreview_store.sqlite import SQLiteStore

        db_path = config.get("store_path", ".sectionreview.db")
        return SQLiteStore(db_path=db_path)

    return NoOpStore()


def _package_version() -> str:
    try:
        return importlib.metadata.version("sectionreview")
    except importlib.metadata.PackageNotFoundError:
        return "0.0.0"


@click.group()
@click.version_option(version=_package_version(), prog_name="sectionreview")
@click.option(
    "--config",
    "config_path",
    default=".sectionreview.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="SECTIONREVIEW_CONFIG",
)
@click.pass_context
def main(ctx: click.Context, config_path: str):
    """Section review and drift detection for property records."""
    from sectionreview_core.config import load_config

    ctx.ensure_object(dict)

    try:
        config = load_config(config_path)
    except ValueError as e:
        raise click.UsageError(str(e))

    store = _build_store(config)
    ctx.obj["store"] = store
    ctx.obj["config"] = config
    ctx.call_on_close(store.close)


main.add_command(status_cmd)
main.add_command(answer_cmd)
main.add_command(comment_cmd)
main.add_command(resolve_cmd)
main.add_command(set_field_cmd)
main.add_command(submit_cmd)
main.add_command(history_cmd)
main.add_command(init_cmd)
