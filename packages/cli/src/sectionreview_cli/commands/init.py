"""init command — interactive setup wizard.

Writes .sectionreview.yml with the chosen store backend and, for the Gist
backend, creates the shared Gist through the GitHub CLI so reviewers do not
need to know the GitHub API.
"""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile
from pathlib import Path

import click
import yaml
from rich.console import Console

console = Console()
logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".sectionreview.yml"


@click.command("init")
@click.option(
    "--debounce",
    "debounce_seconds",
    type=float,
    default=None,
    help="Seconds of inactivity before review changes are saved.",
)
def init_cmd(debounce_seconds: float | None):
    """Set up sectionreview in the current directory.

    Creates .sectionreview.yml and, optionally, a private GitHub Gist that
    holds every property's review state.
    """
    console.print("\n[bold cyan]sectionreview init[/bold cyan] — setup wizard\n")

    console.print("Review state store:")
    console.print("  [bold]none[/bold]    — no persistence (default)")
    console.print("  [bold]sqlite[/bold]  — local SQLite file (single reviewer)")
    console.print("  [bold]gist[/bold]    — shared private GitHub Gist, zero infrastructure")
    store_type = click.prompt(
        "Store backend",
        type=click.Choice(["none", "sqlite", "gist"]),
        default="none",
    )

    config: dict = {}

    if store_type == "none":
        config["store"] = "noop"
    elif store_type == "sqlite":
        db_path = click.prompt("SQLite database path", default=".sectionreview.db")
        config["store"] = "sqlite"
        if db_path != ".sectionreview.db":
            config["store_path"] = db_path
        console.print(f"[green]SQLite store configured at {db_path}[/green]")

    elif store_type == "gist":
        console.print(
            "\n[yellow]Note:[/yellow] the Gist store needs GITHUB_TOKEN set to a token with "
            "[bold]gist[/bold] scope whenever sectionreview runs."
        )
        gist_id = _create_gist()
        if gist_id:
            console.print(f"[green]Created Gist: {gist_id}[/green]")
            config["store"] = "gist"
            config["gist_id"] = gist_id
        else:
            console.print("[yellow]Gist creation failed — add gist_id manually to .sectionreview.yml[/yellow]")

    if debounce_seconds is not None:
        config["debounce_seconds"] = debounce_seconds

    _write_config(config)
    console.print(f"[green]Created {CONFIG_FILENAME}[/green]")
    console.print("\n[bold green]Setup complete![/bold green]")
    console.print("Check a property with: [bold]sectionreview status --property <id>[/bold]")


def _create_gist() -> str | None:
    """Create a private Gist for review state and return its ID."""
    try:
        # gh names Gist files after their path, so the seed file needs a
        # stable name rather than the random temp-file one.
        tmp_dir = tempfile.mkdtemp()
        named_path = os.path.join(tmp_dir, "sectionreview_README.json")
        with open(named_path, "w") as f:
            f.write("{}")

        try:
            result = subprocess.run(
                [
                    "gh",
                    "gist",
                    "create",
                    "--public=false",
                    "--desc",
                    "sectionreview property review state",
                    named_path,
                ],
                capture_output=True,
                text=True,
                timeout=15,
            )
        finally:
            os.unlink(named_path)
            os.rmdir(tmp_dir)

        if result.returncode == 0:
            gist_url = result.stdout.strip()
            return gist_url.rstrip("/").split("/")[-1]
        logger.warning("gh gist create failed: %s", result.stderr.strip())
    except (FileNotFoundError, subprocess.TimeoutExpired):
        pass
    return None


def _write_config(config: dict) -> None:
    """Write or update .sectionreview.yml, preserving any existing keys."""
    path = Path(CONFIG_FILENAME)
    existing: dict = {}
    if path.exists():
        existing = yaml.safe_load(path.read_text()) or {}
    existing.update(config)
    path.write_text(yaml.dump(existing, default_flow_style=False, sort_keys=False, allow_unicode=True))
