"""
Stats Command - Summarize a merged graph.
"""

import json
import sys

import click
from rich.console import Console
from rich.table import Table

from ..utils import configure_logging, load_session, session_options

console = Console()


@click.command()
@session_options
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def stats(files, hide_leaves, config_path, verbose, as_json: bool):
    """
    Show node, edge and origin counts for the merged graph.
    """
    configure_logging(verbose)
    session = load_session(files, hide_leaves, config_path, show_progress=not as_json)
    if session is None:
        sys.exit(1)

    data = session.stats()
    if as_json:
        click.echo(json.dumps(data))
        return

    table = Table(title="Graph Statistics")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    for key, value in data.items():
        table.add_row(key.replace("_", " "), f"{value:,}")
    console.print(table)
