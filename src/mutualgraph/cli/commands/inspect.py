"""
Inspect Command - Show one person and their mutuals per source.
"""

import sys

import click
from rich.console import Console
from rich.markup import escape

from ...core.exceptions import NodeNotFoundError
from ..utils import configure_logging, echo_error, load_session, session_options

console = Console()


@click.command()
@session_options
@click.option("--id", "node_id", required=True, help="Identity to inspect")
def inspect(files, hide_leaves, config_path, verbose, node_id: str):
    """
    Show a node's degree and its mutuals grouped by source.
    """
    configure_logging(verbose)
    session = load_session(files, hide_leaves, config_path)
    if session is None:
        sys.exit(1)

    try:
        node = session.get_node(node_id)
        blocks = session.describe(node_id)
    except NodeNotFoundError as e:
        echo_error(str(e))
        sys.exit(1)

    console.print(f"[bold]{escape(node.label)}[/bold] [dim]({node.id})[/dim]")
    console.print(f"Mutuals: {node.degree}")

    if not blocks:
        console.print("[dim]No mutuals for this user in the loaded sources.[/dim]")
        return

    for block in blocks:
        suffix = "" if block.count == 1 else "s"
        console.print(f"\n[bold cyan]{escape(block.label)}[/bold cyan] - {block.count} mutual{suffix}")
        for name in block.names:
            console.print(f"  {escape(name)}", highlight=False)
        if block.count > len(block.names):
            console.print(f"  [dim]... and {block.count - len(block.names)} more[/dim]")
