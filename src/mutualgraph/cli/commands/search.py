"""
Search Command - Run the search highlight headlessly.

Prints which nodes a query highlights (matches) and which it keeps visible
as neighbors, exactly as the interactive search would.
"""

import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ...core.types import SelectionMode
from ..utils import configure_logging, echo_warning, load_session, session_options

console = Console()


@click.command()
@session_options
@click.option("-q", "--query", required=True, help="Substring to look for in usernames")
def search(files, hide_leaves, config_path, verbose, query: str):
    """
    Search usernames and show the highlighted neighborhood.
    """
    configure_logging(verbose)
    session = load_session(files, hide_leaves, config_path)
    if session is None:
        sys.exit(1)

    state = session.search(query)
    graph = session.graph

    if state.mode == SelectionMode.IDLE:
        echo_warning("Empty query, nothing highlighted")
        return

    if state.mode == SelectionMode.SELECTED:
        focus_ids = {state.selected_id}
    else:
        focus_ids = state.matched_ids

    if not focus_ids:
        echo_warning(f"No usernames match '{state.query}'")
        return

    table = Table(title=f"Search: {escape(state.query)}")
    table.add_column("Role")
    table.add_column("Id", style="cyan")
    table.add_column("Username")
    table.add_column("Mutuals", justify="right")

    for node in graph.nodes:
        if node.id in focus_ids:
            table.add_row("[bold yellow]match[/bold yellow]", node.id, escape(node.label), str(node.degree))
    for node in graph.nodes:
        if node.id in state.neighbor_ids and node.id not in focus_ids:
            table.add_row("[dim]neighbor[/dim]", node.id, escape(node.label), str(node.degree))

    console.print(table)
    console.print(
        f"{len(focus_ids)} match(es), {len(state.neighbor_ids - focus_ids)} neighbor(s), "
        f"{len(session.selection.visible_edge_keys())} visible edge(s)"
    )
