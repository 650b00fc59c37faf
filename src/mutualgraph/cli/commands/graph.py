"""
Graph Command - Generate interactive visualization.

Creates an HTML file with an interactive graph using vis-network.
"""

import sys
from pathlib import Path

import click

from ...graph.visualize import open_visualization, write_visualization
from ..utils import configure_logging, echo_info, echo_success, load_session, session_options


@click.command()
@session_options
@click.option("-o", "--output", default="graph.html", help="Output HTML file")
@click.option("--title", default="Mutuals Graph", help="Page title")
@click.option("--hide-names", is_flag=True, help="Hide node labels")
@click.option("--avatars", is_flag=True, help="Draw nodes as avatars")
@click.option("--open", "open_browser", is_flag=True, help="Open the page in a browser")
def graph(files, hide_leaves, config_path, verbose, output, title, hide_names, avatars, open_browser):
    """
    Generate an interactive HTML visualization of the merged graph.
    """
    configure_logging(verbose)
    session = load_session(files, hide_leaves, config_path)
    if session is None:
        sys.exit(1)

    options = dict(title=title, settings=session.settings, hide_names=hide_names, avatars=avatars)
    if open_browser:
        path = Path(open_visualization(session.graph, output, **options))
    else:
        path = write_visualization(session.graph, output, **options)

    echo_success(f"Generated: {path}")
    echo_info(f"Open: file://{path.absolute()}")
