"""
Merge Command - Combine exports into one re-loadable snapshot.
"""

import logging
import sys
from pathlib import Path
from typing import List

import click
from pydantic import BaseModel

from ...export import write_snapshot
from ..utils import configure_logging, echo_info, echo_success, load_session, session_options

logger = logging.getLogger(__name__)


class MergeSummary(BaseModel):
    """Structured response for the merge command."""
    sources: int
    identities: int
    nodes: int
    edges: int
    roots: List[str]
    output_path: str


@click.command()
@session_options
@click.option("-o", "--output", default="merged.json", help="Output snapshot file")
@click.option("--json", "as_json", is_flag=True, help="Print the summary as JSON")
def merge(files, hide_leaves, config_path, verbose, output: str, as_json: bool):
    """
    Merge export files into a single snapshot.

    The snapshot has the same shape as an export and can be loaded again.
    """
    configure_logging(verbose)
    session = load_session(files, hide_leaves, config_path, show_progress=not as_json)
    if session is None:
        sys.exit(1)

    loaded = session.current
    output_path = write_snapshot(loaded.canonical, Path(output))

    summary = MergeSummary(
        sources=len(loaded.sources),
        identities=len(loaded.canonical),
        nodes=loaded.graph.node_count,
        edges=loaded.graph.edge_count,
        roots=sorted(loaded.roots),
        output_path=str(output_path),
    )

    if as_json:
        click.echo(summary.model_dump_json())
        return

    echo_success(f"Merged {summary.sources} source(s) into {summary.identities} identities")
    echo_info(f"Nodes: {summary.nodes:,} | Edges: {summary.edges:,}")
    if summary.roots:
        echo_info(f"Origins: {', '.join(summary.roots)}")
    echo_info(f"Wrote {output_path}")
