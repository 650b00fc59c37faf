"""
CLI Utilities - Shared helper functions for command line operations.

Formatted printing, the options every command shares, and the logic that
turns a list of export files into a loaded Session.
"""

import asyncio
import functools
import logging
from pathlib import Path
from typing import Callable, Optional, Sequence

import click
from rich.console import Console
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn

from ..config import load_settings
from ..core.types import BuildPhase, BuildProgress
from ..parsing.source import read_files
from ..session import Session

console = Console()

_PHASE_LABELS = {
    BuildPhase.NODES: "Building nodes",
    BuildPhase.EDGES: "Linking edges",
}


def echo_success(message: str) -> None:
    """
    Print a success message with a green checkmark.

    Args:
        message (str): The message to display.
    """
    click.echo(click.style(f"✅ {message}", fg="green"))


def echo_error(message: str) -> None:
    """
    Print an error message with a red cross.

    Args:
        message (str): The error message to display.
    """
    click.echo(click.style(f"❌ {message}", fg="red"), err=True)


def echo_warning(message: str) -> None:
    """Print a warning message with a yellow alert symbol."""
    click.echo(click.style(f"⚠️  {message}", fg="yellow"))


def echo_info(message: str) -> None:
    """Print an informational message, dimmed."""
    click.echo(click.style(f"   {message}", dim=True))


def configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(message)s",
            datefmt="[%X]",
        )


def session_options(func: Callable) -> Callable:
    """Arguments and options shared by every command that loads exports."""

    @click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
    @click.option(
        "--hide-leaves/--show-leaves",
        "hide_leaves",
        default=None,
        help="Hide nodes whose only connection is an origin (default: on for several files)",
    )
    @click.option("-c", "--config", "config_path", type=click.Path(), help="YAML settings file")
    @click.option("-v", "--verbose", is_flag=True, help="Show detailed output")
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        return func(*args, **kwargs)

    return wrapper


def load_session(
    files: Sequence[str],
    hide_leaves: Optional[bool] = None,
    config_path: Optional[str] = None,
    show_progress: bool = True,
) -> Optional[Session]:
    """
    Read, merge and build the given export files.

    Returns None (after printing the reason) when a file cannot be read or
    parsed.
    """
    settings = load_settings(config_path)
    session = Session(settings=settings)

    try:
        payloads = read_files(Path(f) for f in files)
    except OSError as e:
        echo_error(f"Could not read input: {e}")
        return None

    with Progress(
        TextColumn("{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
        transient=True,
        disable=not show_progress,
    ) as progress:
        tasks = {}

        def on_progress(update: BuildProgress) -> None:
            if update.phase not in tasks:
                tasks[update.phase] = progress.add_task(_PHASE_LABELS[update.phase], total=update.total)
            progress.update(tasks[update.phase], completed=update.done, total=update.total)

        result = asyncio.run(session.load(payloads, hide_leaves=hide_leaves, on_progress=on_progress))

    if result.is_err():
        error = result.unwrap_err()
        echo_error(f"Failed to load {error.filename}: {error.message}")
        return None

    return session
