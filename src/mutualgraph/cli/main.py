"""
mutualgraph CLI - Main entry point.

This module registers all CLI commands. Each command is implemented
in its own module under cli/commands/.
"""

import click

from .commands import graph, inspect, merge, search, stats


@click.group()
@click.version_option(package_name="mutualgraph")
def main():
    """mutualgraph: merge friend exports into one mutuals graph.

    \b
    Quick Start:
      mutualgraph merge me.json friend.json -o merged.json
      mutualgraph graph me.json friend.json -o graph.html --open
      mutualgraph search me.json friend.json -q alice
    """
    pass


# Register commands
main.add_command(merge.merge)
main.add_command(graph.graph)
main.add_command(search.search)
main.add_command(inspect.inspect)
main.add_command(stats.stats)

if __name__ == "__main__":
    main()
