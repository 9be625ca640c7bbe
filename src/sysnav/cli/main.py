"""
sysnav CLI - Main entry point.

This module registers all CLI commands. Each command is implemented
in its own module under cli/commands/.
"""

from pathlib import Path
from typing import Optional

import click

from .commands import demo, graph, history, init, interfaces, systems, tree
from .utils import CliContext, configure_logging


@click.group()
@click.version_option(package_name="sysnav")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: .sysnav/config.yaml)",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config_path: Optional[Path], verbose: bool):
    """sysnav: Systems and Interfaces Navigator.

    Browse a hierarchy of systems two levels at a time, see which
    interfaces connect them, and audit every change.

    \b
    Quick Start:
      sysnav demo
      sysnav tree
      sysnav interfaces --available
      sysnav graph -o systems.html
    """
    configure_logging(verbose)
    cli_ctx = ctx.ensure_object(CliContext)
    if config_path is not None:
        cli_ctx.config_path = config_path


# Register commands
main.add_command(init)
main.add_command(demo.demo)
main.add_command(tree.tree)
main.add_command(interfaces.interfaces)
main.add_command(interfaces.interface)
main.add_command(graph.graph)
main.add_command(history.history)
main.add_command(history.restore)
main.add_command(systems.system)

if __name__ == "__main__":
    main()
