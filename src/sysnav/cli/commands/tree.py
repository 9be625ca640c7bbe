"""
Tree Command - Show a system with its children and grandchildren.
"""

import click
from rich.console import Console

from ...analysis.classifier import CURRENT_SYSTEM_PLACEHOLDER
from ...analysis.descendants import DescendantResolver
from ...core.types import System
from ...services import SystemService
from ..formatting import format_tree
from ..utils import CliContext, echo_warning, open_store, pass_context, resolve_root

console = Console()


@click.command()
@click.argument("root", required=False)
@pass_context
def tree(ctx: CliContext, root: str):
    """
    Print ROOT (default: the configured root) two levels deep.
    """
    store = open_store(ctx)
    root_id = resolve_root(ctx, root)

    root_system = SystemService(store).get(root_id)
    if root_system is None:
        echo_warning(f"System {root_id} could not be loaded")
        root_system = System(id=root_id, name=CURRENT_SYSTEM_PLACEHOLDER)

    descendants = DescendantResolver(store).resolve(root_id)

    console.print(format_tree(root_system.at_depth(0), descendants))

    if descendants.is_empty():
        click.echo("No subsystems.")
