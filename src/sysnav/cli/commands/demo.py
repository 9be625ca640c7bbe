"""
Demo Command - Explore sysnav without a hosted store.

Seeds an in-memory store with a sample landscape and prints the tree and
classified interfaces for its root.
"""

from typing import Optional

import click
from rich.console import Console

from ...core.demo import DemoManager
from ...graph.visualize import write_html
from ...navigation import Navigator
from ...store import MemoryEntityStore
from ..formatting import format_classified, format_tree
from ..utils import echo_info, echo_success

console = Console()


@click.command()
@click.option("-o", "--output", default=None, help="Also write the graph to this .html file")
def demo(output: Optional[str]):
    """
    Seed an in-memory sample tree and print it.
    """
    store = MemoryEntityStore()
    root_id = DemoManager(store).provision()

    navigator = Navigator(store, root_id)
    view = navigator.load()

    console.print(format_tree(view.root, view.descendants))
    console.print()
    for table in format_classified(view.interfaces):
        console.print(table)

    stats = view.graph.get_stats()
    echo_success(
        f"Demo graph: {stats['total_nodes']} systems, {stats['total_edges']} edges"
    )

    if output:
        path = write_html(view.graph, output, title=f"sysnav demo: {view.root.name}")
        echo_success(f"Generated: {path}")

    echo_info("Every command accepts the same data with SYSNAV_BACKEND=memory, e.g.")
    echo_info("SYSNAV_BACKEND=memory sysnav interfaces --available")
