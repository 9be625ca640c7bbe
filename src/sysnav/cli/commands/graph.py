"""
Graph Command - Generate interactive visualization.

Builds the layered graph of a root, its children and grandchildren and
writes it as an HTML file using vis.js, as a JSON file, or prints the
JSON envelope to stdout for editor integrations.
"""

import json
import sys
from pathlib import Path
from typing import Optional

import click

from ...graph.visualize import write_html
from ...navigation import Navigator
from ..utils import (
    CliContext,
    echo_error,
    echo_info,
    echo_json,
    echo_success,
    open_store,
    pass_context,
    resolve_root,
)


@click.command()
@click.argument("root", required=False)
@click.option("-o", "--output", default="systems.html", help="Output file (.html or .json)")
@click.option("--json", "json_mode", is_flag=True, help="Output graph data as JSON to stdout")
@click.option("--open", "open_browser", is_flag=True, help="Open the HTML file in a browser")
@pass_context
def graph(ctx: CliContext, root: Optional[str], output: str, json_mode: bool, open_browser: bool):
    """
    Generate an interactive visualization of ROOT's subtree.
    """
    store = open_store(ctx)
    root_id = resolve_root(ctx, root)
    root_name = ctx.settings.root_name if root_id == ctx.settings.root_id else root_id

    view = Navigator(store, root_id, root_name).load()
    system_graph = view.graph

    if json_mode:
        echo_json("graph", system_graph.to_dict())
        return

    output_path = Path(output)

    if output_path.suffix == ".html":
        write_html(system_graph, str(output_path), title=view.root.name, open_browser=open_browser)
        echo_success(f"Generated: {output_path}")
        echo_info(f"Open: file://{output_path.absolute()}")

    elif output_path.suffix == ".json":
        output_path.write_text(json.dumps(system_graph.to_dict(), indent=2, default=str))
        echo_success(f"Generated: {output_path}")

    else:
        echo_error(f"Unsupported format: {output_path.suffix}")
        click.echo("Supported: .html, .json")
        sys.exit(1)

    stats = system_graph.get_stats()
    echo_info(f"{stats['total_nodes']} systems, {stats['total_edges']} edges")
