"""
Interface Commands - List classified interfaces and edit them.

`sysnav interfaces [ROOT]` shows every interface touching the root's
subtree, grouped by the highest tier it touches. The `sysnav interface`
group creates, edits and deletes interfaces through the audited RPCs.
"""

import sys
from typing import Optional

import click
from rich.console import Console
from rich.prompt import Confirm

from ...analysis.classifier import InterfaceClassifier
from ...analysis.descendants import DescendantResolver
from ...services import InterfaceService, SystemService
from ..formatting import format_classified, format_systems_table
from ..utils import (
    CliContext,
    echo_error,
    echo_json,
    open_store,
    pass_context,
    resolve_root,
    run_mutation,
)

console = Console()


@click.command()
@click.argument("root", required=False)
@click.option("--available", is_flag=True, help="Also list systems selectable as endpoints")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@pass_context
def interfaces(ctx: CliContext, root: Optional[str], available: bool, as_json: bool):
    """
    List interfaces of ROOT's subtree as direct / children / grandchildren.
    """
    store = open_store(ctx)
    root_id = resolve_root(ctx, root)

    descendants = DescendantResolver(store).resolve(root_id)
    classifier = InterfaceClassifier(store)
    fetched = classifier.fetch(root_id, descendants)
    classified = classifier.classify(root_id, descendants, fetched)

    selectable = []
    if available:
        fetched_root = SystemService(store).get(root_id)
        selectable = classifier.available_systems(
            root_id, descendants, fetched, root=fetched_root.at_depth(0) if fetched_root else None
        )

    if as_json:
        data = {
            "root_id": root_id,
            "counts": classified.counts(),
            "direct": classified.direct,
            "children": classified.children,
            "grandchildren": classified.grandchildren,
        }
        if available:
            data["available_systems"] = selectable
        echo_json("interfaces", data)
        return

    for table in format_classified(classified):
        console.print(table)

    if available:
        console.print(format_systems_table(f"Available systems ({len(selectable)})", selectable))


@click.group()
def interface():
    """Create, edit and delete interfaces."""


@interface.command("add")
@click.argument("system1_id")
@click.argument("system2_id")
@click.argument("connection")
@click.option("--directional", is_flag=True, help="Connection flows from SYSTEM1 to SYSTEM2")
@pass_context
def add_interface(ctx: CliContext, system1_id: str, system2_id: str, connection: str, directional: bool):
    """Connect SYSTEM1_ID and SYSTEM2_ID with CONNECTION."""
    service = InterfaceService(open_store(ctx))
    run_mutation(
        lambda: service.create(system1_id, system2_id, connection, int(directional)),
        "Created interface {result}",
    )


@interface.command("edit")
@click.argument("interface_id")
@click.option("--system1", "system1_id", default=None, help="New first endpoint")
@click.option("--system2", "system2_id", default=None, help="New second endpoint")
@click.option("--connection", default=None, help="New connection description")
@click.option("--directional/--bidirectional", default=None, help="Change the direction flag")
@pass_context
def edit_interface(
    ctx: CliContext,
    interface_id: str,
    system1_id: Optional[str],
    system2_id: Optional[str],
    connection: Optional[str],
    directional: Optional[bool],
):
    """Update INTERFACE_ID; unspecified fields keep their current value."""
    service = InterfaceService(open_store(ctx))
    current = service.get(interface_id)
    if current is None:
        echo_error(f"Interface not found: {interface_id}")
        sys.exit(1)

    run_mutation(
        lambda: service.update(
            interface_id,
            system1_id or current.system1_id,
            system2_id or current.system2_id,
            connection if connection is not None else current.connection,
            current.directional if directional is None else int(directional),
        ),
        f"Updated interface {interface_id}",
    )


@interface.command("rm")
@click.argument("interface_id")
@click.option("-y", "--yes", is_flag=True, help="Do not ask for confirmation")
@pass_context
def remove_interface(ctx: CliContext, interface_id: str, yes: bool):
    """Delete INTERFACE_ID (recorded in its revision history)."""
    if not yes and not Confirm.ask(f"Delete interface {interface_id}?"):
        click.echo("Aborted.")
        return

    service = InterfaceService(open_store(ctx))
    run_mutation(lambda: service.delete(interface_id), f"Deleted interface {interface_id}")
