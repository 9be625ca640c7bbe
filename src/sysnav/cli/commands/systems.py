"""
System Commands - Show, create, edit and delete systems.
"""

import sys
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm

from ...services import SystemService
from ..formatting import format_systems_table
from ..utils import CliContext, echo_error, echo_json, open_store, pass_context, run_mutation

console = Console()


@click.group()
def system():
    """Show, create, edit and delete systems."""


@system.command("show")
@click.argument("system_id")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@pass_context
def show_system(ctx: CliContext, system_id: str, as_json: bool):
    """Details, parent and subsystems of SYSTEM_ID."""
    service = SystemService(open_store(ctx))
    current = service.get(system_id)
    if current is None:
        echo_error(f"System not found: {system_id}")
        sys.exit(1)

    parent = service.get_parent(current)
    children = service.list_children(system_id)

    if as_json:
        echo_json("system", {"system": current, "parent": parent, "subsystems": children})
        return

    details = [
        f"[bold]Category:[/bold] {current.category or '-'}",
        f"[bold]Parent:[/bold] {parent.name if parent else '-'}",
        f"[bold]Created:[/bold] {current.created_at or '-'}",
        f"[bold]Updated:[/bold] {current.updated_at or '-'}",
    ]
    console.print(Panel("\n".join(details), title=current.name, subtitle=current.id, title_align="left"))
    console.print(format_systems_table(f"Subsystems ({len(children)})", children))


@system.command("add")
@click.argument("name")
@click.argument("category")
@click.option("--parent", "parent_id", default=None, help="Parent system id")
@pass_context
def add_system(ctx: CliContext, name: str, category: str, parent_id: Optional[str]):
    """Create a system called NAME in CATEGORY."""
    service = SystemService(open_store(ctx))
    run_mutation(lambda: service.create(name, category, parent_id), "Created system {result}")


@system.command("edit")
@click.argument("system_id")
@click.option("--name", default=None, help="New name")
@click.option("--category", default=None, help="New category")
@pass_context
def edit_system(ctx: CliContext, system_id: str, name: Optional[str], category: Optional[str]):
    """Rename or recategorize SYSTEM_ID."""
    service = SystemService(open_store(ctx))
    current = service.get(system_id)
    if current is None:
        echo_error(f"System not found: {system_id}")
        sys.exit(1)

    run_mutation(
        lambda: service.update(
            system_id,
            name if name is not None else current.name,
            category if category is not None else current.category,
        ),
        f"Updated system {system_id}",
    )


@system.command("rm")
@click.argument("system_id")
@click.option("-y", "--yes", is_flag=True, help="Do not ask for confirmation")
@pass_context
def remove_system(ctx: CliContext, system_id: str, yes: bool):
    """Delete SYSTEM_ID together with its interfaces."""
    if not yes and not Confirm.ask(f"Delete system {system_id} and its interfaces?"):
        click.echo("Aborted.")
        return

    service = SystemService(open_store(ctx))
    run_mutation(lambda: service.delete(system_id), f"Deleted system {system_id}")
