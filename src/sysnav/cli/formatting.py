"""
Rich renderables for CLI output.

Kept separate from the commands so the same tree, table and diff layouts
are shared between `tree`, `interfaces`, `demo` and `history`.
"""

from typing import Iterable, List

from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from ..analysis.classifier import ClassifiedInterfaces
from ..analysis.descendants import DescendantSet
from ..analysis.revision_diff import RenderableDiff, render_value
from ..core.types import EnrichedInterface, InterfaceGroup, Revision, System

GROUP_TITLES = {
    InterfaceGroup.DIRECT: "Direct interfaces",
    InterfaceGroup.CHILDREN: "Children interfaces",
    InterfaceGroup.GRANDCHILDREN: "Grandchildren interfaces",
}

OPERATION_STYLES = {"create": "green", "update": "yellow", "delete": "red"}


def _label(system: System) -> str:
    if system.category:
        return f"[bold]{system.name}[/bold] [dim]({system.category})[/dim]"
    return f"[bold]{system.name}[/bold]"


def format_tree(root: System, descendants: DescendantSet) -> Tree:
    """Root, its children and each child's children as a rich Tree."""
    tree = Tree(f"🏠 {_label(root)}", guide_style="green")
    for child in descendants.children:
        branch = tree.add(f"[blue]{_label(child)}[/blue]")
        for grandchild in descendants.grandchildren:
            if grandchild.parent_id == child.id:
                branch.add(f"[magenta]{_label(grandchild)}[/magenta]")
    return tree


def _direction(interface: EnrichedInterface) -> str:
    return "→" if interface.is_directional else "↔"


def format_interface_table(title: str, interfaces: Iterable[EnrichedInterface]) -> Table:
    table = Table(title=title, title_justify="left", show_lines=False)
    table.add_column("System 1", style="cyan")
    table.add_column("", justify="center")
    table.add_column("System 2", style="cyan")
    table.add_column("Connection")
    table.add_column("ID", style="dim")

    for interface in interfaces:
        table.add_row(
            interface.endpoint_name(1),
            _direction(interface),
            interface.endpoint_name(2),
            interface.connection,
            interface.id,
        )
    return table


def format_classified(classified: ClassifiedInterfaces) -> List[Table]:
    tables = []
    for group in InterfaceGroup:
        members = classified.group(group)
        tables.append(format_interface_table(f"{GROUP_TITLES[group]} ({len(members)})", members))
    return tables


def format_systems_table(title: str, systems: Iterable[System]) -> Table:
    table = Table(title=title, title_justify="left")
    table.add_column("Name", style="bold")
    table.add_column("Category")
    table.add_column("Depth", justify="right")
    table.add_column("ID", style="dim")

    for system in systems:
        depth = "-" if system.depth is None else str(system.depth)
        table.add_row(system.name, system.category, depth, system.id)
    return table


def format_revision(revision: Revision, diff: RenderableDiff) -> Panel:
    """One revision as a panel: '+' lines green, '-' lines red."""
    body = Text()
    if diff.additions is not None or diff.removals is not None:
        style = "green" if diff.additions is not None else "red"
        for line in diff.to_lines():
            body.append(line + "\n", style=style)
    elif diff.changes:
        for change in diff.changes:
            body.append(f"{change.key}: ", style="bold")
            if not change.was_added:
                body.append(f"- {render_value(change.old_value)} ", style="red")
            if not change.was_removed:
                body.append(f"+ {render_value(change.new_value)}", style="green")
            body.append("\n")
    else:
        body.append("(no renderable changes)", style="dim")

    color = OPERATION_STYLES.get(revision.operation, "white")
    title = (
        f"[{color}]{revision.operation.upper()}[/{color}] "
        f"by {revision.created_by} at {revision.created_at:%Y-%m-%d %H:%M:%S}"
    )
    return Panel(body, title=title, title_align="left", subtitle=revision.id, subtitle_align="right")
