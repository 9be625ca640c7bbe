"""
History Commands - Inspect and roll back the revision log.

`sysnav history` renders each revision of one entity as a diff, newest
first. `sysnav restore` puts an entity back into the state a revision
captured, which itself becomes a new revision.
"""

import click
from rich.console import Console

from ...analysis.revision_diff import RevisionDiffRenderer
from ...core.types import EntityType
from ...services import RevisionService
from ..formatting import format_revision
from ..utils import CliContext, echo_json, open_store, pass_context, run_mutation

console = Console()


@click.command()
@click.argument("entity_type", type=click.Choice([e.value for e in EntityType]))
@click.argument("entity_id")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@pass_context
def history(ctx: CliContext, entity_type: str, entity_id: str, as_json: bool):
    """
    Show the revision history of a system or interface.
    """
    revisions = RevisionService(open_store(ctx)).history(EntityType(entity_type), entity_id)
    renderer = RevisionDiffRenderer()

    if as_json:
        echo_json("history", [
            {**revision.model_dump(mode="json"), "diff": renderer.diff(revision).to_dict()}
            for revision in revisions
        ])
        return

    if not revisions:
        click.echo(f"No revisions for {entity_type} {entity_id}.")
        return

    for revision in revisions:
        console.print(format_revision(revision, renderer.diff(revision)))


@click.command()
@click.argument("revision_id")
@pass_context
def restore(ctx: CliContext, revision_id: str):
    """
    Restore the entity recorded by REVISION_ID.
    """
    service = RevisionService(open_store(ctx))
    run_mutation(lambda: service.restore(revision_id), f"Restored revision {revision_id}")
