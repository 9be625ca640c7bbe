"""
CLI Utilities - Shared helper functions for command line operations.

Formatted printing, the JSON output envelope and the per-invocation
context that lazily opens the configured store.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Optional

import click
from rich.logging import RichHandler

from ..config import Settings, load_settings
from ..core.demo import DemoManager
from ..core.exceptions import MutationError, SysnavError, ValidationError
from ..store import EntityStore, MemoryEntityStore, create_store

logger = logging.getLogger(__name__)


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
    click.echo(click.style(f"⚠️  {message}", fg="yellow"))


def echo_info(message: str) -> None:
    click.echo(click.style(f"   {message}", dim=True))


def configure_logging(verbose: bool) -> None:
    """Route library logging through rich; DEBUG when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=verbose)],
        force=True,
    )


def _json_default(obj: Any) -> Any:
    if hasattr(obj, "model_dump"):
        return obj.model_dump(mode="json")
    if hasattr(obj, "isoformat"):
        return obj.isoformat()
    raise TypeError(f"Type {type(obj)} not serializable")


def echo_json(command: str, data: Any) -> None:
    """Print a success envelope for --json consumers."""
    click.echo(json.dumps(
        {"meta": {"status": "success", "command": command}, "data": data},
        default=_json_default,
        indent=2,
    ))


def echo_json_error(command: str, error: Exception) -> None:
    click.echo(json.dumps({
        "meta": {"status": "error", "command": command},
        "error": {"type": type(error).__name__, "message": str(error)},
    }, indent=2))


class CliContext:
    """
    Per-invocation state shared by all commands.

    Settings and the store are only loaded when a command needs them, so
    `sysnav init` works without a valid configuration. Tests inject a
    ready store through `CliRunner.invoke(main, ..., obj=CliContext(store=...))`.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        store: Optional[EntityStore] = None,
        config_path: Optional[Path] = None,
    ):
        self.config_path = config_path
        self._settings = settings
        self._store = store

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = load_settings(self.config_path)
        return self._settings

    @property
    def store(self) -> EntityStore:
        if self._store is None:
            store = create_store(self.settings)
            if isinstance(store, MemoryEntityStore):
                # Nothing persists between runs, so give commands something to show
                DemoManager(store).provision()
            self._store = store
        return self._store


pass_context = click.make_pass_decorator(CliContext, ensure=True)


def open_store(ctx: CliContext) -> EntityStore:
    """Return the configured store or exit with a readable error."""
    try:
        return ctx.store
    except SysnavError as e:
        echo_error(str(e))
        sys.exit(1)


def resolve_root(ctx: CliContext, root: Optional[str]) -> str:
    return root or ctx.settings.root_id


def run_mutation(action: Callable[[], Any], success_message: str) -> Any:
    """
    Run a service mutation, exiting non-zero with a readable error on failure.

    success_message may reference the mutation's return value as {result}.
    """
    try:
        result = action()
    except (MutationError, ValidationError) as e:
        echo_error(str(e))
        sys.exit(1)
    echo_success(success_message.format(result=result))
    return result
