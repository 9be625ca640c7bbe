"""
Init Command - Onboarding Automation.

This module handles the `sysnav init` command, which writes a
`.sysnav/config.yaml` pointing at a hosted store (or the in-memory demo
backend).
"""

from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt

from ...config import DEFAULT_CONFIG_PATH, DEFAULT_ROOT_ID, Settings, write_settings

console = Console()


def create_gitignore(sysnav_dir: Path):
    """Ensure the .sysnav/ directory is ignored by git; it may hold an API key."""
    gitignore = sysnav_dir.parent / ".gitignore"
    entry = "\n# sysnav\n.sysnav/\n"

    if not gitignore.exists():
        with open(gitignore, "w") as f:
            f.write(entry)
    else:
        content = gitignore.read_text()
        if ".sysnav" not in content:
            with open(gitignore, "a") as f:
                f.write(entry)


def _prompt_settings(memory: bool) -> Settings:
    if memory:
        return Settings(backend="memory")

    console.print("\n[bold]Store connection[/bold]")
    url = Prompt.ask("Project URL (e.g. https://xyz.supabase.co)")
    api_key = Prompt.ask("Anon API key", password=True, default="")
    root_id = Prompt.ask("Root system id", default=DEFAULT_ROOT_ID)
    return Settings(backend="rest", url=url.strip() or None, api_key=api_key or None, root_id=root_id)


@click.command()
@click.option("--force", is_flag=True, help="Overwrite existing configuration")
@click.option("--memory", is_flag=True, help="Use the in-memory demo backend instead of a hosted store")
def init(force: bool, memory: bool):
    """
    Initialize sysnav in the current directory.
    """
    console.print(Panel.fit("🚀 [bold blue]sysnav Initialization[/bold blue]", border_style="blue"))

    root_dir = Path.cwd()
    config_file = root_dir / DEFAULT_CONFIG_PATH

    if config_file.exists() and not force:
        console.print(f"[yellow]Configuration already exists at {config_file}[/yellow]")
        if not Confirm.ask("Do you want to overwrite it?"):
            console.print("Aborted.")
            return

    settings = _prompt_settings(memory)
    write_settings(settings, config_file)
    create_gitignore(config_file.parent)

    console.print("\n✨ [bold green]Initialized successfully![/bold green]")
    console.print(f"   Config created at: [dim]{config_file}[/dim]")
    console.print("\n[bold green]Try:[/bold green] [bold cyan]sysnav tree[/bold cyan]")
