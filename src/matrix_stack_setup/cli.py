"""Matrix Stack Setup CLI - Generate a self-hosted Synapse + Element Call stack."""

import click
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
import questionary

from . import __version__
from .requirements import check_requirements
from .settings import SettingsError, load_settings
from .setup import find_existing_state, generate_configuration

console = Console()

custom_style = questionary.Style([
    ('qmark', 'fg:cyan bold'),
    ('question', 'bold'),
    ('answer', 'fg:cyan bold'),
    ('pointer', 'fg:cyan bold'),
    ('highlighted', 'fg:cyan bold'),
    ('selected', 'fg:cyan'),
])


def confirm(message: str) -> bool:
    """Ask a yes/no question, defaulting to No."""
    answer = questionary.confirm(message, default=False, style=custom_style).ask()
    return bool(answer)


def abort():
    console.print("[red]Aborting setup.[/red]")
    sys.exit(1)


def configure_logging():
    logging.basicConfig(
        level=logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False, show_path=False)],
    )


@click.command()
@click.version_option(version=__version__, prog_name="matrix-stack-setup")
def main():
    """Generate configuration for a Synapse, Element and LiveKit stack.

    Settings are read from .env in the current directory:
    DOMAIN_NAME, FEDERATION_DOMAIN_WHITELIST and MAX_UPLOAD_SIZE.
    """
    configure_logging()
    base_dir = Path.cwd()

    try:
        settings = load_settings(base_dir)
    except SettingsError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)

    # Requirements
    console.print("\n[bold]Checking system requirements[/bold]\n")
    warnings = check_requirements(settings.domain)
    for warning in warnings:
        console.print(f"[yellow]WARNING:[/yellow] {escape(warning)}")

    if warnings:
        console.print(
            "[yellow]WARNING:[/yellow] Some requirements are missing. "
            "Please ensure all dependencies are met for correct operation."
        )
        if not confirm("Do you want to proceed anyway?"):
            abort()
    else:
        console.print("[green]✓[/green] All requirements met")

    console.print()
    console.print(Panel(
        "[bold cyan]Synapse Server Auto-Configuration[/bold cyan]\n\n"
        "Full rebuild of the stack configuration.",
        border_style="cyan"
    ))

    # Overwrite guard, must run before anything is written
    if find_existing_state(base_dir):
        console.print("[yellow]WARNING:[/yellow] Configuration or data already exists in this directory.")
        console.print(
            "Running this command will [bold]REGENERATE ALL SECRETS[/bold] "
            "and might break your existing server."
        )
        if not confirm("Are you sure you want to proceed?"):
            abort()

    generate_configuration(
        base_dir,
        settings,
        callback=lambda msg: console.print(f"[cyan]→[/cyan] {msg}"),
    )
    console.print("[green]✓[/green] Configuration files written")

    console.print()
    console.print(Panel(
        f"[bold green]✓ Configuration REBUILT for {settings.domain}[/bold green]\n\n"
        "Launch with: [bold]docker-compose up -d[/bold]",
        border_style="green"
    ))


if __name__ == "__main__":
    main()
