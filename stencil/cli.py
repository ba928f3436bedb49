"""
Stencil CLI - Command-line interface for creating projects from templates

Usage:
    stencil create <app-name> [-t <template>] [-f] [-i]
    stencil list
    stencil -v
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.align import Align
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from typer.core import TyperGroup

from stencil import __version__
from stencil.config import Settings, configure_logging, load_settings
from stencil.errors import StencilError
from stencil.fetcher import RepositoryFetcher
from stencil.filesystem import FilesystemHelper
from stencil.installer import PackageInstaller
from stencil.orchestrator import InitOrchestrator, InitResult, ProjectRequest
from stencil.prompts import PromptAdapter
from stencil.registry import TemplateRegistry
from stencil.symbols import symbols

BANNER = r"""
     _                  _ _
 ___| |_ ___ _ __   ___(_) |
/ __| __/ _ \ '_ \ / __| | |
\__ \ ||  __/ | | | (__| | |
|___/\__\___|_| |_|\___|_|_|
"""

console = Console()


def show_banner() -> None:
    console.print(Align.center(Text(BANNER.strip("\n"), style="bold bright_green")))
    console.print()


class BannerGroup(TyperGroup):
    """Prints the banner and a per-command hint around the help text."""

    def format_help(self, ctx, formatter):
        show_banner()
        super().format_help(ctx, formatter)
        console.print(
            "\n Run [cyan]stencil <command> --help[/cyan] for detailed usage of given command.\n"
        )


app = typer.Typer(
    name="stencil",
    help="Create a new project from a template repository",
    add_completion=False,
    cls=BannerGroup,
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"stencil {__version__}")
        raise typer.Exit()


@app.callback()
def callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version", "-v",
        help="Display the version number",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logging"),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        help="Path to a stencil config.yaml",
        exists=True,
        dir_okay=False,
        resolve_path=True,
    ),
) -> None:
    configure_logging(logging.DEBUG if verbose else logging.WARNING)
    ctx.obj = {"config": config}


# ═══════════════════════════════════════════════════════════════════════════
# WIRING
# ═══════════════════════════════════════════════════════════════════════════


def _report(error: StencilError) -> None:
    console.print(symbols.error, f"[bright_red]{escape(error.message)}[/bright_red]")
    if error.hint:
        console.print(f"\n {error.hint}\n")


def _load(ctx: typer.Context) -> tuple[Settings, TemplateRegistry]:
    config_path = (ctx.obj or {}).get("config")
    try:
        settings = load_settings(config_path)
        if settings.registry_file is not None:
            registry = TemplateRegistry.from_file(settings.registry_file)
        else:
            registry = TemplateRegistry.load_default()
    except StencilError as e:
        _report(e)
        raise typer.Exit(1)
    return settings, registry


def build_orchestrator(settings: Settings, registry: TemplateRegistry) -> InitOrchestrator:
    """Assemble the create workflow for the current working directory."""
    return InitOrchestrator(
        registry=registry,
        fs=FilesystemHelper.from_cwd(),
        prompter=PromptAdapter(console=console),
        fetcher=RepositoryFetcher(
            git=settings.git_executable,
            depth=settings.clone_depth,
            console=console,
        ),
        installer=PackageInstaller(settings.install_command, console=console),
        console=console,
        git=settings.git_executable,
    )


# ═══════════════════════════════════════════════════════════════════════════
# COMMANDS
# ═══════════════════════════════════════════════════════════════════════════


@app.command()
def create(
    ctx: typer.Context,
    app_name: str = typer.Argument(..., metavar="APP-NAME", help="Project folder and package name"),
    template: Optional[str] = typer.Option(
        None,
        "--template", "-t",
        help="Create the project from this template",
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing folder with the same name"),
    ignore: bool = typer.Option(False, "--ignore", "-i", help="Skip the package.json questions"),
) -> None:
    """Create a new project."""
    settings, registry = _load(ctx)
    request = ProjectRequest(name=app_name, template=template, force=force, ignore=ignore)

    try:
        result = build_orchestrator(settings, registry).run(request)
    except StencilError as e:
        _report(e)
        if e.fatal:
            raise typer.Exit(1)
        return

    _show_next_steps(result, settings)


@app.command("list")
def list_templates(ctx: typer.Context) -> None:
    """Show all available templates."""
    _, registry = _load(ctx)

    table = Table(title=f"{symbols.star} [bright_yellow]All available templates[/bright_yellow]")
    table.add_column("Name", style="bright_green", no_wrap=True)
    table.add_column("Repository", style="bright_blue", no_wrap=True)
    table.add_column("Description", style="bright_blue")

    for item in registry.list_all():
        table.add_row(item.name, item.value, item.desc)

    console.print(table)


@app.command()
def version() -> None:
    """Print the installed stencil version."""
    console.print(f"stencil {__version__}")


def _show_next_steps(result: InitResult, settings: Settings) -> None:
    """Tell the user how to start the freshly created project."""
    steps = f"""
[bold]Next:[/bold]
  cd {result.project_dir.name}
  {settings.package_manager} run dev
"""
    console.print(Panel(steps, title=f"Created from {result.template.name}"))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
