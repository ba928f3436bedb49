"""
Stencil Installer - Run the package manager inside the new project
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console

from stencil.errors import InstallError
from stencil.symbols import symbols

logger = logging.getLogger("stencil")


class PackageInstaller:
    """
    Runs e.g. `npm install --force` with the terminal attached, so the
    package manager's own progress output stays visible.
    """

    def __init__(
        self,
        command: Sequence[str] = ("npm", "install", "--force"),
        console: Console | None = None,
    ):
        self.command = list(command)
        self.console = console or Console()

    def install(self, project_dir: Path) -> None:
        logger.debug("Running %s in %s", " ".join(self.command), project_dir)
        self.console.print(symbols.info, f"Installing dependencies with [cyan]{self.command[0]}[/cyan]...")

        try:
            result = subprocess.run(self.command, cwd=project_dir)
        except OSError as e:
            raise InstallError(
                f"Could not run {self.command[0]}: {e}",
                hint=f"Install the dependencies manually in {project_dir}.",
            ) from e

        if result.returncode != 0:
            raise InstallError(
                f"Dependency installation failed (exit code {result.returncode})",
                hint=f"Install the dependencies manually in {project_dir}.",
            )

        self.console.print(symbols.success, "[bright_green]Dependencies installed[/bright_green]")
