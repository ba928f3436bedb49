"""
Stencil Orchestrator - The `create` workflow

Stages run strictly in order with no retries:

    VALIDATE_ENV -> VALIDATE_NAME -> RESOLVE_TEMPLATE -> RESOLVE_DESTINATION
        -> FETCH_TEMPLATE -> CONFIGURE -> INSTALL -> DONE

Validation stages raise recoverable errors before the disk is touched.
After the destination is removed or fetched, failures are fatal and no
rollback is attempted.
"""

from __future__ import annotations

import logging
import re
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from stencil.errors import (
    DestinationExists,
    EnvironmentMissing,
    InteractionUnavailable,
    InvalidName,
    ManifestEditError,
    UnknownTemplate,
)
from stencil.fetcher import RepositoryFetcher
from stencil.filesystem import FilesystemHelper
from stencil.installer import PackageInstaller
from stencil.prompts import PromptAdapter
from stencil.registry import TemplateDescriptor, TemplateRegistry
from stencil.symbols import symbols

logger = logging.getLogger("stencil")

# CJK unified ideographs plus characters that break shells or paths
ILLEGAL_NAME = re.compile(r"[\u4e00-\u9fff`~!@#$%&^*()\[\]\\;:.<>?]")


class Stage(str, Enum):
    START = "start"
    VALIDATE_ENV = "validate_env"
    VALIDATE_NAME = "validate_name"
    RESOLVE_TEMPLATE = "resolve_template"
    RESOLVE_DESTINATION = "resolve_destination"
    FETCH_TEMPLATE = "fetch_template"
    CONFIGURE = "configure"
    INSTALL = "install"
    DONE = "done"


@dataclass(frozen=True)
class ProjectRequest:
    """What the user asked `create` to do."""

    name: str
    template: str | None = None
    force: bool = False
    ignore: bool = False


@dataclass
class InitResult:
    """Outcome of a completed run."""

    project_dir: Path
    template: TemplateDescriptor
    configured: bool = False
    manifest_error: str | None = None


def validate_name(name: str) -> None:
    if not name or not name.strip():
        raise InvalidName("Project name must not be empty")
    match = ILLEGAL_NAME.search(name)
    if match:
        raise InvalidName(f"Project name '{name}' contains an illegal character: '{match.group()}'")


class InitOrchestrator:
    """
    Creates one project from a template.

    Collaborators are injected so each stage can be exercised on its own.
    """

    def __init__(
        self,
        registry: TemplateRegistry,
        fs: FilesystemHelper,
        prompter: PromptAdapter,
        fetcher: RepositoryFetcher,
        installer: PackageInstaller,
        console: Console | None = None,
        git: str = "git",
    ):
        self.registry = registry
        self.fs = fs
        self.prompter = prompter
        self.fetcher = fetcher
        self.installer = installer
        self.console = console or Console()
        self.git = git
        self.stage = Stage.START

    def _enter(self, stage: Stage) -> None:
        logger.debug("Stage: %s", stage.value)
        self.stage = stage

    def run(self, request: ProjectRequest) -> InitResult:
        """
        Execute every stage for one request.

        Raises:
            StencilError subclasses. Check ``error.fatal`` to decide the exit code.
        """
        self._enter(Stage.VALIDATE_ENV)
        self.check_environment()

        self._enter(Stage.VALIDATE_NAME)
        validate_name(request.name)

        self._enter(Stage.RESOLVE_TEMPLATE)
        template = self.resolve_template(request)

        self._enter(Stage.RESOLVE_DESTINATION)
        self.resolve_destination(request)

        self._enter(Stage.FETCH_TEMPLATE)
        project_dir = self.fs.resolve(request.name)
        self.fetcher.fetch(template.value, project_dir)

        result = InitResult(project_dir=project_dir, template=template)

        if request.ignore:
            logger.debug("Skipping package.json configuration (--ignore)")
        else:
            self._enter(Stage.CONFIGURE)
            self.configure(request, result)

        self._enter(Stage.INSTALL)
        self.installer.install(project_dir)

        self._enter(Stage.DONE)
        self.console.print(symbols.success, "[bright_green]Project created[/bright_green]")
        return result

    # ═══════════════════════════════════════════════════════════════════════
    # STAGES
    # ═══════════════════════════════════════════════════════════════════════

    def check_environment(self) -> None:
        if shutil.which(self.git) is None:
            raise EnvironmentMissing(
                f"'{self.git}' was not found on PATH",
                hint="Install git and try again.",
            )

    def resolve_template(self, request: ProjectRequest) -> TemplateDescriptor:
        if request.template:
            template = self.registry.lookup(request.template)
            if template is None:
                raise UnknownTemplate(
                    f"Template '{request.template}' does not exist",
                    hint=f"Run {symbols.arrow} [bright_cyan]stencil list[/bright_cyan] to see all available templates.",
                )
            return template
        return self.prompter.choose_one("Choose a project template", self.registry.list_all())

    def resolve_destination(self, request: ProjectRequest) -> None:
        if not self.fs.exists(request.name):
            return

        self.console.print(symbols.warning, f"Project folder [bright_yellow]{request.name}[/bright_yellow] already exists")

        if not request.force:
            if not self.prompter.confirm(f"Delete folder {request.name}?"):
                raise DestinationExists(
                    f"Cannot create project, folder '{request.name}' already exists"
                )

        with self.console.status(f"Removing folder {request.name}..."):
            self.fs.remove_directory(request.name)
        self.console.print(symbols.success, f"[bright_green]Removed folder {request.name}[/bright_green]")

    def configure(self, request: ProjectRequest, result: InitResult) -> None:
        """Ask the manifest questions and patch package.json. Never fatal."""
        try:
            answers = self.prompter.input_many(self.registry.questions)
            manifest = self.fs.read_manifest(request.name)
            self.fs.apply_patch(manifest, answers, request.name)
            self.fs.write_manifest(request.name, manifest)
        except (InteractionUnavailable, ManifestEditError) as e:
            logger.debug("Manifest edit failed", exc_info=True)
            self.console.print(
                symbols.error,
                "[red]Could not update package.json, please edit it manually.[/red]",
            )
            self.console.print(f"  {escape(e.message)}")
            result.manifest_error = e.message
            return
        result.configured = True
