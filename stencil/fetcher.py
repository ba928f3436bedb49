"""
Stencil Fetcher - Clone a template repository into a fresh directory

Locators use the shorthand accepted by the JS scaffolding ecosystem:

    owner/repo                      GitHub, default branch
    github:owner/repo#dev           GitHub, branch "dev"
    gitlab:owner/repo               GitLab
    gitlab:git.example.com:o/repo   self-hosted GitLab
    bitbucket:owner/repo            Bitbucket
    direct:https://host/x.git#main  any clone URL

The clone is shallow and its .git directory is removed afterwards, so the
destination holds only the template's files.
"""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from stencil.errors import FetchError
from stencil.symbols import symbols

logger = logging.getLogger("stencil")

HOSTS = {
    "github": "github.com",
    "gitlab": "gitlab.com",
    "bitbucket": "bitbucket.org",
}

_SHORTHAND = re.compile(
    r"^(?:(?P<kind>github|gitlab|bitbucket):(?:(?P<host>[^/:#]+):)?)?"
    r"(?P<owner>[^/:#]+)/(?P<repo>[^/:#]+?)(?:\.git)?"
    r"(?:#(?P<branch>.+))?$"
)


@dataclass(frozen=True)
class RemoteSource:
    """A parsed locator."""

    url: str
    branch: str | None = None


def parse_locator(locator: str) -> RemoteSource:
    """Turn a template locator into a clone URL and optional branch."""
    locator = locator.strip()

    if locator.startswith("direct:"):
        url, _, branch = locator[len("direct:"):].partition("#")
        if not url:
            raise FetchError(f"Empty URL in locator '{locator}'")
        return RemoteSource(url=url, branch=branch or None)

    match = _SHORTHAND.match(locator)
    if not match:
        raise FetchError(
            f"Unrecognised template locator '{locator}'",
            hint="Expected owner/repo, github:owner/repo#branch or direct:<url>.",
        )

    host = match["host"] or HOSTS[match["kind"] or "github"]
    url = f"https://{host}/{match['owner']}/{match['repo']}.git"
    return RemoteSource(url=url, branch=match["branch"])


class RepositoryFetcher:
    """Wraps `git clone` with a transient spinner."""

    def __init__(
        self,
        git: str = "git",
        depth: int = 1,
        console: Console | None = None,
    ):
        self.git = git
        self.depth = depth
        self.console = console or Console()

    def clone_command(self, source: RemoteSource, destination: Path) -> list[str]:
        cmd = [self.git, "clone", "--depth", str(self.depth)]
        if source.branch:
            cmd += ["--branch", source.branch]
        cmd += [source.url, str(destination)]
        return cmd

    def fetch(self, locator: str, destination: Path) -> None:
        """
        Populate destination with the template's file tree.

        Raises:
            FetchError: the locator is malformed or git failed. The destination
                may then be missing, empty or partially populated.
        """
        source = parse_locator(locator)
        cmd = self.clone_command(source, destination)
        logger.debug("Running: %s", " ".join(cmd))

        with self.console.status("Fetching template..."):
            try:
                result = subprocess.run(cmd, capture_output=True, text=True)
            except OSError as e:
                self.console.print(symbols.error, f"[red]{escape(str(e))}[/red]")
                raise FetchError(f"Could not run {self.git}: {e}") from e

        if result.returncode != 0:
            detail = result.stderr.strip() or f"exit code {result.returncode}"
            self.console.print(symbols.error, f"[red]{escape(detail)}[/red]")
            raise FetchError(f"Cloning {source.url} failed: {detail}")

        git_dir = destination / ".git"
        if git_dir.exists():
            try:
                shutil.rmtree(git_dir)
            except OSError as e:
                raise FetchError(f"Could not strip {git_dir}: {e}") from e

        self.console.print(symbols.success, "[green]Template fetched[/green]")
