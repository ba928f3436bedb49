"""Shared pytest fixtures for the stencil test suite.

Provides:
- An isolated environment (no user config, no STENCIL_* variables)
- A small template registry
- Recording fakes for the prompter, fetcher and installer
- An orchestrator factory wired to a temporary working directory
"""

from __future__ import annotations

import io
import json
import os
from pathlib import Path
from typing import Any

import pytest
from rich.console import Console

from stencil import config as config_module
from stencil.filesystem import FilesystemHelper
from stencil.orchestrator import InitOrchestrator
from stencil.registry import TemplateRegistry

REGISTRY_YAML = """
templates:
  - name: vue
    value: github:acme/vue-starter#main
    desc: Vue starter
  - name: react
    value: github:acme/react-starter
    desc: React starter
questions:
  - name: name
    message: "Package name:"
  - name: description
    message: "Description:"
  - name: keywords
    message: "Keywords:"
"""

TEMPLATE_MANIFEST = {
    "name": "vue-starter",
    "version": "1.0.0",
    "description": "Template description",
    "keywords": ["template"],
    "scripts": {"dev": "vite"},
}


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep the developer's own config and environment out of every test."""
    for var in [name for name in os.environ if name.startswith("STENCIL_")]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr(config_module, "DEFAULT_CONFIG_PATH", tmp_path / "no-such-config.yaml")


@pytest.fixture
def git_available(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("stencil.orchestrator.shutil.which", lambda name: f"/usr/bin/{name}")


@pytest.fixture
def git_missing(git_available: None, monkeypatch: pytest.MonkeyPatch) -> None:
    """Hide git. Set up after git_available, so it wins where both are requested."""
    monkeypatch.setattr("stencil.orchestrator.shutil.which", lambda name: None)


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    work = tmp_path / "work"
    work.mkdir()
    return work


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), width=120, force_terminal=False)


def console_output(console: Console) -> str:
    return console.file.getvalue()


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


@pytest.fixture
def registry() -> TemplateRegistry:
    return TemplateRegistry.from_yaml(REGISTRY_YAML)


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakePrompter:
    """Answers prompts from canned values and records every question."""

    def __init__(self, confirm: bool = True, choice: int = 0, answers: dict[str, str] | None = None):
        self.confirm_answer = confirm
        self.choice = choice
        self.answers = answers or {}
        self.calls: list[tuple[str, Any]] = []

    def confirm(self, message: str) -> bool:
        self.calls.append(("confirm", message))
        return self.confirm_answer

    def choose_one(self, message, choices):
        self.calls.append(("choose_one", message))
        return choices[self.choice]

    def input_one(self, message: str) -> str:
        self.calls.append(("input_one", message))
        return ""

    def input_many(self, questions) -> dict[str, str]:
        self.calls.append(("input_many", [q.name for q in questions]))
        return {q.name: self.answers.get(q.name, "") for q in questions}

    def kinds(self) -> list[str]:
        return [kind for kind, _ in self.calls]


class FakeFetcher:
    """Creates the destination with a package.json instead of cloning."""

    def __init__(self, manifest: dict | None = None, error: Exception | None = None):
        self.manifest = TEMPLATE_MANIFEST if manifest is None else manifest
        self.error = error
        self.calls: list[tuple[str, Path]] = []

    def fetch(self, locator: str, destination: Path) -> None:
        self.calls.append((locator, destination))
        if self.error:
            raise self.error
        destination.mkdir(parents=True, exist_ok=True)
        if self.manifest is not False:
            (destination / "package.json").write_text(json.dumps(self.manifest))


class FakeInstaller:
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.calls: list[Path] = []

    def install(self, project_dir: Path) -> None:
        self.calls.append(project_dir)
        if self.error:
            raise self.error


@pytest.fixture
def prompter() -> FakePrompter:
    return FakePrompter()


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def installer() -> FakeInstaller:
    return FakeInstaller()


@pytest.fixture
def make_orchestrator(registry, workdir, prompter, fetcher, installer, console):
    """Factory so tests can swap a single collaborator."""

    def _make(**overrides) -> InitOrchestrator:
        parts = {
            "registry": registry,
            "fs": FilesystemHelper(workdir),
            "prompter": prompter,
            "fetcher": fetcher,
            "installer": installer,
            "console": console,
        }
        parts.update(overrides)
        return InitOrchestrator(**parts)

    return _make
