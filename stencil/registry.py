"""
Stencil Registry - Pydantic models for templates.yaml

The registry is static data: the templates `stencil create` can clone and
the questions asked when filling in package.json.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from stencil.errors import RegistryError

logger = logging.getLogger("stencil")

DEFAULT_REGISTRY_FILE = Path(__file__).parent / "templates.yaml"


class TemplateDescriptor(BaseModel):
    """One clonable template."""

    name: str = Field(min_length=1)
    value: str = Field(min_length=1)  # Remote locator, see fetcher.parse_locator
    desc: str = ""

    model_config = {"frozen": True}


class ManifestQuestion(BaseModel):
    """A package.json field asked for interactively."""

    name: str = Field(min_length=1)
    message: str

    model_config = {"frozen": True}


class TemplateRegistry(BaseModel):
    """Ordered, read-only collection of templates and manifest questions."""

    templates: list[TemplateDescriptor] = Field(min_length=1)
    questions: list[ManifestQuestion] = []

    model_config = {"frozen": True}

    @field_validator("templates")
    @classmethod
    def unique_names(cls, v: list[TemplateDescriptor]) -> list[TemplateDescriptor]:
        seen: set[str] = set()
        for template in v:
            if template.name in seen:
                raise ValueError(f"duplicate template name '{template.name}'")
            seen.add(template.name)
        return v

    def lookup(self, name: str) -> TemplateDescriptor | None:
        for template in self.templates:
            if template.name == name:
                return template
        return None

    def list_all(self) -> list[TemplateDescriptor]:
        """Templates in registration order."""
        return list(self.templates)

    # ═══════════════════════════════════════════════════════════════════════
    # LOADING
    # ═══════════════════════════════════════════════════════════════════════

    @classmethod
    def from_yaml(cls, yaml_content: str) -> "TemplateRegistry":
        """Parse registry from YAML string."""
        try:
            data = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            raise RegistryError(f"Registry is not valid YAML: {e}") from e
        if not isinstance(data, dict):
            raise RegistryError("Registry must be a mapping with a 'templates' list")
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise RegistryError(f"Invalid registry: {e}") from e

    @classmethod
    def from_file(cls, path: str | Path) -> "TemplateRegistry":
        """Load registry from YAML file."""
        path = Path(path).expanduser()
        logger.debug("Loading template registry from %s", path)
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise RegistryError(f"Cannot read registry file {path}: {e}") from e
        return cls.from_yaml(content)

    @classmethod
    def load_default(cls) -> "TemplateRegistry":
        """Load the registry bundled with the package."""
        return cls.from_file(DEFAULT_REGISTRY_FILE)
