"""
Stencil - Project scaffolding from template repositories

Clones a template, fills in package.json and installs dependencies.
"""

__version__ = "0.1.0"

from stencil.orchestrator import InitOrchestrator, InitResult, ProjectRequest, Stage
from stencil.registry import ManifestQuestion, TemplateDescriptor, TemplateRegistry

__all__ = [
    "InitOrchestrator",
    "InitResult",
    "ProjectRequest",
    "Stage",
    "ManifestQuestion",
    "TemplateDescriptor",
    "TemplateRegistry",
]
