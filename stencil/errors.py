"""
Stencil Errors - Exception hierarchy for the create workflow

Errors raised before anything touches the disk are recoverable: the CLI
reports them and returns. Errors marked ``fatal`` terminate the process
with a non-zero exit status.
"""

from __future__ import annotations


class StencilError(Exception):
    """Base class for every error the CLI knows how to report."""

    fatal: bool = True

    def __init__(self, message: str, hint: str | None = None):
        super().__init__(message)
        self.message = message
        self.hint = hint


# ═══════════════════════════════════════════════════════════════════════════
# VALIDATION (no side effects yet)
# ═══════════════════════════════════════════════════════════════════════════


class InvalidName(StencilError):
    fatal = False


class UnknownTemplate(StencilError):
    fatal = False


class DestinationExists(StencilError):
    fatal = False


# ═══════════════════════════════════════════════════════════════════════════
# ENVIRONMENT & SETUP
# ═══════════════════════════════════════════════════════════════════════════


class EnvironmentMissing(StencilError):
    """A required external tool is not on PATH."""


class ConfigError(StencilError):
    """The configuration file could not be read or validated."""


class RegistryError(StencilError):
    """The template registry file is missing or malformed."""


class InteractionUnavailable(StencilError):
    """A prompt was required but stdin is not an interactive terminal."""


# ═══════════════════════════════════════════════════════════════════════════
# SIDE-EFFECTING STEPS
# ═══════════════════════════════════════════════════════════════════════════


class RemovalError(StencilError):
    pass


class FetchError(StencilError):
    pass


class ManifestEditError(StencilError):
    """Reading, patching or writing package.json failed. Reported, not fatal."""

    fatal = False


class InstallError(StencilError):
    pass
