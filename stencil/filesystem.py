"""
Stencil Filesystem - Paths, directory removal and package.json editing

All paths are resolved against one base directory: the real (symlink-free)
working directory captured when the CLI starts.
"""

from __future__ import annotations

import json
import logging
import shutil
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from stencil.errors import ManifestEditError, RemovalError

logger = logging.getLogger("stencil")

MANIFEST_FILE = "package.json"


# ═══════════════════════════════════════════════════════════════════════════
# MANIFEST FIELD TRANSFORMS
# ═══════════════════════════════════════════════════════════════════════════

# A transform gets (current manifest, field, answer, project name) and edits
# the manifest in place.
FieldTransform = Callable[[dict[str, Any], str, str, str], None]


def fallback_or_trim(manifest: dict[str, Any], field: str, value: str, project_name: str) -> None:
    """Blank answers fall back to the project name."""
    value = (value or "").strip()
    manifest[field] = value or project_name


def split_on_comma(manifest: dict[str, Any], field: str, value: str, project_name: str) -> None:
    """'a, b,c' -> ['a', 'b', 'c']. A blank answer keeps the existing list."""
    items = [item.strip() for item in (value or "").split(",")]
    items = [item for item in items if item]
    if items:
        manifest[field] = items


def overwrite_if_non_blank(manifest: dict[str, Any], field: str, value: str, project_name: str) -> None:
    value = (value or "").strip()
    if value:
        manifest[field] = value


FIELD_TRANSFORMS: dict[str, FieldTransform] = {
    "name": fallback_or_trim,
    "keywords": split_on_comma,
}


class FilesystemHelper:
    """
    File operations rooted at a fixed base directory.

    Args:
        base_dir: Directory relative paths resolve against. Resolved to its
            real path once, here.
    """

    def __init__(self, base_dir: str | Path):
        self.base_dir = Path(base_dir).resolve()

    @classmethod
    def from_cwd(cls) -> "FilesystemHelper":
        return cls(Path.cwd())

    def resolve(self, relative_path: str | Path) -> Path:
        return self.base_dir / relative_path

    def exists(self, relative_path: str | Path) -> bool:
        return self.resolve(relative_path).exists()

    def remove_directory(self, relative_path: str | Path) -> None:
        """Delete a directory tree. Does nothing if it is already gone."""
        path = self.resolve(relative_path)
        if not path.exists() and not path.is_symlink():
            return
        logger.debug("Removing %s", path)
        try:
            if path.is_dir() and not path.is_symlink():
                shutil.rmtree(path)
            else:
                path.unlink()
        except OSError as e:
            raise RemovalError(f"Failed to remove {path}: {e}") from e

    # ═══════════════════════════════════════════════════════════════════════
    # package.json
    # ═══════════════════════════════════════════════════════════════════════

    def manifest_path(self, project_dir: str | Path) -> Path:
        return self.resolve(project_dir) / MANIFEST_FILE

    def read_manifest(self, project_dir: str | Path) -> dict[str, Any]:
        path = self.manifest_path(project_dir)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ManifestEditError(f"Failed to read {path}: {e}") from e
        if not isinstance(data, dict):
            raise ManifestEditError(f"{path} does not contain a JSON object")
        return data

    def write_manifest(self, project_dir: str | Path, manifest: Mapping[str, Any]) -> None:
        path = self.manifest_path(project_dir)
        logger.debug("Writing %s", path)
        try:
            path.write_text(json.dumps(manifest, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
        except (OSError, TypeError, ValueError) as e:
            raise ManifestEditError(f"Failed to write {path}: {e}") from e

    @staticmethod
    def apply_patch(
        manifest: dict[str, Any],
        patch: Mapping[str, str],
        project_name: str,
    ) -> dict[str, Any]:
        """Apply interactive answers to a manifest in place and return it."""
        for field, value in patch.items():
            transform = FIELD_TRANSFORMS.get(field, overwrite_if_non_blank)
            transform(manifest, field, value, project_name)
        return manifest
