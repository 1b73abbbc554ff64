"""Creation and post-install patching of the project's ``package.json``."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from semantic_version import NpmSpec

from ..config import CreateAppConfig
from ..utils import console, load_json, save_json
from .models import ManifestError

MANIFEST_NAME = "package.json"


async def write_initial_manifest(
    root: str | Path, app_name: str, config: CreateAppConfig
) -> Path:
    """Write the minimal manifest npm needs before it can install anything."""
    path = Path(root) / MANIFEST_NAME
    await save_json(
        {"name": app_name, "version": config.initial_version, "private": True}, path
    )
    return path


def is_valid_range(value: str) -> bool:
    try:
        NpmSpec(value)
    except ValueError:
        return False
    return True


def make_caret_range(dependencies: dict[str, Any], name: str) -> None:
    """Turn the exact version npm saved for *name* into a caret range, in place.

    Raises:
        ManifestError: If *name* is not a dependency.
    """
    version = dependencies.get(name)
    if version is None:
        raise ManifestError(f"Missing {name} dependency in package.json")

    patched = f"^{version}"
    if not is_valid_range(patched):
        console.print(
            f"Unable to patch {name} dependency version because version "
            f"[red]{version}[/red] will become invalid [red]{patched}[/red]"
        )
        patched = version

    dependencies[name] = patched


async def set_caret_range_for_runtime_deps(
    root: str | Path, package_name: str, runtime_dependencies: list[str]
) -> dict[str, Any]:
    """Loosen the pinned runtime dependencies of the freshly installed project.

    Returns:
        The rewritten manifest.

    Raises:
        ManifestError: If ``dependencies`` or the generator package is missing.
    """
    path = Path(root) / MANIFEST_NAME
    manifest = load_json(path)

    dependencies = manifest.get("dependencies")
    if not isinstance(dependencies, dict):
        raise ManifestError("Missing dependencies in package.json")
    if package_name not in dependencies:
        raise ManifestError(f"Unable to find {package_name} in package.json")

    for name in runtime_dependencies:
        make_caret_range(dependencies, name)

    await save_json(manifest, path)
    return manifest
