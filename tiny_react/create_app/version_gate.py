"""Package-manager and runtime version checks.

An old or unknown npm only earns a warning. The generator package may also
declare the interpreter versions it supports under ``engines`` in its
``package.json``; running outside that range is fatal.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path

from semantic_version import NpmSpec, Version

from ..config import CreateAppConfig
from ..utils import console, load_json, run_command
from .models import RuntimeVersionError


@dataclass
class PackageManagerInfo:
    """Result of asking the package manager for its version."""

    version: str | None
    has_min_version: bool


def satisfies_minimum(version: str, minimum: str) -> bool:
    """Return ``True`` if *version* >= *minimum* in semantic-version order.

    Raises:
        ValueError: If either string is not a version.
    """
    return Version.coerce(version.strip().lstrip("v")) >= Version.coerce(minimum)


def running_python_version() -> str:
    info = sys.version_info
    return f"{info.major}.{info.minor}.{info.micro}"


async def check_npm_version(config: CreateAppConfig) -> PackageManagerInfo:
    """Query ``npm --version`` and compare it to ``config.min_npm_version``.

    A query that cannot run, exits non-zero, or prints something that is not
    a version never raises; it yields ``has_min_version=False``.
    """
    try:
        returncode, stdout, _ = await run_command([config.npm_binary, "--version"], timeout=30)
    except OSError:
        return PackageManagerInfo(version=None, has_min_version=False)

    if returncode != 0 or not stdout:
        return PackageManagerInfo(version=None, has_min_version=False)

    version = stdout.splitlines()[-1].strip()
    try:
        has_min = satisfies_minimum(version, config.min_npm_version)
    except ValueError:
        has_min = False
    return PackageManagerInfo(version=version, has_min_version=has_min)


def warn_if_outdated(info: PackageManagerInfo, minimum: str) -> None:
    if info.has_min_version or not info.version:
        return
    console.print(
        f"[yellow]You are using npm {info.version} so the project will be bootstrapped "
        "with an old unsupported version of tools.\n\n"
        f"Please update to npm {minimum} or higher for a better, fully supported "
        "experience.[/yellow]\n"
    )


def check_runtime_version(
    package_json: str | Path,
    running_version: str | None = None,
    engines_key: str = "python",
) -> None:
    """Enforce the ``engines.<engines_key>`` range of an installed package.

    Args:
        package_json: Manifest of the installed generator package.
        running_version: Version to test; defaults to this interpreter's.
        engines_key: Entry under ``engines`` holding the range.

    Raises:
        RuntimeVersionError: If the running version is outside the range.
        FileNotFoundError: If the manifest does not exist.
    """
    manifest = load_json(package_json)
    engines = manifest.get("engines")
    if not isinstance(engines, dict) or not engines.get(engines_key):
        return

    required = str(engines[engines_key])
    running = running_version or running_python_version()
    if not NpmSpec(required).match(Version.coerce(running)):
        raise RuntimeVersionError(running=running, required=required)
