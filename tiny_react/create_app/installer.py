"""Dependency installation through an external package manager.

The package manager is spawned once, inherits the terminal so its progress
output reaches the user, and is judged solely by its exit code.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

from ..config import CreateAppConfig
from ..utils import load_json, run_command
from .models import InstallCommandError, InstallResult


def build_install_command(
    dependencies: list[str],
    config: CreateAppConfig,
    use_yarn: bool = False,
    is_online: bool = True,
    verbose: bool = False,
) -> list[str]:
    """Return the argv that installs *dependencies* and pins them in ``package.json``."""
    if use_yarn:
        args = [config.yarn_binary, "add", "--exact"]
        if not is_online:
            args.append("--offline")
    else:
        args = [config.npm_binary, "install", "--save", "--save-exact", "--loglevel", "error"]
    if verbose:
        args.append("--verbose")
    return args + list(dependencies)


async def check_if_online(use_yarn: bool = False) -> bool:
    # The registry is never pinged; an offline install fails in the package
    # manager itself and is reported like any other failed command.
    return True


def resolve_package_spec(spec: str, base: str | Path) -> str:
    """Make a relative ``file:`` spec absolute against *base*.

    The package manager runs inside the new project, so a path relative to
    the directory the user invoked us from would otherwise point elsewhere.
    """
    match = re.match(r"^file:(.*)$", spec)
    if not match:
        return spec
    return f"file:{os.path.abspath(os.path.join(base, match.group(1)))}"


def strip_version_range(spec: str) -> str:
    """``name@range`` -> ``name`` and ``@scope/name@range`` -> ``@scope/name``."""
    if spec.startswith("@"):
        scope, _, rest = spec[1:].partition("/")
        return f"@{scope}/{rest.split('@')[0]}"
    return spec.split("@")[0]


async def get_package_name(install_package: str) -> str:
    """Return the npm package name an install spec will produce.

    ``file:<dir>`` reads ``<dir>/package.json``; registry specs drop their
    version range.
    """
    match = re.match(r"^file:(.*)$", install_package)
    if match:
        manifest = load_json(Path(match.group(1)) / "package.json")
        return manifest["name"]
    return strip_version_range(install_package)


class DependencyInstaller:
    """Runs the package manager for a project directory."""

    def __init__(self, config: CreateAppConfig, verbose: bool = False) -> None:
        self.config = config
        self.verbose = verbose

    async def install(
        self,
        root: str | Path,
        dependencies: list[str],
        use_yarn: bool = False,
        is_online: bool = True,
        package_name: str | None = None,
    ) -> InstallResult:
        """Install *dependencies* into *root*.

        Args:
            root: Project directory; the package manager runs inside it.
            dependencies: Specs passed verbatim to the package manager.
            use_yarn: Use the alternate package manager.
            is_online: Whether the registry is assumed reachable.
            package_name: Generator package name, echoed in the result.

        Returns:
            A successful ``InstallResult``.

        Raises:
            InstallCommandError: If the command exits non-zero or cannot be
                started. ``command`` holds the argv joined by spaces.
        """
        cmd = build_install_command(
            dependencies, self.config, use_yarn=use_yarn, is_online=is_online,
            verbose=self.verbose,
        )
        cmd_str = " ".join(cmd)

        try:
            returncode, _, _ = await run_command(cmd, cwd=root, timeout=None, capture=False)
        except OSError as exc:
            raise InstallCommandError(cmd_str) from exc

        if returncode != 0:
            raise InstallCommandError(
                cmd_str,
                result=InstallResult(
                    succeeded=False,
                    failing_command=cmd_str,
                    resolved_package_name=package_name,
                ),
            )

        return InstallResult(succeeded=True, resolved_package_name=package_name)
