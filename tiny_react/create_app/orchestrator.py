"""Project bootstrap orchestrator.

Drives one ``create-tiny-react-app`` run:

1. validate the project name,
2. ensure the target directory exists and is safe to use,
3. write a minimal ``package.json``,
4. check the package manager version (warning only),
5. install ``react``, ``react-dom`` and the generator package,
6. enforce the generator's runtime requirement, loosen the runtime
   dependency pins and hand off to the generator's ``init``.

Any failure after the manifest is written rolls back the generated files,
and the project directory itself when it is left empty, before the error
propagates. Every path is absolute; the working directory is never changed.
"""

from __future__ import annotations

import importlib.util
import os
import re
from pathlib import Path
from typing import Any, Callable

from rich.markup import escape

from ..config import CreateAppConfig
from ..utils import console, ensure_dir, print_error, remove_path
from .installer import (
    DependencyInstaller,
    check_if_online,
    get_package_name,
    resolve_package_spec,
    strip_version_range,
)
from .manifest import set_caret_range_for_runtime_deps, write_initial_manifest
from .models import (
    BootstrapError,
    InstallCommandError,
    InstallResult,
    ProjectRequest,
    RuntimeVersionError,
    UnexpectedError,
)
from .naming import check_app_name
from .safety import is_safe_to_create_project_in
from .version_gate import check_npm_version, check_runtime_version, warn_if_outdated

InitEntryPoint = Callable[[Path, str, bool, Path], Any]


def load_init_entry_point(package_dir: str | Path) -> InitEntryPoint:
    """Import ``<package_dir>/scripts/init.py`` and return its ``init`` callable.

    Raises:
        UnexpectedError: If the file or the callable is missing.
    """
    script = Path(package_dir) / "scripts" / "init.py"
    if not script.is_file():
        raise UnexpectedError(f"Generator entry point not found: {script}")

    module_name = "tiny_react_init_" + re.sub(r"\W", "_", Path(package_dir).name)
    spec = importlib.util.spec_from_file_location(module_name, script)
    if spec is None or spec.loader is None:
        raise UnexpectedError(f"Cannot load generator entry point: {script}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    init = getattr(module, "init", None)
    if not callable(init):
        raise UnexpectedError(f"{script} does not define an init() function")
    return init


class ProjectBootstrapper:
    """Creates a project directory and installs its dependencies.

    Attributes:
        config: Creation settings (allow-lists, dependency list, versions).
        installer: Runs the package manager; replaceable in tests.
    """

    def __init__(
        self,
        config: CreateAppConfig,
        installer: DependencyInstaller | None = None,
    ) -> None:
        self.config = config
        self.installer = installer or DependencyInstaller(config)

    # -- Public API --------------------------------------------------------

    async def create_app(
        self, request: ProjectRequest, original_directory: str | Path
    ) -> Path:
        """Scaffold the project described by *request*.

        Args:
            request: Target directory, name and package-manager choice.
            original_directory: Directory the user invoked the tool from.

        Returns:
            The project root.

        Raises:
            BootstrapError: On any failure. Failures after the manifest was
                written are raised only once the rollback has finished.
        """
        root = request.target_directory
        app_name = request.project_name
        original = Path(original_directory)

        check_app_name(app_name, self._reserved_names())

        ensure_dir(root)
        is_safe_to_create_project_in(root, app_name, self.config)

        console.print(f"Creating a new React app in [green]{escape(str(root))}[/green].")
        console.print()

        try:
            await write_initial_manifest(root, app_name, self.config)

            if not request.use_alternate_package_manager:
                npm_info = await check_npm_version(self.config)
                warn_if_outdated(npm_info, self.config.min_npm_version)

            await self.run(request, original)
        except Exception as exc:
            error = exc if isinstance(exc, BootstrapError) else UnexpectedError(str(exc), cause=exc)
            self._report_failure(error)
            self.rollback(root, app_name)
            if error is exc:
                raise
            raise error from exc

        return root

    async def run(self, request: ProjectRequest, original_directory: Path) -> InstallResult:
        """Install dependencies and hand the project over to the generator."""
        root = request.target_directory
        use_yarn = request.use_alternate_package_manager

        package_to_install = resolve_package_spec(
            self.config.scripts_package, original_directory
        )
        all_dependencies = [*self.config.runtime_dependencies, package_to_install]

        console.print("Installing packages. This might take a couple of minutes.")
        package_name = await get_package_name(package_to_install)
        is_online = await check_if_online(use_yarn)

        names = ", ".join(f"[cyan]{dep}[/cyan]" for dep in self.config.runtime_dependencies)
        console.print(f"Installing {names}, and [cyan]{escape(package_name)}[/cyan]...")
        console.print()

        result = await self.installer.install(
            root,
            all_dependencies,
            use_yarn=use_yarn,
            is_online=is_online,
            package_name=package_name,
        )

        package_dir = root / "node_modules" / package_name
        check_runtime_version(
            package_dir / "package.json", engines_key=self.config.engines_key
        )
        await set_caret_range_for_runtime_deps(
            root, package_name, self.config.runtime_dependencies
        )

        init = load_init_entry_point(package_dir)
        # init always receives True as its third argument, whichever manager installed.
        init(root, request.project_name, True, original_directory)
        return result

    def rollback(self, root: Path, app_name: str) -> None:
        """Delete generated files, and *root* itself once it is empty."""
        if not root.is_dir():
            return

        for entry in sorted(os.listdir(root)):
            if entry in self.config.known_generated_files:
                console.print(f"Deleting generated file... [cyan]{escape(entry)}[/cyan]")
                remove_path(root / entry)

        if not any(root.iterdir()):
            console.print(
                f"Deleting [cyan]{escape(app_name)}/[/cyan] from "
                f"[cyan]{escape(str(root.parent))}[/cyan]"
            )
            root.rmdir()
        console.print("Done.")

    # -- Internals ---------------------------------------------------------

    def _reserved_names(self) -> list[str]:
        names = list(self.config.runtime_dependencies)
        spec = self.config.scripts_package
        if spec.startswith("file:"):
            names.append(Path(spec[len("file:"):]).name)
        else:
            names.append(strip_version_range(spec))
        return names

    def _report_failure(self, error: BootstrapError) -> None:
        console.print()
        console.print("Aborting installation.")
        if isinstance(error, InstallCommandError):
            console.print(f"  [cyan]{escape(error.command)}[/cyan] has failed.")
        elif isinstance(error, RuntimeVersionError):
            print_error(str(error))
        else:
            console.print("[red]Unexpected error. Please report it as a bug:[/red]")
            cause = error.cause if isinstance(error, UnexpectedError) and error.cause else error
            console.print(repr(cause), markup=False)
        console.print()
