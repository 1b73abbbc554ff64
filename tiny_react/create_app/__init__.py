"""tiny-react app creator.

Creates a project directory, installs React and the generator package with
npm (or yarn) and hands off to the generator's ``init`` routine, rolling the
directory back when anything fails.

Key classes:
    ProjectBootstrapper  - Sequences the whole creation flow and its rollback
    DependencyInstaller  - Runs the package manager
    ProjectRequest       - What to create and where
"""

from .installer import DependencyInstaller
from .models import (
    BootstrapError,
    ConflictError,
    ConflictReport,
    ErrorKind,
    InstallCommandError,
    InstallResult,
    InvalidProjectNameError,
    ManifestError,
    ProjectRequest,
    RuntimeVersionError,
    UnexpectedError,
)
from .orchestrator import ProjectBootstrapper
from .safety import check_directory, is_safe_to_create_project_in
from .version_gate import PackageManagerInfo, check_npm_version, satisfies_minimum

__all__ = [
    # Orchestration
    "ProjectBootstrapper",
    "ProjectRequest",
    # Components
    "DependencyInstaller",
    "InstallResult",
    "check_directory",
    "is_safe_to_create_project_in",
    "ConflictReport",
    "PackageManagerInfo",
    "check_npm_version",
    "satisfies_minimum",
    # Errors
    "ErrorKind",
    "BootstrapError",
    "ConflictError",
    "InvalidProjectNameError",
    "RuntimeVersionError",
    "InstallCommandError",
    "UnexpectedError",
    "ManifestError",
]
