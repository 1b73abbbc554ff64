"""Records and errors produced while bootstrapping a project.

Every record lives for a single ``create-tiny-react-app`` run. Errors are
tagged with an :class:`ErrorKind` and carry exactly the fields their handler
needs to report them.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class ProjectRequest(BaseModel):
    """What the user asked to create."""

    model_config = ConfigDict(frozen=True)

    target_directory: Path = Field(..., description="Absolute path of the project root")
    project_name: str = Field(..., description="Base name of the project root")
    use_alternate_package_manager: bool = Field(
        default=False, description="Install with yarn instead of npm"
    )

    @classmethod
    def from_directory(
        cls,
        directory: str | Path,
        use_alternate_package_manager: bool = False,
        base: str | Path | None = None,
    ) -> "ProjectRequest":
        """Resolve *directory* against *base* (default: cwd) and name the project after it."""
        root = Path(os.path.abspath(os.path.join(base or os.getcwd(), directory)))
        return cls(
            target_directory=root,
            project_name=root.name,
            use_alternate_package_manager=use_alternate_package_manager,
        )


@dataclass
class InstallResult:
    """Outcome of one package-manager run."""

    succeeded: bool
    failing_command: str | None = None
    resolved_package_name: str | None = None


@dataclass
class ConflictReport:
    """Entries of a target directory that block project creation."""

    directory: Path
    conflicts: list[str] = field(default_factory=list)
    removed_logs: list[str] = field(default_factory=list)

    @property
    def is_safe(self) -> bool:
        return not self.conflicts


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class ErrorKind(str, Enum):
    INVALID_NAME = "invalid_name"
    CONFLICT = "conflict"
    RUNTIME_VERSION = "runtime_version"
    INSTALL_COMMAND = "install_command"
    UNEXPECTED = "unexpected"


class BootstrapError(Exception):
    """Base class for every failure that aborts project creation."""

    kind: ErrorKind = ErrorKind.UNEXPECTED


class InvalidProjectNameError(BootstrapError):
    """The project name is not a valid npm package name."""

    kind = ErrorKind.INVALID_NAME

    def __init__(self, name: str, problems: list[str]) -> None:
        self.name = name
        self.problems = problems
        super().__init__(
            f"Cannot create a project named {name!r}: " + "; ".join(problems)
        )


class ConflictError(BootstrapError):
    """The target directory holds files that could be overwritten."""

    kind = ErrorKind.CONFLICT

    def __init__(self, report: ConflictReport) -> None:
        self.report = report
        super().__init__(
            f"{report.directory} contains files that could conflict: "
            + ", ".join(report.conflicts)
        )

    @property
    def conflicts(self) -> list[str]:
        return self.report.conflicts


class RuntimeVersionError(BootstrapError):
    """The running interpreter does not satisfy the generator's ``engines`` entry."""

    kind = ErrorKind.RUNTIME_VERSION

    def __init__(self, running: str, required: str) -> None:
        self.running = running
        self.required = required
        super().__init__(
            f"You are running Python {running}.\n"
            f"tiny-react requires Python {required}.\n"
            "Please update your version of Python."
        )


class InstallCommandError(BootstrapError):
    """The package manager exited with a non-zero status."""

    kind = ErrorKind.INSTALL_COMMAND

    def __init__(self, command: str, result: InstallResult | None = None) -> None:
        self.command = command
        self.result = result or InstallResult(succeeded=False, failing_command=command)
        super().__init__(f"{command} has failed.")


class UnexpectedError(BootstrapError):
    """Anything else that broke the bootstrap chain."""

    kind = ErrorKind.UNEXPECTED

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        self.cause = cause
        super().__init__(message)


class ManifestError(UnexpectedError):
    """``package.json`` is missing an entry the bootstrap relies on."""
