"""Checks that a target directory can receive a new project.

A directory is safe when every entry is either on the allow-list (editor and
VCS metadata, a README, a licence, ...) or a transient log left behind by an
earlier failed install. Those logs are deleted on every check and never count
as conflicts.
"""

from __future__ import annotations

import os
from pathlib import Path

from ..config import CreateAppConfig
from ..utils import console, remove_path
from .models import ConflictError, ConflictReport


def _is_error_log(file_name: str, patterns: list[str]) -> bool:
    # Catches `(npm-debug|yarn-error|yarn-debug).log*` files.
    return any(file_name.startswith(pattern) for pattern in patterns)


def check_directory(root: str | Path, config: CreateAppConfig) -> ConflictReport:
    """Inspect *root* and remove leftover install logs.

    Args:
        root: Directory to inspect. It must exist.
        config: Supplies the allow-list and the log-file prefixes.

    Returns:
        A report listing conflicting entries (sorted) and the logs removed.
    """
    root_path = Path(root)
    entries = sorted(os.listdir(root_path))

    conflicts = [
        entry
        for entry in entries
        if entry not in config.valid_files
        and not _is_error_log(entry, config.error_log_file_patterns)
    ]

    removed: list[str] = []
    for entry in entries:
        if _is_error_log(entry, config.error_log_file_patterns):
            remove_path(root_path / entry)
            removed.append(entry)

    return ConflictReport(directory=root_path, conflicts=conflicts, removed_logs=removed)


def is_safe_to_create_project_in(
    root: str | Path, name: str, config: CreateAppConfig
) -> ConflictReport:
    """Run :func:`check_directory` and report conflicts to the user.

    Raises:
        ConflictError: If any entry would conflict with the new project.
    """
    report = check_directory(root, config)
    if report.is_safe:
        return report

    console.print()
    console.print(f"The directory [green]{name}[/green] contains files that could conflict:")
    console.print()
    for file_name in report.conflicts:
        console.print(f"  {file_name}", markup=False)
    console.print()
    console.print(
        "Either try using a new directory name, or remove the files listed above."
    )
    raise ConflictError(report)
