"""Project-name checks applied before anything touches the disk."""

from __future__ import annotations

from urllib.parse import quote

from .models import InvalidProjectNameError

MAX_NAME_LENGTH = 214
RESERVED_NAMES = frozenset({"node_modules", "favicon.ico"})


def npm_name_problems(name: str) -> list[str]:
    """Return every npm naming rule *name* breaks (empty when it is valid)."""
    problems: list[str] = []
    if not name:
        return ["name length must be greater than zero"]
    if name.startswith("."):
        problems.append("name cannot start with a period")
    if name.startswith("_"):
        problems.append("name cannot start with an underscore")
    if name.strip() != name:
        problems.append("name cannot contain leading or trailing spaces")
    if name.lower() in RESERVED_NAMES:
        problems.append(f"{name} is a blacklisted name")
    if len(name) > MAX_NAME_LENGTH:
        problems.append(f"name can no longer contain more than {MAX_NAME_LENGTH} characters")
    if name.lower() != name:
        problems.append("name can no longer contain capital letters")
    if quote(name, safe="!~*'()") != name:
        problems.append("name can only contain URL-friendly characters")
    return problems


def check_app_name(name: str, dependencies: list[str]) -> None:
    """Refuse names npm cannot publish or that shadow one of *dependencies*.

    Raises:
        InvalidProjectNameError: Listing every broken rule.
    """
    problems = npm_name_problems(name)
    if problems:
        raise InvalidProjectNameError(name, problems)

    if name in dependencies:
        raise InvalidProjectNameError(
            name,
            [
                "a dependency with the same name exists; due to the way npm works, "
                "the following names are not allowed: " + ", ".join(sorted(dependencies))
            ],
        )
