"""``create-tiny-react-app`` command-line entry point.

Usage::

    create-tiny-react-app my-app
    create-tiny-react-app my-app --use-yarn
    create-tiny-react-app my-app --scripts-version file:../tiny-react-scripts
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from rich.markup import escape

from ..config import Config
from ..utils import console, print_error
from .installer import DependencyInstaller
from .models import BootstrapError, InvalidProjectNameError, ProjectRequest
from .orchestrator import ProjectBootstrapper


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="create-tiny-react-app",
        description="Create a new React app with no build configuration.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  create-tiny-react-app my-app\n"
            "  create-tiny-react-app my-app --use-yarn\n"
        ),
    )
    parser.add_argument(
        "project_directory",
        nargs="?",
        help="Directory to create the app in (its base name becomes the app name)",
    )
    parser.add_argument(
        "--use-yarn",
        action="store_true",
        help="Install dependencies with yarn instead of npm",
    )
    parser.add_argument(
        "--scripts-version",
        default=None,
        help="Generator package to install (name, name@range or file:<path>)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Print additional package manager logs",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``create-tiny-react-app``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.project_directory:
        console.print("Please specify the project directory:")
        console.print(f"  [cyan]{parser.prog}[/cyan] [green]<project-directory>[/green]")
        console.print()
        console.print("For example:")
        console.print(f"  [cyan]{parser.prog}[/cyan] [green]my-react-app[/green]")
        sys.exit(1)

    try:
        config = Config.from_env()
    except ValueError as exc:
        print_error(f"Invalid configuration: {escape(str(exc))}")
        sys.exit(1)
    if args.scripts_version:
        config.create_app.scripts_package = args.scripts_version

    original_directory = Path.cwd()
    request = ProjectRequest.from_directory(
        args.project_directory,
        use_alternate_package_manager=args.use_yarn,
        base=original_directory,
    )

    bootstrapper = ProjectBootstrapper(
        config.create_app,
        installer=DependencyInstaller(config.create_app, verbose=args.verbose),
    )
    try:
        asyncio.run(bootstrapper.create_app(request, original_directory))
    except InvalidProjectNameError as exc:
        print_error(escape(str(exc)))
        sys.exit(1)
    except BootstrapError:
        # Already reported (and rolled back where anything was written).
        sys.exit(1)


if __name__ == "__main__":
    main()
