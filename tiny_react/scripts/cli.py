"""``tiny-react-scripts`` command dispatcher.

Maps ``start``, ``build``, ``test`` and ``eject`` to script files next to this
module and re-executes the interpreter on them::

    tiny-react-scripts [runtime options] <script> [script options]

Options before the script name go to the interpreter, options after it go to
the script. The child inherits the terminal and its exit status becomes ours.
"""

from __future__ import annotations

import asyncio
import signal
import sys
from dataclasses import dataclass, field
from pathlib import Path

from rich.markup import escape

from ..config import Config, ScriptsConfig
from ..utils import console, print_error, run_command

SIGNAL_EXPLANATIONS: dict[str, str] = {
    "SIGKILL": (
        "The build failed because the process exited too early. "
        "This probably means the system ran out of memory or someone called "
        "`kill -9` on the process."
    ),
    "SIGTERM": (
        "The build failed because the process exited too early. "
        "Someone might have called `kill` or `killall`, or the system could "
        "be shutting down."
    ),
}


@dataclass
class ScriptInvocation:
    """A command line split around its script name."""

    script: str | None
    runtime_args: list[str] = field(default_factory=list)
    script_args: list[str] = field(default_factory=list)


@dataclass
class DispatchOutcome:
    """How the script process ended. ``exit_code`` is what we exit with."""

    exit_code: int
    terminating_signal: str | None = None


class ScriptNotFoundError(Exception):
    """A recognised script has no file to run."""

    def __init__(self, script: str, path: Path) -> None:
        self.script = script
        self.path = path
        super().__init__(f'Script "{script}" is not installed (expected {path}).')


def parse_invocation(args: list[str], scripts: list[str]) -> ScriptInvocation:
    """Split *args* at the first token naming one of *scripts*.

    Without such a token the first argument is taken as the (unknown) script
    name and nothing is forwarded.
    """
    index = next((i for i, arg in enumerate(args) if arg in scripts), -1)
    if index == -1:
        return ScriptInvocation(script=args[0] if args else None)
    return ScriptInvocation(
        script=args[index],
        runtime_args=list(args[:index]),
        script_args=list(args[index + 1:]),
    )


def resolve_script_path(script: str, scripts_dir: str | Path) -> Path:
    path = Path(scripts_dir) / f"{script}.py"
    if not path.is_file():
        raise ScriptNotFoundError(script, path)
    return path


def signal_name(signum: int) -> str:
    try:
        return signal.Signals(signum).name
    except ValueError:
        return f"SIG{signum}"


async def run_script(
    invocation: ScriptInvocation,
    config: ScriptsConfig,
    executable: str | None = None,
) -> DispatchOutcome:
    """Run the script of *invocation* and wait for it.

    Raises:
        ScriptNotFoundError: If the script file does not exist.
    """
    script_path = resolve_script_path(invocation.script, config.scripts_dir)
    cmd = [
        executable or sys.executable,
        *invocation.runtime_args,
        str(script_path),
        *invocation.script_args,
    ]
    returncode, _, _ = await run_command(cmd, timeout=None, capture=False)

    if returncode < 0:
        name = signal_name(-returncode)
        explanation = SIGNAL_EXPLANATIONS.get(name)
        if explanation:
            console.print(explanation, markup=False)
        return DispatchOutcome(exit_code=1, terminating_signal=name)

    return DispatchOutcome(exit_code=returncode)


def report_unknown_script(script: str | None, config: ScriptsConfig) -> None:
    console.print(f'Unknown script "{script or ""}".', markup=False)
    console.print("Perhaps you need to update tiny-react-scripts?")
    console.print(f"See: {config.update_docs_url}", markup=False)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``tiny-react-scripts``."""
    args = sys.argv[1:] if argv is None else argv
    try:
        config = Config.from_env().scripts
    except ValueError as exc:
        print_error(f"Invalid configuration: {escape(str(exc))}")
        sys.exit(1)
    invocation = parse_invocation(args, config.scripts)

    if invocation.script not in config.scripts:
        # Informational only: the exit status stays 0.
        report_unknown_script(invocation.script, config)
        return

    try:
        outcome = asyncio.run(run_script(invocation, config))
    except ScriptNotFoundError as exc:
        print_error(str(exc))
        sys.exit(1)
    sys.exit(outcome.exit_code)


if __name__ == "__main__":
    main()
