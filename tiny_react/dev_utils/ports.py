"""Port selection for the development server.

If the preferred port is taken, the user is told what is listening there and
asked whether to move to the next free port. Without a terminal to ask on,
the busy port is reported and no port is chosen.
"""

from __future__ import annotations

import os
import sys

from rich.markup import escape
from rich.prompt import Confirm

from ..utils import check_port_available, clear_console, console, is_interactive, run_command

MAX_PORT = 65535


class PortError(Exception):
    """No free port exists at or above the requested one."""


def is_root() -> bool:
    return hasattr(os, "getuid") and os.getuid() == 0


async def detect_port(port: int, host: str = "0.0.0.0") -> int:
    """Return *port* if it is free, else the next free port above it.

    Raises:
        PortError: If every port up to 65535 is taken.
    """
    for candidate in range(port, MAX_PORT + 1):
        if await check_port_available(candidate, host):
            return candidate
    raise PortError(f"Could not find an open port at {host}.")


async def _get_process_id_on_port(port: int) -> str | None:
    try:
        returncode, stdout, _ = await run_command(
            ["lsof", f"-i:{port}", "-P", "-t", "-sTCP:LISTEN"], timeout=10
        )
    except OSError:
        return None
    if returncode != 0 or not stdout:
        return None
    return stdout.splitlines()[0].strip()


async def _get_process_command(pid: str) -> str | None:
    returncode, stdout, _ = await run_command(["ps", "-o", "command", "-p", pid], timeout=10)
    lines = stdout.splitlines()
    if returncode != 0 or len(lines) < 2:
        return None
    # First line is the column header.
    return lines[1].strip()


async def _get_directory_of_process(pid: str) -> str | None:
    returncode, stdout, _ = await run_command(["lsof", "-p", pid], timeout=10)
    if returncode != 0:
        return None
    for line in stdout.splitlines():
        columns = line.split()
        if len(columns) >= 9 and columns[3] == "cwd":
            return " ".join(columns[8:])
    return None


async def get_process_for_port(port: int) -> str | None:
    """Describe the process listening on *port*, or ``None`` if unknown.

    Returns rich markup: the command, its pid and its working directory.
    """
    pid = await _get_process_id_on_port(port)
    if not pid:
        return None
    try:
        command = await _get_process_command(pid)
        directory = await _get_directory_of_process(pid)
    except OSError:
        return None
    if not command:
        return None

    description = f"[cyan]{escape(command)}[/cyan][grey50] (pid {pid})[/grey50]"
    if directory:
        description += f"\n[blue]  in [/blue][cyan]{escape(directory)}[/cyan]"
    return description


async def choose_port(
    host: str, default_port: int, interactive: bool | None = None
) -> int | None:
    """Pick the port the development server should listen on.

    Args:
        host: Interface the server will bind.
        default_port: Preferred port.
        interactive: Whether the user can be asked; defaults to whether
            stdout is a terminal.

    Returns:
        *default_port* when free, the next free port if the user accepts it,
        otherwise ``None``.
    """
    port = await detect_port(default_port, host)
    if port == default_port:
        return port

    if interactive is None:
        interactive = is_interactive()

    if sys.platform != "win32" and default_port < 1024 and not is_root():
        message = "Admin permissions are required to run a server on a port below 1024."
    else:
        message = f"Something is already running on port {default_port}."

    if not interactive:
        console.print(f"[red]{message}[/red]")
        return None

    clear_console()
    existing = await get_process_for_port(default_port)
    question = f"[yellow]{message}[/yellow]"
    if existing:
        question += f"[yellow] Probably:[/yellow]\n  {existing}"
    question += "\n\nWould you like to run the app on another port instead?"

    if Confirm.ask(question, default=True, console=console):
        return port
    return None
