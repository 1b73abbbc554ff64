"""Browser helpers for the ``start`` script.

``open_browser`` honours the ``BROWSER`` environment variable:

* ``none`` disables opening entirely,
* a path ending in ``.py`` or ``.js`` is run with the URL as its argument,
* any other value names a :mod:`webbrowser` controller (``firefox``, ...),
* unset uses the system default.

``check_browsers`` makes sure the app declares its target browsers, offering
to write sensible defaults into ``package.json`` when it does not.
"""

from __future__ import annotations

import os
import subprocess
import sys
import webbrowser
from pathlib import Path
from typing import Any

from rich.prompt import Confirm

from ..utils import console, is_interactive, load_json, print_error, save_json

BROWSERSLIST_DEFAULTS: dict[str, list[str]] = {
    "production": [">0.2%", "not dead", "not op_mini all"],
    "development": [
        "last 1 chrome version",
        "last 1 firefox version",
        "last 1 safari version",
    ],
}


class BrowserslistError(Exception):
    """The app does not declare which browsers it targets."""


def _run_browser_script(script: str, url: str) -> bool:
    interpreter = sys.executable if script.endswith(".py") else "node"
    try:
        # Not waited on: the browser script may outlive the start script.
        subprocess.Popen([interpreter, script, url])
    except OSError as exc:
        print_error(f"The script specified as BROWSER environment variable failed: {exc}")
        return False
    return True


def open_browser(url: str, browser: str | None = None) -> bool:
    """Open *url*, returning ``True`` if a browser (or browser script) was started."""
    value = browser if browser is not None else os.environ.get("BROWSER", "")
    if value.lower() == "none":
        return False
    if value.endswith((".py", ".js")):
        return _run_browser_script(value, url)

    try:
        controller = webbrowser.get(value) if value else webbrowser.get()
        return controller.open_new_tab(url)
    except webbrowser.Error:
        return False


def find_browserslist_config(app_dir: str | Path) -> Any:
    """Return the app's browserslist configuration, or ``None``."""
    app_path = Path(app_dir)
    rc_file = app_path / ".browserslistrc"
    if rc_file.is_file():
        return rc_file.read_text(encoding="utf-8")

    manifest_path = app_path / "package.json"
    if manifest_path.is_file():
        return load_json(manifest_path).get("browserslist")
    return None


async def check_browsers(
    app_dir: str | Path, interactive: bool | None = None, retry: bool = True
) -> Any:
    """Ensure target browsers are configured for the app in *app_dir*.

    Returns:
        The browserslist configuration found (or written).

    Raises:
        BrowserslistError: If none is configured and the user could not or
            would not add the defaults.
    """
    current = find_browserslist_config(app_dir)
    if current:
        return current

    if interactive is None:
        interactive = is_interactive()
    if not retry or not interactive:
        raise BrowserslistError(
            "As of tiny-react-scripts >=2 you must specify targeted browsers. "
            "Please add a browserslist key to your package.json."
        )

    question = (
        "[yellow]We're unable to detect target browsers.[/yellow]\n\n"
        "Would you like to add the defaults to your [bold]package.json[/bold]?"
    )
    if Confirm.ask(question, default=True, console=console):
        manifest_path = Path(app_dir) / "package.json"
        if not manifest_path.is_file():
            raise BrowserslistError(f"Could not find a package.json in {app_dir}.")
        manifest = load_json(manifest_path)
        manifest["browserslist"] = BROWSERSLIST_DEFAULTS
        await save_json(manifest, manifest_path)
        console.print(
            "[green]Set target browsers:[/green] "
            f"[cyan]{', '.join(BROWSERSLIST_DEFAULTS['production'])}[/cyan]"
        )

    return await check_browsers(app_dir, interactive, retry=False)
