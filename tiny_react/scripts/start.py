"""``start`` script: pick a port and open the app in the browser.

Run by ``tiny-react-scripts start`` inside a generated app. The development
server itself is provided by the app's build tooling.
"""

import asyncio
import os
import sys

from rich.markup import escape

from tiny_react.config import AppPaths, Config, DevServerConfig
from tiny_react.dev_utils import (
    BrowserslistError,
    PortError,
    check_browsers,
    choose_port,
    open_browser,
)
from tiny_react.utils import console, load_json, print_error


def prepare_url(protocol: str, host: str, port: int) -> str:
    pretty_host = "localhost" if host in ("0.0.0.0", "::") else host
    return f"{protocol}://{pretty_host}:{port}/"


def _app_name(paths: AppPaths) -> str:
    if paths.app_package_json.is_file():
        name = load_json(paths.app_package_json).get("name")
        if name:
            return name
    return paths.app_path.name


async def start(
    paths: AppPaths, config: DevServerConfig, interactive: bool | None = None
) -> int:
    """Return the exit status for the ``start`` script."""
    try:
        await check_browsers(paths.app_path, interactive)
    except BrowserslistError as exc:
        console.print(str(exc), markup=False)
        return 1

    try:
        port = await choose_port(config.host, config.default_port, interactive)
    except PortError as exc:
        print_error(str(exc))
        return 1
    if port is None:
        # We have not found a port.
        return 0

    url = prepare_url(config.protocol, config.host, port)
    build_command = "yarn build" if paths.use_yarn else "npm run build"

    console.print(f"You can now view [bold]{escape(_app_name(paths))}[/bold] in the browser.")
    console.print()
    console.print(f"  [bold]Local:[/bold]  {url}")
    console.print()
    console.print(f"To create a production build, use [cyan]{build_command}[/cyan].")
    console.print()

    open_browser(url)
    return 0


def main() -> int:
    # Set first so anything reading them sees the right environment.
    os.environ["BABEL_ENV"] = "development"
    os.environ["NODE_ENV"] = "development"

    try:
        config = Config.from_env()
    except ValueError as exc:
        print_error(f"Invalid configuration: {escape(str(exc))}")
        return 1
    return asyncio.run(start(AppPaths.from_directory(), config.dev_server))


if __name__ == "__main__":
    sys.exit(main())
