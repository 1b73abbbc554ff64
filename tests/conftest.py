"""Shared pytest fixtures for the tiny-react test suite.

Provides reusable fixtures for:
- Temporary project and invocation directories
- A local generator package (``file:`` install target) with an ``init.py``
- A simulated package manager that mimics what ``npm install`` leaves behind
- Mock subprocess helpers
"""

from __future__ import annotations

import json
import shutil
import textwrap
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from tiny_react.config import CreateAppConfig


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_project_dir(tmp_path: Path) -> Path:
    """Temporary directory for a generated project (not yet created)."""
    yield tmp_path / "workspace" / "my-app"


@pytest.fixture
def original_dir(tmp_path: Path) -> Path:
    """Directory the user invoked ``create-tiny-react-app`` from."""
    directory = tmp_path / "workspace"
    directory.mkdir(parents=True, exist_ok=True)
    return directory


# ---------------------------------------------------------------------------
# Generator package
# ---------------------------------------------------------------------------

INIT_SOURCE = textwrap.dedent(
    """
    import json
    from pathlib import Path


    def init(root, app_name, use_yarn, original_directory):
        Path(root, "init-called.json").write_text(
            json.dumps(
                {
                    "root": str(root),
                    "app_name": app_name,
                    "use_yarn": use_yarn,
                    "original_directory": str(original_directory),
                }
            )
        )
    """
)


@pytest.fixture
def generator_package(tmp_path: Path) -> Path:
    """A local ``tiny-react-scripts`` package usable as ``file:<path>``."""
    package_dir = tmp_path / "tiny-react-scripts"
    (package_dir / "scripts").mkdir(parents=True)
    (package_dir / "package.json").write_text(
        json.dumps(
            {
                "name": "tiny-react-scripts",
                "version": "1.0.0",
                "engines": {"python": ">=3.8.0"},
            }
        )
    )
    (package_dir / "scripts" / "init.py").write_text(INIT_SOURCE)
    return package_dir


@pytest.fixture
def create_config(generator_package: Path) -> CreateAppConfig:
    """Creation settings pointing at the local generator package."""
    return CreateAppConfig(scripts_package=f"file:{generator_package}")


# ---------------------------------------------------------------------------
# Simulated package manager
# ---------------------------------------------------------------------------

def simulate_npm_install(
    root: Path,
    generator_package: Path,
    versions: dict[str, str] | None = None,
) -> None:
    """Leave behind what a successful ``npm install --save-exact`` would."""
    versions = versions or {"react": "18.2.0", "react-dom": "18.2.0"}
    manifest_path = root / "package.json"
    manifest = json.loads(manifest_path.read_text())
    manifest["dependencies"] = {
        **versions,
        "tiny-react-scripts": f"file:{generator_package}",
    }
    manifest_path.write_text(json.dumps(manifest, indent=2) + "\n")

    node_modules = root / "node_modules"
    for name in versions:
        (node_modules / name).mkdir(parents=True, exist_ok=True)
    shutil.copytree(generator_package, node_modules / "tiny-react-scripts")
    (root / "package-lock.json").write_text("{}\n")


@pytest.fixture
def fake_package_manager(generator_package: Path):
    """Factory for a ``run_command`` replacement that plays npm.

    ``npm --version`` answers *npm_version*; ``npm install`` simulates an
    install and exits with *install_returncode*.

    Usage:
        def test_create(fake_package_manager):
            runner = fake_package_manager(install_returncode=1)
            with patch("tiny_react.create_app.installer.run_command", runner):
                ...
    """
    def factory(
        npm_version: str = "10.2.4",
        install_returncode: int = 0,
        versions: dict[str, str] | None = None,
    ) -> AsyncMock:
        async def _run(cmd: list[str], cwd: Any = None, **kwargs: Any) -> tuple[int, str, str]:
            if cmd[1:] == ["--version"]:
                return (0, npm_version, "")
            root = Path(cwd)
            if install_returncode == 0:
                simulate_npm_install(root, generator_package, versions)
            else:
                (root / "node_modules").mkdir(exist_ok=True)
            return (install_returncode, "", "")

        return AsyncMock(side_effect=_run)

    return factory


# ---------------------------------------------------------------------------
# Mock Subprocess (generic)
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory
