"""tiny-react configuration.

Centralised, typed configuration for the app creator, the script dispatcher
and the development helpers. All settings use Pydantic v2 models so they can
be validated at construction time and serialised to/from JSON or environment
variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

# Directory holding the script files the dispatcher resolves (start.py, ...).
SCRIPTS_DIR = Path(__file__).resolve().parent / "scripts"


class CreateAppConfig(BaseModel):
    """Settings for ``create-tiny-react-app``."""

    # Files that may already live in the target directory.
    valid_files: list[str] = Field(
        default=[
            ".DS_Store",
            "Thumbs.db",
            ".git",
            ".gitattributes",
            ".gitignore",
            ".hg",
            ".hgcheck",
            ".hgignore",
            ".idea",
            ".npmignore",
            "LICENSE",
            "README.md",
            "docs",
        ]
    )
    # These files should be allowed to remain on a failed install,
    # but then silently removed during the next create.
    error_log_file_patterns: list[str] = Field(
        default=["npm-debug.log", "yarn-error.log", "yarn-debug.log"]
    )
    known_generated_files: list[str] = Field(
        default=["package.json", "package-lock.json", "yarn.lock", "node_modules"],
        description="Entries deleted from the project directory on rollback",
    )
    runtime_dependencies: list[str] = Field(default=["react", "react-dom"])
    scripts_package: str = Field(
        default="file:../tiny-react-scripts",
        description="Generator package spec (name, name@range or file:<path>)",
    )
    initial_version: str = Field(default="0.1.0")
    min_npm_version: str = Field(default="3.0.0")
    engines_key: str = Field(
        default="python",
        description="Key under the generator's ``engines`` naming the runtime requirement",
    )
    npm_binary: str = Field(default="npm")
    yarn_binary: str = Field(default="yarnpkg")


class DevServerConfig(BaseModel):
    """Where the development server is expected to listen."""

    host: str = Field(default="0.0.0.0")
    default_port: int = Field(default=3000, ge=1, le=65535)
    protocol: str = Field(default="http", pattern=r"^https?$")


class ScriptsConfig(BaseModel):
    """Subcommands the dispatcher recognises and where their files live."""

    scripts: list[str] = Field(default=["build", "eject", "start", "test"])
    scripts_dir: Path = Field(default=SCRIPTS_DIR)
    update_docs_url: str = Field(
        default="https://github.com/facebook/create-react-app/blob/main/packages/react-scripts/template/README.md#updating-to-new-releases"
    )


class Config(BaseModel):
    """Global tiny-react configuration.

    Instances are created once by a CLI entry point and then passed to every
    component that needs them. Nothing reads module-level state.
    """

    create_app: CreateAppConfig = Field(default_factory=CreateAppConfig)
    dev_server: DevServerConfig = Field(default_factory=DevServerConfig)
    scripts: ScriptsConfig = Field(default_factory=ScriptsConfig)

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Args:
            path: Destination file.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            TINY_REACT_SCRIPTS_PACKAGE, TINY_REACT_MIN_NPM_VERSION,
            TINY_REACT_SCRIPTS_DIR, HOST, PORT, HTTPS.

        Raises:
            pydantic.ValidationError: If a variable holds an invalid value
                (a non-numeric or out-of-range ``PORT``, ...).
        """
        create_kwargs: dict[str, Any] = {}
        if os.environ.get("TINY_REACT_SCRIPTS_PACKAGE"):
            create_kwargs["scripts_package"] = os.environ["TINY_REACT_SCRIPTS_PACKAGE"]
        if os.environ.get("TINY_REACT_MIN_NPM_VERSION"):
            create_kwargs["min_npm_version"] = os.environ["TINY_REACT_MIN_NPM_VERSION"]

        server_kwargs: dict[str, Any] = {}
        if os.environ.get("HOST"):
            server_kwargs["host"] = os.environ["HOST"]
        if os.environ.get("PORT"):
            server_kwargs["default_port"] = os.environ["PORT"]
        if os.environ.get("HTTPS") == "true":
            server_kwargs["protocol"] = "https"

        scripts_kwargs: dict[str, Any] = {}
        if os.environ.get("TINY_REACT_SCRIPTS_DIR"):
            scripts_kwargs["scripts_dir"] = Path(os.environ["TINY_REACT_SCRIPTS_DIR"])

        return cls(
            create_app=CreateAppConfig(**create_kwargs),
            dev_server=DevServerConfig(**server_kwargs),
            scripts=ScriptsConfig(**scripts_kwargs),
        )


class AppPaths(BaseModel):
    """Well-known locations inside a generated app.

    Symlinks in the project folder are resolved so every derived path is
    stable regardless of how the directory was reached.
    """

    app_directory: Path

    @classmethod
    def from_directory(cls, directory: str | Path | None = None) -> "AppPaths":
        return cls(app_directory=Path(os.path.realpath(directory or os.getcwd())))

    @property
    def app_path(self) -> Path:
        return self.app_directory

    @property
    def app_html(self) -> Path:
        return self.app_directory / "public" / "index.html"

    @property
    def app_public(self) -> Path:
        return self.app_directory / "public"

    @property
    def app_index_js(self) -> Path:
        return self.app_directory / "src" / "index.js"

    @property
    def app_package_json(self) -> Path:
        return self.app_directory / "package.json"

    @property
    def use_yarn(self) -> bool:
        """``True`` when the app was installed with yarn (a lockfile exists)."""
        return (self.app_directory / "yarn.lock").exists()
