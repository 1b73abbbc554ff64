"""Unit tests for Config and related Pydantic models (tiny_react.config).

Tests cover:
- CreateAppConfig defaults (allow-list, log prefixes, dependencies)
- DevServerConfig defaults and validation
- ScriptsConfig defaults
- Config save/load, from_env (including invalid values)
- AppPaths derived paths and yarn detection
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from tiny_react.config import (
    SCRIPTS_DIR,
    AppPaths,
    Config,
    CreateAppConfig,
    DevServerConfig,
    ScriptsConfig,
)


# ---------------------------------------------------------------------------
# CreateAppConfig
# ---------------------------------------------------------------------------


class TestCreateAppConfig:
    @pytest.mark.unit
    def test_allow_list_defaults(self):
        config = CreateAppConfig()
        for name in (".DS_Store", "README.md", "LICENSE", ".npmignore", "docs", ".git"):
            assert name in config.valid_files

    @pytest.mark.unit
    def test_error_log_patterns(self):
        config = CreateAppConfig()
        assert config.error_log_file_patterns == [
            "npm-debug.log",
            "yarn-error.log",
            "yarn-debug.log",
        ]

    @pytest.mark.unit
    def test_generated_files_cover_manifest_and_install_dir(self):
        config = CreateAppConfig()
        assert "package.json" in config.known_generated_files
        assert "node_modules" in config.known_generated_files

    @pytest.mark.unit
    def test_runtime_defaults(self):
        config = CreateAppConfig()
        assert config.runtime_dependencies == ["react", "react-dom"]
        assert config.scripts_package == "file:../tiny-react-scripts"
        assert config.initial_version == "0.1.0"
        assert config.min_npm_version == "3.0.0"
        assert config.engines_key == "python"

    @pytest.mark.unit
    def test_generator_defaults_to_local_path(self):
        spec = CreateAppConfig().scripts_package
        assert spec.startswith("file:")
        assert spec.endswith("/tiny-react-scripts")

    @pytest.mark.unit
    def test_instances_do_not_share_lists(self):
        first = CreateAppConfig()
        second = CreateAppConfig()
        first.valid_files.append("extra")
        assert "extra" not in second.valid_files


# ---------------------------------------------------------------------------
# DevServerConfig
# ---------------------------------------------------------------------------


class TestDevServerConfig:
    @pytest.mark.unit
    def test_defaults(self):
        server = DevServerConfig()
        assert server.host == "0.0.0.0"
        assert server.default_port == 3000
        assert server.protocol == "http"

    @pytest.mark.unit
    def test_port_out_of_range_rejected(self):
        with pytest.raises(ValidationError):
            DevServerConfig(default_port=70000)

    @pytest.mark.unit
    def test_port_zero_rejected(self):
        with pytest.raises(ValidationError):
            DevServerConfig(default_port=0)

    @pytest.mark.unit
    def test_unknown_protocol_rejected(self):
        with pytest.raises(ValidationError):
            DevServerConfig(protocol="ftp")


# ---------------------------------------------------------------------------
# ScriptsConfig
# ---------------------------------------------------------------------------


class TestScriptsConfig:
    @pytest.mark.unit
    def test_recognised_scripts(self):
        assert sorted(ScriptsConfig().scripts) == ["build", "eject", "start", "test"]

    @pytest.mark.unit
    def test_scripts_dir_holds_start(self):
        config = ScriptsConfig()
        assert config.scripts_dir == SCRIPTS_DIR
        assert (config.scripts_dir / "start.py").is_file()


# ---------------------------------------------------------------------------
# Config save / load
# ---------------------------------------------------------------------------


class TestConfigSaveLoad:
    @pytest.mark.unit
    def test_save_writes_json(self, tmp_path: Path):
        path = Config().save(tmp_path / "config.json")
        data = json.loads(path.read_text())
        assert data["dev_server"]["default_port"] == 3000

    @pytest.mark.unit
    def test_load_roundtrip(self, tmp_path: Path):
        config = Config(dev_server=DevServerConfig(default_port=4000))
        path = config.save(tmp_path / "config.json")
        loaded = Config.load(path)
        assert loaded.dev_server.default_port == 4000
        assert loaded.create_app.runtime_dependencies == ["react", "react-dom"]

    @pytest.mark.unit
    def test_save_creates_parent_dirs(self, tmp_path: Path):
        path = Config().save(tmp_path / "deep" / "nested" / "config.json")
        assert path.exists()


# ---------------------------------------------------------------------------
# Config.from_env
# ---------------------------------------------------------------------------


class TestConfigFromEnv:
    @pytest.mark.unit
    def test_defaults_when_no_env(self):
        with patch.dict(os.environ, {}, clear=True):
            config = Config.from_env()
        assert config.create_app.scripts_package == "file:../tiny-react-scripts"
        assert config.dev_server.default_port == 3000

    @pytest.mark.unit
    def test_scripts_package_from_env(self):
        env = {"TINY_REACT_SCRIPTS_PACKAGE": "file:../local-scripts"}
        with patch.dict(os.environ, env, clear=True):
            config = Config.from_env()
        assert config.create_app.scripts_package == "file:../local-scripts"

    @pytest.mark.unit
    def test_min_npm_version_from_env(self):
        with patch.dict(os.environ, {"TINY_REACT_MIN_NPM_VERSION": "6.0.0"}, clear=True):
            config = Config.from_env()
        assert config.create_app.min_npm_version == "6.0.0"

    @pytest.mark.unit
    def test_dev_server_from_env(self):
        env = {"HOST": "127.0.0.1", "PORT": "4000", "HTTPS": "true"}
        with patch.dict(os.environ, env, clear=True):
            config = Config.from_env()
        assert config.dev_server.host == "127.0.0.1"
        assert config.dev_server.default_port == 4000
        assert config.dev_server.protocol == "https"

    @pytest.mark.unit
    def test_invalid_port_from_env_rejected(self):
        with patch.dict(os.environ, {"PORT": "99999"}, clear=True):
            with pytest.raises(ValidationError):
                Config.from_env()

    @pytest.mark.unit
    def test_non_numeric_port_from_env_rejected(self):
        with patch.dict(os.environ, {"PORT": "abc"}, clear=True):
            with pytest.raises(ValidationError):
                Config.from_env()

    @pytest.mark.unit
    def test_scripts_dir_from_env(self, tmp_path: Path):
        with patch.dict(os.environ, {"TINY_REACT_SCRIPTS_DIR": str(tmp_path)}, clear=True):
            config = Config.from_env()
        assert config.scripts.scripts_dir == tmp_path


# ---------------------------------------------------------------------------
# AppPaths
# ---------------------------------------------------------------------------


class TestAppPaths:
    @pytest.mark.unit
    def test_derived_paths(self, tmp_path: Path):
        paths = AppPaths.from_directory(tmp_path)
        root = Path(os.path.realpath(tmp_path))
        assert paths.app_path == root
        assert paths.app_html == root / "public" / "index.html"
        assert paths.app_public == root / "public"
        assert paths.app_index_js == root / "src" / "index.js"
        assert paths.app_package_json == root / "package.json"

    @pytest.mark.unit
    def test_symlinks_resolved(self, tmp_path: Path):
        real = tmp_path / "real"
        real.mkdir()
        link = tmp_path / "link"
        link.symlink_to(real, target_is_directory=True)
        assert AppPaths.from_directory(link).app_path == Path(os.path.realpath(real))

    @pytest.mark.unit
    def test_use_yarn_follows_lockfile(self, tmp_path: Path):
        paths = AppPaths.from_directory(tmp_path)
        assert paths.use_yarn is False
        (tmp_path / "yarn.lock").write_text("")
        assert paths.use_yarn is True
