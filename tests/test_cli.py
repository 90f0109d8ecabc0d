"""Tests for the asset-sync command-line interface."""

import pytest
from typer.testing import CliRunner

from asset_sync.cli import app as app_module
from asset_sync.cli.app import app
from asset_sync.storage.config_manager import ConfigManager


class TestCLI:
    """Test CLI commands that do not need a network."""

    def setup_method(self):
        """Set up test runner."""
        self.runner = CliRunner()

    @pytest.fixture(autouse=True)
    def config_file(self, tmp_path, monkeypatch):
        path = tmp_path / "config" / "config.ini"
        monkeypatch.setattr(app_module, "CONFIG_FILE", path)
        return path

    def test_version(self):
        result = self.runner.invoke(app, ["--version"])

        assert result.exit_code == 0

    def test_init_writes_config(self, config_file, tmp_path):
        result = self.runner.invoke(
            app,
            [
                "init",
                "https://cdn.example.com",
                "--output-dir",
                str(tmp_path / "out"),
                "--resource-version",
                "24-01-01",
                "--whitelist",
                "arts/",
            ],
        )

        assert result.exit_code == 0
        config = ConfigManager(config_file).load_config()
        assert config.server_url == "https://cdn.example.com"
        assert config.path_whitelist == ["arts/"]

    def test_init_without_version_source_fails(self, tmp_path):
        result = self.runner.invoke(
            app, ["init", "https://cdn.example.com", "--output-dir", str(tmp_path)]
        )

        assert result.exit_code == 1

    def test_validate_without_config_fails(self):
        result = self.runner.invoke(app, ["validate"])

        assert result.exit_code == 1

    def test_clear_cache_removes_file(self, config_file, tmp_path):
        self.runner.invoke(
            app,
            [
                "init",
                "https://cdn.example.com",
                "-o",
                str(tmp_path / "out"),
                "--resource-version",
                "v1",
            ],
        )
        cache_file = config_file.parent / "hash_cache.json"
        cache_file.write_text("{}", encoding="utf-8")

        result = self.runner.invoke(app, ["clear-cache", "--force"])

        assert result.exit_code == 0
        assert not cache_file.exists()

    @pytest.mark.parametrize(
        "args",
        [
            ["sync", "-w", "arts/", "-j", "4", "--dry-run"],
            ["plan", "-w", "arts/"],
        ],
    )
    def test_short_whitelist_option_takes_text(self, args):
        """``-w`` is the whitelist everywhere; a parse error would exit with 2."""
        result = self.runner.invoke(app, args)

        assert result.exit_code == 1
