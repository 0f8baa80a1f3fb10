"""
Tests for CLI commands — install, list, check, and global options.
"""

import json
import os
import textwrap
from pathlib import Path

import pytest
from click.testing import CliRunner

from idt.main import cli


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch):
    """No user config, no env overrides, HOME inside tmp."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    for name in ("IDT_CONFIG", "IDT_DEV_TOOLS_DIR", "IDT_BIN_DIR", "IDT_LOG_LEVEL", "IDT_LOG_FILE"):
        monkeypatch.delenv(name, raising=False)


def _config(tmp_path: Path) -> Path:
    """Config with both directories under tmp and one extra npm tool."""
    path = tmp_path / "idt.yml"
    path.write_text(textwrap.dedent(f"""\
        dev_tools_dir: {tmp_path / "dev"}
        bin_dir: {tmp_path / "bin"}
        tools:
          - name: pyright
            backend: npm
            packages: [pyright]
            bin_name: pyright-langserver
    """))
    return path


class TestCLIGlobal:
    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "install" in result.output
        assert "check" in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_invalid_config(self, tmp_path: Path):
        bad = tmp_path / "bad.yml"
        bad.write_text("tools: [unclosed\n")
        result = CliRunner().invoke(cli, ["--config", str(bad), "list"])
        assert result.exit_code == 1
        assert "Invalid YAML" in result.output

    def test_missing_explicit_config(self, tmp_path: Path):
        result = CliRunner().invoke(cli, ["--config", str(tmp_path / "none.yml"), "list", "--json"])
        assert result.exit_code == 1
        assert json.loads(result.output)["error_kind"] == "config"


class TestListCommand:
    def test_list(self):
        result = CliRunner().invoke(cli, ["list"])
        assert result.exit_code == 0
        assert "typescript-language-server" in result.output
        assert "[cargo]" in result.output

    def test_list_json_includes_config_tools(self, tmp_path: Path):
        result = CliRunner().invoke(cli, ["--config", str(_config(tmp_path)), "list", "--json"])
        assert result.exit_code == 0
        rows = json.loads(result.output)
        assert rows[0]["name"] == "bash-language-server"
        assert rows[-1] == {
            "name": "pyright",
            "backend": "npm",
            "bin_name": "pyright-langserver",
            "source": "pyright",
            "description": "",
            "skipped": False,
        }


class TestInstallCommand:
    def test_unknown_key_exits_1(self, tmp_path: Path, fake_runner):
        result = CliRunner().invoke(
            cli,
            ["install", "no-such-tool", "--bin-dir", str(tmp_path / "bin")],
            obj={"runner": fake_runner},
        )
        assert result.exit_code == 1
        assert "no-such-tool" in result.output
        assert fake_runner.calls == []
        assert not (tmp_path / "bin").exists()

    def test_unknown_key_json(self, tmp_path: Path, fake_runner):
        result = CliRunner().invoke(
            cli,
            ["install", "nope", "--bin-dir", str(tmp_path / "bin"), "--json"],
            obj={"runner": fake_runner},
        )
        assert result.exit_code == 1
        assert json.loads(result.output)["error_kind"] == "unknown_tool"

    def test_install_success(self, tmp_path: Path, make_runner):
        runner = make_runner(bins={"pyright": ["pyright-langserver"]})
        result = CliRunner().invoke(
            cli,
            ["--config", str(_config(tmp_path)), "install", "pyright-langserver"],
            obj={"runner": runner},
        )
        assert result.exit_code == 0, result.output
        assert "1/1 installed" in result.output
        link = tmp_path / "bin" / "pyright-langserver"
        assert link.is_symlink()
        assert os.access(link, os.X_OK)

    def test_install_json_failure_exits_1(self, tmp_path: Path, make_runner):
        runner = make_runner(fail={"pyright": 1})
        result = CliRunner().invoke(
            cli,
            ["-q", "--config", str(_config(tmp_path)), "install", "pyright", "--json"],
            obj={"runner": runner},
        )
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["status"] == "failed"
        assert data["results"][0]["error_kind"] == "process_failed"

    def test_cli_dirs_override_config_and_env(self, tmp_path: Path, make_runner, monkeypatch):
        monkeypatch.setenv("IDT_BIN_DIR", str(tmp_path / "env-bin"))
        runner = make_runner(bins={"pyright": ["pyright-langserver"]})
        result = CliRunner().invoke(
            cli,
            [
                "--config", str(_config(tmp_path)),
                "install", "pyright",
                "--bin-dir", str(tmp_path / "cli-bin"),
                "--dev-tools-dir", str(tmp_path / "cli-dev"),
            ],
            obj={"runner": runner},
        )
        assert result.exit_code == 0, result.output
        assert (tmp_path / "cli-bin" / "pyright-langserver").is_symlink()
        assert (tmp_path / "cli-dev" / "pyright").is_dir()
        assert not (tmp_path / "env-bin").exists()

    def test_dry_run(self, tmp_path: Path, fake_runner):
        result = CliRunner().invoke(
            cli,
            ["install", "all", "--dry-run", "--bin-dir", str(tmp_path / "bin")],
            obj={"runner": fake_runner, "release_lookup": lambda repo: "v0.0.1"},
        )
        assert result.exit_code == 0, result.output
        assert "would be installed" in result.output
        assert fake_runner.calls == []
        assert not (tmp_path / "bin").exists()


class TestCheckCommand:
    def test_check_json(self, tmp_path: Path):
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir()
        tool = bin_dir / "taplo"
        tool.write_text("#!/bin/sh\n")
        tool.chmod(0o755)

        result = CliRunner().invoke(cli, ["check", "--bin-dir", str(bin_dir), "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [p["program"] for p in data["prerequisites"]][0] == "npm"
        status = {t["name"]: t["installed"] for t in data["tools"]}
        assert status["taplo"] is True
        assert status["deno"] is False

    def test_check_explicit_missing_exits_1(self, tmp_path: Path):
        result = CliRunner().invoke(cli, ["check", "deno", "--bin-dir", str(tmp_path)])
        assert result.exit_code == 1
        assert "0/1 installed" in result.output

    def test_check_unknown(self, tmp_path: Path):
        result = CliRunner().invoke(cli, ["check", "zzz", "--bin-dir", str(tmp_path)])
        assert result.exit_code == 1
        assert "zzz" in result.output
