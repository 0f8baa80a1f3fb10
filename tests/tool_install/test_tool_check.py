"""
Tests for prerequisite / installed-tool detection and the smoke check.
"""

import os
from pathlib import Path

import pytest

from idt.core.errors import ProcessFailed
from idt.core.models import ToolDescriptor
from idt.core.services.tool_install.detection.tool_check import (
    check_prerequisites,
    check_tool,
    installed_status,
)


class TestCheckPrerequisites:
    def test_reports_each_program_once(self):
        found = {"npm": "/usr/bin/npm", "curl": "/usr/bin/curl"}
        report = check_prerequisites(which=found.get)

        programs = [item["program"] for item in report]
        assert programs == ["npm", "python3", "composer", "curl", "zcat", "cargo"]

        npm = report[0]
        assert npm["found"] and npm["path"] == "/usr/bin/npm"
        assert npm["hint"] == ""

        cargo = report[-1]
        assert not cargo["found"]
        assert "rustup" in cargo["hint"]

    def test_program_shared_by_backends(self):
        report = check_prerequisites(which=lambda _: None)
        zcat = next(item for item in report if item["program"] == "zcat")
        assert zcat["backends"] == ["curl"]


class TestInstalledStatus:
    def test_installed_missing_dangling(self, tmp_path: Path, make_npm_tool):
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir()
        real = tmp_path / "real"
        real.write_text("#!/bin/sh\n")
        os.chmod(real, 0o755)
        (bin_dir / "a").symlink_to(real)
        (bin_dir / "c").symlink_to(tmp_path / "gone")

        tools = [make_npm_tool("a"), make_npm_tool("b"), make_npm_tool("c")]
        status = {s["name"]: s for s in installed_status(tools, bin_dir)}

        assert status["a"]["installed"]
        assert not status["b"]["installed"] and not status["b"]["dangling"]
        assert not status["c"]["installed"] and status["c"]["dangling"]


class TestCheckTool:
    def test_no_check_args_runs_nothing(self, fake_runner, make_npm_tool, tmp_path: Path):
        assert check_tool(make_npm_tool("a"), tmp_path / "a", fake_runner) == ""
        assert fake_runner.calls == []

    def test_first_output_line(self, fake_runner, tmp_path: Path):
        tool = ToolDescriptor(name="taplo", backend="cargo", packages=["taplo-cli"], check_args=["--version"])
        out = check_tool(tool, tmp_path / "taplo", fake_runner)
        assert out == "taplo 1.0.0"
        assert fake_runner.calls == [[str(tmp_path / "taplo"), "--version"]]

    def test_failure_propagates(self, make_runner, tmp_path: Path):
        runner = make_runner(fail={"--version": 2})
        tool = ToolDescriptor(name="taplo", backend="cargo", packages=["taplo-cli"], check_args=["--version"])
        with pytest.raises(ProcessFailed):
            check_tool(tool, tmp_path / "taplo", runner)
