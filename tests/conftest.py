"""
Shared test fixtures and configuration.

``FakeRunner`` stands in for ``CommandRunner``: it records every
command and simulates npm / pip / composer / cargo / curl / zcat by
creating the files those tools would create, so installs run end to
end without network or package managers.
"""

from __future__ import annotations

import gzip
import os
from pathlib import Path

import pytest

from idt.core.errors import ProcessFailed, SpawnFailed
from idt.core.models import Registry, ToolDescriptor
from idt.core.services.tool_install.detection.platform import Platform
from idt.core.services.tool_install.execution.subprocess_runner import (
    CommandResult,
    CommandRunner,
)

SCRIPT = "#!/bin/sh\necho {name} 1.0.0\n"


def _write_bin(path: Path, mode: int = 0o644) -> None:
    # Non-executable on purpose: linking must add the x bits.
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(SCRIPT.format(name=path.name))
    os.chmod(path, mode)


class FakeRunner(CommandRunner):
    """Recording runner that simulates package managers on disk."""

    def __init__(
        self,
        *,
        bins: dict[str, list[str]] | None = None,
        fail: dict[str, int] | None = None,
        missing: set[str] | None = None,
        downloads: dict[str, bytes] | None = None,
        http_codes: dict[str, int] | None = None,
    ):
        super().__init__()
        self.bins = bins or {}
        self.fail = fail or {}
        self.missing = missing or set()
        self.downloads = downloads or {}
        self.http_codes = http_codes or {}
        self.calls: list[list[str]] = []

    def programs(self) -> list[str]:
        return [Path(cmd[0]).name for cmd in self.calls]

    def _bins_for(self, package: str) -> list[str]:
        return self.bins.get(package, [package.rsplit("/", 1)[-1]])

    def run(self, cmd, *, cwd=None, stdin_path=None, stdout_path=None, timeout=None):
        cmd = [str(part) for part in cmd]
        self.calls.append(cmd)
        program = Path(cmd[0]).name

        if program in self.missing:
            raise SpawnFailed(program)
        for needle, code in self.fail.items():
            if needle in cmd:
                raise ProcessFailed(cmd, code, f"{needle}: simulated failure")

        stdout = ""
        if program == "npm":
            prefix = Path(cmd[cmd.index("--prefix") + 1])
            for package in cmd[cmd.index("--prefix") + 2:]:
                for name in self._bins_for(package):
                    _write_bin(prefix / "node_modules" / ".bin" / name)
        elif program == "python3" and cmd[1:3] == ["-m", "venv"]:
            _write_bin(Path(cmd[3]) / "bin" / "python", 0o755)
        elif program == "python" and "pip" in cmd:
            venv_bin = Path(cmd[0]).parent
            for package in cmd[cmd.index("--upgrade") + 1:]:
                if package == "pip":
                    continue
                for name in self._bins_for(package):
                    _write_bin(venv_bin / name)
        elif program == "composer":
            workdir = Path(cmd[cmd.index("--working-dir") + 1])
            for package in cmd[cmd.index("--working-dir") + 2:]:
                for name in self._bins_for(package):
                    _write_bin(workdir / "vendor" / "bin" / name)
        elif program == "cargo":
            root = Path(cmd[cmd.index("--root") + 1])
            for name in self._bins_for(cmd[2]):
                _write_bin(root / "bin" / name)
        elif program == "curl":
            url = cmd[-1]
            output = Path(cmd[cmd.index("--output") + 1])
            code = self.http_codes.get(url, 200)
            output.write_bytes(self.downloads.get(url, SCRIPT.format(name="download").encode()))
            stdout = str(code)
        elif program == "zcat":
            Path(stdout_path).write_bytes(gzip.decompress(Path(stdin_path).read_bytes()))
        else:
            stdout = f"{program} 1.0.0\n"

        return CommandResult(command=cmd, returncode=0, stdout=stdout)


def npm_tool(name: str, **kwargs) -> ToolDescriptor:
    return ToolDescriptor(name=name, backend="npm", packages=kwargs.pop("packages", [name]), **kwargs)


# ── Fixtures ────────────────────────────────────────────────────


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def dev_tools_dir(tmp_path: Path) -> Path:
    return tmp_path / "dev-tools"


@pytest.fixture
def bin_dir(tmp_path: Path) -> Path:
    return tmp_path / "bin"


@pytest.fixture
def linux_x86() -> Platform:
    return Platform(os="linux", arch="x86_64")


@pytest.fixture
def release_lookup():
    """Release resolver that always answers ``v1.2.3`` and records repos."""
    asked: list[str] = []

    def lookup(repo: str) -> str:
        asked.append(repo)
        return "v1.2.3"

    lookup.asked = asked
    return lookup


@pytest.fixture
def small_registry() -> Registry:
    """Three npm tools a, b, c in that order."""
    return Registry([npm_tool("a"), npm_tool("b"), npm_tool("c")])


@pytest.fixture
def make_runner():
    """``FakeRunner`` factory: ``make_runner(fail={"b": 1})``."""
    return FakeRunner


@pytest.fixture
def make_npm_tool():
    """``ToolDescriptor`` factory for npm tools."""
    return npm_tool
