"""
L3 Detection — Installed-tool and prerequisite checks.

Read-only probes: which backend executables are on PATH, which tools
already have an executable in the bin directory, and the smoke check
run against a freshly installed binary.
"""

from __future__ import annotations

import shutil
from collections.abc import Callable, Iterable
from pathlib import Path

from idt.core.models import ToolDescriptor
from idt.core.services.tool_install.data.constants import BACKEND_PROGRAMS, PREREQUISITE_HINTS
from idt.core.services.tool_install.execution.subprocess_runner import CommandRunner
from idt.core.services.tool_install.execution.symlink import is_executable


def check_prerequisites(
    which: Callable[[str], str | None] = shutil.which,
) -> list[dict]:
    """Report every backend executable and whether it is on PATH.

    Returns:
        ``[{"program", "backends", "path", "found", "hint"}, ...]`` in
        backend declaration order.
    """
    programs: dict[str, list[str]] = {}
    for backend, names in BACKEND_PROGRAMS.items():
        for program in names:
            programs.setdefault(program, []).append(backend)

    report = []
    for program, backends in programs.items():
        path = which(program)
        report.append({
            "program": program,
            "backends": backends,
            "path": path,
            "found": path is not None,
            "hint": "" if path else PREREQUISITE_HINTS.get(program, ""),
        })
    return report


def installed_status(tools: Iterable[ToolDescriptor], bin_dir: Path) -> list[dict]:
    """Whether each tool's ``bin_name`` exists and is executable in ``bin_dir``."""
    bin_dir = Path(bin_dir)
    status = []
    for tool in tools:
        path = bin_dir / tool.bin_name
        status.append({
            "name": tool.name,
            "bin_name": tool.bin_name,
            "path": str(path),
            "installed": is_executable(path),
            "dangling": path.is_symlink() and not path.exists(),
        })
    return status


def check_tool(tool: ToolDescriptor, bin_path: Path, runner: CommandRunner) -> str:
    """Run ``bin_path`` with the tool's ``check_args``.

    Returns:
        The first non-empty output line ('' when the tool has no check).

    Raises:
        SpawnFailed / ProcessFailed: The binary did not run cleanly.
    """
    if not tool.check_args:
        return ""
    result = runner.run([str(bin_path), *tool.check_args], timeout=60)
    for line in (result.stdout + "\n" + result.stderr).splitlines():
        if line.strip():
            return line.strip()
    return ""
