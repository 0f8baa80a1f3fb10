"""
L5 Orchestration — Batch install.

``run`` turns a user selection into one ``InstallResult`` per tool:
validate the whole selection, prepare the directories, install
sequentially, prune dead links. A failing tool never stops the batch.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from idt.core.errors import IdtError
from idt.core.models import InstallResult, Registry, ToolDescriptor
from idt.core.services.tool_install.detection.platform import Platform, detect_platform
from idt.core.services.tool_install.detection.tool_check import check_tool
from idt.core.services.tool_install.execution.download import latest_release_tag
from idt.core.services.tool_install.execution.subprocess_runner import CommandRunner
from idt.core.services.tool_install.execution.symlink import remove_dead_symlinks
from idt.core.services.tool_install.orchestration.installer import (
    ReleaseLookup,
    describe_install,
    install_tool,
)

logger = logging.getLogger(__name__)


@dataclass
class InstallReport:
    """Ordered results of one ``run``."""

    results: list[InstallResult] = field(default_factory=list)
    dev_tools_dir: str = ""
    bin_dir: str = ""
    dry_run: bool = False
    pruned: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if r.failed)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.results if r.status == "skipped")

    @property
    def all_ok(self) -> bool:
        return self.failed == 0

    @property
    def status(self) -> str:
        if self.failed == 0:
            return "ok"
        if self.succeeded > 0:
            return "partial"
        return "failed"

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "dry_run": self.dry_run,
            "dev_tools_dir": self.dev_tools_dir,
            "bin_dir": self.bin_dir,
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "skipped": self.skipped,
            "pruned": list(self.pruned),
            "results": [r.model_dump(mode="json") for r in self.results],
        }


def _install_one(
    tool: ToolDescriptor,
    dev_tools_dir: Path,
    bin_dir: Path,
    *,
    runner: CommandRunner,
    platform: Platform,
    release_lookup: ReleaseLookup,
    verify: bool,
) -> InstallResult:
    start = time.monotonic()

    def elapsed() -> int:
        return int((time.monotonic() - start) * 1000)

    try:
        bin_path = install_tool(
            tool, dev_tools_dir, bin_dir,
            runner=runner, platform=platform, release_lookup=release_lookup,
        )
        check_output = check_tool(tool, bin_path, runner) if verify else ""
    except IdtError as e:
        return InstallResult.failure(
            tool.name, e.kind, str(e), bin_name=tool.bin_name, duration_ms=elapsed(),
        )
    except OSError as e:
        return InstallResult.failure(
            tool.name, "io", str(e), bin_name=tool.bin_name, duration_ms=elapsed(),
        )

    return InstallResult.success(
        tool.name,
        str(bin_path),
        bin_name=tool.bin_name,
        duration_ms=elapsed(),
        check_output=check_output,
    )


def run(
    selected: Sequence[str] | None,
    dev_tools_dir: Path,
    bin_dir: Path,
    *,
    registry: Registry,
    runner: CommandRunner | None = None,
    platform: Platform | None = None,
    release_lookup: ReleaseLookup | None = None,
    dry_run: bool = False,
    verify: bool = True,
    on_result: Callable[[InstallResult], None] | None = None,
) -> InstallReport:
    """Install the selected tools, one after another.

    Args:
        selected: Tool keys (name or bin name), ``"all"``, or None/empty
            for the whole registry.
        dev_tools_dir: Root of the per-tool install directories.
        bin_dir: Directory on PATH receiving the executables.
        registry: Known tools.
        runner: Subprocess runner shared by every tool.
        platform: Target platform (the host when omitted).
        release_lookup: ``repo -> tag`` resolver.
        dry_run: Describe what would run, touch nothing.
        verify: Run each tool's ``check_args`` after installing it.
        on_result: Called with each result as soon as it exists.

    Returns:
        InstallReport in install order.

    Raises:
        UnknownTool: Before anything is touched, if any key is unknown.
    """
    tools = registry.resolve(selected)

    dev_tools_dir = Path(dev_tools_dir).expanduser()
    bin_dir = Path(bin_dir).expanduser()
    platform = platform or detect_platform()
    report = InstallReport(
        dev_tools_dir=str(dev_tools_dir),
        bin_dir=str(bin_dir),
        dry_run=dry_run,
    )

    if dry_run:
        for tool in tools:
            result = InstallResult.skip(
                tool.name,
                describe_install(tool, dev_tools_dir, bin_dir, platform=platform),
                bin_name=tool.bin_name,
            )
            report.results.append(result)
            if on_result:
                on_result(result)
        return report

    runner = runner or CommandRunner()
    release_lookup = release_lookup or latest_release_tag
    dev_tools_dir.mkdir(parents=True, exist_ok=True)
    bin_dir.mkdir(parents=True, exist_ok=True)

    logger.info("Installing %d tool(s) into %s", len(tools), bin_dir)

    for tool in tools:
        result = _install_one(
            tool, dev_tools_dir, bin_dir,
            runner=runner,
            platform=platform,
            release_lookup=release_lookup,
            verify=verify,
        )
        report.results.append(result)

        status_marker = "✓" if result.ok else "✗"
        if result.ok:
            logger.info("%s %s → %s", status_marker, tool.name, result.bin_path)
        else:
            logger.warning(
                "%s %s → %s: %s", status_marker, tool.name, result.error_kind, result.error,
            )
        if on_result:
            on_result(result)

    report.pruned = [str(p) for p in remove_dead_symlinks(bin_dir)]

    logger.info(
        "Install finished: %d ok, %d failed (%s)",
        report.succeeded, report.failed, report.status,
    )
    return report
