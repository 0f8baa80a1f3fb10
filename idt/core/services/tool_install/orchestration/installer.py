"""
L5 Orchestration — Single-tool installer.

``install_tool`` is the one place that matches on a descriptor's
backend kind. Every branch ends with the tool's executable available
as ``<bin_dir>/<bin_name>``, or raises from the error taxonomy.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from idt.core.models import BackendKind, DownloadFormat, ToolDescriptor
from idt.core.services.tool_install.detection.platform import Platform, detect_platform
from idt.core.services.tool_install.execution.backends import (
    cargo_install,
    cargo_root,
    composer_install,
    npm_install,
    pip_install,
)
from idt.core.services.tool_install.execution.download import (
    ExtractTo,
    UnpackVia,
    WriteTo,
    curl_download,
    latest_release_tag,
)
from idt.core.services.tool_install.execution.subprocess_runner import CommandRunner
from idt.core.services.tool_install.execution.symlink import chmod_x, link, write_wrapper

logger = logging.getLogger(__name__)

ReleaseLookup = Callable[[str], str]

_PACKAGE_INSTALLERS = {
    BackendKind.NPM: npm_install,
    BackendKind.PIP: pip_install,
    BackendKind.COMPOSER: composer_install,
}


# ── Templating ──────────────────────────────────────────────────


def template_vars(tool: ToolDescriptor, platform: Platform, tag: str = "") -> dict[str, str]:
    """Values for the ``{placeholders}`` of a tool's url / archive_bin."""
    values = {
        "name": tool.name,
        "bin": tool.bin_name,
        "tag": tag,
        "version": tag[1:] if tag.startswith("v") else tag,
    }
    values.update(platform.template_vars(tool.os_names, tool.arch_names))
    return values


def render_url(tool: ToolDescriptor, platform: Platform, tag: str = "") -> str:
    """Download url of a curl tool for ``platform``."""
    return tool.url.format_map(template_vars(tool, platform, tag))


def _release_tag(tool: ToolDescriptor, release_lookup: ReleaseLookup) -> str:
    if not tool.needs_release_tag:
        return ""
    return release_lookup(tool.release_repo)


# ── Install ─────────────────────────────────────────────────────


def install_tool(
    tool: ToolDescriptor,
    dev_tools_dir: Path,
    bin_dir: Path,
    *,
    runner: CommandRunner | None = None,
    platform: Platform | None = None,
    release_lookup: ReleaseLookup | None = None,
) -> Path:
    """Install one tool and expose it in ``bin_dir``.

    Args:
        tool: Descriptor to install.
        dev_tools_dir: Root of the per-tool install directories.
        bin_dir: Directory on PATH receiving the executable.
        runner: Subprocess runner (a default one when omitted).
        platform: Target platform (the host when omitted).
        release_lookup: ``repo -> tag`` resolver for ``{tag}`` urls.

    Returns:
        ``<bin_dir>/<bin_name>``

    Raises:
        IdtError: Any backend, download or link failure, unchanged.
    """
    runner = runner or CommandRunner()
    platform = platform or detect_platform()
    release_lookup = release_lookup or latest_release_tag
    dev_tools_dir = Path(dev_tools_dir)
    bin_dir = Path(bin_dir)
    destination = bin_dir / tool.bin_name

    if tool.backend in _PACKAGE_INSTALLERS:
        install = _PACKAGE_INSTALLERS[tool.backend]
        source_bin = install(dev_tools_dir, tool.name, tool.packages, runner=runner)
        if tool.link_all:
            link(source_bin, bin_dir)
        else:
            link(source_bin / tool.bin_name, destination)

    elif tool.backend is BackendKind.CURL:
        tag = _release_tag(tool, release_lookup)
        values = template_vars(tool, platform, tag)
        url = tool.url.format_map(values)

        if tool.format is DownloadFormat.WRITE:
            curl_download(url, WriteTo(destination), runner=runner)
        elif tool.format is DownloadFormat.GUNZIP:
            curl_download(url, UnpackVia(destination), runner=runner)
        else:
            extracted = curl_download(url, ExtractTo(dev_tools_dir / tool.name), runner=runner)
            executable = extracted / tool.archive_bin.format_map(values)
            if tool.wrap:
                write_wrapper(executable, destination)
            else:
                link(executable, destination)

    elif tool.backend is BackendKind.CARGO:
        root = cargo_root(bin_dir, dev_tools_dir, tool.name)
        cargo_bin = cargo_install(
            tool.packages, root, runner=runner, extra_args=tool.install_args,
        )
        if cargo_bin == bin_dir:
            chmod_x(destination)
        else:
            link(cargo_bin / tool.bin_name, destination)

    else:
        raise ValueError(f"Unsupported backend: {tool.backend}")

    logger.debug("%s available at %s", tool.name, destination)
    return destination


def describe_install(
    tool: ToolDescriptor,
    dev_tools_dir: Path,
    bin_dir: Path,
    *,
    platform: Platform | None = None,
) -> str:
    """Human-readable plan of what ``install_tool`` would do (no side effects)."""
    platform = platform or detect_platform()
    destination = Path(bin_dir) / tool.bin_name
    tool_dir = Path(dev_tools_dir) / tool.name

    if tool.backend in _PACKAGE_INSTALLERS:
        return (
            f"{tool.backend.value} install {' '.join(tool.packages)} "
            f"into {tool_dir}, link {destination}"
        )
    if tool.backend is BackendKind.CARGO:
        root = cargo_root(bin_dir, dev_tools_dir, tool.name)
        args = "".join(f" {arg}" for arg in tool.install_args)
        return f"cargo install {' '.join(tool.packages)}{args} --root {root}"

    tag = f"<latest {tool.release_repo}>" if tool.needs_release_tag else ""
    url = render_url(tool, platform, tag)
    if tool.format is DownloadFormat.ARCHIVE:
        verb = "wrap" if tool.wrap else "link"
        return f"download {url}, extract into {tool_dir}, {verb} {destination}"
    return f"download {url} to {destination}"
