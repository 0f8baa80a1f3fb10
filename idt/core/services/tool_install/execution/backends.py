"""
L4 Execution — Package-manager backends.

Each function installs packages into a per-tool directory and returns
the directory holding the resulting executables. Nothing here links or
chmods; the installer does that afterwards.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from idt.core.services.tool_install.execution.subprocess_runner import CommandRunner

logger = logging.getLogger(__name__)


def tool_dir(dev_tools_dir: Path, tool_name: str) -> Path:
    """Private install directory of one tool, created on demand."""
    path = Path(dev_tools_dir) / tool_name
    path.mkdir(parents=True, exist_ok=True)
    return path


# ── npm ─────────────────────────────────────────────────────────


def npm_install(
    dev_tools_dir: Path,
    tool_name: str,
    packages: Sequence[str],
    *,
    runner: CommandRunner,
) -> Path:
    """``npm install`` into ``<dev_tools_dir>/<tool_name>``.

    Returns:
        ``<tool dir>/node_modules/.bin``
    """
    target = tool_dir(dev_tools_dir, tool_name)
    logger.info("npm install %s → %s", " ".join(packages), target)
    runner.run(["npm", "install", "--silent", "--prefix", str(target), *packages])
    return target / "node_modules" / ".bin"


# ── pip ─────────────────────────────────────────────────────────


def pip_install(
    dev_tools_dir: Path,
    tool_name: str,
    packages: Sequence[str],
    *,
    runner: CommandRunner,
) -> Path:
    """Create a venv under the tool dir and ``pip install`` into it.

    pip itself is upgraded in the same call; the venv is reused when it
    already exists.

    Returns:
        ``<tool dir>/.venv/bin``
    """
    target = tool_dir(dev_tools_dir, tool_name)
    venv = target / ".venv"
    venv_bin = venv / "bin"

    if not (venv_bin / "python").exists():
        logger.info("Creating venv %s", venv)
        runner.run(["python3", "-m", "venv", str(venv)])

    logger.info("pip install %s → %s", " ".join(packages), venv)
    runner.run([
        str(venv_bin / "python"), "-m", "pip", "install", "--upgrade",
        "pip", *packages,
    ])
    return venv_bin


# ── composer ────────────────────────────────────────────────────


def composer_install(
    dev_tools_dir: Path,
    tool_name: str,
    packages: Sequence[str],
    *,
    runner: CommandRunner,
) -> Path:
    """``composer require --dev`` into the tool dir.

    Returns:
        ``<tool dir>/vendor/bin``
    """
    target = tool_dir(dev_tools_dir, tool_name)
    logger.info("composer require %s → %s", " ".join(packages), target)
    runner.run([
        "composer", "require", "--dev", "--no-interaction",
        "--working-dir", str(target), *packages,
    ])
    return target / "vendor" / "bin"


# ── cargo ───────────────────────────────────────────────────────


def cargo_root(bin_dir: Path, dev_tools_dir: Path, tool_name: str) -> Path:
    """Where ``cargo install --root`` should point.

    Cargo always writes into ``<root>/bin``. When the bin directory is
    itself named ``bin`` its parent is used, so binaries land directly in
    place; otherwise each tool gets a root under the dev-tools dir.
    """
    bin_dir = Path(bin_dir)
    if bin_dir.name == "bin":
        return bin_dir.parent
    return Path(dev_tools_dir) / tool_name


def cargo_install(
    crates: Sequence[str],
    root: Path,
    *,
    runner: CommandRunner,
    extra_args: Sequence[str] = (),
) -> Path:
    """``cargo install --force`` each crate under ``root``.

    ``extra_args`` (e.g. ``--all-features``) are passed right after the
    crate name.

    Returns:
        ``<root>/bin``
    """
    root = Path(root)
    root.mkdir(parents=True, exist_ok=True)
    for crate in crates:
        logger.info("cargo install %s → %s", crate, root)
        runner.run(["cargo", "install", crate, *extra_args, "--force", "--root", str(root)])
    return root / "bin"
