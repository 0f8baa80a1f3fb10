"""
L4 Execution — Symlink and permission helper.

Exposes installed binaries in the bin directory. Links are swapped in
atomically (temporary link + ``os.replace``), so a destination is never
observed missing and re-running is a no-op when the link is already
correct.
"""

from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass, field
from pathlib import Path

from idt.core.errors import LinkError, SourceMissing

logger = logging.getLogger(__name__)

_EXEC_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


@dataclass
class LinkOutcome:
    """Links produced by one ``link`` call."""

    created: list[Path] = field(default_factory=list)
    unchanged: list[Path] = field(default_factory=list)

    @property
    def links(self) -> list[Path]:
        """Every link the call is responsible for, new or already correct."""
        return self.created + self.unchanged


def link(source: Path, destination: Path) -> LinkOutcome:
    """Symlink ``source`` into ``destination`` and make the target executable.

    - ``source`` is a directory: every file in it is linked into the
      ``destination`` directory under its own name.
    - ``destination`` is an existing directory: ``source`` is linked into
      it under its own name.
    - otherwise ``destination`` is the link path; whatever sits there is
      replaced.

    Raises:
        SourceMissing: ``source`` does not exist (or is a dangling link).
        LinkError: A real directory is in the way of a link.
    """
    source = Path(source)
    destination = Path(destination)

    if not source.exists():
        raise SourceMissing(source)

    outcome = LinkOutcome()

    if source.is_dir():
        destination.mkdir(parents=True, exist_ok=True)
        for entry in sorted(source.iterdir()):
            if entry.is_dir():
                continue
            _link_one(entry, destination / entry.name, outcome)
    elif destination.is_dir() and not destination.is_symlink():
        _link_one(source, destination / source.name, outcome)
    else:
        destination.parent.mkdir(parents=True, exist_ok=True)
        _link_one(source, destination, outcome)

    return outcome


def _link_one(source: Path, link_path: Path, outcome: LinkOutcome) -> None:
    target = source.absolute()

    if link_path.is_symlink() and Path(os.readlink(link_path)) == target:
        outcome.unchanged.append(link_path)
    else:
        if link_path.is_dir() and not link_path.is_symlink():
            raise LinkError(f"Refusing to replace directory {link_path} with a link")
        tmp = link_path.with_name(f".{link_path.name}.idt-tmp")
        if tmp.is_symlink() or tmp.exists():
            tmp.unlink()
        tmp.symlink_to(target)
        os.replace(tmp, link_path)
        outcome.created.append(link_path)
        logger.debug("Linked %s → %s", link_path, target)

    chmod_x(link_path)


def write_wrapper(source: Path, destination: Path) -> bool:
    """Expose ``source`` as an ``exec`` shell script at ``destination``.

    Used instead of a symlink for programs that resolve their support
    files from the path they were started with.

    Returns:
        ``True`` when the script was (re)written, ``False`` when it was
        already up to date.

    Raises:
        SourceMissing: ``source`` does not exist.
        LinkError: A real directory is in the way.
    """
    source = Path(source)
    destination = Path(destination)
    if not source.exists():
        raise SourceMissing(source)
    if destination.is_dir() and not destination.is_symlink():
        raise LinkError(f"Refusing to replace directory {destination} with a wrapper")

    chmod_x(source)
    script = f'#!/bin/sh\nexec "{source.absolute()}" "$@"\n'
    if (
        destination.is_file()
        and not destination.is_symlink()
        and destination.read_text(encoding="utf-8", errors="replace") == script
    ):
        chmod_x(destination)
        return False

    destination.parent.mkdir(parents=True, exist_ok=True)
    tmp = destination.with_name(f".{destination.name}.idt-tmp")
    if tmp.is_symlink() or tmp.exists():
        tmp.unlink()
    tmp.write_text(script, encoding="utf-8")
    chmod_x(tmp)
    os.replace(tmp, destination)
    logger.debug("Wrote wrapper %s → %s", destination, source)
    return True


def chmod_x(path: Path) -> None:
    """Add the executable bits to ``path`` (following symlinks)."""
    path = Path(path)
    if not path.exists():
        raise SourceMissing(path)
    mode = path.stat().st_mode
    if mode & _EXEC_BITS != _EXEC_BITS:
        os.chmod(path, mode | _EXEC_BITS)


def is_executable(path: Path) -> bool:
    """Whether ``path`` resolves to an executable regular file."""
    path = Path(path)
    return path.is_file() and os.access(path, os.X_OK)


def remove_dead_symlinks(directory: Path) -> list[Path]:
    """Delete symlinks in ``directory`` whose target no longer exists.

    Returns:
        The removed link paths.
    """
    directory = Path(directory)
    if not directory.is_dir():
        return []

    removed: list[Path] = []
    for entry in sorted(directory.iterdir()):
        if entry.is_symlink() and not entry.exists():
            entry.unlink()
            removed.append(entry)
            logger.info("Removed dead symlink %s", entry)
    return removed
