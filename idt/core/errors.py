"""
Error taxonomy for tool provisioning.

Every failure that can happen while installing a tool maps to one of
these classes. Each carries a stable ``kind`` string that ends up in
``InstallResult.error_kind`` and in the JSON report.

    IdtError
    ├── UnknownTool
    ├── BackendError
    │   ├── SpawnFailed
    │   └── ProcessFailed
    ├── DownloadError
    │   ├── HttpStatusError
    │   ├── DownloadIOError
    │   └── ReleaseLookupError
    └── LinkError
        └── SourceMissing

``ConfigError`` lives next to the loader (``idt.core.config.loader``).
"""

from __future__ import annotations

import shlex
from collections.abc import Sequence
from pathlib import Path


class IdtError(Exception):
    """Base class for every error raised by idt."""

    kind = "error"


class UnknownTool(IdtError):
    """One or more requested tool keys are not in the registry."""

    kind = "unknown_tool"

    def __init__(self, keys: Sequence[str]):
        self.keys = list(keys)
        super().__init__(f"Unknown tool(s): {', '.join(self.keys)}")


# ── Backend ─────────────────────────────────────────────────────


class BackendError(IdtError):
    """A package-manager or helper subprocess could not do its job."""

    kind = "backend"


class SpawnFailed(BackendError):
    """The executable could not be started (usually: not on PATH)."""

    kind = "spawn_failed"

    def __init__(self, program: str, reason: str = ""):
        self.program = program
        self.reason = reason
        message = f"Cannot run '{program}'"
        message += f": {reason}" if reason else " (not found on PATH)"
        super().__init__(message)


class ProcessFailed(BackendError):
    """The subprocess ran but exited non-zero."""

    kind = "process_failed"

    def __init__(self, command: Sequence[str], exit_code: int, stderr: str = ""):
        self.command = list(command)
        self.exit_code = exit_code
        self.stderr = stderr
        message = f"Command failed (exit {exit_code}): {shlex.join(self.command)}"
        if stderr.strip():
            message += f"\n{stderr.strip()}"
        super().__init__(message)


# ── Download ────────────────────────────────────────────────────


class DownloadError(IdtError):
    """Fetching a release artifact failed."""

    kind = "download"


class HttpStatusError(DownloadError):
    """The server answered with a non-2xx status."""

    kind = "http_status"

    def __init__(self, code: int, url: str):
        self.code = code
        self.url = url
        super().__init__(f"HTTP {code} for {url}")


class DownloadIOError(DownloadError):
    """The body could not be written, decompressed or extracted locally."""

    kind = "io_error"

    def __init__(self, path: Path | str, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot write {self.path}: {reason}")


class ReleaseLookupError(DownloadError):
    """The latest release tag of a repository could not be resolved."""

    kind = "release_lookup"

    def __init__(self, repo: str, reason: str):
        self.repo = repo
        self.reason = reason
        super().__init__(f"Cannot resolve latest release of {repo}: {reason}")


# ── Link ────────────────────────────────────────────────────────


class LinkError(IdtError):
    """Exposing an installed binary in the bin directory failed."""

    kind = "link"


class SourceMissing(LinkError):
    """The backend claimed success but the binary is not where expected."""

    kind = "source_missing"

    def __init__(self, path: Path | str):
        self.path = Path(path)
        super().__init__(f"Link source does not exist: {self.path}")
