"""
L4 Execution — Release downloads.

``curl_download`` fetches a url with curl and lands the body in one of
three shapes (``WriteTo``, ``UnpackVia``, ``ExtractTo``). Bodies always
go to a temporary sibling first and are moved into place only once
complete, so an interrupted download never leaves a half-written
binary behind.

``latest_release_tag`` asks the GitHub REST API for the newest release.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import tarfile
import tempfile
import urllib.error
import urllib.request
import zipfile
from dataclasses import dataclass
from pathlib import Path

from idt.core.errors import DownloadIOError, HttpStatusError, ReleaseLookupError
from idt.core.services.tool_install.data.constants import DECOMPRESS_COMMAND, GITHUB_API
from idt.core.services.tool_install.execution.subprocess_runner import CommandRunner
from idt.core.services.tool_install.execution.symlink import chmod_x

logger = logging.getLogger(__name__)


# ── Output shapes ───────────────────────────────────────────────


@dataclass(frozen=True)
class WriteTo:
    """Write the body as-is to ``path`` and mark it executable."""

    path: Path


@dataclass(frozen=True)
class UnpackVia:
    """Pipe the body through ``decompress_command`` into ``path``."""

    path: Path
    decompress_command: tuple[str, ...] = DECOMPRESS_COMMAND


@dataclass(frozen=True)
class ExtractTo:
    """Extract a tar (any compression) or zip body into ``directory``."""

    directory: Path


DownloadOutput = WriteTo | UnpackVia | ExtractTo


# ── curl ────────────────────────────────────────────────────────


def curl_download(url: str, output: DownloadOutput, *, runner: CommandRunner) -> Path:
    """Download ``url`` into ``output``.

    Returns:
        The written file (``WriteTo`` / ``UnpackVia``) or the extraction
        directory (``ExtractTo``).

    Raises:
        SpawnFailed: curl (or the decompressor) is not on PATH.
        ProcessFailed: curl or the decompressor exited non-zero.
        HttpStatusError: The server answered with a non-2xx status.
        DownloadIOError: The body could not be written or unpacked.
    """
    if isinstance(output, ExtractTo):
        anchor = Path(output.directory)
    else:
        anchor = Path(output.path)
    parent = anchor.parent

    try:
        parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{anchor.name}.", suffix=".download", dir=parent)
        os.close(fd)
    except OSError as e:
        raise DownloadIOError(anchor, str(e)) from e
    tmp = Path(tmp_name)

    try:
        _fetch(url, tmp, runner)

        if isinstance(output, WriteTo):
            return _finish_file(tmp, anchor)

        if isinstance(output, UnpackVia):
            unpacked = tmp.with_suffix(".unpacked")
            try:
                runner.run(list(output.decompress_command), stdin_path=tmp, stdout_path=unpacked)
                return _finish_file(unpacked, anchor)
            finally:
                unpacked.unlink(missing_ok=True)

        return _extract(tmp, anchor)
    finally:
        tmp.unlink(missing_ok=True)


def _fetch(url: str, tmp: Path, runner: CommandRunner) -> None:
    logger.info("Downloading %s", url)
    result = runner.run([
        "curl", "--location", "--silent", "--show-error",
        "--output", str(tmp),
        "--write-out", "%{http_code}",
        url,
    ])
    try:
        code = int(result.stdout.strip() or 0)
    except ValueError:
        code = 0
    if not 200 <= code < 300:
        raise HttpStatusError(code, url)
    logger.debug("HTTP %d for %s", code, url)


def _finish_file(source: Path, destination: Path) -> Path:
    try:
        os.replace(source, destination)
        chmod_x(destination)
    except OSError as e:
        raise DownloadIOError(destination, str(e)) from e
    return destination


def _extract(archive: Path, directory: Path) -> Path:
    """Unpack ``archive`` into a fresh ``directory`` (previous content replaced)."""
    staging = directory.with_name(f".{directory.name}.extract")
    try:
        if staging.exists():
            shutil.rmtree(staging)
        staging.mkdir(parents=True)

        if zipfile.is_zipfile(archive):
            _extract_zip(archive, staging)
        elif tarfile.is_tarfile(archive):
            with tarfile.open(archive, "r:*") as tar:
                tar.extractall(staging, filter="data")
        else:
            raise DownloadIOError(directory, "not a tar or zip archive")

        if directory.exists():
            shutil.rmtree(directory)
        os.replace(staging, directory)
    except (OSError, tarfile.TarError, zipfile.BadZipFile) as e:
        raise DownloadIOError(directory, str(e)) from e
    finally:
        if staging.exists():
            shutil.rmtree(staging, ignore_errors=True)

    logger.debug("Extracted %s into %s", archive.name, directory)
    return directory


def _extract_zip(archive: Path, directory: Path) -> None:
    # zipfile drops unix permissions; restore them from external_attr.
    with zipfile.ZipFile(archive) as zf:
        for info in zf.infolist():
            extracted = Path(zf.extract(info, directory))
            mode = info.external_attr >> 16
            if mode and not info.is_dir():
                os.chmod(extracted, mode & 0o777)


# ── GitHub releases ─────────────────────────────────────────────


def latest_release_tag(
    repo: str,
    *,
    token: str | None = None,
    timeout: int = 15,
) -> str:
    """Return the ``tag_name`` of the latest release of ``repo``.

    Args:
        repo: GitHub repo in ``owner/repo`` format.
        token: API token; defaults to ``$GITHUB_TOKEN`` when set.
        timeout: HTTP request timeout in seconds.

    Raises:
        ReleaseLookupError: Network failure, non-2xx answer or no tag.
    """
    api_url = f"{GITHUB_API}/repos/{repo}/releases/latest"
    headers = {
        "Accept": "application/vnd.github+json",
        "User-Agent": "idt",
    }
    token = token if token is not None else os.environ.get("GITHUB_TOKEN", "")
    if token:
        headers["Authorization"] = f"Bearer {token}"

    logger.debug("Looking up latest release of %s", repo)
    try:
        req = urllib.request.Request(api_url, headers=headers)
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            data = json.loads(resp.read())
    except urllib.error.HTTPError as e:
        raise ReleaseLookupError(repo, f"HTTP {e.code}") from e
    except (urllib.error.URLError, OSError, ValueError) as e:
        raise ReleaseLookupError(repo, str(e)) from e

    tag = data.get("tag_name", "") if isinstance(data, dict) else ""
    if not tag:
        raise ReleaseLookupError(repo, "response has no tag_name")
    logger.info("Latest release of %s is %s", repo, tag)
    return tag
