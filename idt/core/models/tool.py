"""
Tool descriptor — the static definition of one installable tool.

A descriptor says *what* to install and *where the executable ends up*;
the installer decides *how* by matching on ``backend``. Descriptors are
built once at startup (built-in table + optional user config) and never
mutated.
"""

from __future__ import annotations

import string
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Placeholders understood by ``url`` and ``archive_bin`` templates.
TEMPLATE_FIELDS = frozenset({"name", "bin", "tag", "version", "os", "arch", "target"})

# Placeholders that require a release lookup before rendering.
RELEASE_FIELDS = frozenset({"tag", "version"})


class BackendKind(str, Enum):
    """How a tool's files get onto disk."""

    NPM = "npm"
    PIP = "pip"
    COMPOSER = "composer"
    CURL = "curl"
    CARGO = "cargo"


class DownloadFormat(str, Enum):
    """Shape of the artifact a curl tool downloads."""

    WRITE = "write"        # raw executable, written as-is
    GUNZIP = "gunzip"      # single gzip-compressed executable
    ARCHIVE = "archive"    # tar.gz / tar.xz / zip, extracted under dev-tools


PACKAGE_BACKENDS = frozenset({BackendKind.NPM, BackendKind.PIP, BackendKind.COMPOSER})


def template_fields(template: str) -> set[str]:
    """Names of the ``{placeholders}`` used in a template string."""
    return {
        field_name
        for _, field_name, _, _ in string.Formatter().parse(template)
        if field_name
    }


class ToolDescriptor(BaseModel):
    """One installable tool.

    ``bin_name`` defaults to ``name``. ``packages`` holds npm / pip /
    composer package specs or cargo crate names. Curl tools are described
    by a ``url`` template instead; ``os_names`` and ``arch_names`` map the
    detected platform onto the upstream project's asset naming. An
    ``arch_names`` key may also be ``<os>-<arch>`` when an upstream names
    the same CPU differently per OS.

    ``install_args`` are extra ``cargo install`` flags. ``wrap`` exposes
    an archive tool through a small exec script instead of a symlink,
    for programs that locate their runtime files from their own path.
    """

    model_config = ConfigDict(frozen=True, use_enum_values=False)

    name: str
    backend: BackendKind
    packages: tuple[str, ...] = ()
    bin_name: str = ""
    description: str = ""

    # curl only
    url: str = ""
    release_repo: str = ""
    format: DownloadFormat = DownloadFormat.WRITE
    archive_bin: str = ""
    os_names: dict[str, str] = Field(default_factory=dict)
    arch_names: dict[str, str] = Field(default_factory=dict)
    wrap: bool = False

    # npm / pip / composer only
    link_all: bool = False

    # cargo only
    install_args: tuple[str, ...] = ()

    check_args: tuple[str, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _default_bin_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("bin_name"):
            data = {**data, "bin_name": data.get("name", "")}
        return data

    @model_validator(mode="after")
    def _validate_fields(self) -> ToolDescriptor:
        for label, value in (("name", self.name), ("bin_name", self.bin_name)):
            if not value or not value.strip():
                raise ValueError(f"{label} must not be empty")
            if "/" in value:
                raise ValueError(f"{label} must not contain '/': {value!r}")

        if self.backend is BackendKind.CURL:
            if not self.url:
                raise ValueError(f"curl tool '{self.name}' needs a url")
            if self.format is DownloadFormat.ARCHIVE and not self.archive_bin:
                raise ValueError(f"archive tool '{self.name}' needs archive_bin")
            used = template_fields(self.url) | template_fields(self.archive_bin)
            unknown = used - TEMPLATE_FIELDS
            if unknown:
                raise ValueError(
                    f"unknown placeholder(s) in '{self.name}': {', '.join(sorted(unknown))}"
                )
            if used & RELEASE_FIELDS and not self.release_repo:
                raise ValueError(
                    f"'{self.name}' uses {{tag}}/{{version}} but has no release_repo"
                )
        elif not self.packages:
            raise ValueError(
                f"{self.backend.value} tool '{self.name}' needs at least one package"
            )

        if self.install_args and self.backend is not BackendKind.CARGO:
            raise ValueError(f"install_args is only supported for cargo tools ('{self.name}')")
        if self.wrap and self.format is not DownloadFormat.ARCHIVE:
            raise ValueError(f"wrap is only supported for archive tools ('{self.name}')")

        return self

    @property
    def needs_release_tag(self) -> bool:
        """Whether rendering the url requires the latest release tag."""
        used = template_fields(self.url) | template_fields(self.archive_bin)
        return bool(used & RELEASE_FIELDS)

    def summary(self) -> str:
        """One-line description of the install source."""
        if self.backend is BackendKind.CURL:
            return self.url
        return " ".join(self.packages)
