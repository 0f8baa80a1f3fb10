"""
L3 Detection — Host platform.

Read-only probe of the running OS / CPU, plus the template variables
derived from it for release asset urls.
"""

from __future__ import annotations

import platform as _platform
from dataclasses import dataclass

from idt.core.services.tool_install.data.constants import _ARCH_ALIASES, _TARGET_SUFFIX


@dataclass(frozen=True)
class Platform:
    """Normalized host platform: ``os`` is ``darwin``/``linux``, ``arch`` is
    ``x86_64``/``aarch64``."""

    os: str
    arch: str

    @property
    def target(self) -> str:
        """Rust-style target triple, e.g. ``aarch64-apple-darwin``."""
        suffix = _TARGET_SUFFIX.get(self.os, self.os)
        return f"{self.arch}-{suffix}"

    def template_vars(
        self,
        os_names: dict[str, str] | None = None,
        arch_names: dict[str, str] | None = None,
    ) -> dict[str, str]:
        """Platform placeholders, renamed to a tool's naming convention.

        ``arch_names`` is looked up by ``<os>-<arch>`` first, then by
        ``<arch>``.
        """
        arch_names = arch_names or {}
        arch = arch_names.get(f"{self.os}-{self.arch}", arch_names.get(self.arch, self.arch))
        return {
            "os": (os_names or {}).get(self.os, self.os),
            "arch": arch,
            "target": self.target,
        }


def detect_platform(system: str | None = None, machine: str | None = None) -> Platform:
    """Detect the host platform.

    Args:
        system: Override for ``platform.system()`` (tests).
        machine: Override for ``platform.machine()`` (tests).
    """
    os_name = (system if system is not None else _platform.system()).lower()
    raw_arch = machine if machine is not None else _platform.machine()
    arch = _ARCH_ALIASES.get(raw_arch, _ARCH_ALIASES.get(raw_arch.lower(), raw_arch.lower()))
    return Platform(os=os_name, arch=arch)
