"""
Domain models — tool descriptors, install results and the registry.

    from idt.core.models import ToolDescriptor, InstallResult, Registry
"""

from idt.core.models.registry import ALL, Registry
from idt.core.models.result import InstallResult
from idt.core.models.tool import (
    BackendKind,
    DownloadFormat,
    ToolDescriptor,
)

__all__ = [
    "ALL",
    # tool.py
    "BackendKind",
    "DownloadFormat",
    # result.py
    "InstallResult",
    # registry.py
    "Registry",
    "ToolDescriptor",
]
