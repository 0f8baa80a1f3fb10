"""
L3 Detection — ``__init__.py`` re-exports all detection functions.

These functions READ system state but never WRITE.
"""

from idt.core.services.tool_install.detection.platform import (  # noqa: F401
    Platform,
    detect_platform,
)
from idt.core.services.tool_install.detection.tool_check import (  # noqa: F401
    check_prerequisites,
    check_tool,
    installed_status,
)
