"""L0 Data — built-in tool table and constants."""

from idt.core.services.tool_install.data.constants import (  # noqa: F401
    BACKEND_PROGRAMS,
    DECOMPRESS_COMMAND,
    DEFAULT_TIMEOUT,
    GITHUB_API,
    PREREQUISITE_HINTS,
    _ARCH_ALIASES,
    _TARGET_SUFFIX,
)
from idt.core.services.tool_install.data.tools import TOOLS  # noqa: F401
