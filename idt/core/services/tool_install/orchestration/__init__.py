"""
L5 Orchestration — ``__init__.py`` re-exports orchestration functions.
"""

from idt.core.services.tool_install.orchestration.installer import (  # noqa: F401
    describe_install,
    install_tool,
    render_url,
)
from idt.core.services.tool_install.orchestration.orchestrator import (  # noqa: F401
    InstallReport,
    run,
)
