"""
Tool installation service — package re-exports.

    from idt.core.services.tool_install import install_tool, run

Each symbol lives in its single-responsibility module inside the
appropriate layer (data → detection → execution → orchestration).
"""

# ── L0: Data ──
from idt.core.services.tool_install.data.tools import TOOLS  # noqa: F401

# ── L3: Detection ──
from idt.core.services.tool_install.detection.platform import (  # noqa: F401
    Platform,
    detect_platform,
)
from idt.core.services.tool_install.detection.tool_check import (  # noqa: F401
    check_prerequisites,
    check_tool,
    installed_status,
)

# ── L4: Execution ──
from idt.core.services.tool_install.execution.subprocess_runner import (  # noqa: F401
    CommandResult,
    CommandRunner,
)
from idt.core.services.tool_install.execution.symlink import (  # noqa: F401
    LinkOutcome,
    chmod_x,
    link,
    remove_dead_symlinks,
    write_wrapper,
)

# ── L5: Orchestration ──
from idt.core.services.tool_install.orchestration.installer import (  # noqa: F401
    describe_install,
    install_tool,
)
from idt.core.services.tool_install.orchestration.orchestrator import (  # noqa: F401
    InstallReport,
    run,
)
