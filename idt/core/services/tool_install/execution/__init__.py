"""
L4 Execution — ``__init__.py`` re-exports all execution functions.

These functions WRITE to the system: subprocess calls, downloads,
package installs, symlinks.
"""

from idt.core.services.tool_install.execution.backends import (  # noqa: F401
    cargo_install,
    cargo_root,
    composer_install,
    npm_install,
    pip_install,
)
from idt.core.services.tool_install.execution.download import (  # noqa: F401
    ExtractTo,
    UnpackVia,
    WriteTo,
    curl_download,
    latest_release_tag,
)
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
