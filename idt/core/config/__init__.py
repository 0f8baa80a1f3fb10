"""
Configuration — optional idt.yml plus environment overrides.
"""

from idt.core.config.loader import (  # noqa: F401
    ConfigError,
    Settings,
    build_registry,
    builtin_tools,
    find_config_file,
    load_settings,
    resolve_dirs,
)
