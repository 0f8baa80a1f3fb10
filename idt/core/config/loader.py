"""
Configuration loader — reads idt.yml and builds the tool registry.

The file is optional. It can move the two install directories, hide
built-in tools from ``all`` and add or override tool definitions:

    dev_tools_dir: ~/.dev-tools
    bin_dir: ~/.local/bin
    skip: [quicktype]
    tools:
      - name: pyright
        backend: npm
        packages: [pyright]
        bin_name: pyright-langserver
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from idt.core.errors import IdtError
from idt.core.models import Registry, ToolDescriptor
from idt.core.services.tool_install.data.tools import TOOLS

logger = logging.getLogger(__name__)

CONFIG_FILE = "idt.yml"
CONFIG_ENV = "IDT_CONFIG"
DEV_TOOLS_DIR_ENV = "IDT_DEV_TOOLS_DIR"
BIN_DIR_ENV = "IDT_BIN_DIR"

DEFAULT_DEV_TOOLS_DIR = "~/.dev-tools"
DEFAULT_BIN_DIR = "~/.local/bin"


class ConfigError(IdtError):
    """Raised when the config file is unreadable or invalid."""

    kind = "config"


class Settings(BaseModel):
    """Validated content of idt.yml."""

    model_config = ConfigDict(extra="forbid")

    dev_tools_dir: str | None = None
    bin_dir: str | None = None
    skip: list[str] = Field(default_factory=list)
    tools: list[ToolDescriptor] = Field(default_factory=list)

    @field_validator("dev_tools_dir", "bin_dir")
    @classmethod
    def _expand(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return expand_path(value)


def expand_path(value: str) -> str:
    """Expand ``~`` and ``$VARS`` in a path string."""
    return os.path.expanduser(os.path.expandvars(value))


# ── Lookup ──────────────────────────────────────────────────────


def default_config_path(environ: Mapping[str, str] | None = None) -> Path:
    """``$XDG_CONFIG_HOME/idt/idt.yml`` (``~/.config`` when unset)."""
    env = os.environ if environ is None else environ
    base = env.get("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config")
    return Path(base) / "idt" / CONFIG_FILE


def find_config_file(
    explicit: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Path | None:
    """Locate the config file.

    Order: ``explicit`` (``--config``), ``$IDT_CONFIG``, then the
    default location. An explicit or env path is returned even when it
    does not exist so that loading it reports the problem; the default
    location is returned only if present.
    """
    env = os.environ if environ is None else environ
    if explicit is not None:
        return Path(explicit).expanduser()
    if env.get(CONFIG_ENV):
        return Path(expand_path(env[CONFIG_ENV]))
    candidate = default_config_path(env)
    return candidate if candidate.is_file() else None


# ── Load ────────────────────────────────────────────────────────


def load_settings(path: Path | None) -> Settings:
    """Load and validate a config file.

    Args:
        path: Config file, or None for built-in defaults only.

    Raises:
        ConfigError: If the file is missing, unreadable or invalid.
    """
    if path is None:
        return Settings()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return Settings()
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        settings = Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e

    logger.info(
        "Loaded config %s (%d extra tool(s), %d skipped)",
        path, len(settings.tools), len(settings.skip),
    )
    return settings


def resolve_dirs(
    settings: Settings,
    dev_tools_dir: str | Path | None = None,
    bin_dir: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> tuple[Path, Path]:
    """Final ``(dev_tools_dir, bin_dir)``.

    Precedence per directory: explicit argument > env var > config
    file > default.
    """
    env = os.environ if environ is None else environ

    def pick(explicit: str | Path | None, env_name: str, configured: str | None, default: str) -> Path:
        for value in (explicit, env.get(env_name), configured):
            if value:
                return Path(expand_path(str(value)))
        return Path(expand_path(default))

    return (
        pick(dev_tools_dir, DEV_TOOLS_DIR_ENV, settings.dev_tools_dir, DEFAULT_DEV_TOOLS_DIR),
        pick(bin_dir, BIN_DIR_ENV, settings.bin_dir, DEFAULT_BIN_DIR),
    )


# ── Registry ────────────────────────────────────────────────────


def builtin_tools() -> list[ToolDescriptor]:
    """Descriptors of the built-in tool table, in install order."""
    return [ToolDescriptor.model_validate({"name": name, **fields}) for name, fields in TOOLS.items()]


def build_registry(settings: Settings | None = None) -> Registry:
    """Built-in tools extended / overridden by the config's ``tools``.

    ``skip`` entries match a tool name or bin name; entries matching
    nothing are ignored with a warning.
    """
    settings = settings or Settings()
    tools = Registry([*builtin_tools(), *settings.tools])

    skipped = []
    for key in settings.skip:
        tool = tools.get(key)
        if tool is None:
            logger.warning("Config skips unknown tool '%s'", key)
            continue
        skipped.append(tool.name)

    return Registry(tools, skipped=skipped)
