"""
L0 Data — Module-level constants.

Pure data. No logic. No imports beyond stdlib.
"""

from __future__ import annotations

# Architecture name normalization to the uname-style names most release
# assets use (x86_64 / aarch64). Per-tool ``arch_names`` maps them on to
# each upstream project's convention (amd64, arm64, x64, ...).
_ARCH_ALIASES: dict[str, str] = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "AMD64": "x86_64",     # Windows / WSL2
    "aarch64": "aarch64",
    "arm64": "aarch64",    # macOS (Darwin reports arm64)
}

# OS part of Rust-style target triples, used by the ``{target}`` placeholder.
_TARGET_SUFFIX: dict[str, str] = {
    "darwin": "apple-darwin",
    "linux": "unknown-linux-gnu",
}

# Executables each backend shells out to.
BACKEND_PROGRAMS: dict[str, tuple[str, ...]] = {
    "npm": ("npm",),
    "pip": ("python3",),
    "composer": ("composer",),
    "curl": ("curl", "zcat"),
    "cargo": ("cargo",),
}

# Where each missing prerequisite comes from.
PREREQUISITE_HINTS: dict[str, str] = {
    "npm": "Install Node.js from https://nodejs.org/",
    "python3": "Install Python 3 from https://www.python.org/",
    "composer": "Install Composer from https://getcomposer.org/",
    "curl": "Install curl with your system package manager",
    "zcat": "Install gzip with your system package manager",
    "cargo": "Install Rust from https://rustup.rs/",
}

# Decompression filter for ``gunzip`` downloads.
DECOMPRESS_COMMAND: tuple[str, ...] = ("zcat",)

# Subprocess timeout (seconds). Package managers and cargo builds are slow.
DEFAULT_TIMEOUT = 1800

GITHUB_API = "https://api.github.com"
