"""
L0 Data — Built-in tool table.

Keys are tool names (the ``name`` of the resulting ``ToolDescriptor``).
Order matters: it is the install order for ``idt install`` / ``all``.
Pure data, no logic.

Url templates accept ``{name}``, ``{bin}``, ``{tag}``, ``{version}``
(tag without a leading ``v``), ``{os}``, ``{arch}`` and ``{target}``
(Rust-style triple, e.g. ``aarch64-apple-darwin``).
"""

from __future__ import annotations

_GH = "https://github.com"

TOOLS: dict[str, dict] = {

    # ── npm ─────────────────────────────────────────────────────

    "bash-language-server": {
        "backend": "npm",
        "packages": ["bash-language-server"],
        "description": "Bash LSP",
    },
    "commitlint": {
        "backend": "npm",
        "packages": ["@commitlint/cli", "@commitlint/config-conventional"],
        "check_args": ["--version"],
        "description": "Conventional commit message linter",
    },
    "docker-langserver": {
        "backend": "npm",
        "packages": ["dockerfile-language-server-nodejs"],
        "description": "Dockerfile LSP",
    },
    "elm-language-server": {
        "backend": "npm",
        "packages": ["@elm-tooling/elm-language-server"],
        "description": "Elm LSP",
    },
    "eslint_d": {
        "backend": "npm",
        "packages": ["eslint_d"],
        "description": "ESLint daemon",
    },
    "graphql-lsp": {
        "backend": "npm",
        "packages": ["graphql-language-service-cli"],
        "description": "GraphQL LSP",
    },
    "prettierd": {
        "backend": "npm",
        "packages": ["@fsouza/prettierd"],
        "check_args": ["--version"],
        "description": "Prettier daemon",
    },
    "quicktype": {
        "backend": "npm",
        "packages": ["quicktype"],
        "description": "JSON → types generator",
    },
    "sql-language-server": {
        "backend": "npm",
        "packages": ["sql-language-server"],
        "description": "SQL LSP",
    },
    "typescript-language-server": {
        "backend": "npm",
        "packages": ["typescript-language-server", "typescript"],
        "check_args": ["--version"],
        "description": "TypeScript / JavaScript LSP",
    },
    "vscode-langservers-extracted": {
        "backend": "npm",
        "packages": ["vscode-langservers-extracted"],
        "bin_name": "vscode-json-language-server",
        "link_all": True,
        "description": "HTML / CSS / JSON / ESLint LSPs extracted from VS Code",
    },
    "yaml-language-server": {
        "backend": "npm",
        "packages": ["yaml-language-server"],
        "description": "YAML LSP",
    },

    # ── pip ─────────────────────────────────────────────────────

    "ruff-lsp": {
        "backend": "pip",
        "packages": ["ruff-lsp"],
        "description": "Ruff LSP",
    },

    # ── composer ────────────────────────────────────────────────

    "phpactor": {
        "backend": "composer",
        "packages": ["phpactor/phpactor"],
        "description": "PHP LSP",
    },

    # ── cargo ───────────────────────────────────────────────────

    "harper-ls": {
        "backend": "cargo",
        "packages": ["harper-ls"],
        "description": "Grammar checker LSP",
    },
    "taplo": {
        "backend": "cargo",
        "packages": ["taplo-cli"],
        # the lsp subcommand is behind a feature flag
        "install_args": ["--all-features"],
        "check_args": ["--version"],
        "description": "TOML toolkit and LSP",
    },

    # ── curl: raw binaries ──────────────────────────────────────

    "hadolint": {
        "backend": "curl",
        "url": f"{_GH}/hadolint/hadolint/releases/latest/download/hadolint-{{os}}-{{arch}}",
        "os_names": {"darwin": "Darwin", "linux": "Linux"},
        "arch_names": {"aarch64": "arm64"},
        "description": "Dockerfile linter",
    },
    "helm_ls": {
        "backend": "curl",
        "url": f"{_GH}/mrjosh/helm-ls/releases/latest/download/helm_ls_{{os}}_{{arch}}",
        "arch_names": {"x86_64": "amd64", "aarch64": "arm64"},
        "check_args": ["version"],
        "description": "Helm LSP",
    },
    "marksman": {
        "backend": "curl",
        "url": f"{_GH}/artempyanykh/marksman/releases/latest/download/marksman-{{os}}{{arch}}",
        "os_names": {"darwin": "macos"},
        # macOS ships one universal binary
        "arch_names": {
            "darwin-x86_64": "",
            "darwin-aarch64": "",
            "x86_64": "-x64",
            "aarch64": "-arm64",
        },
        "description": "Markdown LSP",
    },

    # ── curl: gzip-compressed binaries ──────────────────────────

    "rust-analyzer": {
        "backend": "curl",
        "format": "gunzip",
        "url": f"{_GH}/rust-lang/rust-analyzer/releases/download/nightly/rust-analyzer-{{target}}.gz",
        "check_args": ["--version"],
        "description": "Rust LSP (nightly)",
    },

    # ── curl: archives ──────────────────────────────────────────

    "deno": {
        "backend": "curl",
        "format": "archive",
        "release_repo": "denoland/deno",
        "url": f"{_GH}/denoland/deno/releases/download/{{tag}}/deno-{{target}}.zip",
        "archive_bin": "deno",
        "check_args": ["--version"],
        "description": "Deno runtime (markdown preview)",
    },
    "elixir-ls": {
        "backend": "curl",
        "format": "archive",
        "release_repo": "elixir-lsp/elixir-ls",
        "url": f"{_GH}/elixir-lsp/elixir-ls/releases/download/{{tag}}/elixir-ls-{{tag}}.zip",
        "archive_bin": "language_server.sh",
        "description": "Elixir LSP",
    },
    "lua-language-server": {
        "backend": "curl",
        "format": "archive",
        "release_repo": "LuaLS/lua-language-server",
        "url": (
            f"{_GH}/LuaLS/lua-language-server/releases/download/{{tag}}/"
            "lua-language-server-{tag}-{os}-{arch}.tar.gz"
        ),
        "arch_names": {"x86_64": "x64", "aarch64": "arm64"},
        "archive_bin": "bin/lua-language-server",
        # finds its runtime relative to the unresolved executable path
        "wrap": True,
        "check_args": ["--version"],
        "description": "Lua LSP",
    },
    "shellcheck": {
        "backend": "curl",
        "format": "archive",
        "release_repo": "koalaman/shellcheck",
        "url": (
            f"{_GH}/koalaman/shellcheck/releases/download/{{tag}}/"
            "shellcheck-{tag}.{os}.{arch}.tar.xz"
        ),
        "archive_bin": "shellcheck-{tag}/shellcheck",
        "check_args": ["--version"],
        "description": "Shell script linter",
    },
    "sqruff": {
        "backend": "curl",
        "format": "archive",
        "url": f"{_GH}/quarylabs/sqruff/releases/latest/download/sqruff-{{os}}-{{arch}}.tar.gz",
        "archive_bin": "sqruff",
        "description": "SQL linter / formatter",
    },
    "terraform-ls": {
        "backend": "curl",
        "format": "archive",
        "release_repo": "hashicorp/terraform-ls",
        "url": (
            "https://releases.hashicorp.com/terraform-ls/{version}/"
            "terraform-ls_{version}_{os}_{arch}.zip"
        ),
        "arch_names": {"x86_64": "amd64", "aarch64": "arm64"},
        "archive_bin": "terraform-ls",
        "check_args": ["--version"],
        "description": "Terraform LSP",
    },
    "typos-lsp": {
        "backend": "curl",
        "format": "archive",
        "release_repo": "tekumara/typos-vscode",
        "url": (
            f"{_GH}/tekumara/typos-vscode/releases/download/{{tag}}/"
            "typos-lsp-{tag}-{target}.tar.gz"
        ),
        "archive_bin": "typos-lsp",
        "description": "Spell checker LSP",
    },
}
