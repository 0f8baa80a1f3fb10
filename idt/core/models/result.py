"""
InstallResult — outcome of one tool's install attempt.

Results are the orchestrator's I/O contract: each installer call
becomes exactly one result, success or failure. Nothing is persisted.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel


class InstallResult(BaseModel):
    """Result of installing (or planning to install) a single tool."""

    name: str
    bin_name: str = ""
    status: Literal["ok", "failed", "skipped"] = "ok"

    bin_path: str | None = None
    error_kind: str | None = None
    error: str | None = None

    duration_ms: int = 0
    check_output: str = ""
    detail: str = ""

    @property
    def ok(self) -> bool:
        """Whether the tool was installed."""
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        """Whether the install failed."""
        return self.status == "failed"

    @classmethod
    def success(
        cls,
        name: str,
        bin_path: str,
        **kwargs: Any,
    ) -> InstallResult:
        """Create a success result."""
        return cls(name=name, status="ok", bin_path=bin_path, **kwargs)

    @classmethod
    def failure(
        cls,
        name: str,
        error_kind: str,
        error: str,
        **kwargs: Any,
    ) -> InstallResult:
        """Create a failure result."""
        return cls(
            name=name,
            status="failed",
            error_kind=error_kind,
            error=error,
            **kwargs,
        )

    @classmethod
    def skip(
        cls,
        name: str,
        reason: str = "",
        **kwargs: Any,
    ) -> InstallResult:
        """Create a skipped result (dry run)."""
        return cls(name=name, status="skipped", detail=reason, **kwargs)
