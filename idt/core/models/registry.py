"""
Tool registry — the immutable, ordered set of known tools.

Built once at startup and handed to the orchestrator explicitly.
Later definitions with the same name replace earlier ones in place,
so a user override keeps the built-in tool's position.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence

from idt.core.errors import UnknownTool
from idt.core.models.tool import ToolDescriptor

ALL = "all"


class Registry:
    """Ordered mapping of tool name → descriptor.

    Lookup accepts either a tool's ``name`` or its ``bin_name``.
    Tools listed in ``skipped`` stay addressable by key but are left
    out when the whole registry is selected.
    """

    def __init__(
        self,
        tools: Iterable[ToolDescriptor],
        skipped: Iterable[str] = (),
    ):
        self._tools: dict[str, ToolDescriptor] = {}
        for tool in tools:
            self._tools[tool.name] = tool
        self._skipped = frozenset(skipped)

    def __iter__(self) -> Iterator[ToolDescriptor]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None

    def __repr__(self) -> str:
        return f"<Registry tools={len(self._tools)} skipped={len(self._skipped)}>"

    @property
    def skipped(self) -> frozenset[str]:
        return self._skipped

    def names(self) -> list[str]:
        """Tool names in declaration order."""
        return list(self._tools)

    def get(self, key: str) -> ToolDescriptor | None:
        """Look up a tool by name, falling back to binary name."""
        tool = self._tools.get(key)
        if tool is not None:
            return tool
        for candidate in self._tools.values():
            if candidate.bin_name == key:
                return candidate
        return None

    def resolve(self, keys: Sequence[str] | None = None) -> list[ToolDescriptor]:
        """Turn a user selection into descriptors.

        ``None``, an empty selection or ``"all"`` select every
        non-skipped tool in declaration order. Otherwise the user's order
        is kept and duplicates are collapsed. All keys are validated
        before anything is returned.

        Raises:
            UnknownTool: If any key matches neither a name nor a bin name.
        """
        found: list[ToolDescriptor] = []
        unknown: list[str] = []
        for key in keys or ():
            if key == ALL:
                continue
            tool = self.get(key)
            if tool is None:
                unknown.append(key)
            else:
                found.append(tool)
        if unknown:
            raise UnknownTool(unknown)

        if not keys or ALL in keys:
            return [tool for tool in self._tools.values() if tool.name not in self._skipped]

        selected: list[ToolDescriptor] = []
        seen: set[str] = set()
        for tool in found:
            if tool.name not in seen:
                seen.add(tool.name)
                selected.append(tool)
        return selected
