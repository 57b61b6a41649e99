"""Lookup helper for the per-request ``variables`` list sent by the platform."""

from __future__ import annotations

from typing import Any


class Variables:
    """
    Read-only view over ``[{"name": ..., "value": ...}, ...]``.

    Entries with a missing name are ignored.  A later entry with the same
    name overrides an earlier one.  Blank values read as ``None``.
    """

    def __init__(self, variables: list[dict[str, Any]] | None) -> None:
        self._values: dict[str, Any] = {}
        for item in variables or []:
            name = item.get("name")
            if name:
                self._values[name] = item.get("value")

    def get(self, name: str, default: Any = None) -> Any:
        value = self._values.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            return default
        return value

    def names(self) -> list[str]:
        return sorted(self._values)

    def __contains__(self, name: object) -> bool:
        return name in self._values
