"""
Path-based access over a parsed JSON document.

Paths are ``/``-separated field names; integer segments index into arrays.
An empty path (or ``None``) addresses the root. Lookups never raise: a path
that cannot be followed resolves to MISSING.
"""

import json
from typing import Any


class _Missing:
    """Sentinel for a path that does not resolve."""

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


class JsonDocument:
    """
    Read-only view over a parsed JSON value.

    Attributes:
        root: Parsed JSON value (dict, list or scalar)
    """

    def __init__(self, root: Any):
        self.root = root

    @classmethod
    def parse(cls, text: str) -> "JsonDocument":
        """
        Parse JSON text into a document.

        Raises:
            json.JSONDecodeError: Text is not valid JSON
        """
        return cls(json.loads(text))

    def find(self, path: str | None = None) -> Any:
        """Resolve a path, returning MISSING when any segment is absent."""
        node = self.root
        for segment in _segments(path):
            if isinstance(node, dict):
                if segment not in node:
                    return MISSING
                node = node[segment]
            elif isinstance(node, list) and segment.isdecimal():
                index = int(segment)
                if index >= len(node):
                    return MISSING
                node = node[index]
            else:
                return MISSING
        return node

    def exists(self, path: str | None = None) -> bool:
        return self.find(path) is not MISSING

    def at(self, path: str | None = None) -> "JsonDocument | None":
        """Sub-document at path, or None when the path is missing."""
        node = self.find(path)
        if node is MISSING:
            return None
        return JsonDocument(node)

    def has(self, name: str) -> bool:
        """True when the root is an object with the given field."""
        return isinstance(self.root, dict) and name in self.root

    def fields(self) -> list[str]:
        """Field names of the root object (empty for non-objects)."""
        if isinstance(self.root, dict):
            return list(self.root)
        return []

    def text(self, name: str) -> str | None:
        """
        Field value as text.

        Strings are returned as-is, other values in their JSON form
        (``1``, ``true``, ``{"a": 1}``). Missing fields and nulls give None.
        """
        if not self.has(name):
            return None
        value = self.root[name]
        if value is None:
            return None
        if isinstance(value, str):
            return value
        return json.dumps(value, separators=(",", ":"))

    def __repr__(self) -> str:
        return json.dumps(self.root)[:200]


def _segments(path: str | None) -> list[str]:
    if not path:
        return []
    return [segment for segment in path.strip("/").split("/") if segment]
