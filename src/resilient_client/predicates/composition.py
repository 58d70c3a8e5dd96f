"""Logical composition of predicates."""

from collections.abc import Callable
from typing import Any, TypeVar

T = TypeVar("T")

Predicate = Callable[[T], bool]


class AllOf:
    """
    AND of several predicates, evaluated left to right with short-circuit.

    ``None`` entries are dropped so callers can pass optional checks
    directly. An empty composition is always true.
    """

    def __init__(self, *predicates: Predicate[Any] | None):
        self.predicates: tuple[Predicate[Any], ...] = tuple(p for p in predicates if p is not None)

    def __call__(self, value: Any) -> bool:
        return all(predicate(value) for predicate in self.predicates)

    def __len__(self) -> int:
        return len(self.predicates)

    def __repr__(self) -> str:
        return f"AllOf({', '.join(repr(p) for p in self.predicates)})"


def all_of(*predicates: Predicate[Any] | None) -> AllOf:
    """Compose predicates via AND with short-circuit evaluation."""
    return AllOf(*predicates)
