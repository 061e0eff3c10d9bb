# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Predicate tree over member records.

Predicates are plain immutable data. Each node can evaluate itself against a
record dict (used by the in-process store and by tests); the SQL store
compiles the same tree into a WHERE clause instead.
"""

from dataclasses import dataclass
from typing import Any, Mapping


class Predicate:
    def matches(self, record: Mapping[str, Any]) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class MatchAll(Predicate):
    def matches(self, record: Mapping[str, Any]) -> bool:
        return True


@dataclass(frozen=True)
class Equals(Predicate):
    """Exact, case-sensitive equality on one field."""

    field: str
    value: Any

    def matches(self, record: Mapping[str, Any]) -> bool:
        current = record.get(self.field)
        return current is not None and current == self.value


@dataclass(frozen=True)
class Contains(Predicate):
    """Case-insensitive literal substring match on one field."""

    field: str
    term: str

    def matches(self, record: Mapping[str, Any]) -> bool:
        current = record.get(self.field)
        if current is None:
            return False
        return self.term.lower() in str(current).lower()


@dataclass(frozen=True)
class NotEmpty(Predicate):
    """Field is present, not null, and not the empty string."""

    field: str

    def matches(self, record: Mapping[str, Any]) -> bool:
        current = record.get(self.field)
        return current is not None and current != ""


@dataclass(frozen=True)
class And(Predicate):
    children: tuple[Predicate, ...]

    def matches(self, record: Mapping[str, Any]) -> bool:
        return all(child.matches(record) for child in self.children)


@dataclass(frozen=True)
class Or(Predicate):
    children: tuple[Predicate, ...]

    def matches(self, record: Mapping[str, Any]) -> bool:
        return any(child.matches(record) for child in self.children)


def all_of(*predicates: Predicate) -> Predicate:
    """AND the given predicates, dropping tautologies and flattening nested ANDs."""
    children: list[Predicate] = []
    for p in predicates:
        if isinstance(p, MatchAll):
            continue
        if isinstance(p, And):
            children.extend(p.children)
        else:
            children.append(p)
    if not children:
        return MatchAll()
    if len(children) == 1:
        return children[0]
    return And(tuple(children))


def any_of(*predicates: Predicate) -> Predicate:
    """OR the given predicates. A single child is returned unwrapped."""
    if any(isinstance(p, MatchAll) for p in predicates):
        return MatchAll()
    if len(predicates) == 1:
        return predicates[0]
    return Or(tuple(predicates))
