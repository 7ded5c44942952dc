"""
Two-case preference constraints.

A preference field is either ``UNCONSTRAINED`` ("no preference, anything
goes") or ``Constrained(value)``. Empty input, a missing value and the
literal ``Any`` all collapse to ``UNCONSTRAINED``, so "no preference" can never
be confused with "constrained to nothing".
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Iterable, TypeVar

T = TypeVar("T")

ANY_TOKEN = "any"


class Unconstrained:
    _instance: Unconstrained | None = None

    def __new__(cls) -> Unconstrained:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNCONSTRAINED"

    def __bool__(self) -> bool:
        return False


UNCONSTRAINED = Unconstrained()


@dataclass(frozen=True)
class Constrained(Generic[T]):
    value: T


Constraint = Unconstrained | Constrained


def is_constrained(constraint: Constraint) -> bool:
    return isinstance(constraint, Constrained)


def value_or(constraint: Constraint, default: Any) -> Any:
    return constraint.value if isinstance(constraint, Constrained) else default


def set_constraint(values: Iterable[str] | None) -> Constraint:
    """Build a set constraint from raw strings.

    Values are trimmed, blanks dropped and case-insensitive duplicates
    collapsed to their first spelling. If nothing is left, or any value is
    ``Any``, the field is unconstrained.
    """
    if values is None:
        return UNCONSTRAINED
    cleaned: list[str] = []
    seen: set[str] = set()
    for value in values:
        value = value.strip() if value is not None else ""
        if value and value.lower() not in seen:
            seen.add(value.lower())
            cleaned.append(value)
    if not cleaned or any(v.lower() == ANY_TOKEN for v in cleaned):
        return UNCONSTRAINED
    return Constrained(frozenset(cleaned))


def parse_set_constraint(raw: str | None) -> Constraint:
    """Parse comma-separated user input into a set constraint."""
    if raw is None:
        return UNCONSTRAINED
    return set_constraint(raw.split(","))


def number_constraint(value: float | int | None) -> Constraint:
    if value is None:
        return UNCONSTRAINED
    return Constrained(value)


def to_storage(constraint: Constraint) -> Any:
    """Serialize for a nullable column: ``None`` when unconstrained."""
    if not isinstance(constraint, Constrained):
        return None
    if isinstance(constraint.value, frozenset):
        return sorted(constraint.value)
    return constraint.value


def from_storage_list(stored: list[str] | None) -> Constraint:
    return set_constraint(stored) if stored else UNCONSTRAINED


def describe(constraint: Constraint, unset_label: str = "Any") -> str:
    if not isinstance(constraint, Constrained):
        return unset_label
    if isinstance(constraint.value, frozenset):
        return ", ".join(sorted(constraint.value))
    return str(constraint.value)
