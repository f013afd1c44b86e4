"""Permission policy expressions used to guard routes.

A route declares what it accepts as a policy over permission names
("resource:action"). AnyOf is the common case: the caller needs at least one
of the listed permissions. AllOf and Not compose for stricter rules.

    AnyOf("leave:read", "leave:manage")
    AllOf("roles:update", Not("roles:readonly"))

Evaluation is strict set membership; there are no wildcards.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Set
from typing import Union

PolicyLike = Union["Policy", str]


class Policy(ABC):
    """A predicate over a user's effective permission set."""

    @abstractmethod
    def is_satisfied_by(self, granted: Set[str]) -> bool:
        """Return True if the granted permission names satisfy this policy."""

    @abstractmethod
    def permission_names(self) -> list[str]:
        """Return every permission name mentioned by this policy (for error details)."""

    def __or__(self, other: PolicyLike) -> AnyOf:
        return AnyOf(self, other)

    def __and__(self, other: PolicyLike) -> AllOf:
        return AllOf(self, other)

    def __invert__(self) -> Not:
        return Not(self)


class Require(Policy):
    """Satisfied when the exact permission name is granted."""

    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        if not name or ":" not in name:
            raise ValueError(f"Permission name must look like 'resource:action', got {name!r}")
        self.name = name

    def is_satisfied_by(self, granted: Set[str]) -> bool:
        return self.name in granted

    def permission_names(self) -> list[str]:
        return [self.name]

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Require) and other.name == self.name

    def __hash__(self) -> int:
        return hash(("Require", self.name))

    def __repr__(self) -> str:
        return f"Require({self.name!r})"


class _Composite(Policy):
    __slots__ = ("policies",)

    def __init__(self, *items: PolicyLike) -> None:
        if not items:
            raise ValueError(f"{type(self).__name__} needs at least one permission")
        self.policies: tuple[Policy, ...] = tuple(_coerce(item) for item in items)

    def permission_names(self) -> list[str]:
        names: list[str] = []
        for policy in self.policies:
            for name in policy.permission_names():
                if name not in names:
                    names.append(name)
        return names

    def __eq__(self, other: object) -> bool:
        return type(other) is type(self) and other.policies == self.policies  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.policies))

    def __repr__(self) -> str:
        inner = ", ".join(repr(p) for p in self.policies)
        return f"{type(self).__name__}({inner})"


class AnyOf(_Composite):
    """Satisfied when at least one member policy is satisfied (OR)."""

    def is_satisfied_by(self, granted: Set[str]) -> bool:
        return any(p.is_satisfied_by(granted) for p in self.policies)


class AllOf(_Composite):
    """Satisfied only when every member policy is satisfied (AND)."""

    def is_satisfied_by(self, granted: Set[str]) -> bool:
        return all(p.is_satisfied_by(granted) for p in self.policies)


class Not(Policy):
    """Satisfied when the wrapped policy is not."""

    __slots__ = ("policy",)

    def __init__(self, policy: PolicyLike) -> None:
        self.policy = _coerce(policy)

    def is_satisfied_by(self, granted: Set[str]) -> bool:
        return not self.policy.is_satisfied_by(granted)

    def permission_names(self) -> list[str]:
        return self.policy.permission_names()

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Not) and other.policy == self.policy

    def __hash__(self) -> int:
        return hash(("Not", self.policy))

    def __repr__(self) -> str:
        return f"Not({self.policy!r})"


def _coerce(item: PolicyLike) -> Policy:
    if isinstance(item, Policy):
        return item
    if isinstance(item, str):
        return Require(item)
    raise TypeError(f"Expected permission name or Policy, got {type(item).__name__}")


def as_policy(requirement: PolicyLike | Iterable[PolicyLike]) -> Policy:
    """Normalize a route requirement to a Policy.

    A single name becomes Require; a list or tuple of names becomes AnyOf.
    """
    if isinstance(requirement, (Policy, str)):
        return _coerce(requirement)
    return AnyOf(*requirement)
