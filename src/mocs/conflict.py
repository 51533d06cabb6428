# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Member name collision checks between two override files."""

from dataclasses import dataclass
from typing import Literal, Sequence

from mocs.extractor import ExtractionResult

MemberKind = Literal["method", "property", "constant"]


@dataclass(frozen=True)
class MemberCollision:
    """Represent one member name declared by both override files."""

    member_kind: MemberKind
    name: str


def has_conflicting_method(
    candidate: ExtractionResult, existing: ExtractionResult
) -> bool:
    """Return whether both files declare a method with the same name."""
    return _shares_name(candidate.methods, existing.methods)


def has_conflicting_property(
    candidate: ExtractionResult, existing: ExtractionResult
) -> bool:
    """Return whether both files declare a property with the same name."""
    return _shares_name(candidate.properties, existing.properties)


def has_conflicting_constant(
    candidate: ExtractionResult, existing: ExtractionResult
) -> bool:
    """Return whether both files declare a class constant with the same name."""
    return _shares_name(candidate.constants, existing.constants)


def find_conflicts(candidate: ExtractionResult, existing: ExtractionResult) -> bool:
    """Return whether the two files collide on any member kind.

    Args:
        candidate: Members of the override about to be installed.
        existing: Members of the override already in place.

    Returns:
        True when a method, property or constant name is shared.
    """
    return (
        has_conflicting_method(candidate, existing)
        or has_conflicting_property(candidate, existing)
        or has_conflicting_constant(candidate, existing)
    )


def list_collisions(
    candidate: ExtractionResult, existing: ExtractionResult
) -> list[MemberCollision]:
    """List every shared member name, in candidate declaration order.

    Args:
        candidate: Members of the override about to be installed.
        existing: Members of the override already in place.

    Returns:
        De-duplicated collisions grouped by member kind.
    """
    collisions: list[MemberCollision] = []
    groups: tuple[tuple[MemberKind, Sequence[str], Sequence[str]], ...] = (
        ("method", candidate.methods, existing.methods),
        ("property", candidate.properties, existing.properties),
        ("constant", candidate.constants, existing.constants),
    )
    for member_kind, candidate_names, existing_names in groups:
        existing_set = set(existing_names)
        seen: set[str] = set()
        for name in candidate_names:
            if name in existing_set and name not in seen:
                seen.add(name)
                collisions.append(MemberCollision(member_kind=member_kind, name=name))
    return collisions


def _shares_name(candidate_names: Sequence[str], existing_names: Sequence[str]) -> bool:
    return any(name in existing_names for name in candidate_names)
