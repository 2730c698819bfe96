"""Type relation - decides whether a type change widens or narrows a type."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..core.changes import TypeRelation
from ..core.snapshot import TypeSchema
from ..logging_config import get_logger

logger = get_logger(__name__)

INPUT = "input"    # parameter position
OUTPUT = "output"  # return position

_OPENERS = "([{<"
_CLOSERS = ")]}>"


def split_top_level(text: str, separator: str) -> List[str]:
    """Split ``text`` on ``separator`` outside of any brackets."""
    parts = []
    depth = 0
    current = []
    for char in text:
        if char in _OPENERS:
            depth += 1
        elif char in _CLOSERS:
            depth = max(depth - 1, 0)
        if char == separator and depth == 0:
            parts.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    parts.append("".join(current).strip())
    return [part for part in parts if part]


def union_members(text: str) -> List[str]:
    """Members of a union type expression.

    Understands ``A | B`` as well as ``Optional[A]`` and ``Union[A, B]``.
    A non-union type is a union of one member.
    """
    members = []
    for part in split_top_level(text, "|"):
        if part.startswith("Optional[") and part.endswith("]"):
            members.extend(union_members(part[len("Optional["):-1]))
            members.append("None")
        elif part.startswith("Union[") and part.endswith("]"):
            for inner in split_top_level(part[len("Union["):-1], ","):
                members.extend(union_members(inner))
        else:
            members.append(part)

    unique = []
    for member in members:
        if member not in unique:
            unique.append(member)
    return unique


class TypeComparator(ABC):
    """Compares an old and a new type of the same slot."""

    @abstractmethod
    def compare(self, old: Optional[TypeSchema], new: Optional[TypeSchema]) -> TypeRelation:
        """Return how ``new`` relates to ``old``."""


class HeuristicTypeComparator(TypeComparator):
    """String-level comparator for union-style type expressions.

    Works on the normalized type text and uses union members from the
    schema when the extractor provided them. A type that appears where
    there was none is a widening, a type that disappears is a narrowing.
    Anything that is neither a superset nor a subset is unrelated.
    """

    def compare(self, old: Optional[TypeSchema], new: Optional[TypeSchema]) -> TypeRelation:
        if old is None and new is None:
            return TypeRelation.SAME
        if old is None:
            return TypeRelation.WIDENED
        if new is None:
            return TypeRelation.NARROWED

        if old.normalized == new.normalized:
            return TypeRelation.SAME

        before = set(self._members(old))
        after = set(self._members(new))

        if before == after:
            # Same members in a different order or spelling
            return TypeRelation.SAME
        if before < after:
            return TypeRelation.WIDENED
        if after < before:
            return TypeRelation.NARROWED

        logger.debug("Unrelated type change %r -> %r", old.normalized, new.normalized)
        return TypeRelation.UNRELATED

    def _members(self, schema: TypeSchema) -> List[str]:
        if schema.kind == "union" and schema.members:
            members = []
            for member in schema.members:
                members.extend(union_members(member.normalized))
            return members
        return union_members(schema.normalized)


def is_type_safe(relation: TypeRelation, position: str) -> bool:
    """Whether a type change is safe for callers given its position.

    Parameters (input) may widen, return types (output) may narrow. An
    unrecognized change is tolerated in input position only: a parameter
    that now takes some other type is assumed to still accept what callers
    pass, while a return value of some other type is not.
    """
    if relation == TypeRelation.SAME:
        return True
    if position == INPUT:
        return relation in (TypeRelation.WIDENED, TypeRelation.UNRELATED)
    if position == OUTPUT:
        return relation == TypeRelation.NARROWED
    raise ValueError(f"Unknown type position: {position!r}")
