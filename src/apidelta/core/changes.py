"""Change records produced by the diff engine."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .snapshot import APISnapshot, SymbolSchema


class ChangeKind(Enum):
    """Kinds of API changes."""
    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"
    DEPRECATED = "deprecated"


class SemverBump(Enum):
    """Semantic version bump recommendation."""
    NONE = "none"
    MINOR = "minor"
    MAJOR = "major"


class TypeRelation(Enum):
    """How a new type relates to the old one."""
    SAME = "same"
    WIDENED = "widened"      # accepts a superset of the old values
    NARROWED = "narrowed"    # accepts a subset of the old values
    UNRELATED = "unrelated"


class DetailKind(Enum):
    """Reason codes describing what changed on a symbol."""
    EXPORT_ADDED = "export_added"
    EXPORT_REMOVED = "export_removed"
    PARAMETER_ADDED = "parameter_added"
    PARAMETER_REMOVED = "parameter_removed"
    PARAMETER_REORDERED = "parameter_reordered"
    PARAMETER_RENAMED = "parameter_renamed"
    PARAMETER_TYPE_WIDENED = "parameter_type_widened"
    PARAMETER_TYPE_NARROWED = "parameter_type_narrowed"
    PARAMETER_TYPE_CHANGED = "parameter_type_changed"
    PARAMETER_MADE_OPTIONAL = "parameter_made_optional"
    PARAMETER_MADE_REQUIRED = "parameter_made_required"
    RETURN_TYPE_WIDENED = "return_type_widened"
    RETURN_TYPE_NARROWED = "return_type_narrowed"
    RETURN_TYPE_CHANGED = "return_type_changed"
    DEPRECATED = "deprecated"


@dataclass(frozen=True)
class ChangeDetail:
    """One observed difference within a change."""
    kind: DetailKind
    breaking: bool
    parameter: Optional[str] = None
    position: Optional[int] = None
    before: Optional[str] = None
    after: Optional[str] = None
    relation: Optional[TypeRelation] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "breaking": self.breaking,
            "parameter": self.parameter,
            "position": self.position,
            "before": self.before,
            "after": self.after,
            "relation": self.relation.value if self.relation else None
        }


@dataclass(frozen=True)
class Change:
    """A single entry of an API diff."""
    kind: ChangeKind
    module_path: str
    symbol_name: str
    symbol_ref: str
    breaking: bool
    details: Tuple[ChangeDetail, ...] = ()
    before: Optional[SymbolSchema] = None
    after: Optional[SymbolSchema] = None

    @property
    def semver_impact(self) -> SemverBump:
        return SemverBump.MAJOR if self.breaking else SemverBump.MINOR

    @property
    def reasons(self) -> Tuple[str, ...]:
        return tuple(detail.kind.value for detail in self.details)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "module_path": self.module_path,
            "symbol_name": self.symbol_name,
            "symbol_ref": self.symbol_ref,
            "breaking": self.breaking,
            "semver_impact": self.semver_impact.value,
            "details": [detail.to_dict() for detail in self.details]
        }


class ModuleStatus(Enum):
    """Module-level status within a diff."""
    ADDED = "added"
    REMOVED = "removed"
    CHANGED = "changed"


@dataclass(frozen=True)
class ModuleChange:
    """Changes of a diff that belong to one module."""
    module_path: str
    status: ModuleStatus
    changes: Tuple[Change, ...]
    breaking: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "module_path": self.module_path,
            "status": self.status.value,
            "breaking": self.breaking,
            "changes": len(self.changes)
        }


@dataclass(frozen=True)
class DiffSummary:
    """Counts over a diff's changes.

    ``modifications`` includes deprecations; ``deprecations`` is that subset.
    """
    additions: int = 0
    removals: int = 0
    modifications: int = 0
    deprecations: int = 0
    breaking_changes: int = 0
    total_changes: int = 0
    modules_affected: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "additions": self.additions,
            "removals": self.removals,
            "modifications": self.modifications,
            "deprecations": self.deprecations,
            "breaking_changes": self.breaking_changes,
            "total_changes": self.total_changes,
            "modules_affected": self.modules_affected
        }


@dataclass(frozen=True)
class APIDiff:
    """Complete semantic diff between two API snapshots."""
    from_snapshot: APISnapshot
    to_snapshot: APISnapshot
    changes: Tuple[Change, ...]
    module_changes: Tuple[ModuleChange, ...]
    summary: DiffSummary
    recommended_bump: SemverBump

    @property
    def from_snapshot_id(self) -> str:
        return self.from_snapshot.id

    @property
    def to_snapshot_id(self) -> str:
        return self.to_snapshot.id

    @property
    def breaking_changes(self) -> Tuple[Change, ...]:
        return tuple(change for change in self.changes if change.breaking)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from": self.from_snapshot_id,
            "to": self.to_snapshot_id,
            "recommended_bump": self.recommended_bump.value,
            "summary": self.summary.to_dict(),
            "changes": [change.to_dict() for change in self.changes],
            "module_changes": [mc.to_dict() for mc in self.module_changes]
        }
