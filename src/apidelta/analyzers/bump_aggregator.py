"""Bump Aggregator - reduces a list of changes into release-level results."""

from collections import Counter
from typing import Dict, List, Sequence, Tuple

from ..core.changes import (
    Change, ChangeKind, DiffSummary, ModuleChange, ModuleStatus, SemverBump
)
from .symbol_matcher import ModuleMatch


def compute_bump(changes: Sequence[Change]) -> SemverBump:
    """Recommend a semver bump.

    Any breaking change means major; any other change means minor. The
    number of changes has no influence.
    """
    if any(change.breaking for change in changes):
        return SemverBump.MAJOR
    if changes:
        return SemverBump.MINOR
    return SemverBump.NONE


def group_module_changes(module_matches: Sequence[ModuleMatch],
                         changes: Sequence[Change]) -> Tuple[ModuleChange, ...]:
    """Group changes per module in module iteration order.

    Added and removed modules are always listed, even without exports;
    modules present on both sides only when something in them changed.
    """
    by_module: Dict[str, List[Change]] = {}
    for change in changes:
        by_module.setdefault(change.module_path, []).append(change)

    grouped = []
    for module_match in module_matches:
        module_changes = tuple(by_module.get(module_match.module_path, ()))

        if module_match.status == ModuleStatus.REMOVED:
            breaking = module_match.had_exports
        elif module_match.status == ModuleStatus.ADDED:
            breaking = False
        elif module_changes:
            breaking = any(change.breaking for change in module_changes)
        else:
            continue

        grouped.append(ModuleChange(
            module_path=module_match.module_path,
            status=module_match.status,
            changes=module_changes,
            breaking=breaking
        ))

    return tuple(grouped)


def summarize(changes: Sequence[Change], module_changes: Sequence[ModuleChange]) -> DiffSummary:
    """Count changes by kind."""
    kinds = Counter(change.kind for change in changes)
    return DiffSummary(
        additions=kinds[ChangeKind.ADDED],
        removals=kinds[ChangeKind.REMOVED],
        modifications=kinds[ChangeKind.MODIFIED] + kinds[ChangeKind.DEPRECATED],
        deprecations=kinds[ChangeKind.DEPRECATED],
        breaking_changes=sum(1 for change in changes if change.breaking),
        total_changes=len(changes),
        modules_affected=len(module_changes)
    )
