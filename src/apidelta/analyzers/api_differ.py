"""API Differ - Orchestrates matching, classification and aggregation of API changes."""

from typing import Optional

from ..core.changes import APIDiff
from ..core.snapshot import APISnapshot
from ..logging_config import get_logger
from .bump_aggregator import compute_bump, group_module_changes, summarize
from .change_classifier import ChangeClassifier
from .symbol_matcher import SymbolMatcher
from .type_relation import TypeComparator

logger = get_logger(__name__)


class APIDiffer:
    """Computes semantic diffs between API snapshots."""

    def __init__(self, comparator: Optional[TypeComparator] = None):
        self.matcher = SymbolMatcher()
        self.classifier = ChangeClassifier(comparator)

    def diff(self, from_snapshot: APISnapshot, to_snapshot: APISnapshot) -> APIDiff:
        """Diff two snapshots. The result depends on nothing but the inputs."""
        module_matches = self.matcher.match(from_snapshot, to_snapshot)
        changes = tuple(self.classifier.classify_modules(module_matches))
        module_changes = group_module_changes(module_matches, changes)
        summary = summarize(changes, module_changes)
        bump = compute_bump(changes)

        logger.debug(
            "Diff %s -> %s: %d changes (%d breaking), recommended bump %s",
            from_snapshot.id, to_snapshot.id, summary.total_changes,
            summary.breaking_changes, bump.value
        )

        return APIDiff(
            from_snapshot=from_snapshot,
            to_snapshot=to_snapshot,
            changes=changes,
            module_changes=module_changes,
            summary=summary,
            recommended_bump=bump
        )


def compute_diff(from_snapshot: APISnapshot, to_snapshot: APISnapshot) -> APIDiff:
    """Compute the semantic diff between an older and a newer snapshot.

    Example:
        >>> diff = compute_diff(old_snapshot, new_snapshot)
        >>> diff.recommended_bump
        <SemverBump.MAJOR: 'major'>
    """
    return APIDiffer().diff(from_snapshot, to_snapshot)
