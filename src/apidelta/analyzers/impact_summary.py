"""Impact summary - Release-level aggregation of per-symbol impact reports."""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from ..core.changes import APIDiff, Change
from .impact_analyzer import ImpactLevel, ImpactReport

HIGH_IMPACT_LEVELS = (ImpactLevel.HIGH, ImpactLevel.CRITICAL)


@dataclass(frozen=True)
class ImpactSummary:
    """Summary of impact analysis for a diff."""
    total_changes: int
    critical_impact: int
    high_impact: int
    medium_impact: int
    low_impact: int
    no_impact: int
    total_blast_radius: int
    most_impacted_symbol: Optional[str]
    most_impacted_blast_radius: int
    unassessed_breaking: int = 0

    def count(self, level: ImpactLevel) -> int:
        return {
            ImpactLevel.CRITICAL: self.critical_impact,
            ImpactLevel.HIGH: self.high_impact,
            ImpactLevel.MEDIUM: self.medium_impact,
            ImpactLevel.LOW: self.low_impact,
            ImpactLevel.NONE: self.no_impact
        }[level]

    @property
    def critical_total(self) -> int:
        """Critical reports plus breaking changes whose blast radius is unknown."""
        return self.critical_impact + self.unassessed_breaking

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_changes": self.total_changes,
            "critical_impact": self.critical_impact,
            "high_impact": self.high_impact,
            "medium_impact": self.medium_impact,
            "low_impact": self.low_impact,
            "no_impact": self.no_impact,
            "total_blast_radius": self.total_blast_radius,
            "most_impacted_symbol": self.most_impacted_symbol,
            "most_impacted_blast_radius": self.most_impacted_blast_radius,
            "unassessed_breaking": self.unassessed_breaking
        }


def get_high_impact_changes(diff: APIDiff, impact_map: Mapping[str, ImpactReport]) -> List[Change]:
    """Changes whose impact is high or critical, in diff order."""
    high_impact = []
    for change in diff.changes:
        report = impact_map.get(change.symbol_ref)
        if report is not None and report.impact_level in HIGH_IMPACT_LEVELS:
            high_impact.append(change)
    return high_impact


def get_total_blast_radius(impact_map: Mapping[str, ImpactReport]) -> int:
    """Sum of blast radii over all reports."""
    return sum(report.blast_radius for report in impact_map.values())


def generate_impact_summary(diff: APIDiff, impact_map: Mapping[str, ImpactReport]) -> ImpactSummary:
    """Aggregate impact reports in a single pass.

    ``total_changes`` is taken from the diff summary. The most impacted
    symbol is the first report with the largest blast radius in map order,
    or None when no change has any callers.

    Breaking changes without a report and breaking module changes have no
    known blast radius; they are counted in ``unassessed_breaking`` rather
    than in a level.
    """
    counts = {level: 0 for level in ImpactLevel}
    total_blast_radius = 0
    most_impacted_symbol = None
    most_impacted_blast_radius = 0

    for symbol_ref, report in impact_map.items():
        counts[report.impact_level] += 1
        total_blast_radius += report.blast_radius

        if report.blast_radius > most_impacted_blast_radius:
            most_impacted_symbol = symbol_ref
            most_impacted_blast_radius = report.blast_radius

    unassessed_breaking = sum(
        1 for change in diff.changes if change.breaking and change.symbol_ref not in impact_map
    )
    unassessed_breaking += sum(1 for module_change in diff.module_changes if module_change.breaking)

    return ImpactSummary(
        total_changes=diff.summary.total_changes,
        critical_impact=counts[ImpactLevel.CRITICAL],
        high_impact=counts[ImpactLevel.HIGH],
        medium_impact=counts[ImpactLevel.MEDIUM],
        low_impact=counts[ImpactLevel.LOW],
        no_impact=counts[ImpactLevel.NONE],
        total_blast_radius=total_blast_radius,
        most_impacted_symbol=most_impacted_symbol,
        most_impacted_blast_radius=most_impacted_blast_radius,
        unassessed_breaking=unassessed_breaking
    )
