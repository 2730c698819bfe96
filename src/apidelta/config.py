"""Configuration for impact analysis."""

from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class AnalysisConfiguration:
    """Thresholds for mapping blast radius to impact levels.

    A change reaches a level once its blast radius is at least the level's
    threshold. Affected public exports can raise the level to high or
    critical on their own.

    Attributes:
        low_threshold: Blast radius for LOW impact
        medium_threshold: Blast radius for MEDIUM impact
        high_threshold: Blast radius for HIGH impact
        critical_threshold: Blast radius for CRITICAL impact
        high_export_threshold: Affected exports for HIGH impact
        critical_export_threshold: Affected exports for CRITICAL impact
        elevate_isolated_entry_points: Raise entry points without callers to LOW
        max_depth: Maximum BFS depth for transitive callers, None for unbounded
    """
    low_threshold: int = 1
    medium_threshold: int = 3
    high_threshold: int = 10
    critical_threshold: int = 25
    high_export_threshold: int = 2
    critical_export_threshold: int = 5
    elevate_isolated_entry_points: bool = True
    max_depth: Optional[int] = None

    def __post_init__(self):
        thresholds = [self.low_threshold, self.medium_threshold,
                      self.high_threshold, self.critical_threshold]
        if thresholds[0] < 1:
            raise ValueError("low_threshold must be at least 1")
        if any(lower >= upper for lower, upper in zip(thresholds, thresholds[1:])):
            raise ValueError(f"Impact thresholds must be strictly increasing, got {thresholds}")
        if not 1 <= self.high_export_threshold < self.critical_export_threshold:
            raise ValueError("Export thresholds must satisfy 1 <= high < critical")
        if self.max_depth is not None and self.max_depth < 1:
            raise ValueError("max_depth must be at least 1")

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "AnalysisConfiguration":
        """Build a configuration from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in values.items() if key in known})
