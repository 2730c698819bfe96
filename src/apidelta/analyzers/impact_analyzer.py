"""Impact Analyzer - Computes the blast radius of API changes over a call graph."""

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import AbstractSet, Any, Dict, List, Mapping, Optional, Tuple

from ..config import AnalysisConfiguration
from ..core.changes import APIDiff
from ..core.snapshot import APISnapshot
from ..logging_config import get_logger
from .call_graph_analyzer import CallGraph, create_node_id

logger = get_logger(__name__)


class ImpactLevel(Enum):
    """Discrete impact levels, lowest first."""
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _LEVEL_ORDER.index(self)


_LEVEL_ORDER = [ImpactLevel.NONE, ImpactLevel.LOW, ImpactLevel.MEDIUM,
                ImpactLevel.HIGH, ImpactLevel.CRITICAL]


@dataclass(frozen=True)
class ImpactReport:
    """Callers and impact of one changed symbol."""
    symbol_ref: str
    direct_callers: Tuple[str, ...]
    transitive_callers: Tuple[str, ...]
    blast_radius: int
    impact_level: ImpactLevel
    affected_modules: Tuple[str, ...]
    affected_exports: Tuple[str, ...]

    @classmethod
    def isolated(cls, symbol_ref: str, impact_level: ImpactLevel = ImpactLevel.NONE) -> "ImpactReport":
        return cls(symbol_ref, (), (), 0, impact_level, (), ())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "symbol_ref": self.symbol_ref,
            "direct_callers": list(self.direct_callers),
            "transitive_callers": list(self.transitive_callers),
            "blast_radius": self.blast_radius,
            "impact_level": self.impact_level.value,
            "affected_modules": list(self.affected_modules),
            "affected_exports": list(self.affected_exports)
        }


def export_index(*snapshots: APISnapshot) -> Dict[str, str]:
    """Map call graph references of exported symbols to their export names.

    Each export is reachable by its schema ref and by ``module#name``.
    Earlier snapshots take precedence.
    """
    index: Dict[str, str] = {}
    for snapshot in snapshots:
        for module in snapshot.modules:
            for export in module.exports:
                index.setdefault(create_node_id(module.path, export.name), export.name)
                if export.symbol is not None:
                    index.setdefault(export.symbol.id, export.name)
    return index


class ImpactAnalyzer:
    """Finds direct and transitive callers of changed symbols.

    Traversal is a breadth-first search over caller edges with an explicit
    queue and a visited set scoped to a single query, so cycles and self
    calls terminate and each node is counted once.
    """

    def __init__(self, configuration: Optional[AnalysisConfiguration] = None):
        self.config = configuration or AnalysisConfiguration()

    def analyze_all(self, diff: APIDiff, call_graph: CallGraph,
                    entry_points: AbstractSet[str] = frozenset()) -> Dict[str, ImpactReport]:
        """Analyze every change of a diff, keyed by symbol reference in change order."""
        exported = export_index(diff.to_snapshot, diff.from_snapshot)
        reports: Dict[str, ImpactReport] = {}

        for change in diff.changes:
            if change.symbol_ref in reports:
                continue

            node_id = call_graph.find_node(change.symbol_ref, change.module_path, change.symbol_name)
            if node_id is None:
                logger.debug("%s not in call graph, treating as isolated", change.symbol_ref)

            reports[change.symbol_ref] = self._analyze_node(
                change.symbol_ref, node_id, call_graph, entry_points, exported
            )

        return reports

    def analyze(self, symbol_ref: str, call_graph: CallGraph,
                entry_points: AbstractSet[str] = frozenset(),
                exported: Optional[Mapping[str, str]] = None) -> ImpactReport:
        """Analyze a single symbol."""
        node_id = call_graph.find_node(symbol_ref)
        return self._analyze_node(symbol_ref, node_id, call_graph, entry_points, exported or {})

    def _analyze_node(self, symbol_ref: str, node_id: Optional[str], call_graph: CallGraph,
                      entry_points: AbstractSet[str], exported: Mapping[str, str]) -> ImpactReport:
        is_entry_point = symbol_ref in entry_points or (node_id is not None and node_id in entry_points)

        if node_id is None:
            return ImpactReport.isolated(symbol_ref, self.impact_level(0, 0, is_entry_point))

        direct = [caller for caller in call_graph.callers(node_id) if caller != node_id]
        transitive = self._transitive_callers(node_id, direct, call_graph)
        all_callers = direct + transitive

        affected_modules = self._distinct(call_graph.module_of(caller) for caller in all_callers)
        affected_exports = self._distinct(self._export_name(caller, call_graph, exported)
                                          for caller in all_callers)
        blast_radius = len(all_callers)

        return ImpactReport(
            symbol_ref=symbol_ref,
            direct_callers=tuple(direct),
            transitive_callers=tuple(transitive),
            blast_radius=blast_radius,
            impact_level=self.impact_level(blast_radius, len(affected_exports), is_entry_point),
            affected_modules=tuple(affected_modules),
            affected_exports=tuple(affected_exports)
        )

    def _transitive_callers(self, node_id: str, direct: List[str], call_graph: CallGraph) -> List[str]:
        """Callers of callers, excluding the symbol and its direct callers."""
        max_depth = self.config.max_depth
        visited = {node_id}
        visited.update(direct)
        transitive = []
        queue = deque((caller, 1) for caller in direct)

        while queue:
            current, depth = queue.popleft()
            if max_depth is not None and depth >= max_depth:
                continue
            for caller in call_graph.callers(current):
                if caller not in visited:
                    visited.add(caller)
                    transitive.append(caller)
                    queue.append((caller, depth + 1))

        return transitive

    def impact_level(self, blast_radius: int, export_count: int,
                     is_entry_point: bool = False) -> ImpactLevel:
        """Map caller counts to an impact level.

        Non-decreasing in both ``blast_radius`` and ``export_count``.
        """
        config = self.config
        if blast_radius >= config.critical_threshold:
            level = ImpactLevel.CRITICAL
        elif blast_radius >= config.high_threshold:
            level = ImpactLevel.HIGH
        elif blast_radius >= config.medium_threshold:
            level = ImpactLevel.MEDIUM
        elif blast_radius >= config.low_threshold:
            level = ImpactLevel.LOW
        else:
            level = ImpactLevel.NONE

        if export_count >= config.critical_export_threshold:
            level = ImpactLevel.CRITICAL
        elif export_count >= config.high_export_threshold and level.rank < ImpactLevel.HIGH.rank:
            level = ImpactLevel.HIGH

        # Entry points are usually invoked from outside the graph
        if level == ImpactLevel.NONE and is_entry_point and config.elevate_isolated_entry_points:
            level = ImpactLevel.LOW

        return level

    def _export_name(self, ref: str, call_graph: CallGraph, exported: Mapping[str, str]) -> Optional[str]:
        if ref in exported:
            return exported[ref]
        node = call_graph.node(ref)
        if node is not None and node.module and node.symbol:
            return exported.get(create_node_id(node.module, node.symbol))
        return None

    def _distinct(self, values) -> List[str]:
        """Non-None values in first-seen order."""
        return list(dict.fromkeys(value for value in values if value is not None))


def analyze_impact(symbol_ref: str, call_graph: CallGraph,
                   entry_points: AbstractSet[str] = frozenset(),
                   exported: Optional[Mapping[str, str]] = None,
                   configuration: Optional[AnalysisConfiguration] = None) -> ImpactReport:
    """Analyze the impact of changing a single symbol."""
    return ImpactAnalyzer(configuration).analyze(symbol_ref, call_graph, entry_points, exported)


def analyze_all_impacts(diff: APIDiff, call_graph: CallGraph,
                        entry_points: AbstractSet[str] = frozenset(),
                        configuration: Optional[AnalysisConfiguration] = None) -> Dict[str, ImpactReport]:
    """Analyze the impact of every change in a diff.

    Every change gets a report; symbols missing from the call graph get an
    isolated report with zero callers.
    """
    return ImpactAnalyzer(configuration).analyze_all(diff, call_graph, entry_points)
