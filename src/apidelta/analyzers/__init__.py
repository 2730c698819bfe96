"""API diff and change impact analysis."""

from .type_relation import (
    TypeComparator, HeuristicTypeComparator,
    INPUT, OUTPUT, is_type_safe
)
from .symbol_matcher import SymbolMatcher, SymbolMatch, ModuleMatch, MatchStatus
from .change_classifier import ChangeClassifier
from .bump_aggregator import compute_bump, group_module_changes, summarize
from .api_differ import APIDiffer, compute_diff
from .call_graph_analyzer import (
    CallGraphAnalyzer, CallGraph, CallGraphNode, CallGraphEdge, build_call_graph
)
from .impact_analyzer import (
    ImpactAnalyzer, ImpactLevel, ImpactReport, analyze_impact, analyze_all_impacts
)
from .impact_summary import (
    ImpactSummary, generate_impact_summary, get_high_impact_changes, get_total_blast_radius
)

__all__ = [
    "TypeComparator", "HeuristicTypeComparator",
    "INPUT", "OUTPUT", "is_type_safe",
    "SymbolMatcher", "SymbolMatch", "ModuleMatch", "MatchStatus",
    "ChangeClassifier",
    "compute_bump", "group_module_changes", "summarize",
    "APIDiffer", "compute_diff",
    "CallGraphAnalyzer", "CallGraph", "CallGraphNode", "CallGraphEdge", "build_call_graph",
    "ImpactAnalyzer", "ImpactLevel", "ImpactReport", "analyze_impact", "analyze_all_impacts",
    "ImpactSummary", "generate_impact_summary", "get_high_impact_changes", "get_total_blast_radius"
]
