"""apidelta - semantic API diffs and change impact analysis."""

from .config import AnalysisConfiguration
from .core import (
    APISnapshot, ModuleAPISnapshot, ExportedSymbol, ExportInfo, SymbolSchema,
    ParameterSchema, TypeSchema, DeprecationInfo, SnapshotStatistics,
    APIDiff, Change, ChangeKind, ChangeDetail, DetailKind, SemverBump, TypeRelation
)
from .analyzers import (
    compute_diff, analyze_impact, analyze_all_impacts, get_high_impact_changes,
    get_total_blast_radius, generate_impact_summary, build_call_graph,
    CallGraph, CallGraphNode, CallGraphEdge, ImpactLevel, ImpactReport, ImpactSummary
)

__version__ = "0.1.0"

__all__ = [
    "AnalysisConfiguration",
    "APISnapshot", "ModuleAPISnapshot", "ExportedSymbol", "ExportInfo", "SymbolSchema",
    "ParameterSchema", "TypeSchema", "DeprecationInfo", "SnapshotStatistics",
    "APIDiff", "Change", "ChangeKind", "ChangeDetail", "DetailKind", "SemverBump", "TypeRelation",
    "compute_diff", "analyze_impact", "analyze_all_impacts", "get_high_impact_changes",
    "get_total_blast_radius", "generate_impact_summary", "build_call_graph",
    "CallGraph", "CallGraphNode", "CallGraphEdge", "ImpactLevel", "ImpactReport", "ImpactSummary"
]
