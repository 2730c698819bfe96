"""API snapshot and change data model."""

from .snapshot import (
    TypeSchema, ParameterSchema, DeprecationInfo, SymbolSchema,
    ExportInfo, ExportedSymbol, ModuleAPISnapshot, SnapshotStatistics, APISnapshot
)
from .changes import (
    ChangeKind, SemverBump, TypeRelation, DetailKind, ChangeDetail, Change,
    ModuleStatus, ModuleChange, DiffSummary, APIDiff
)

__all__ = [
    "TypeSchema", "ParameterSchema", "DeprecationInfo", "SymbolSchema",
    "ExportInfo", "ExportedSymbol", "ModuleAPISnapshot", "SnapshotStatistics", "APISnapshot",
    "ChangeKind", "SemverBump", "TypeRelation", "DetailKind", "ChangeDetail", "Change",
    "ModuleStatus", "ModuleChange", "DiffSummary", "APIDiff"
]
